"""Debug configuration resolution and debug container cleanup."""

from __future__ import annotations

from .provider import DebugConfigurationProvider
from .session import (
    CleanupSubscription,
    DebugSession,
    DebugSessionManager,
    SessionCleanupRegistry,
    SessionState,
    get_default_registry,
)

__all__ = [
    "CleanupSubscription",
    "DebugConfigurationProvider",
    "DebugSession",
    "DebugSessionManager",
    "SessionCleanupRegistry",
    "SessionState",
    "get_default_registry",
]
