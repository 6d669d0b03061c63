"""Per-platform option resolvers."""

from __future__ import annotations

from ..config import Config
from ..platforms import Platform
from .base import TaskHelper
from .netcore import NetCoreTaskHelper
from .node import NodeTaskHelper

__all__ = ["NetCoreTaskHelper", "NodeTaskHelper", "TaskHelper", "default_helpers"]


def default_helpers(config: Config | None = None) -> dict[Platform, TaskHelper]:
    """One helper per supported platform, sharing ``config``."""
    config = config or Config()
    return {
        Platform.NET_CORE: NetCoreTaskHelper(config),
        Platform.NODE: NodeTaskHelper(config),
    }
