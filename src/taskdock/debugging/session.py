"""Debug session lifecycle and container cleanup.

A session is RESOLVING until its configuration resolves, then ACTIVE.
If the resolved configuration names a container to kill (and removal is
not disabled), a CleanupSubscription is registered for it. Every
session-end event is offered to every subscription; a subscription only
acts on the event carrying its own container name, removes that
container, and unsubscribes itself whether or not removal succeeded.
"""

from __future__ import annotations

import functools
import threading
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable

from ..config import Config
from ..docker import remove_container
from ..errors import DockerError
from ..logging import get_logger
from .provider import DebugConfigurationProvider

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ..cancellation import CancellationToken
    from ..models import DebugConfiguration, TaskDefinition, WorkspaceFolder

logger = get_logger(__name__)

# remover(container_name, force=True); raises DockerError or OSError on failure
ContainerRemover = Callable[..., object]


class SessionState(str, Enum):
    RESOLVING = "resolving"
    ACTIVE = "active"


class CleanupSubscription:
    """One session's obligation to remove its container when it ends."""

    def __init__(
        self,
        registry: SessionCleanupRegistry,
        container_name: str,
        remover: ContainerRemover,
    ) -> None:
        self._registry = registry
        self.container_name = container_name
        self._remover = remover

    @property
    def active(self) -> bool:
        return self._registry.is_registered(self)

    def handle(self, configuration: DebugConfiguration) -> bool:
        """Handle a session-end event; False if it belongs to another session."""
        if configuration.container_name_to_kill != self.container_name:
            return False
        if not self._registry.claim(self):
            return False  # already handled by a concurrent dispatch

        try:
            self._remover(self.container_name, force=True)
            logger.debug("Removed debug container %s", self.container_name)
        except (DockerError, OSError) as e:
            logger.warning("Failed to remove debug container %s: %s", self.container_name, e)
        return True

    def unsubscribe(self) -> None:
        self._registry.claim(self)


class SessionCleanupRegistry:
    """Process-wide set of live cleanup subscriptions (thread-safe)."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subscriptions: list[CleanupSubscription] = []

    def register(self, container_name: str, remover: ContainerRemover) -> CleanupSubscription:
        subscription = CleanupSubscription(self, container_name, remover)
        with self._lock:
            self._subscriptions.append(subscription)
        logger.debug("Armed cleanup of container %s", container_name)
        return subscription

    def claim(self, subscription: CleanupSubscription) -> bool:
        """Remove ``subscription``; True only for the caller that removed it."""
        with self._lock:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)
                return True
            return False

    def is_registered(self, subscription: CleanupSubscription) -> bool:
        with self._lock:
            return subscription in self._subscriptions

    def _snapshot(self) -> list[CleanupSubscription]:
        with self._lock:
            return list(self._subscriptions)

    def dispatch(self, configuration: DebugConfiguration) -> int:
        """Offer a session-end event to every subscription.

        Returns:
            Number of subscriptions that handled it.
        """
        return sum(1 for s in self._snapshot() if s.handle(configuration))

    def __len__(self) -> int:
        with self._lock:
            return len(self._subscriptions)


@dataclass
class DebugSession:
    configuration: DebugConfiguration
    state: SessionState = SessionState.RESOLVING
    resolved: DebugConfiguration | None = None
    cleanup: CleanupSubscription | None = None


_default_registry = SessionCleanupRegistry()


def get_default_registry() -> SessionCleanupRegistry:
    return _default_registry


class DebugSessionManager:
    """Resolves debug sessions and removes their containers afterwards."""

    def __init__(
        self,
        provider: DebugConfigurationProvider | None = None,
        remover: ContainerRemover | None = None,
        registry: SessionCleanupRegistry | None = None,
        config: Config | None = None,
    ) -> None:
        self.config = config or Config()
        self.provider = provider or DebugConfigurationProvider(config=self.config)
        self.remover = remover or functools.partial(
            remove_container, docker_path=self.config.docker_path
        )
        self.registry = registry if registry is not None else get_default_registry()

    def start(
        self,
        folder: WorkspaceFolder | None,
        configuration: DebugConfiguration,
        token: CancellationToken | None = None,
        tasks: Sequence[TaskDefinition] | None = None,
    ) -> DebugSession:
        """Resolve ``configuration`` and arm container cleanup.

        Resolution errors propagate; nothing is registered in that case.
        """
        session = DebugSession(configuration)
        session.resolved = self.provider.resolve_debug_configuration(
            folder, configuration, token, tasks
        )
        session.state = SessionState.ACTIVE

        if self.should_remove_container(session.resolved):
            session.cleanup = self.registry.register(
                session.resolved.container_name_to_kill or "", self.remover
            )
        return session

    def should_remove_container(self, resolved: DebugConfiguration) -> bool:
        if not resolved.container_name_to_kill:
            return False
        if resolved.remove_container_after_debug is None:
            return self.config.remove_container_after_debug
        return resolved.remove_container_after_debug

    def session_terminated(self, configuration: DebugConfiguration) -> int:
        """Entry point for the host's session-end events."""
        return self.registry.dispatch(configuration)
