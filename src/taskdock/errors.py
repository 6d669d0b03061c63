"""Exception hierarchy for taskdock.

Every taskdock exception derives from TaskdockError so the CLI can turn
them into a single red error line. Resolution errors reach the user
verbatim; runtime failures raised during cleanup are only logged.

Dependency direction:
    Leaf module, imported by everything else, imports nothing from taskdock.
"""

from __future__ import annotations


class TaskdockError(Exception):
    """Base exception for all taskdock errors."""


class ConfigurationError(TaskdockError):
    """A task or debug configuration can not be resolved.

    Examples:
        - Required option missing with no safe default
        - Task scope (workspace folder) unknown
        - Malformed tasks.json / launch.json content
    """


class UnrecognizedPlatformError(ConfigurationError):
    """Raised when a definition targets neither netCore nor node."""

    def __init__(self, platform: str | None) -> None:
        self.platform = platform
        super().__init__(f"Unrecognized platform '{platform}'.")


class CancelledError(TaskdockError):
    """Raised when the caller cancelled a resolution in progress."""


class DockerError(TaskdockError):
    """Base class for Docker CLI failures."""


class DockerNotFoundError(DockerError):
    """Raised when Docker is not installed or not in PATH."""


class DockerTimeoutError(DockerError):
    """Raised when a Docker operation times out."""


class ExternalCommandFailure(DockerError):
    """Raised when a side-effecting Docker call (e.g. ``docker rm``) fails.

    Only ever logged: by the time it happens the debug session is over.
    """
