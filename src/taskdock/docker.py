"""Docker CLI calls made by taskdock.

Resolution never launches containers; the only side effects here are
the status check used by the CLI and forced container removal when a
debug session ends.
"""

from __future__ import annotations

import shlex
import subprocess
from typing import TYPE_CHECKING

from .command_line import CommandLineBuilder
from .constants import DOCKER_COMMAND_TIMEOUT
from .errors import DockerError, DockerNotFoundError, DockerTimeoutError, ExternalCommandFailure
from .logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = get_logger(__name__)

__all__ = [
    "DockerError",
    "DockerNotFoundError",
    "DockerTimeoutError",
    "ExternalCommandFailure",
    "check_docker_status",
    "remove_container",
    "safe_docker_run",
]


def safe_docker_run(
    argv: Sequence[str],
    *,
    timeout: int = DOCKER_COMMAND_TIMEOUT,
    capture_output: bool = True,
) -> subprocess.CompletedProcess[str]:
    """Run one docker invocation; the exit code is left to the caller.

    Raises:
        DockerNotFoundError: If ``argv[0]`` does not exist.
        DockerError: If ``argv[0]`` exists but can not be executed.
        DockerTimeoutError: If docker does not exit within ``timeout``.
    """
    printable = shlex.join(argv)
    logger.debug("Running: %s", printable)
    try:
        completed = subprocess.run(
            list(argv),
            capture_output=capture_output,
            text=True,
            check=False,
            timeout=timeout,
        )
    except FileNotFoundError as e:
        raise DockerNotFoundError(
            f"Docker not found in PATH ('{argv[0]}'). Command: {printable}"
        ) from e
    except OSError as e:
        raise DockerError(f"Unable to run '{printable}': {e}") from e
    except subprocess.TimeoutExpired as e:
        raise DockerTimeoutError(f"'{printable}' timed out after {timeout}s") from e

    logger.debug("'%s' exited with %d", printable, completed.returncode)
    return completed


def check_docker_status(docker_path: str = "docker") -> bool:
    """True if the daemon answers ``docker info``."""
    try:
        completed = safe_docker_run([docker_path, "info"])
    except DockerError as e:
        logger.debug("Docker is unavailable: %s", e)
        return False
    return completed.returncode == 0


def remove_container(
    container_name: str, *, force: bool = True, docker_path: str = "docker"
) -> None:
    """``docker rm [-f] NAME``.

    Raises:
        ExternalCommandFailure: If docker exits non-zero.
        DockerNotFoundError: If docker is not installed.
        DockerError: If docker can not be executed.
        DockerTimeoutError: If docker does not answer in time.
    """
    argv = (
        CommandLineBuilder.create(docker_path, "rm")
        .with_flag_arg("-f", force)
        .with_args([container_name])
        .build_argv()
    )
    completed = safe_docker_run(argv)
    if completed.returncode != 0:
        detail = (completed.stderr or "").strip() or f"exit code {completed.returncode}"
        raise ExternalCommandFailure(f"Failed to remove container '{container_name}': {detail}")
