"""Path helpers for task options and Docker volume mounts.

Task options may reference ``${workspaceFolder}`` and may be relative to
the workspace. Volume sources must be in the form Docker Desktop expects
(``/c/Users/...`` rather than ``C:\\Users\\...``).
"""

from __future__ import annotations

import os
import re
from pathlib import Path, PurePosixPath

_WINDOWS_PATH = re.compile(r"^([A-Za-z]):[/\\]*(.*)$")
_WSL_MOUNT = re.compile(r"^/mnt/([a-z])(?:/(.*))?$")


def _collapse_slashes(path_str: str) -> str:
    normalized = re.sub(r"/+", "/", path_str.replace("\\", "/"))
    if len(normalized) > 1:
        normalized = normalized.rstrip("/")
    return normalized


def _drive_path(drive: str, rest: str) -> str:
    rest = _collapse_slashes(rest).strip("/")
    return f"/{drive.lower()}/{rest}" if rest else f"/{drive.lower()}"


def is_windows_path(path: str | Path) -> bool:
    """True for drive-letter paths such as ``D:\\src`` or ``D:/src``."""
    return bool(re.match(r"^[A-Za-z]:[/\\]", str(path)))


def resolve_for_docker(path: str | Path) -> str:
    """Convert a host path to the form used as a ``-v`` source.

    Examples:
        >>> resolve_for_docker("D:\\\\GitHub\\\\Project")
        '/d/GitHub/Project'
        >>> resolve_for_docker("/mnt/c/Users/name")
        '/c/Users/name'
        >>> resolve_for_docker("/home/user/project")
        '/home/user/project'
    """
    path_str = str(path).replace("\\", "/")

    match = _WINDOWS_PATH.match(path_str)
    if match and is_windows_path(path_str):
        return _drive_path(match.group(1), match.group(2))

    match = _WSL_MOUNT.match(path_str)
    if match:
        return _drive_path(match.group(1), match.group(2) or "")

    return path_str


def substitute_variables(value: str, folder_path: Path, folder_name: str) -> str:
    """Expand the workspace variables supported in task options."""
    return (
        value.replace("${workspaceFolderBasename}", folder_name)
        .replace("${workspaceFolder}", str(folder_path))
        .replace("${workspaceRoot}", str(folder_path))
    )


def resolve_file_path(value: str, folder_path: Path, folder_name: str | None = None) -> Path:
    """Resolve a task option path against its workspace folder."""
    expanded = substitute_variables(value, folder_path, folder_name or folder_path.name)
    expanded = os.path.expanduser(expanded)
    candidate = Path(expanded)
    if not candidate.is_absolute():
        candidate = folder_path / candidate
    return Path(os.path.normpath(candidate))


def to_container_path(*parts: str) -> str:
    """Join container-side path parts with forward slashes."""
    return str(PurePosixPath(*parts))
