"""Reads and writes the workspace's tasks.json and launch.json.

Both files are JSON with comments (``//`` and ``/* */``) and trailing
commas allowed, as the editor writes them.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ..constants import (
    DOCKER_BUILD_TASK,
    LAUNCH_FILE,
    RELEASE_BUILD_TASK_LABEL,
    TASKS_FILE,
    TASKS_VERSION,
    VSCODE_DIR,
)
from ..errors import ConfigurationError
from ..logging import get_logger
from ..models import DebugConfiguration, TaskDefinition, WorkspaceFolder
from ..paths import resolve_file_path

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = get_logger(__name__)

_TRAILING_COMMA = re.compile(r",(\s*[}\]])")


def strip_json_comments(text: str) -> str:
    """Remove comments outside of string literals, then trailing commas."""
    out: list[str] = []
    i, n = 0, len(text)
    in_string = False
    while i < n:
        ch = text[i]
        if in_string:
            out.append(ch)
            if ch == "\\" and i + 1 < n:
                out.append(text[i + 1])
                i += 2
                continue
            if ch == '"':
                in_string = False
            i += 1
        elif ch == '"':
            in_string = True
            out.append(ch)
            i += 1
        elif text.startswith("//", i):
            end = text.find("\n", i)
            i = n if end == -1 else end
        elif text.startswith("/*", i):
            end = text.find("*/", i + 2)
            i = n if end == -1 else end + 2
        else:
            out.append(ch)
            i += 1
    return _strip_trailing_commas("".join(out))


def _strip_trailing_commas(text: str) -> str:
    out: list[str] = []
    in_string = False
    i, n = 0, len(text)
    while i < n:
        ch = text[i]
        if in_string:
            if ch == "\\":
                out.append(text[i : i + 2])
                i += 2
                continue
            in_string = ch != '"'
        elif ch == '"':
            in_string = True
        elif ch == ",":
            match = _TRAILING_COMMA.match(text, i)
            if match:
                i += 1
                continue
        out.append(ch)
        i += 1
    return "".join(out)


def _read_jsonc(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = json.loads(strip_json_comments(path.read_text(encoding="utf-8")))
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Failed to parse {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a JSON object")
    return data


def _entries(data: dict[str, Any], key: str, path: Path) -> list[dict[str, Any]]:
    entries = data.get(key) or []
    if not isinstance(entries, list):
        raise ConfigurationError(f"'{key}' in {path} must be a list")
    for i, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ConfigurationError(f"'{key}[{i}]' in {path} must be an object")
    return entries


class WorkspaceTasks:
    """Task and launch configuration of one workspace folder."""

    def __init__(self, folder: WorkspaceFolder) -> None:
        self.folder = folder

    @property
    def tasks_path(self) -> Path:
        return self.folder.path / VSCODE_DIR / TASKS_FILE

    @property
    def launch_path(self) -> Path:
        return self.folder.path / VSCODE_DIR / LAUNCH_FILE

    def load_tasks(self) -> list[TaskDefinition]:
        """All tasks.json tasks, in declaration order."""
        data = _read_jsonc(self.tasks_path)
        return [
            TaskDefinition.from_dict(entry, f"tasks[{i}]")
            for i, entry in enumerate(_entries(data, "tasks", self.tasks_path))
        ]

    def load_debug_configurations(self) -> list[DebugConfiguration]:
        """All launch.json configurations, in declaration order."""
        data = _read_jsonc(self.launch_path)
        return [
            DebugConfiguration.from_dict(entry, f"configurations[{i}]")
            for i, entry in enumerate(_entries(data, "configurations", self.launch_path))
        ]

    def find_task(self, label: str) -> TaskDefinition | None:
        return next((t for t in self.load_tasks() if t.label == label), None)

    def find_debug_configuration(self, name: str) -> DebugConfiguration | None:
        return next((c for c in self.load_debug_configurations() if c.name == name), None)

    def add_task(self, task: TaskDefinition, overwrite: bool = False) -> bool:
        """Insert ``task`` or replace the task with the same label.

        Returns:
            False, without writing anything, when the label exists and
            ``overwrite`` is not set; True otherwise.
        """
        data = _read_jsonc(self.tasks_path)
        entries = _entries(data, "tasks", self.tasks_path)

        index = next(
            (i for i, entry in enumerate(entries) if entry.get("label") == task.label),
            None,
        )
        if index is not None:
            if not overwrite:
                logger.debug("Task '%s' already exists, not overwriting", task.label)
                return False
            entries[index] = task.to_dict()
        else:
            entries.append(task.to_dict())

        data.setdefault("version", TASKS_VERSION)
        data["tasks"] = entries
        self.tasks_path.parent.mkdir(parents=True, exist_ok=True)
        self.tasks_path.write_text(json.dumps(data, indent=4) + "\n", encoding="utf-8")
        logger.debug("Saved task '%s' to %s", task.label, self.tasks_path)
        return True


def find_build_task_for_dockerfile(
    tasks: Sequence[TaskDefinition], dockerfile: str | Path, folder: WorkspaceFolder
) -> TaskDefinition | None:
    """The docker-build task that builds ``dockerfile``.

    Only tasks with an explicit ``dockerBuild.dockerfile`` take part. With
    several candidates the one labelled ``docker-build: release`` wins;
    otherwise the choice is ambiguous and None is returned.
    """
    wanted = str(resolve_file_path(str(dockerfile), folder.path, folder.name)).lower()
    candidates = [
        t
        for t in tasks
        if t.type == DOCKER_BUILD_TASK
        and t.docker_build is not None
        and t.docker_build.dockerfile
        and str(resolve_file_path(t.docker_build.dockerfile, folder.path, folder.name)).lower()
        == wanted
    ]

    if len(candidates) == 1:
        return candidates[0]
    return next((t for t in candidates if t.label == RELEASE_BUILD_TASK_LABEL), None)
