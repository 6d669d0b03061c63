"""docker-build / docker-run task resolution and the task graph."""

from __future__ import annotations

from .graph import (
    find_task_by_label,
    find_task_by_type,
    get_associated_build_task,
    get_associated_run_task,
    recursive_find_task_by_type,
)
from .store import WorkspaceTasks, find_build_task_for_dockerfile

__all__ = [
    "WorkspaceTasks",
    "find_build_task_for_dockerfile",
    "find_task_by_label",
    "find_task_by_type",
    "get_associated_build_task",
    "get_associated_run_task",
    "recursive_find_task_by_type",
]
