"""Workspace-level entry points.

These read the task graph from the folder's tasks.json and delegate to
the providers and the graph walker.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .config import Config
from .debugging.provider import DebugConfigurationProvider
from .tasks.graph import get_associated_build_task, get_associated_run_task
from .tasks.providers import resolve_task
from .tasks.store import WorkspaceTasks

if TYPE_CHECKING:
    from .cancellation import CancellationToken
    from .models import DebugConfiguration, TaskDefinition, WorkspaceFolder

__all__ = [
    "find_associated_build_task",
    "find_associated_run_task",
    "resolve_debug_configuration",
    "resolve_task",
]


def resolve_debug_configuration(
    folder: WorkspaceFolder | None,
    configuration: DebugConfiguration,
    token: CancellationToken | None = None,
    config: Config | None = None,
) -> DebugConfiguration:
    return DebugConfigurationProvider(config=config).resolve_debug_configuration(
        folder, configuration, token
    )


def find_associated_run_task(
    folder: WorkspaceFolder,
    debug_configuration: DebugConfiguration,
    token: CancellationToken | None = None,
) -> TaskDefinition | None:
    return get_associated_run_task(WorkspaceTasks(folder).load_tasks(), debug_configuration, token)


def find_associated_build_task(
    folder: WorkspaceFolder,
    run_task: TaskDefinition | str,
    token: CancellationToken | None = None,
) -> TaskDefinition | None:
    return get_associated_build_task(WorkspaceTasks(folder).load_tasks(), run_task, token)
