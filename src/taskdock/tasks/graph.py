"""Walks the task graph declared in tasks.json.

A debug configuration points at its run task through ``preLaunchTask``;
a run task points at its build task through ``dependsOn``. The graph is
user-edited, so the walk keeps a visited set and gives up (returns None)
on cycles and dangling labels instead of recursing forever.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Union

from ..cancellation import CancellationToken, check_cancelled
from ..constants import DOCKER_BUILD_TASK, DOCKER_RUN_TASK
from ..logging import get_logger
from ..models import DebugConfiguration, DependsOnType, TaskDefinition

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = get_logger(__name__)

GraphNode = Union[TaskDefinition, DebugConfiguration]


def find_task_by_label(tasks: Sequence[TaskDefinition], label: str) -> TaskDefinition | None:
    """First task with ``label``, in declaration order."""
    return next((t for t in tasks if t.label == label), None)


def find_task_by_type(tasks: Sequence[TaskDefinition], task_type: str) -> TaskDefinition | None:
    """First task of ``task_type``, in declaration order."""
    return next((t for t in tasks if t.type == task_type), None)


def _next_nodes(tasks: Sequence[TaskDefinition], node: GraphNode) -> list[TaskDefinition | None]:
    """Nodes to try after ``node``, in the order they must be tried."""
    pre_launch_task = getattr(node, "pre_launch_task", None)
    if pre_launch_task:
        return [find_task_by_label(tasks, pre_launch_task)]

    depends_on = getattr(node, "depends_on", None)
    if isinstance(depends_on, DependsOnType):
        return [find_task_by_type(tasks, depends_on.type)]
    if depends_on:
        return [find_task_by_label(tasks, label) for label in depends_on]
    return []


def recursive_find_task_by_type(
    tasks: Sequence[TaskDefinition],
    task_type: str,
    start: GraphNode | None,
    token: CancellationToken | None = None,
) -> TaskDefinition | None:
    """Find the task of ``task_type`` that ``start`` leads to.

    Rules, per node:
        1. ``preLaunchTask`` set: continue from that label's task.
        2. node type is ``task_type``: found.
        3. ``dependsOn`` list: try each label in order, first match wins.
           ``dependsOn`` object: continue from the first task of its type.
        4. otherwise: not found on this path.

    Depth-first with an explicit stack; each task is expanded at most once.
    """
    stack: list[GraphNode | None] = [start]
    visited: set[int] = set()

    while stack:
        check_cancelled(token)
        node = stack.pop()
        if node is None or id(node) in visited:
            continue
        visited.add(id(node))

        if not getattr(node, "pre_launch_task", None) and node.type == task_type:
            return node  # type: ignore[return-value]

        # reversed so the first dependency is popped first
        stack.extend(reversed(_next_nodes(tasks, node)))

    logger.debug("No '%s' task reachable from %r", task_type, _describe(start))
    return None


def _describe(node: GraphNode | None) -> str | None:
    if node is None:
        return None
    return getattr(node, "label", None) or getattr(node, "name", None)


def get_associated_run_task(
    tasks: Sequence[TaskDefinition],
    debug_configuration: DebugConfiguration,
    token: CancellationToken | None = None,
) -> TaskDefinition | None:
    """The docker-run task a debug configuration launches, if any."""
    return recursive_find_task_by_type(tasks, DOCKER_RUN_TASK, debug_configuration, token)


def get_associated_build_task(
    tasks: Sequence[TaskDefinition],
    run_task: TaskDefinition | str,
    token: CancellationToken | None = None,
) -> TaskDefinition | None:
    """The docker-build task a run task depends on, if any.

    The run task is looked up again by label so the stored ``dependsOn``
    is used even when the caller holds a stripped-down copy.
    """
    label = run_task if isinstance(run_task, str) else run_task.label
    stored = find_task_by_label(tasks, label) if label else None
    if stored is None and not isinstance(run_task, str):
        stored = run_task
    return recursive_find_task_by_type(tasks, DOCKER_BUILD_TASK, stored, token)
