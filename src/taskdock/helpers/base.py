"""Interface shared by the per-platform option resolvers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from ..config import Config

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ..cancellation import CancellationToken
    from ..models import (
        BuildOptions,
        DebugConfiguration,
        RunOptions,
        TaskDefinition,
        WorkspaceFolder,
    )
    from ..platforms import Platform


class TaskHelper(ABC):
    """Fills the gaps of a platform's docker-build / docker-run options.

    Implementations clone their inputs; explicitly set fields are returned
    unchanged and only unset (None) fields are inferred.
    """

    platform: Platform

    def __init__(self, config: Config | None = None) -> None:
        self.config = config or Config()

    @abstractmethod
    def provide_build_tasks(
        self, folder: WorkspaceFolder, options: dict[str, Any] | None = None
    ) -> list[TaskDefinition]:
        """Default docker-build task definitions for a new workspace."""

    @abstractmethod
    def provide_run_tasks(
        self, folder: WorkspaceFolder, options: dict[str, Any] | None = None
    ) -> list[TaskDefinition]:
        """Default docker-run task definitions for a new workspace."""

    @abstractmethod
    def resolve_build_options(
        self,
        folder: WorkspaceFolder,
        build_options: BuildOptions | None,
        helper_options: Any,
        token: CancellationToken | None = None,
    ) -> BuildOptions:
        """Complete ``dockerBuild`` options."""

    @abstractmethod
    def resolve_run_options(
        self,
        folder: WorkspaceFolder,
        run_options: RunOptions | None,
        helper_options: Any,
        build_result: BuildOptions | None = None,
        token: CancellationToken | None = None,
    ) -> RunOptions:
        """Complete ``dockerRun`` options.

        ``build_result`` is the resolved build options of the run task's
        build task, if it has one.
        """

    @abstractmethod
    def resolve_debug_configuration(
        self,
        folder: WorkspaceFolder,
        configuration: DebugConfiguration,
        tasks: Sequence[TaskDefinition],
        token: CancellationToken | None = None,
    ) -> DebugConfiguration:
        """Turn a ``docker`` debug configuration into a launchable one."""
