"""Resolution of docker-build and docker-run tasks into command lines.

    task definition -> classify -> platform helper -> CommandLineBuilder

The caller's definition is cloned first; the resolved copy is returned
alongside the command line.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..command_line import CommandLineBuilder
from ..config import Config
from ..constants import DOCKER_BUILD_TASK, DOCKER_RUN_TASK
from ..errors import ConfigurationError, UnrecognizedPlatformError
from ..helpers import default_helpers
from ..logging import get_logger
from ..models import BuildOptions, ResolvedTask, RunOptions, TaskDefinition, WorkspaceFolder
from ..platforms import Platform, classify
from .graph import get_associated_build_task
from .store import WorkspaceTasks

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ..cancellation import CancellationToken
    from ..helpers import TaskHelper

logger = get_logger(__name__)


def _helper_options(definition: TaskDefinition, platform: Platform) -> Any:
    return definition.net_core if platform is Platform.NET_CORE else definition.node


class _DockerTaskProvider:
    task_type = ""

    def __init__(
        self,
        helpers: dict[Platform, TaskHelper] | None = None,
        config: Config | None = None,
    ) -> None:
        self.config = config or Config()
        self.helpers = helpers if helpers is not None else default_helpers(self.config)

    def _require_scope(
        self, definition: TaskDefinition, folder: WorkspaceFolder | None
    ) -> WorkspaceFolder:
        if folder is None:
            raise ConfigurationError(
                f"Unable to determine task scope to execute {self.task_type} task "
                f"'{definition.label}'."
            )
        return folder

    def _helper(self, definition: TaskDefinition) -> tuple[Platform, TaskHelper]:
        platform = classify(definition)
        helper = self.helpers.get(platform)
        if helper is None:
            raise UnrecognizedPlatformError(definition.platform)
        logger.debug("Task '%s' targets platform %s", definition.label, platform.value)
        return platform, helper

    def _initialize(
        self,
        store: WorkspaceTasks,
        definitions: list[TaskDefinition],
        overwrite: bool,
    ) -> list[TaskDefinition]:
        """Store scaffolded definitions; returns the ones actually written."""
        return [d for d in definitions if store.add_task(d, overwrite=overwrite)]

    def _platform_helper(self, platform: Platform | str) -> TaskHelper:
        try:
            helper = self.helpers.get(Platform(platform))
        except ValueError:
            helper = None
        if helper is None:
            raise UnrecognizedPlatformError(str(getattr(platform, "value", platform)))
        return helper


class BuildTaskProvider(_DockerTaskProvider):
    task_type = DOCKER_BUILD_TASK

    def resolve_task(
        self,
        task: TaskDefinition,
        folder: WorkspaceFolder | None,
        token: CancellationToken | None = None,
    ) -> ResolvedTask:
        definition = task.clone()
        folder = self._require_scope(definition, folder)
        platform, helper = self._helper(definition)

        definition.docker_build = helper.resolve_build_options(
            folder, definition.docker_build, _helper_options(definition, platform), token
        )
        return ResolvedTask(definition, self.resolve_command_line(definition.docker_build))

    def resolve_command_line(self, options: BuildOptions) -> list[str]:
        return (
            CommandLineBuilder.create(self.config.docker_path, "build", "--rm")
            .with_flag_arg("--pull", options.pull)
            .with_named_arg("-f", options.dockerfile)
            .with_key_value_args("--build-arg", options.args)
            .with_key_value_args("--label", options.labels)
            .with_named_arg("-t", options.tag)
            .with_named_arg("--target", options.target)
            .with_quoted_arg(options.context)
            .build()
        )

    def initialize_build_tasks(
        self,
        store: WorkspaceTasks,
        platform: Platform | str,
        options: dict[str, Any] | None = None,
        overwrite: bool = False,
    ) -> list[TaskDefinition]:
        helper = self._platform_helper(platform)
        return self._initialize(
            store, helper.provide_build_tasks(store.folder, options), overwrite
        )


class RunTaskProvider(_DockerTaskProvider):
    task_type = DOCKER_RUN_TASK

    def resolve_task(
        self,
        task: TaskDefinition,
        folder: WorkspaceFolder | None,
        token: CancellationToken | None = None,
        tasks: Sequence[TaskDefinition] | None = None,
    ) -> ResolvedTask:
        """Resolve a docker-run task.

        ``tasks`` is the task graph used to find the bound build task; it
        is read from the folder's tasks.json when not given.
        """
        definition = task.clone()
        folder = self._require_scope(definition, folder)
        platform, helper = self._helper(definition)

        if tasks is None:
            tasks = WorkspaceTasks(folder).load_tasks()
        build_result = self._resolve_build_result(definition, folder, tasks, token)

        definition.docker_run = helper.resolve_run_options(
            folder,
            definition.docker_run,
            _helper_options(definition, platform),
            build_result,
            token,
        )
        return ResolvedTask(definition, self.resolve_command_line(definition.docker_run))

    def _resolve_build_result(
        self,
        definition: TaskDefinition,
        folder: WorkspaceFolder,
        tasks: Sequence[TaskDefinition],
        token: CancellationToken | None,
    ) -> BuildOptions | None:
        build_task = get_associated_build_task(tasks, definition, token)
        if build_task is None:
            return None

        platform = classify(build_task)
        helper = self.helpers.get(platform)
        if helper is None:
            return build_task.docker_build
        return helper.resolve_build_options(
            folder, build_task.docker_build, _helper_options(build_task, platform), token
        )

    def resolve_command_line(self, options: RunOptions) -> list[str]:
        # -P when asked for, or by default when no port is listed
        publish_all = options.ports_publish_all or (
            options.ports_publish_all is None and not options.ports
        )
        return (
            CommandLineBuilder.create(self.config.docker_path, "run", "-dt")
            .with_flag_arg("-P", publish_all)
            .with_named_arg("--name", options.container_name)
            .with_named_arg("--network", options.network)
            .with_named_arg("--network-alias", options.network_alias)
            .with_key_value_args("-e", options.env)
            .with_array_args("--env-file", options.env_files)
            .with_key_value_args("--label", options.labels)
            .with_array_args("-v", options.volumes, lambda volume: volume.format())
            .with_array_args("-p", options.ports, lambda port: port.format())
            .with_array_args("--add-host", options.extra_hosts, lambda host: host.format())
            .with_named_arg("--entrypoint", options.entrypoint)
            .with_quoted_arg(options.image)
            .with_args(options.command)
            .build()
        )

    def initialize_run_tasks(
        self,
        store: WorkspaceTasks,
        platform: Platform | str,
        options: dict[str, Any] | None = None,
        overwrite: bool = False,
    ) -> list[TaskDefinition]:
        helper = self._platform_helper(platform)
        return self._initialize(store, helper.provide_run_tasks(store.folder, options), overwrite)


def resolve_task(
    task: TaskDefinition,
    folder: WorkspaceFolder | None,
    token: CancellationToken | None = None,
    config: Config | None = None,
) -> ResolvedTask:
    """Resolve a docker-build or docker-run task by its ``type``."""
    if task.type == DOCKER_BUILD_TASK:
        return BuildTaskProvider(config=config).resolve_task(task, folder, token)
    if task.type == DOCKER_RUN_TASK:
        return RunTaskProvider(config=config).resolve_task(task, folder, token)
    raise ConfigurationError(
        f"Task '{task.label}' has type '{task.type}'; expected "
        f"'{DOCKER_BUILD_TASK}' or '{DOCKER_RUN_TASK}'."
    )
