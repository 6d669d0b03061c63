""".NET Core (netCore platform) option resolution.

Defaults:
    build: context = workspace folder, dockerfile = <folder>/Dockerfile,
        tag = <folder>:dev, target = base, created-by label.
    run: container = <folder>-dev, image from build tag, os = Linux,
        development env vars, project/source/NuGet/debugger mounts and a
        keep-alive entrypoint so the debugger can attach. No port is
        listed, so ``docker run -P`` publishes the image's EXPOSEd ports.
    debug: coreclr launch of ``dotnet <dll>`` through ``docker exec``.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ..cancellation import CancellationToken, check_cancelled
from ..constants import (
    CREATED_BY_LABEL,
    CREATED_BY_VALUE,
    DEV_TAG,
    DOCKER_BUILD_TASK,
    DOCKER_RUN_TASK,
    LATEST_TAG,
    NETCORE_APP_DIR,
    NETCORE_BUILD_TARGET,
    NETCORE_DEBUGGER_DIR,
    NETCORE_NUGET_DIR,
    NETCORE_PROJECT_PATTERNS,
    NETCORE_SRC_DIR,
)
from ..errors import ConfigurationError
from ..logging import get_logger
from ..models import (
    BuildOptions,
    ContainerVolume,
    DebugConfiguration,
    NetCoreTaskOptions,
    RunOptions,
    TaskDefinition,
    WorkspaceFolder,
)
from ..paths import resolve_file_path, resolve_for_docker, to_container_path
from ..platforms import Platform
from ..tasks.graph import get_associated_run_task
from .base import TaskHelper
from .naming import get_default_container_name, get_default_image_name, infer_image_name

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = get_logger(__name__)

_TARGET_FRAMEWORK = re.compile(r"<TargetFrameworks?>\s*([^<;\s]+)")
_ASSEMBLY_NAME = re.compile(r"<AssemblyName>\s*([^<\s]+)\s*</AssemblyName>")
_SKIPPED_DIRS = {"bin", "obj", "node_modules", ".git"}

# Container-side mount points per container OS
_WINDOWS_DIRS = {
    NETCORE_APP_DIR: "C:\\app",
    NETCORE_SRC_DIR: "C:\\src",
    NETCORE_NUGET_DIR: "C:\\.nuget\\packages",
    NETCORE_DEBUGGER_DIR: "C:\\remote_debugger",
}


def find_project_files(folder: WorkspaceFolder) -> list[Path]:
    """All .csproj/.fsproj files under ``folder``, build output excluded."""
    found: list[Path] = []
    for pattern in NETCORE_PROJECT_PATTERNS:
        for path in folder.path.rglob(pattern):
            if not _SKIPPED_DIRS.intersection(path.relative_to(folder.path).parts):
                found.append(path)
    return sorted(found)


def read_target_framework(project_file: Path) -> str:
    """First target framework declared in a project file."""
    try:
        text = project_file.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Unable to read project file '{project_file}': {e}") from e
    match = _TARGET_FRAMEWORK.search(text)
    if not match:
        raise ConfigurationError(
            f"Unable to determine the target framework of '{project_file}'. "
            "Set 'netCore.appOutput' in the debug configuration."
        )
    return match.group(1)


def read_assembly_name(project_file: Path) -> str:
    try:
        text = project_file.read_text(encoding="utf-8")
    except OSError:
        return project_file.stem
    match = _ASSEMBLY_NAME.search(text)
    return match.group(1) if match else project_file.stem


class NetCoreTaskHelper(TaskHelper):
    platform = Platform.NET_CORE

    def resolve_app_project(
        self,
        folder: WorkspaceFolder,
        app_project: str | None,
        token: CancellationToken | None = None,
    ) -> Path:
        """Locate the project file, explicit or the only one in the folder."""
        if app_project:
            path = resolve_file_path(app_project, folder.path, folder.name)
            if not path.is_file():
                raise ConfigurationError(f"The project file '{path}' does not exist.")
            return path

        check_cancelled(token)
        projects = find_project_files(folder)
        if not projects:
            raise ConfigurationError(
                "No .NET Core project file (.csproj or .fsproj) could be found. "
                "Set 'netCore.appProject'."
            )
        if len(projects) > 1:
            names = ", ".join(str(p.relative_to(folder.path)) for p in projects)
            raise ConfigurationError(
                f"Multiple .NET Core project files found ({names}). Set 'netCore.appProject'."
            )
        logger.debug("Inferred netCore.appProject: %s", projects[0])
        return projects[0]

    # --- scaffolding -----------------------------------------------------

    def _project_option(self, folder: WorkspaceFolder, options: dict[str, Any]) -> str:
        project = self.resolve_app_project(
            folder, options.get("appProject") or options.get("app_project")
        )
        relative = project.relative_to(folder.path).as_posix()
        return f"${{workspaceFolder}}/{relative}"

    def provide_build_tasks(
        self, folder: WorkspaceFolder, options: dict[str, Any] | None = None
    ) -> list[TaskDefinition]:
        options = options or {}
        app_project = self._project_option(folder, options)
        return [
            TaskDefinition(
                label=f"{DOCKER_BUILD_TASK}: debug",
                type=DOCKER_BUILD_TASK,
                platform=self.platform.value,
                docker_build=BuildOptions(
                    tag=get_default_image_name(folder.name, DEV_TAG),
                    target=NETCORE_BUILD_TARGET,
                    dockerfile="${workspaceFolder}/Dockerfile",
                    context="${workspaceFolder}",
                    pull=True,
                ),
                net_core=NetCoreTaskOptions(app_project=app_project),
            ),
            TaskDefinition(
                label=f"{DOCKER_BUILD_TASK}: release",
                type=DOCKER_BUILD_TASK,
                platform=self.platform.value,
                docker_build=BuildOptions(
                    tag=get_default_image_name(folder.name, LATEST_TAG),
                    dockerfile="${workspaceFolder}/Dockerfile",
                    context="${workspaceFolder}",
                    pull=True,
                ),
                net_core=NetCoreTaskOptions(app_project=app_project),
            ),
        ]

    def provide_run_tasks(
        self, folder: WorkspaceFolder, options: dict[str, Any] | None = None
    ) -> list[TaskDefinition]:
        options = options or {}
        app_project = self._project_option(folder, options)
        return [
            TaskDefinition(
                label=f"{DOCKER_RUN_TASK}: {mode}",
                type=DOCKER_RUN_TASK,
                platform=self.platform.value,
                depends_on=[f"{DOCKER_BUILD_TASK}: {mode}"],
                docker_run=RunOptions(),
                net_core=NetCoreTaskOptions(app_project=app_project),
            )
            for mode in ("debug", "release")
        ]

    # --- resolution ------------------------------------------------------

    def resolve_build_options(
        self,
        folder: WorkspaceFolder,
        build_options: BuildOptions | None,
        helper_options: NetCoreTaskOptions | None,
        token: CancellationToken | None = None,
    ) -> BuildOptions:
        options = build_options.clone() if build_options else BuildOptions()
        app_project = helper_options.app_project if helper_options else None
        self.resolve_app_project(folder, app_project, token)

        if options.context is None:
            options.context = str(folder.path)
        if options.dockerfile is None:
            options.dockerfile = str(folder.path / "Dockerfile")
        if options.tag is None:
            options.tag = get_default_image_name(folder.name, DEV_TAG)
        if options.target is None:
            options.target = NETCORE_BUILD_TARGET
        if options.labels is None:
            options.labels = {CREATED_BY_LABEL: CREATED_BY_VALUE}

        logger.debug("Resolved netCore build options: %s", options)
        return options

    def resolve_run_options(
        self,
        folder: WorkspaceFolder,
        run_options: RunOptions | None,
        helper_options: NetCoreTaskOptions | None,
        build_result: BuildOptions | None = None,
        token: CancellationToken | None = None,
    ) -> RunOptions:
        options = run_options.clone() if run_options else RunOptions()
        project = self.resolve_app_project(
            folder, helper_options.app_project if helper_options else None, token
        )

        if options.container_name is None:
            options.container_name = get_default_container_name(folder.name, DEV_TAG)
        options.image = infer_image_name(options, build_result, folder.name, DEV_TAG)
        if options.os is None:
            options.os = "Linux"
        is_windows = options.os == "Windows"

        if options.env is None:
            options.env = {
                "ASPNETCORE_ENVIRONMENT": "Development",
                "DOTNET_USE_POLLING_FILE_WATCHER": "1",
            }
            if helper_options is not None and helper_options.configure_ssl:
                options.env["ASPNETCORE_URLS"] = "https://+:443;http://+:80"

        if options.volumes is None:
            options.volumes = self._default_volumes(folder, project, is_windows)

        if options.entrypoint is None and options.command is None:
            options.entrypoint = "ping" if is_windows else "tail"
            options.command = "-t localhost" if is_windows else "-f /dev/null"

        logger.debug("Resolved netCore run options: %s", options)
        return options

    def _default_volumes(
        self, folder: WorkspaceFolder, project: Path, is_windows: bool
    ) -> list[ContainerVolume]:
        def target(path: str) -> str:
            return _WINDOWS_DIRS[path] if is_windows else path

        mounts = [
            (project.parent, NETCORE_APP_DIR, "rw"),
            (folder.path, NETCORE_SRC_DIR, "rw"),
            (self.config.nuget_packages_dir, NETCORE_NUGET_DIR, "ro"),
            (self.config.vsdbg_dir, NETCORE_DEBUGGER_DIR, "ro"),
        ]
        return [
            ContainerVolume(
                local_path=resolve_for_docker(local),
                container_path=target(remote),
                permissions=permissions,
            )
            for local, remote, permissions in mounts
        ]

    def resolve_debug_configuration(
        self,
        folder: WorkspaceFolder,
        configuration: DebugConfiguration,
        tasks: Sequence[TaskDefinition],
        token: CancellationToken | None = None,
    ) -> DebugConfiguration:
        resolved = configuration.clone()
        debug_options = resolved.net_core

        run_task = get_associated_run_task(tasks, resolved, token)
        app_project = debug_options.app_project if debug_options else None
        if not app_project and run_task is not None and run_task.net_core is not None:
            app_project = run_task.net_core.app_project
        project = self.resolve_app_project(folder, app_project, token)

        if debug_options is not None and debug_options.app_output:
            app_output = debug_options.app_output
        else:
            framework = read_target_framework(project)
            app_output = f"bin/Debug/{framework}/{read_assembly_name(project)}.dll"

        container_name = get_default_container_name(folder.name, DEV_TAG)
        if run_task is not None and run_task.docker_run and run_task.docker_run.container_name:
            container_name = run_task.docker_run.container_name

        resolved.type = "coreclr"
        resolved.request = "launch"
        resolved.extra.update(
            {
                "program": "dotnet",
                "args": [to_container_path(NETCORE_APP_DIR, app_output)],
                "cwd": NETCORE_APP_DIR,
                "pipeTransport": {
                    "pipeProgram": self.config.docker_path,
                    "pipeArgs": ["exec", "-i", container_name],
                    "debuggerPath": to_container_path(NETCORE_DEBUGGER_DIR, "vsdbg"),
                    "pipeCwd": str(folder.path),
                    "quoteArgs": False,
                },
                "sourceFileMap": {
                    NETCORE_APP_DIR: str(project.parent),
                    NETCORE_SRC_DIR: str(folder.path),
                },
            }
        )
        if run_task is not None:
            resolved.container_name_to_kill = container_name

        logger.debug("Resolved netCore debug configuration for container %s", container_name)
        return resolved
