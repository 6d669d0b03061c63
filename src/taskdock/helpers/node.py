"""Node.js (node platform) option resolution.

Defaults:
    build: package = <folder>/package.json, context = the package's
        directory, dockerfile = <context>/Dockerfile,
        tag = <package name>:latest.
    run: container = <package name>-dev, image from build tag. With
        debugging enabled (the default) the inspect port (9229) is
        published host == container and the start command gets
        ``--inspect=0.0.0.0:<port>``.
    debug: node2 attach to localhost:<port>, remote root /usr/src/app.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ..cancellation import CancellationToken, check_cancelled
from ..command_line import Quoting, ShellToken
from ..constants import (
    DOCKER_BUILD_TASK,
    DOCKER_RUN_TASK,
    LATEST_TAG,
    NODE_DEBUG_ADDRESS,
    NODE_INSPECT_PORT,
    NODE_PACKAGE_FILE,
    NODE_REMOTE_ROOT,
)
from ..errors import ConfigurationError
from ..logging import get_logger
from ..models import (
    BuildOptions,
    ContainerPort,
    DebugConfiguration,
    NodeDebugOptions,
    NodeTaskOptions,
    RunOptions,
    TaskDefinition,
    WorkspaceFolder,
)
from ..paths import resolve_file_path
from ..platforms import Platform
from ..tasks.graph import get_associated_run_task
from .base import TaskHelper
from .naming import get_default_container_name, get_default_image_name, infer_image_name

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = get_logger(__name__)

_NODE_COMMAND = re.compile(r"^node(\s|$)")


class NodePackage:
    """The parts of package.json that drive defaults."""

    def __init__(self, path: Path, data: dict[str, Any]) -> None:
        self.path = path
        self.data = data

    @property
    def directory(self) -> Path:
        return self.path.parent

    @property
    def name(self) -> str | None:
        name = self.data.get("name")
        return name if isinstance(name, str) and name else None

    @property
    def start_script(self) -> str | None:
        scripts = self.data.get("scripts")
        if isinstance(scripts, dict) and isinstance(scripts.get("start"), str):
            return scripts["start"]
        return None

    @property
    def main(self) -> str | None:
        main = self.data.get("main")
        return main if isinstance(main, str) and main else None


def read_package(folder: WorkspaceFolder, package: str | None) -> NodePackage:
    """Load the project's package.json (default: the folder's own)."""
    default = f"${{workspaceFolder}}/{NODE_PACKAGE_FILE}"
    path = resolve_file_path(package or default, folder.path, folder.name)
    if not path.is_file():
        raise ConfigurationError(
            f"Unable to find '{path}'. Set 'node.package' to the project's package.json."
        )
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Unable to read '{path}': {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"'{path}' must contain a JSON object")
    return NodePackage(path, data)


def inspect_arg(mode: str | None, port: int) -> str:
    flag = "--inspect-brk" if mode == "break" else "--inspect"
    return f"{flag}=0.0.0.0:{port}"


def infer_command(package: NodePackage, inspect: str | None) -> str | list[str | ShellToken]:
    """Command that starts the app, with ``inspect`` inserted after ``node``.

    A start script is returned as written. Without one, ``main`` is run as
    a single quoted token so a path with spaces stays one argument.

    Raises:
        ConfigurationError: If neither ``scripts.start`` nor ``main`` exist.
    """
    start = package.start_script
    if start:
        if inspect and _NODE_COMMAND.match(start):
            return f"node {inspect}{start[4:]}"
        if inspect:
            logger.debug("Start script does not begin with 'node', not injecting %s", inspect)
        return start

    if package.main:
        parts: list[str | ShellToken] = ["node", inspect] if inspect else ["node"]
        return [*parts, ShellToken(package.main, Quoting.STRONG)]

    raise ConfigurationError(
        "Unable to infer the command to run the application within the container. "
        "Set 'dockerRun.command' or add a 'start' script or 'main' to package.json."
    )


class NodeTaskHelper(TaskHelper):
    platform = Platform.NODE

    # --- scaffolding -----------------------------------------------------

    def provide_build_tasks(
        self, folder: WorkspaceFolder, options: dict[str, Any] | None = None
    ) -> list[TaskDefinition]:
        options = options or {}
        package = options.get("package")
        node = NodeTaskOptions(package=package) if package else None
        return [
            TaskDefinition(
                label=DOCKER_BUILD_TASK,
                type=DOCKER_BUILD_TASK,
                platform=self.platform.value,
                docker_build=BuildOptions(
                    dockerfile="${workspaceFolder}/Dockerfile",
                    context="${workspaceFolder}",
                    pull=True,
                ),
                node=node,
            )
        ]

    def provide_run_tasks(
        self, folder: WorkspaceFolder, options: dict[str, Any] | None = None
    ) -> list[TaskDefinition]:
        options = options or {}
        package = options.get("package")
        return [
            TaskDefinition(
                label=f"{DOCKER_RUN_TASK}: {mode}",
                type=DOCKER_RUN_TASK,
                platform=self.platform.value,
                depends_on=[DOCKER_BUILD_TASK],
                docker_run=RunOptions(),
                node=NodeTaskOptions(package=package, enable_debugging=mode == "debug"),
            )
            for mode in ("release", "debug")
        ]

    # --- resolution ------------------------------------------------------

    def _name_hint(self, folder: WorkspaceFolder, package: NodePackage) -> str:
        return package.name or folder.name

    def resolve_build_options(
        self,
        folder: WorkspaceFolder,
        build_options: BuildOptions | None,
        helper_options: NodeTaskOptions | None,
        token: CancellationToken | None = None,
    ) -> BuildOptions:
        options = build_options.clone() if build_options else BuildOptions()
        check_cancelled(token)
        package = read_package(folder, helper_options.package if helper_options else None)

        if options.context is None:
            options.context = str(package.directory)
        if options.dockerfile is None:
            context = resolve_file_path(options.context, folder.path, folder.name)
            options.dockerfile = str(context / "Dockerfile")
        if options.tag is None:
            options.tag = get_default_image_name(self._name_hint(folder, package), LATEST_TAG)

        logger.debug("Resolved node build options: %s", options)
        return options

    def resolve_run_options(
        self,
        folder: WorkspaceFolder,
        run_options: RunOptions | None,
        helper_options: NodeTaskOptions | None,
        build_result: BuildOptions | None = None,
        token: CancellationToken | None = None,
    ) -> RunOptions:
        options = run_options.clone() if run_options else RunOptions()
        helper_options = helper_options or NodeTaskOptions()
        check_cancelled(token)
        package = read_package(folder, helper_options.package)
        name_hint = self._name_hint(folder, package)

        if options.container_name is None:
            options.container_name = get_default_container_name(name_hint)
        options.image = infer_image_name(options, build_result, name_hint, LATEST_TAG)

        inspect = None
        if helper_options.enable_debugging is not False:
            port = helper_options.inspect_port or NODE_INSPECT_PORT
            inspect = inspect_arg(helper_options.inspect_mode, port)
            ports = options.ports or []
            if not any(p.container_port == port for p in ports):
                options.ports = [*ports, ContainerPort(container_port=port, host_port=port)]

        if options.command is None:
            options.command = infer_command(package, inspect)

        logger.debug("Resolved node run options: %s", options)
        return options

    def resolve_debug_configuration(
        self,
        folder: WorkspaceFolder,
        configuration: DebugConfiguration,
        tasks: Sequence[TaskDefinition],
        token: CancellationToken | None = None,
    ) -> DebugConfiguration:
        resolved = configuration.clone()
        debug_options = resolved.node
        run_task = get_associated_run_task(tasks, resolved, token)
        run_node = run_task.node if run_task is not None and run_task.node else NodeTaskOptions()

        package_option = (debug_options.package if debug_options else None) or run_node.package
        package = read_package(folder, package_option)

        debug_options = debug_options or NodeDebugOptions()
        port = debug_options.port or run_node.inspect_port or NODE_INSPECT_PORT
        address = debug_options.address or NODE_DEBUG_ADDRESS
        local_root = debug_options.local_root or str(package.directory)
        remote_root = debug_options.remote_root or NODE_REMOTE_ROOT

        resolved.type = "node2"
        resolved.request = "attach"
        resolved.extra.update(
            {
                "port": port,
                "address": address,
                "localRoot": local_root,
                "remoteRoot": remote_root,
            }
        )

        if run_task is not None:
            container_name = get_default_container_name(self._name_hint(folder, package))
            if run_task.docker_run is not None and run_task.docker_run.container_name:
                container_name = run_task.docker_run.container_name
            resolved.container_name_to_kill = container_name
            logger.debug("Resolved node debug configuration for container %s", container_name)

        return resolved
