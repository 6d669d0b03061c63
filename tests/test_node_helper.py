"""Tests for Node.js option resolution."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from taskdock.command_line import CommandLineBuilder, Quoting, ShellToken
from taskdock.errors import ConfigurationError
from taskdock.helpers.node import (
    NodePackage,
    NodeTaskHelper,
    infer_command,
    inspect_arg,
    read_package,
)
from taskdock.models import (
    BuildOptions,
    ContainerPort,
    DebugConfiguration,
    NodeDebugOptions,
    NodeTaskOptions,
    RunOptions,
    TaskDefinition,
    WorkspaceFolder,
)
from taskdock.tasks.providers import RunTaskProvider


def _package(**data: object) -> NodePackage:
    return NodePackage(Path("/ws/package.json"), dict(data))


class TestReadPackage:
    """Tests for read_package function."""

    def test_default_location(self, node_folder: WorkspaceFolder) -> None:
        package = read_package(node_folder, None)
        assert package.path == node_folder.path / "package.json"
        assert package.name == "my-app"
        assert package.start_script == "node ./bin/www"

    def test_nested_package(self, node_folder: WorkspaceFolder) -> None:
        api = node_folder.path / "api"
        api.mkdir()
        (api / "package.json").write_text(json.dumps({"main": "server.js"}))
        package = read_package(node_folder, "${workspaceFolder}/api/package.json")
        assert package.directory == api
        assert package.name is None
        assert package.main == "server.js"

    def test_missing(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="node.package"):
            read_package(WorkspaceFolder(tmp_path), None)

    def test_invalid_json(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text("{")
        with pytest.raises(ConfigurationError, match="Unable to read"):
            read_package(WorkspaceFolder(tmp_path), None)

    def test_not_an_object(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text("[]")
        with pytest.raises(ConfigurationError, match="JSON object"):
            read_package(WorkspaceFolder(tmp_path), None)


class TestInferCommand:
    """Tests for inspect_arg and infer_command functions."""

    def test_inspect_arg(self) -> None:
        assert inspect_arg(None, 9229) == "--inspect=0.0.0.0:9229"
        assert inspect_arg("default", 9230) == "--inspect=0.0.0.0:9230"
        assert inspect_arg("break", 9229) == "--inspect-brk=0.0.0.0:9229"

    def test_start_script_with_node(self) -> None:
        package = _package(scripts={"start": "node ./bin/www"})
        assert infer_command(package, "--inspect=0.0.0.0:9229") == (
            "node --inspect=0.0.0.0:9229 ./bin/www"
        )
        assert infer_command(package, None) == "node ./bin/www"

    def test_start_script_without_node(self) -> None:
        package = _package(scripts={"start": "nodemon app.js"})
        assert infer_command(package, "--inspect=0.0.0.0:9229") == "nodemon app.js"

    def test_main(self) -> None:
        package = _package(main="my server.js")
        assert infer_command(package, "--inspect=0.0.0.0:9229") == [
            "node",
            "--inspect=0.0.0.0:9229",
            ShellToken("my server.js", Quoting.STRONG),
        ]

    def test_main_with_space_stays_one_argument(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text(json.dumps({"name": "app", "main": "my app.js"}))
        options = NodeTaskHelper().resolve_run_options(WorkspaceFolder(tmp_path), None, None)
        line = RunTaskProvider().resolve_command_line(options)
        assert line[-3:] == ["node", "--inspect=0.0.0.0:9229", "'my app.js'"]
        builder = CommandLineBuilder("docker").with_args(options.command)
        assert builder.build_argv()[-1] == "my app.js"

    def test_nothing_to_run(self) -> None:
        with pytest.raises(ConfigurationError, match="Unable to infer the command"):
            infer_command(_package(name="x"), None)


class TestResolveBuildOptions:
    """Tests for NodeTaskHelper.resolve_build_options."""

    def test_defaults(self, node_folder: WorkspaceFolder) -> None:
        options = NodeTaskHelper().resolve_build_options(node_folder, None, None)
        assert options == BuildOptions(
            context=str(node_folder.path),
            dockerfile=str(node_folder.path / "Dockerfile"),
            tag="myapp:latest",
        )

    def test_dockerfile_follows_context(self, node_folder: WorkspaceFolder) -> None:
        options = NodeTaskHelper().resolve_build_options(
            node_folder, BuildOptions(context="${workspaceFolder}/docker"), None
        )
        assert options.context == "${workspaceFolder}/docker"
        assert options.dockerfile == str(node_folder.path / "docker" / "Dockerfile")

    def test_folder_name_when_package_unnamed(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text("{}")
        folder = WorkspaceFolder(tmp_path, "Shop Front")
        options = NodeTaskHelper().resolve_build_options(folder, None, None)
        assert options.tag == "shopfront:latest"

    def test_all_fields_set(self, node_folder: WorkspaceFolder) -> None:
        given = BuildOptions(
            args={"NODE_ENV": "production"},
            context="app",
            dockerfile="app/Dockerfile.prod",
            labels={"team": "web"},
            tag="shop:2",
            target="runtime",
            pull=False,
        )
        result = NodeTaskHelper().resolve_build_options(
            node_folder, given, NodeTaskOptions(package="package.json")
        )
        assert result == given
        assert result is not given


class TestResolveRunOptions:
    """Tests for NodeTaskHelper.resolve_run_options."""

    def test_debugging_by_default(self, node_folder: WorkspaceFolder) -> None:
        options = NodeTaskHelper().resolve_run_options(node_folder, None, None)
        assert options.container_name == "myapp-dev"
        assert options.image == "myapp:latest"
        assert options.ports == [ContainerPort(container_port=9229, host_port=9229)]
        assert options.command == "node --inspect=0.0.0.0:9229 ./bin/www"

    def test_debugging_disabled(self, node_folder: WorkspaceFolder) -> None:
        options = NodeTaskHelper().resolve_run_options(
            node_folder, None, NodeTaskOptions(enable_debugging=False)
        )
        assert options.ports is None
        assert options.command == "node ./bin/www"

    def test_inspect_port_and_mode(self, node_folder: WorkspaceFolder) -> None:
        options = NodeTaskHelper().resolve_run_options(
            node_folder,
            RunOptions(ports=[ContainerPort(container_port=3000, host_port=3000)]),
            NodeTaskOptions(inspect_mode="break", inspect_port=9230),
        )
        assert options.ports == [
            ContainerPort(container_port=3000, host_port=3000),
            ContainerPort(container_port=9230, host_port=9230),
        ]
        assert options.command == "node --inspect-brk=0.0.0.0:9230 ./bin/www"

    def test_inspect_port_not_duplicated(self, node_folder: WorkspaceFolder) -> None:
        given = RunOptions(ports=[ContainerPort(container_port=9229, host_port=19229)])
        options = NodeTaskHelper().resolve_run_options(node_folder, given, None)
        assert options.ports == [ContainerPort(container_port=9229, host_port=19229)]

    def test_image_from_build_result(self, node_folder: WorkspaceFolder) -> None:
        options = NodeTaskHelper().resolve_run_options(
            node_folder, None, None, BuildOptions(tag="shop:dev")
        )
        assert options.image == "shop:dev"

    def test_all_fields_set(self, node_folder: WorkspaceFolder) -> None:
        given = RunOptions(
            command="npm start",
            container_name="shop",
            image="shop:2",
            ports=[ContainerPort(container_port=3000)],
        )
        result = NodeTaskHelper().resolve_run_options(
            node_folder, given, NodeTaskOptions(enable_debugging=False)
        )
        assert result == given

    def test_command_required(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text('{"name": "x"}')
        with pytest.raises(ConfigurationError, match="Unable to infer the command"):
            NodeTaskHelper().resolve_run_options(WorkspaceFolder(tmp_path), None, None)


class TestResolveDebugConfiguration:
    """Tests for NodeTaskHelper.resolve_debug_configuration."""

    def _tasks(self, **node: object) -> list[TaskDefinition]:
        return [
            TaskDefinition(label="docker-build", type="docker-build", platform="node"),
            TaskDefinition(
                label="docker-run: debug",
                type="docker-run",
                depends_on=["docker-build"],
                node=NodeTaskOptions(**node),  # type: ignore[arg-type]
            ),
        ]

    def test_attach(self, node_folder: WorkspaceFolder) -> None:
        configuration = DebugConfiguration(
            name="Docker Node.js Launch",
            type="docker",
            request="launch",
            platform="node",
            pre_launch_task="docker-run: debug",
        )
        resolved = NodeTaskHelper().resolve_debug_configuration(
            node_folder, configuration, self._tasks()
        )
        assert (resolved.type, resolved.request) == ("node2", "attach")
        assert resolved.extra == {
            "port": 9229,
            "address": "localhost",
            "localRoot": str(node_folder.path),
            "remoteRoot": "/usr/src/app",
        }
        assert resolved.container_name_to_kill == "myapp-dev"

    def test_port_from_run_task(self, node_folder: WorkspaceFolder) -> None:
        configuration = DebugConfiguration(name="D", pre_launch_task="docker-run: debug")
        resolved = NodeTaskHelper().resolve_debug_configuration(
            node_folder, configuration, self._tasks(inspect_port=9300)
        )
        assert resolved.extra["port"] == 9300

    def test_explicit_options(self, node_folder: WorkspaceFolder) -> None:
        configuration = DebugConfiguration(
            name="D",
            node=NodeDebugOptions(port=5858, address="10.0.0.5", remote_root="/srv"),
        )
        resolved = NodeTaskHelper().resolve_debug_configuration(node_folder, configuration, [])
        assert resolved.extra["port"] == 5858
        assert resolved.extra["address"] == "10.0.0.5"
        assert resolved.extra["remoteRoot"] == "/srv"
        assert resolved.container_name_to_kill is None


class TestScaffolding:
    """Tests for the default tasks offered to a new workspace."""

    def test_build_and_run_tasks(self, node_folder: WorkspaceFolder) -> None:
        helper = NodeTaskHelper()
        build = helper.provide_build_tasks(node_folder)
        run = helper.provide_run_tasks(node_folder, {"package": "api/package.json"})

        assert [t.label for t in build] == ["docker-build"]
        assert build[0].node is None
        assert [(t.label, t.depends_on) for t in run] == [
            ("docker-run: release", ["docker-build"]),
            ("docker-run: debug", ["docker-build"]),
        ]
        assert run[0].node == NodeTaskOptions(package="api/package.json", enable_debugging=False)
        assert run[1].node is not None and run[1].node.enable_debugging is True
