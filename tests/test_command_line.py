"""Tests for the command-line builder."""

from __future__ import annotations

from taskdock.command_line import CommandLineBuilder, Quoting, ShellToken
from taskdock.models import ContainerPort


class TestShellToken:
    """Tests for ShellToken rendering."""

    def test_verbatim_never_quoted(self) -> None:
        assert ShellToken("--inspect=0.0.0.0:9229").render() == "--inspect=0.0.0.0:9229"
        assert ShellToken("a b").render() == "a b"

    def test_strong_quotes_only_when_needed(self) -> None:
        assert ShellToken("myapp:dev", Quoting.STRONG).render() == "myapp:dev"
        assert ShellToken("/my app", Quoting.STRONG).render() == "'/my app'"

    def test_strong_escapes_single_quotes(self) -> None:
        assert ShellToken("it's", Quoting.STRONG).render() == "'it'\"'\"'s'"


class TestCommandLineBuilder:
    """Tests for CommandLineBuilder."""

    def test_executable_and_leading_args(self) -> None:
        assert CommandLineBuilder.create("docker", "build", "--rm").build() == [
            "docker",
            "build",
            "--rm",
        ]

    def test_flag_arg(self) -> None:
        """Flags are emitted only when present."""
        builder = CommandLineBuilder("docker").with_flag_arg("--pull", True)
        builder.with_flag_arg("-P", False).with_flag_arg("--rm", None)
        assert builder.build() == ["docker", "--pull"]

    def test_named_arg_skips_unset(self) -> None:
        builder = (
            CommandLineBuilder("docker")
            .with_named_arg("-t", "app:dev")
            .with_named_arg("--target", None)
            .with_named_arg("--network", "")
        )
        assert builder.build() == ["docker", "-t", "app:dev"]

    def test_named_arg_quotes_value(self) -> None:
        builder = CommandLineBuilder("docker").with_named_arg("-f", "/my dir/Dockerfile")
        assert builder.build() == ["docker", "-f", "'/my dir/Dockerfile'"]

    def test_key_value_args_keep_mapping_order(self) -> None:
        builder = CommandLineBuilder("docker").with_key_value_args(
            "--build-arg", {"B": "2", "A": "has space"}
        )
        assert builder.build() == ["docker", "--build-arg", "B=2", "--build-arg", "'A=has space'"]

    def test_key_value_args_none(self) -> None:
        assert CommandLineBuilder("docker").with_key_value_args("-e", None).build() == ["docker"]

    def test_array_args_with_formatter(self) -> None:
        ports = [
            ContainerPort(container_port=80),
            ContainerPort(container_port=443, host_port=8443, protocol="tcp"),
        ]
        builder = CommandLineBuilder("docker").with_array_args("-p", ports, lambda p: p.format())
        assert builder.build() == ["docker", "-p", "80", "-p", "8443:443/tcp"]

    def test_quoted_arg(self) -> None:
        builder = CommandLineBuilder("docker").with_quoted_arg("/ws/my app").with_quoted_arg(None)
        assert builder.build() == ["docker", "'/ws/my app'"]

    def test_args_string_is_split_not_quoted(self) -> None:
        builder = CommandLineBuilder("docker").with_args("node  --inspect=0.0.0.0:9229 ./bin/www")
        assert builder.build() == ["docker", "node", "--inspect=0.0.0.0:9229", "./bin/www"]

    def test_args_sequence_taken_as_tokens(self) -> None:
        builder = CommandLineBuilder("docker").with_args(
            ["sh", "-c", ShellToken("echo hi", Quoting.STRONG)]
        )
        assert builder.build() == ["docker", "sh", "-c", "'echo hi'"]
        assert builder.build_argv() == ["docker", "sh", "-c", "echo hi"]

    def test_call_order_is_token_order(self) -> None:
        builder = (
            CommandLineBuilder.create("docker", "run")
            .with_named_arg("--name", "web")
            .with_flag_arg("-P", True)
            .with_quoted_arg("web:latest")
        )
        assert str(builder) == "docker run --name web -P web:latest"

    def test_tokens_are_a_copy(self) -> None:
        builder = CommandLineBuilder("docker")
        builder.tokens.append(ShellToken("rm"))
        assert builder.build() == ["docker"]
