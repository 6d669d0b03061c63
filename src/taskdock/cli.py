"""Command-line interface for taskdock."""

from __future__ import annotations

import json
import sys
from dataclasses import asdict
from pathlib import Path
from typing import NoReturn

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .api import (
    find_associated_build_task,
    find_associated_run_task,
    resolve_debug_configuration,
)
from .config import Config, get_config_path, load_config, save_config, set_config_value
from .constants import DOCKER_BUILD_TASK, DOCKER_RUN_TASK
from .docker import check_docker_status, remove_container
from .errors import DockerError, TaskdockError
from .logging import set_debug
from .models import DebugConfiguration, TaskDefinition, WorkspaceFolder
from .platforms import Platform, classify
from .tasks.providers import BuildTaskProvider, RunTaskProvider, resolve_task
from .tasks.store import WorkspaceTasks

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)


def _fail(message: str) -> NoReturn:
    err_console.print(f"[red]Error: {escape(message)}[/red]")
    sys.exit(1)


def _folder(ctx: click.Context) -> WorkspaceFolder:
    return WorkspaceFolder(Path(ctx.obj["folder"]))


def _config(ctx: click.Context) -> Config:
    return ctx.obj["config"]


@click.group()
@click.option("--debug", "-d", is_flag=True, help="Enable debug logging")
@click.option(
    "--folder",
    "-f",
    default=".",
    type=click.Path(exists=True, file_okay=False, resolve_path=True),
    help="Workspace folder containing .vscode/tasks.json",
)
@click.version_option(version=__version__, prog_name="taskdock")
@click.pass_context
def cli(ctx: click.Context, debug: bool, folder: str) -> None:
    """taskdock - resolve docker tasks and debug configurations."""
    if debug:
        set_debug(True)
    ctx.ensure_object(dict)
    ctx.obj["folder"] = folder
    ctx.obj.setdefault("config", load_config())


@cli.command("resolve-task")
@click.argument("label")
@click.option("--argv", is_flag=True, help="Print one token per line")
@click.pass_context
def resolve_task_cmd(ctx: click.Context, label: str, argv: bool) -> None:
    """Print the docker command line of task LABEL."""
    folder = _folder(ctx)
    try:
        task = WorkspaceTasks(folder).find_task(label)
        if task is None:
            _fail(f"No task labelled '{label}' in {folder.path}")
        resolved = resolve_task(task, folder, config=_config(ctx))
    except TaskdockError as e:
        _fail(str(e))

    if argv:
        for token in resolved.command_line:
            click.echo(token)
    else:
        click.echo(str(resolved))


@cli.command("resolve-debug")
@click.argument("name")
@click.pass_context
def resolve_debug_cmd(ctx: click.Context, name: str) -> None:
    """Print the resolved launch configuration NAME as JSON."""
    folder = _folder(ctx)
    try:
        configuration = WorkspaceTasks(folder).find_debug_configuration(name)
        if configuration is None:
            _fail(f"No debug configuration named '{name}' in {folder.path}")
        resolved = resolve_debug_configuration(folder, configuration, config=_config(ctx))
    except TaskdockError as e:
        _fail(str(e))

    click.echo(json.dumps(resolved.to_dict(), indent=2))


@cli.command("run-task")
@click.argument("name")
@click.pass_context
def run_task_cmd(ctx: click.Context, name: str) -> None:
    """Print the docker-run task behind debug configuration NAME."""
    folder = _folder(ctx)
    try:
        configuration = WorkspaceTasks(folder).find_debug_configuration(name)
        if configuration is None:
            _fail(f"No debug configuration named '{name}' in {folder.path}")
        task = find_associated_run_task(folder, configuration)
    except TaskdockError as e:
        _fail(str(e))

    if task is None:
        _fail(f"No docker-run task is associated with '{name}'")
    click.echo(task.label or "")


@cli.command("build-task")
@click.argument("label")
@click.pass_context
def build_task_cmd(ctx: click.Context, label: str) -> None:
    """Print the docker-build task behind run task LABEL."""
    folder = _folder(ctx)
    try:
        task = find_associated_build_task(folder, label)
    except TaskdockError as e:
        _fail(str(e))

    if task is None:
        _fail(f"No docker-build task is associated with '{label}'")
    click.echo(task.label or "")


@cli.command()
@click.argument("platform", type=click.Choice([Platform.NET_CORE.value, Platform.NODE.value]))
@click.option("--overwrite", is_flag=True, help="Replace tasks with the same label")
@click.option("--app-project", help="netCore: project file (.csproj/.fsproj)")
@click.option("--package", help="node: path to package.json")
@click.pass_context
def init(
    ctx: click.Context,
    platform: str,
    overwrite: bool,
    app_project: str | None,
    package: str | None,
) -> None:
    """Add default docker-build and docker-run tasks to tasks.json."""
    store = WorkspaceTasks(_folder(ctx))
    options = {"appProject": app_project, "package": package}
    config = _config(ctx)
    try:
        added = BuildTaskProvider(config=config).initialize_build_tasks(
            store, platform, options, overwrite
        )
        added += RunTaskProvider(config=config).initialize_run_tasks(
            store, platform, options, overwrite
        )
    except TaskdockError as e:
        _fail(str(e))

    for task in added:
        console.print(f"[green]Added[/green] {escape(task.label or '')}")
    if not added:
        console.print("[yellow]All tasks already exist (use --overwrite to replace)[/yellow]")


@cli.command()
@click.argument("container")
@click.pass_context
def cleanup(ctx: click.Context, container: str) -> None:
    """Force-remove a debug container."""
    try:
        remove_container(container, force=True, docker_path=_config(ctx).docker_path)
    except DockerError as e:
        _fail(str(e))
    console.print(f"[green]Removed[/green] {escape(container)}")


@cli.command("config")
@click.argument("key", required=False)
@click.argument("value", required=False)
@click.pass_context
def config_cmd(ctx: click.Context, key: str | None, value: str | None) -> None:
    """Show settings, or set KEY to VALUE in ~/.taskdock/config.json."""
    config = _config(ctx)
    settings = {name.replace("_", "-"): current for name, current in asdict(config).items()}

    if key is None:
        table = Table(title=escape(str(get_config_path())))
        table.add_column("Setting")
        table.add_column("Value")
        for name, current in settings.items():
            table.add_row(name, escape(str(current)))
        console.print(table)
        return

    if value is None:
        name = key.replace("_", "-")
        if name not in settings:
            _fail(f"Unknown setting '{key}'")
        console.print(escape(str(settings[name])))
        return

    try:
        updated = set_config_value(config, key, value)
        save_config(updated)
    except (TaskdockError, OSError) as e:
        _fail(str(e))
    ctx.obj["config"] = updated
    console.print(f"[green]Saved[/green] {escape(key)} = {escape(value)}")


@cli.command()
@click.pass_context
def doctor(ctx: click.Context) -> None:
    """Check Docker and list the workspace's docker tasks."""
    folder = _folder(ctx)
    config = _config(ctx)

    docker_ok = check_docker_status(config.docker_path)
    status = "[green]OK[/green]" if docker_ok else "[red]FAIL[/red]"
    console.print(f"Docker ({escape(config.docker_path)}): {status}")

    try:
        store = WorkspaceTasks(folder)
        tasks = [t for t in store.load_tasks() if t.type in (DOCKER_BUILD_TASK, DOCKER_RUN_TASK)]
        configurations = [c for c in store.load_debug_configurations() if c.type == "docker"]
    except TaskdockError as e:
        _fail(str(e))

    table = Table(title=f"Workspace: {escape(folder.name)}")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Platform")
    for task in tasks:
        table.add_row(escape(task.label or ""), task.type, _platform_cell(task))
    for configuration in configurations:
        table.add_row(escape(configuration.name or ""), "debug", _platform_cell(configuration))
    console.print(table)

    if not docker_ok:
        sys.exit(1)


def _platform_cell(item: TaskDefinition | DebugConfiguration) -> str:
    platform = classify(item)
    if platform is Platform.UNKNOWN:
        return f"[red]{escape(str(item.platform))}[/red]"
    return f"[cyan]{platform.value}[/cyan]"
