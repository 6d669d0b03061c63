"""Pytest configuration and fixtures for taskdock tests.

This module ensures the taskdock package is importable during tests
without requiring installation.
"""

from __future__ import annotations

import json
import sys
from collections.abc import Callable
from pathlib import Path

import pytest

# Add src directory to path for development testing
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from taskdock.config import Config  # noqa: E402
from taskdock.models import WorkspaceFolder  # noqa: E402

CSPROJ = """<Project Sdk="Microsoft.NET.Sdk.Web">
  <PropertyGroup>
    <TargetFramework>netcoreapp3.1</TargetFramework>
  </PropertyGroup>
</Project>
"""


@pytest.fixture
def config(tmp_path: Path) -> Config:
    """Config whose host mount folders live under tmp_path."""
    return Config(
        vsdbg_path=str(tmp_path / "vsdbg"),
        nuget_packages_path=str(tmp_path / "nuget"),
    )


@pytest.fixture
def netcore_folder(tmp_path: Path) -> WorkspaceFolder:
    """Workspace 'webapp' holding a single .NET Core project."""
    root = tmp_path / "webapp"
    (root / "src").mkdir(parents=True)
    (root / "src" / "WebApp.csproj").write_text(CSPROJ)
    return WorkspaceFolder(root)


@pytest.fixture
def node_folder(tmp_path: Path) -> WorkspaceFolder:
    """Workspace 'site' holding a Node.js package named 'my-app'."""
    root = tmp_path / "site"
    root.mkdir()
    (root / "package.json").write_text(
        json.dumps({"name": "my-app", "scripts": {"start": "node ./bin/www"}})
    )
    return WorkspaceFolder(root)


@pytest.fixture
def write_tasks() -> Callable[..., None]:
    """Writer for a folder's .vscode/tasks.json (and launch.json)."""

    def write(
        folder: WorkspaceFolder, tasks: list[dict], configurations: list[dict] | None = None
    ) -> None:
        vscode = folder.path / ".vscode"
        vscode.mkdir(parents=True, exist_ok=True)
        (vscode / "tasks.json").write_text(json.dumps({"version": "2.0.0", "tasks": tasks}))
        if configurations is not None:
            (vscode / "launch.json").write_text(
                json.dumps({"version": "0.2.0", "configurations": configurations})
            )

    return write
