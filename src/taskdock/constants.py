"""Constants module for taskdock.

Shared timeouts, task type names and container conventions (SSOT).
"""

from __future__ import annotations

# === Docker Timeouts (seconds) ===
DOCKER_COMMAND_TIMEOUT = 30  # docker info / rm / inspect

# === Task types ===
DOCKER_BUILD_TASK = "docker-build"
DOCKER_RUN_TASK = "docker-run"
RELEASE_BUILD_TASK_LABEL = "docker-build: release"

# === Image tags ===
DEV_TAG = "dev"
LATEST_TAG = "latest"
FALLBACK_IMAGE_NAME = "image"

# === Workspace files ===
VSCODE_DIR = ".vscode"
TASKS_FILE = "tasks.json"
LAUNCH_FILE = "launch.json"
TASKS_VERSION = "2.0.0"

# === netCore container conventions ===
NETCORE_APP_DIR = "/app"
NETCORE_SRC_DIR = "/src"
NETCORE_NUGET_DIR = "/root/.nuget/packages"
NETCORE_DEBUGGER_DIR = "/remote_debugger"
NETCORE_BUILD_TARGET = "base"
NETCORE_PROJECT_PATTERNS = ("*.csproj", "*.fsproj")
CREATED_BY_LABEL = "com.microsoft.created-by"
CREATED_BY_VALUE = "visual-studio-code"

# === node container conventions ===
NODE_INSPECT_PORT = 9229
NODE_REMOTE_ROOT = "/usr/src/app"
NODE_DEBUG_ADDRESS = "localhost"
NODE_PACKAGE_FILE = "package.json"
