"""User configuration for taskdock."""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path

from rich.console import Console

from .errors import ConfigurationError

console = Console(stderr=True)

_BOOLEANS = {"true": True, "yes": True, "1": True, "false": False, "no": False, "0": False}


@dataclass
class Config:
    """taskdock configuration model."""

    # Executable used as token 0 of every command line
    docker_path: str = "docker"

    # Default when a debug configuration omits removeContainerAfterDebug
    remove_container_after_debug: bool = True

    # Host folders mounted into netCore containers
    vsdbg_path: str = "~/.vsdbg"
    nuget_packages_path: str = "~/.nuget/packages"

    @property
    def vsdbg_dir(self) -> Path:
        return Path(os.path.expanduser(self.vsdbg_path))

    @property
    def nuget_packages_dir(self) -> Path:
        return Path(os.path.expanduser(self.nuget_packages_path))


def get_config_dir() -> Path:
    """Get the taskdock configuration directory."""
    return Path.home() / ".taskdock"


def get_config_path() -> Path:
    """Get the path to the config file."""
    return get_config_dir() / "config.json"


def load_config() -> Config:
    """Load configuration from file, or return defaults."""
    config_path = get_config_path()

    if config_path.exists():
        try:
            data = json.loads(config_path.read_text(encoding="utf-8"))
            known = {f.name for f in fields(Config)}
            return Config(**{k: v for k, v in data.items() if k in known})
        except (json.JSONDecodeError, ValueError, TypeError, AttributeError) as e:
            console.print(f"[yellow]Warning: Failed to load config ({e}), using defaults[/yellow]")

    return Config()


def save_config(config: Config) -> None:
    """Save configuration to file."""
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    get_config_path().write_text(
        json.dumps(asdict(config), indent=2, ensure_ascii=False),
        encoding="utf-8",
    )


def set_config_value(config: Config, key: str, value: str) -> Config:
    """Return a copy of ``config`` with ``key`` (``docker-path`` or ``docker_path``) set.

    Raises:
        ConfigurationError: If the key is unknown or a boolean value is not one.
    """
    name = key.replace("-", "_")
    known = [f.name for f in fields(Config)]
    if name not in known:
        names = ", ".join(n.replace("_", "-") for n in known)
        raise ConfigurationError(f"Unknown setting '{key}'. Known settings: {names}")

    parsed: str | bool = value
    if isinstance(getattr(config, name), bool):
        if value.lower() not in _BOOLEANS:
            raise ConfigurationError(f"'{key}' must be true or false, got '{value}'")
        parsed = _BOOLEANS[value.lower()]
    return replace(config, **{name: parsed})
