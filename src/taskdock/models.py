"""Typed task and debug configuration models.

tasks.json and launch.json are untyped, camelCase JSON. ``from_dict``
validates them at the boundary with pydantic and raises ConfigurationError
on malformed values; ``to_dict`` writes them back, omitting unset fields.
Tasks and debug configurations keep keys they do not know about (in
``extra``) so that round trips through the task store do not lose user data.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, TypeVar, Union

from pydantic import BaseModel, Field, InstanceOf, StrictBool, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from .command_line import ShellToken
from .errors import ConfigurationError

T = TypeVar("T", bound="_Model")


def _location(what: str, loc: tuple[int | str, ...]) -> str:
    path = what
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path = f"{path}.{part}" if path else part
    return path


def _describe(error: ValidationError, what: str) -> str:
    problems = [
        f"'{_location(what, detail['loc']) or what}': {detail['msg']}"
        for detail in error.errors(include_url=False)
    ]
    return "; ".join(problems)


def _str_map(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(k): str(v) for k, v in value.items()}
    return value


def _str_list(value: Any) -> Any:
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [str(v) for v in value]
    return value


class _Model(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = {"alias_generator": to_camel, "populate_by_name": True}

    @classmethod
    def from_dict(cls: type[T], data: Any, what: str = "") -> T:
        if not isinstance(data, dict):
            raise ConfigurationError(f"'{what or cls.__name__}' must be an object")
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(_describe(e, what)) from e

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)

    def clone(self: T) -> T:
        return self.model_copy(deep=True)

    @property
    def extra(self) -> dict[str, Any]:
        """Keys kept verbatim because no field declares them."""
        if self.__pydantic_extra__ is None:
            return {}
        return self.__pydantic_extra__


# --- docker options -------------------------------------------------------


class BuildOptions(_Model):
    """Options for ``docker build``. ``None`` means the flag is not emitted."""

    args: Optional[dict[str, str]] = None
    context: Optional[str] = None
    dockerfile: Optional[str] = None
    labels: Optional[dict[str, str]] = None
    tag: Optional[str] = None
    target: Optional[str] = None
    pull: Optional[StrictBool] = None

    @field_validator("args", "labels", mode="before")
    @classmethod
    def coerce_maps(cls, v: Any) -> Any:
        return _str_map(v)


class ContainerPort(_Model):
    container_port: int
    host_port: Optional[int] = None
    protocol: Optional[str] = None

    @field_validator("protocol")
    @classmethod
    def check_protocol(cls, v: str | None) -> str | None:
        if v not in (None, "tcp", "udp"):
            raise ValueError("must be 'tcp' or 'udp'")
        return v

    def format(self) -> str:
        host = f"{self.host_port}:" if self.host_port else ""
        proto = f"/{self.protocol}" if self.protocol else ""
        return f"{host}{self.container_port}{proto}"


class ContainerVolume(_Model):
    local_path: str = Field(min_length=1)
    container_path: str = Field(min_length=1)
    permissions: Optional[str] = None

    @field_validator("permissions")
    @classmethod
    def check_permissions(cls, v: str | None) -> str | None:
        if v not in (None, "ro", "rw"):
            raise ValueError("must be 'ro' or 'rw'")
        return v

    def format(self) -> str:
        perms = f":{self.permissions}" if self.permissions else ""
        return f"{self.local_path}:{self.container_path}{perms}"


class ExtraHost(_Model):
    hostname: str
    ip: str

    def format(self) -> str:
        return f"{self.hostname}:{self.ip}"


# A command read from tasks.json is a string or a list of strings; helpers
# may put pre-quoted tokens in the list.
Command = Union[str, list[Union[str, InstanceOf[ShellToken]]]]


class RunOptions(_Model):
    """Options for ``docker run``. ``None`` means the flag is not emitted."""

    command: Optional[Command] = None
    container_name: Optional[str] = None
    entrypoint: Optional[str] = None
    env: Optional[dict[str, str]] = None
    env_files: Optional[list[str]] = None
    extra_hosts: Optional[list[ExtraHost]] = None
    image: Optional[str] = None
    labels: Optional[dict[str, str]] = None
    network: Optional[str] = None
    network_alias: Optional[str] = None
    os: Optional[str] = None
    ports: Optional[list[ContainerPort]] = None
    ports_publish_all: Optional[StrictBool] = None
    volumes: Optional[list[ContainerVolume]] = None

    @field_validator("env", "labels", mode="before")
    @classmethod
    def coerce_maps(cls, v: Any) -> Any:
        return _str_map(v)

    @field_validator("env_files", mode="before")
    @classmethod
    def coerce_lists(cls, v: Any) -> Any:
        return _str_list(v)


# --- platform option bags -------------------------------------------------


class NetCoreTaskOptions(_Model):
    app_project: Optional[str] = None
    configure_ssl: Optional[StrictBool] = None


class NodeTaskOptions(_Model):
    """``node`` bag of docker-build and docker-run tasks.

    Build tasks only read ``package``.
    """

    package: Optional[str] = None
    enable_debugging: Optional[StrictBool] = None
    inspect_mode: Optional[str] = None
    inspect_port: Optional[int] = None


class NetCoreDebugOptions(_Model):
    app_project: Optional[str] = None
    app_output: Optional[str] = None


class NodeDebugOptions(_Model):
    package: Optional[str] = None
    port: Optional[int] = None
    address: Optional[str] = None
    local_root: Optional[str] = None
    remote_root: Optional[str] = None


# --- tasks and debug configurations ---------------------------------------


class DependsOnType(_Model):
    """``"dependsOn": {"type": "..."}``: depend on the first task of a type."""

    model_config = {"frozen": True}

    type: str


DependsOn = Union[list[str], DependsOnType]


class TaskDefinition(_Model):
    """One entry of tasks.json ``tasks``."""

    model_config = {"extra": "allow"}

    label: Optional[str] = None
    type: Optional[str] = None
    platform: Optional[str] = None
    depends_on: Optional[DependsOn] = None
    docker_build: Optional[BuildOptions] = None
    docker_run: Optional[RunOptions] = None
    net_core: Optional[NetCoreTaskOptions] = None
    node: Optional[NodeTaskOptions] = None

    @field_validator("depends_on", mode="before")
    @classmethod
    def normalize_depends_on(cls, v: Any) -> Any:
        if isinstance(v, dict):
            if not isinstance(v.get("type"), str):
                raise ValueError("object must have a string 'type'")
            return DependsOnType(type=v["type"])
        return _str_list(v)


class DebugConfiguration(_Model):
    """One entry of launch.json ``configurations``.

    ``container_name_to_kill`` and ``remove_container_after_debug`` only
    live on the in-memory resolved configuration of a running session.
    Launch-specific keys produced by resolution (port, program, ...) are
    kept in ``extra``.
    """

    model_config = {"extra": "allow"}

    name: Optional[str] = None
    type: Optional[str] = None
    request: Optional[str] = None
    platform: Optional[str] = None
    pre_launch_task: Optional[str] = None
    net_core: Optional[NetCoreDebugOptions] = None
    node: Optional[NodeDebugOptions] = None
    docker_server_ready_action: Optional[dict[str, Any]] = None
    container_name_to_kill: Optional[str] = Field(default=None, alias="_containerNameToKill")
    remove_container_after_debug: Optional[StrictBool] = None


@dataclass
class WorkspaceFolder:
    """A workspace root; ``name`` defaults to the directory's base name."""

    path: Path
    name: str = ""

    def __post_init__(self) -> None:
        self.path = Path(self.path)
        if not self.name:
            self.name = self.path.name


@dataclass
class ResolvedTask:
    """A task whose options are complete, with its final command line."""

    definition: TaskDefinition
    command_line: list[str]

    @property
    def executable(self) -> str:
        return self.command_line[0]

    @property
    def args(self) -> list[str]:
        return self.command_line[1:]

    def __str__(self) -> str:
        return " ".join(self.command_line)
