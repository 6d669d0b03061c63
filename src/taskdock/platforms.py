"""Platform classification for tasks and debug configurations."""

from __future__ import annotations

from enum import Enum
from typing import Any

from .models import DebugConfiguration, TaskDefinition


class Platform(str, Enum):
    """Runtime platforms a docker task or debug configuration can target."""

    NET_CORE = "netCore"  # native-compiled (.NET Core)
    NODE = "node"  # scripting (Node.js)
    UNKNOWN = "unknown"


# Options bag key per platform (same as the tag)
PLATFORM_BAGS: dict[Platform, str] = {
    Platform.NET_CORE: "netCore",
    Platform.NODE: "node",
}


def _fields(item: TaskDefinition | DebugConfiguration | dict[str, Any]) -> tuple[Any, dict]:
    if isinstance(item, dict):
        return item.get("platform"), {
            platform: item.get(bag) is not None for platform, bag in PLATFORM_BAGS.items()
        }
    return item.platform, {
        Platform.NET_CORE: item.net_core is not None,
        Platform.NODE: item.node is not None,
    }


def classify(item: TaskDefinition | DebugConfiguration | dict[str, Any]) -> Platform:
    """Return the platform ``item`` targets.

    The explicit ``platform`` tag wins. Without a recognised tag the
    presence of a ``netCore`` or ``node`` options bag decides, netCore
    first. Otherwise UNKNOWN, which callers must reject.
    """
    tag, bags = _fields(item)

    for platform in (Platform.NET_CORE, Platform.NODE):
        if tag == platform.value:
            return platform

    for platform in (Platform.NET_CORE, Platform.NODE):
        if bags[platform]:
            return platform

    return Platform.UNKNOWN
