"""Fluent builder for docker command lines.

Each ``with_*`` call appends zero or more tokens; nothing ever reorders
tokens already appended, so call order is the command-line order.

Example:
    >>> CommandLineBuilder.create("docker", "build", "--rm").with_flag_arg(
    ...     "--pull", True
    ... ).with_named_arg("-t", "my app:dev").build()
    ['docker', 'build', '--rm', '--pull', '-t', "'my app:dev'"]
"""

from __future__ import annotations

import shlex
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping


class Quoting(str, Enum):
    """How a token is rendered for the shell."""

    VERBATIM = "verbatim"  # flags and pre-tokenized arguments
    STRONG = "strong"  # values: single-quoted only when needed


@dataclass(frozen=True)
class ShellToken:
    """One command-line token and its quoting mode."""

    value: str
    quoting: Quoting = Quoting.VERBATIM

    def render(self) -> str:
        if self.quoting is Quoting.STRONG:
            return shlex.quote(self.value)
        return self.value


class CommandLineBuilder:
    """Accumulates ShellTokens for one executable invocation."""

    def __init__(self, executable: str, *args: str) -> None:
        self._tokens: list[ShellToken] = [ShellToken(executable)]
        self._tokens.extend(ShellToken(arg) for arg in args)

    @classmethod
    def create(cls, executable: str, *args: str) -> CommandLineBuilder:
        return cls(executable, *args)

    def with_flag_arg(self, flag: str, present: bool | None) -> CommandLineBuilder:
        """Emit ``flag`` only when ``present`` is truthy."""
        if present:
            self._tokens.append(ShellToken(flag))
        return self

    def with_named_arg(self, name: str, value: Any) -> CommandLineBuilder:
        """Emit ``name value`` when value is not None or empty."""
        if value is not None and str(value) != "":
            self._tokens.append(ShellToken(name))
            self._tokens.append(ShellToken(str(value), Quoting.STRONG))
        return self

    def with_key_value_args(
        self, flag: str, mapping: Mapping[str, Any] | None
    ) -> CommandLineBuilder:
        """Emit ``flag k=v`` per entry, in the mapping's iteration order."""
        for key, value in (mapping or {}).items():
            self._tokens.append(ShellToken(flag))
            self._tokens.append(ShellToken(f"{key}={value}", Quoting.STRONG))
        return self

    def with_array_args(
        self,
        flag: str,
        items: Iterable[Any] | None,
        formatter: Callable[[Any], str] = str,
    ) -> CommandLineBuilder:
        """Emit ``flag formatter(item)`` per item, in list order."""
        for item in items or ():
            self._tokens.append(ShellToken(flag))
            self._tokens.append(ShellToken(formatter(item), Quoting.STRONG))
        return self

    def with_quoted_arg(self, value: str | None) -> CommandLineBuilder:
        """Emit a positional value, quoted if it needs quoting."""
        if value:
            self._tokens.append(ShellToken(value, Quoting.STRONG))
        return self

    def with_args(self, value: str | Iterable[str | ShellToken] | None) -> CommandLineBuilder:
        """Append raw arguments.

        A string is split on whitespace into separate tokens; a sequence is
        taken as already tokenized. Plain strings are not quoted, ShellTokens
        keep their own quoting.
        """
        if value is None:
            return self
        if isinstance(value, str):
            parts: Iterable[str | ShellToken] = value.split()
        else:
            parts = value
        for part in parts:
            self._tokens.append(part if isinstance(part, ShellToken) else ShellToken(part))
        return self

    @property
    def tokens(self) -> list[ShellToken]:
        return list(self._tokens)

    def build(self) -> list[str]:
        """Return the rendered, shell-quoted tokens."""
        return [token.render() for token in self._tokens]

    def build_argv(self) -> list[str]:
        """Return the raw tokens, suitable for ``subprocess.run``."""
        return [token.value for token in self._tokens]

    def __str__(self) -> str:
        return " ".join(self.build())
