"""Cooperative cancellation for resolution requests."""

from __future__ import annotations

import threading

from .errors import CancelledError


class CancellationToken:
    """Cancellation flag shared between a caller and a running resolution.

    Lookups call ``raise_if_cancelled`` between steps. Code that has
    already started changing container state does not check it.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise CancelledError("Resolution was cancelled")


def check_cancelled(token: CancellationToken | None) -> None:
    """Raise CancelledError if ``token`` is set; ``None`` never cancels."""
    if token is not None:
        token.raise_if_cancelled()
