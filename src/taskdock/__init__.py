"""taskdock - resolve docker-build/docker-run tasks and docker debug configurations."""

from __future__ import annotations

__version__ = "0.1.0"
