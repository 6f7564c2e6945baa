# src/taskboard/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The task store depends on Protocols instead of concrete implementations.
This keeps data sources swappable (HTTP, local file, in-memory fakes in tests).
"""

from datetime import datetime
from typing import Any, Protocol


class TaskSource(Protocol):
    """Where the initial batch of raw task records comes from."""

    async def fetch(self) -> Any: ...


class Clock(Protocol):
    def __call__(self) -> datetime: ...
