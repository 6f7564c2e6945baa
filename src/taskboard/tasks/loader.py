# src/taskboard/tasks/loader.py

"""
Initial data sources.

A source fetches one untyped batch of records. It does not normalize and does
not retry: TaskStore.load() calls it at most once per process.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import httpx

logger = logging.getLogger(__name__)


class TaskLoadError(RuntimeError):
    """The external source was unreachable or returned something unusable."""


class HttpTaskSource:
    def __init__(
        self,
        url: str,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url
        self._timeout = httpx.Timeout(timeout, connect=min(timeout, 5.0))
        self._transport = transport

    @property
    def url(self) -> str:
        return self._url

    def _name(self) -> str:
        return Path(urlparse(self._url).path).name or self._url

    async def fetch(self) -> Any:
        logger.info("Fetching tasks from %s", self._url)
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                res = await client.get(self._url)
        except httpx.HTTPError as e:
            raise TaskLoadError(f"Failed to load {self._name()} ({e.__class__.__name__})") from e

        if not res.is_success:
            raise TaskLoadError(f"Failed to load {self._name()} ({res.status_code})")

        try:
            return res.json()
        except ValueError as e:
            raise TaskLoadError(f"Invalid JSON in {self._name()}") from e


class FileTaskSource:
    def __init__(self, path: str | Path) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    async def fetch(self) -> Any:
        logger.info("Reading tasks from %s", self._path)
        try:
            text = self._path.read_text("utf-8")
        except OSError as e:
            raise TaskLoadError(f"Failed to load {self._path.name} ({e.strerror or e})") from e
        try:
            return json.loads(text)
        except ValueError as e:
            raise TaskLoadError(f"Invalid JSON in {self._path.name}") from e


def source_from_location(location: str, *, timeout: float = 10.0) -> HttpTaskSource | FileTaskSource:
    """http(s):// URLs are fetched over the network, anything else is a file path."""
    scheme = urlparse(location).scheme.lower()
    if scheme in ("http", "https"):
        return HttpTaskSource(location, timeout=timeout)
    return FileTaskSource(location)
