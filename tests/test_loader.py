# tests/test_loader.py

from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest

from taskboard.tasks.loader import (
    FileTaskSource,
    HttpTaskSource,
    TaskLoadError,
    source_from_location,
)


def _transport(handler) -> httpx.MockTransport:
    return httpx.MockTransport(handler)


@pytest.mark.asyncio
async def test_http_source_returns_json_payload() -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, json=[{"id": "a"}])

    src = HttpTaskSource("https://example.test/tasks.json", transport=_transport(handler))

    assert await src.fetch() == [{"id": "a"}]
    assert seen == ["https://example.test/tasks.json"]


@pytest.mark.asyncio
async def test_http_source_raises_on_bad_status() -> None:
    src = HttpTaskSource(
        "https://example.test/tasks.json",
        transport=_transport(lambda request: httpx.Response(404)),
    )

    with pytest.raises(TaskLoadError, match=r"Failed to load tasks.json \(404\)"):
        await src.fetch()


@pytest.mark.asyncio
async def test_http_source_raises_on_invalid_json() -> None:
    src = HttpTaskSource(
        "https://example.test/tasks.json",
        transport=_transport(lambda request: httpx.Response(200, text="<html>")),
    )

    with pytest.raises(TaskLoadError, match="Invalid JSON"):
        await src.fetch()


@pytest.mark.asyncio
async def test_http_source_wraps_transport_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("boom", request=request)

    src = HttpTaskSource("https://example.test/tasks.json", transport=_transport(handler))

    with pytest.raises(TaskLoadError, match="ConnectError"):
        await src.fetch()


@pytest.mark.asyncio
async def test_file_source(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    path.write_text(json.dumps([{"id": "f1"}]), "utf-8")

    assert await FileTaskSource(path).fetch() == [{"id": "f1"}]


@pytest.mark.asyncio
async def test_file_source_missing_or_invalid(tmp_path: Path) -> None:
    with pytest.raises(TaskLoadError, match="Failed to load"):
        await FileTaskSource(tmp_path / "nope.json").fetch()

    bad = tmp_path / "bad.json"
    bad.write_text("{not json", "utf-8")
    with pytest.raises(TaskLoadError, match="Invalid JSON"):
        await FileTaskSource(bad).fetch()


def test_source_from_location_picks_by_scheme(tmp_path: Path) -> None:
    assert isinstance(source_from_location("https://example.test/tasks.json"), HttpTaskSource)
    assert isinstance(source_from_location("HTTP://example.test/tasks.json"), HttpTaskSource)
    assert isinstance(source_from_location(str(tmp_path / "tasks.json")), FileTaskSource)
    assert isinstance(source_from_location("tasks.json"), FileTaskSource)
