from __future__ import annotations

import json
from collections.abc import Generator
from datetime import UTC, datetime
from pathlib import Path
from uuid import uuid4

import httpx
import pytest
from fastapi.testclient import TestClient

from moodlog.app.core import config


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture()
def moods_file(tmp_path: Path) -> Path:
    return tmp_path / "data" / "moods.json"


@pytest.fixture()
def test_client(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
    moods_file: Path,
) -> Generator[TestClient, None, None]:
    monkeypatch.delenv("WEATHER_API_KEY", raising=False)
    monkeypatch.setenv("VERSION", "0.1.0-test")
    monkeypatch.setenv("MOODS_FILE", str(moods_file))
    monkeypatch.setenv("LOG_FILE", str(tmp_path / "logs" / "moodlog.log"))
    config.get_settings.cache_clear()

    from moodlog.app.main import create_app

    with TestClient(create_app()) as client:
        yield client

    config.get_settings.cache_clear()


class FakeMoodServer:
    """In-memory stand-in for the HTTP API, served through ``httpx.MockTransport``."""

    def __init__(self) -> None:
        self.entries: list[dict[str, object]] = []
        self.requests: list[httpx.Request] = []
        self.fail_weather = False
        self.fail_create = False
        self.fail_list = False

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path.startswith("/api/weather/"):
            if self.fail_weather:
                raise httpx.ConnectError("connection refused", request=request)
            city = path.removeprefix("/api/weather/")
            return httpx.Response(
                200,
                json={"temp": 18, "description": "clear sky", "city": city, "icon": "01d"},
            )
        if path == "/api/moods" and request.method == "GET":
            if self.fail_list:
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(200, json=self.entries)
        if path == "/api/moods" and request.method == "POST":
            if self.fail_create:
                return httpx.Response(500, json={"error": "Failed to create mood entry"})
            body = json.loads(request.content)
            entry = {
                "id": uuid4().hex,
                "mood": body["mood"],
                "note": body.get("note") or "",
                "weather": body.get("weather"),
                "timestamp": datetime.now(UTC).isoformat(),
            }
            self.entries.insert(0, entry)
            return httpx.Response(201, json=entry)
        return httpx.Response(404, json={"error": "not found"})

    def calls(self, prefix: str) -> int:
        return sum(1 for request in self.requests if request.url.path.startswith(prefix))

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture()
def fake_server() -> FakeMoodServer:
    return FakeMoodServer()
