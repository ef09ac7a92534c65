from __future__ import annotations

import httpx
import pytest

from moodlog.app.schemas.mood import MoodCreate
from moodlog.client.api import MoodApiClient, MoodApiError


def _client(handler) -> MoodApiClient:
    return MoodApiClient("http://moodlog.test/", transport=httpx.MockTransport(handler))


@pytest.mark.anyio
async def test_weather_place_is_url_encoded() -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.raw_path.decode())
        payload = {"temp": 1, "description": "snow", "city": "Current Location"}
        return httpx.Response(200, json=payload)

    async with _client(handler) as client:
        snapshot = await client.get_weather("Current Location")

    assert seen == ["/api/weather/Current%20Location"]
    assert snapshot.icon is None


@pytest.mark.anyio
async def test_error_body_is_reported() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"error": "Mood is required"})

    async with _client(handler) as client:
        with pytest.raises(MoodApiError, match="Mood is required"):
            await client.create_entry(MoodCreate(mood=""))


@pytest.mark.anyio
async def test_unexpected_shape_is_an_api_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"not": "a list"})

    async with _client(handler) as client:
        with pytest.raises(MoodApiError):
            await client.list_entries()
