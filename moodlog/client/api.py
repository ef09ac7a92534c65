from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from moodlog.app.schemas.mood import MoodCreate, MoodEntry, MoodEntryList
from moodlog.app.schemas.weather import WeatherSnapshot

T = TypeVar("T")


class MoodApiError(RuntimeError):
    """Raised when the Mood Tracker API cannot be reached or answers with an error."""


class MoodApiClient:
    """Async wrapper over the Mood Tracker HTTP API."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
        )

    async def get_weather(self, place: str) -> WeatherSnapshot:
        data = await self._request("GET", f"/api/weather/{quote(place, safe='')}")
        return self._parse(WeatherSnapshot.model_validate, data)

    async def list_entries(self) -> list[MoodEntry]:
        data = await self._request("GET", "/api/moods")
        return self._parse(MoodEntryList.validate_python, data)

    async def create_entry(self, payload: MoodCreate) -> MoodEntry:
        data = await self._request("POST", "/api/moods", json=payload.model_dump(mode="json"))
        return self._parse(MoodEntry.model_validate, data)

    async def _request(self, method: str, url: str, **kwargs: object) -> object:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise MoodApiError(f"{method} {url} failed: {exc}") from exc

        if response.is_error:
            detail = _error_detail(response)
            raise MoodApiError(f"{method} {url} returned {response.status_code}: {detail}")
        try:
            return response.json()
        except ValueError as exc:
            raise MoodApiError(f"{method} {url} returned invalid JSON") from exc

    @staticmethod
    def _parse(validator: Callable[[object], T], data: object) -> T:
        try:
            return validator(data)
        except ValidationError as exc:
            raise MoodApiError(f"unexpected response shape: {exc.error_count()} errors") from exc

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> MoodApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict) and "error" in body:
        return str(body["error"])
    return str(body)[:200]


__all__ = ["MoodApiClient", "MoodApiError"]
