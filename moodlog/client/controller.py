from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime

from moodlog.app.schemas.weather import WeatherSnapshot

from . import state as form
from .api import MoodApiClient, MoodApiError
from .presenter import HISTORY_ERROR_MESSAGE, HistoryView, build_view, empty_stats

logger = logging.getLogger(__name__)

DEFAULT_CITY = "San Francisco"
CURRENT_LOCATION = "Current Location"
NOTICE_TTL_SECONDS = 3.0

Coordinates = tuple[float, float]
Locator = Callable[[], Awaitable[Coordinates | None]]


def mock_weather() -> WeatherSnapshot:
    return WeatherSnapshot(temp=22, description="partly cloudy", city="Your Location")


class MoodController:
    """Drive the mood form against the API, keeping state in a :class:`FormState`."""

    def __init__(
        self,
        api: MoodApiClient,
        *,
        locate: Locator | None = None,
        notice_ttl: float = NOTICE_TTL_SECONDS,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._api = api
        self._locate = locate
        self._notice_ttl = notice_ttl
        self._clock = clock or (lambda: datetime.now(UTC))
        self._dismiss_task: asyncio.Task[None] | None = None
        self.state = form.FormState()

    # -- form transitions ------------------------------------------------
    def select_mood(self, mood: str) -> form.FormState:
        self.state = form.select_mood(self.state, mood)
        return self.state

    def edit_note(self, text: str) -> form.FormState:
        self.state = form.edit_note(self.state, text)
        return self.state

    # -- weather ---------------------------------------------------------
    async def resolve_place(self) -> str:
        if self._locate is None:
            return DEFAULT_CITY
        try:
            coords = await self._locate()
        except Exception as exc:
            logger.info("Geolocation failed, using default city: %s", exc)
            return DEFAULT_CITY
        return CURRENT_LOCATION if coords is not None else DEFAULT_CITY

    async def load_weather(self, place: str | None = None) -> WeatherSnapshot:
        place = place or await self.resolve_place()
        try:
            snapshot = await self._api.get_weather(place)
        except MoodApiError as exc:
            logger.warning("Weather request failed, showing mock weather: %s", exc)
            snapshot = mock_weather()
        self.state = form.set_weather(self.state, snapshot)
        return snapshot

    # -- history ---------------------------------------------------------
    async def load_history(self) -> HistoryView:
        try:
            entries = await self._api.list_entries()
        except MoodApiError as exc:
            logger.warning("History loading error: %s", exc)
            return HistoryView(items=[], stats=empty_stats(), message=HISTORY_ERROR_MESSAGE)
        return build_view(entries, self._clock())

    # -- submission ------------------------------------------------------
    async def submit(self) -> HistoryView | None:
        """Send the selected mood; returns the refreshed history on success."""

        if not self.state.submit_enabled:
            return None
        self.state, payload = form.begin_submit(self.state)
        try:
            await self._api.create_entry(payload)
        except MoodApiError as exc:
            logger.error("Submit error: %s", exc)
            self.state = form.submit_failed(self.state)
            return None

        self.state = form.submit_succeeded(self.state)
        self._schedule_dismiss(self.state.notice)
        return await self.load_history()

    def _schedule_dismiss(self, notice: form.Notice | None) -> None:
        if notice is None:
            return
        if self._dismiss_task is not None and not self._dismiss_task.done():
            self._dismiss_task.cancel()
        self._dismiss_task = asyncio.create_task(self._dismiss_later(notice))

    async def _dismiss_later(self, notice: form.Notice) -> None:
        await asyncio.sleep(self._notice_ttl)
        self.state = form.dismiss_notice(self.state, notice)

    async def aclose(self) -> None:
        if self._dismiss_task is not None and not self._dismiss_task.done():
            self._dismiss_task.cancel()
        await self._api.aclose()


__all__ = ["CURRENT_LOCATION", "DEFAULT_CITY", "MoodController", "mock_weather"]
