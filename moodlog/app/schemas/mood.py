from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from .weather import WeatherSnapshot

KNOWN_MOODS: tuple[str, ...] = ("happy", "excited", "neutral", "sad", "stressed")


class MoodCreate(BaseModel):
    # Mood presence is checked by the route so it can answer with its own message.
    mood: str | None = None
    note: str | None = None
    weather: WeatherSnapshot | None = None


class MoodEntry(BaseModel):
    """A persisted mood log record."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., min_length=1)
    mood: str = Field(..., min_length=1)
    note: str = ""
    weather: WeatherSnapshot | None = None
    timestamp: datetime

    @field_validator("timestamp")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value


class MoodStats(BaseModel):
    days: int
    counts: dict[str, int]
    total: int


MoodEntryList = TypeAdapter(list[MoodEntry])
