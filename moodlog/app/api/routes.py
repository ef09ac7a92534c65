from __future__ import annotations

import logging
from datetime import UTC, datetime

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse

from ..metrics import ENTRIES_CREATED
from ..schemas.mood import KNOWN_MOODS, MoodCreate, MoodEntry, MoodStats
from ..schemas.weather import WeatherSnapshot
from ..services.stats import mood_counts
from ..services.storage import EntryStoreError, JsonEntryStore
from ..services.weather import WeatherGateway

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["moods"])


def get_entry_store(request: Request) -> JsonEntryStore:
    return request.app.state.entry_store


def get_weather_gateway(request: Request) -> WeatherGateway:
    return request.app.state.weather_gateway


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.get("/weather/{city}", response_model=WeatherSnapshot)
async def read_weather(
    city: str,
    gateway: WeatherGateway = Depends(get_weather_gateway),
) -> WeatherSnapshot:
    return await gateway.fetch_by_city(city)


@router.get("/moods", response_model=list[MoodEntry])
async def list_moods(
    store: JsonEntryStore = Depends(get_entry_store),
) -> list[MoodEntry] | JSONResponse:
    try:
        return await store.list_entries()
    except Exception:
        logger.exception("Failed to read moods")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to read moods")


@router.get("/moods/stats", response_model=MoodStats)
async def mood_stats(
    days: int = Query(default=7, ge=1, le=30),
    store: JsonEntryStore = Depends(get_entry_store),
) -> MoodStats | JSONResponse:
    try:
        entries = await store.list_entries()
    except Exception:
        logger.exception("Failed to read moods for stats")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to read moods")
    counts = mood_counts(entries, now=datetime.now(UTC), days=days)
    return MoodStats(days=days, counts=counts, total=sum(counts.values()))


@router.post(
    "/moods",
    response_model=MoodEntry,
    status_code=status.HTTP_201_CREATED,
)
async def create_mood(
    payload: MoodCreate,
    store: JsonEntryStore = Depends(get_entry_store),
) -> MoodEntry | JSONResponse:
    if not payload.mood or not payload.mood.strip():
        return error_response(status.HTTP_400_BAD_REQUEST, "Mood is required")

    try:
        entry = await store.create(
            mood=payload.mood,
            note=payload.note,
            weather=payload.weather,
        )
    except EntryStoreError:
        logger.exception("Failed to create mood entry")
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to create mood entry"
        )

    ENTRIES_CREATED.labels(mood=entry.mood if entry.mood in KNOWN_MOODS else "other").inc()
    logger.info(
        "Mood entry created",
        extra={"extra_fields": {"entry_id": entry.id, "mood": entry.mood}},
    )
    return entry
