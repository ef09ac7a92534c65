from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from pydantic import BaseModel

from moodlog.app.schemas.mood import KNOWN_MOODS, MoodEntry
from moodlog.app.schemas.weather import WeatherSnapshot
from moodlog.app.services.stats import mood_counts

MOOD_EMOJIS: dict[str, str] = {
    "happy": "😊",
    "excited": "🤩",
    "neutral": "😐",
    "sad": "😢",
    "stressed": "😰",
}
DEFAULT_EMOJI = "😐"

HISTORY_LIMIT = 10
STATS_DAYS = 7

EMPTY_HISTORY_MESSAGE = "No moods logged yet. Start by logging your first mood!"
HISTORY_ERROR_MESSAGE = "Unable to load mood history"


class HistoryItem(BaseModel):
    emoji: str
    mood: str
    time_label: str
    note: str | None = None
    weather_line: str | None = None


class HistoryView(BaseModel):
    items: list[HistoryItem] = []
    stats: dict[str, int] = {}
    message: str | None = None


def format_relative_time(timestamp: datetime, now: datetime) -> str:
    seconds = (now - timestamp).total_seconds()
    if seconds < 60:
        return "Just now"
    if seconds < 3600:
        return f"{int(seconds // 60)}m ago"
    if seconds < 86400:
        return f"{int(seconds // 3600)}h ago"
    if seconds < 604800:
        return f"{int(seconds // 86400)}d ago"
    return timestamp.astimezone().strftime("%b %d, %Y")


def format_weather(weather: WeatherSnapshot) -> str:
    return f"{weather.temp}°C, {weather.description} in {weather.city}"


def build_history(
    entries: Sequence[MoodEntry],
    now: datetime,
    limit: int = HISTORY_LIMIT,
) -> list[HistoryItem]:
    return [
        HistoryItem(
            emoji=MOOD_EMOJIS.get(entry.mood, DEFAULT_EMOJI),
            mood=entry.mood,
            time_label=format_relative_time(entry.timestamp, now),
            note=entry.note or None,
            weather_line=format_weather(entry.weather) if entry.weather else None,
        )
        for entry in entries[:limit]
    ]


def weekly_stats(
    entries: Sequence[MoodEntry],
    now: datetime,
    days: int = STATS_DAYS,
) -> dict[str, int]:
    return mood_counts(entries, now=now, days=days)


def empty_stats() -> dict[str, int]:
    return {mood: 0 for mood in KNOWN_MOODS}


def build_view(entries: Sequence[MoodEntry], now: datetime) -> HistoryView:
    stats = weekly_stats(entries, now)
    if not entries:
        return HistoryView(items=[], stats=stats, message=EMPTY_HISTORY_MESSAGE)
    return HistoryView(items=build_history(entries, now), stats=stats)


def render_text(view: HistoryView) -> str:
    """Plain-text rendering used by the terminal client."""

    lines: list[str] = []
    if view.message:
        lines.append(view.message)
    for item in view.items:
        lines.append(f"{item.emoji} {item.mood:<9} {item.time_label}")
        if item.note:
            lines.append(f'    "{item.note}"')
        if item.weather_line:
            lines.append(f"    🌤️ {item.weather_line}")
    if view.stats:
        summary = "  ".join(
            f"{MOOD_EMOJIS.get(mood, DEFAULT_EMOJI)} {count}" for mood, count in view.stats.items()
        )
        lines.append(f"Last {STATS_DAYS} days: {summary}")
    return "\n".join(lines)
