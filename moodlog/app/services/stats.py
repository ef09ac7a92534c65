from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timedelta

from ..schemas.mood import KNOWN_MOODS, MoodEntry


def mood_counts(
    entries: Iterable[MoodEntry],
    *,
    now: datetime,
    days: int = 7,
) -> dict[str, int]:
    """Count known moods among entries strictly newer than ``now - days``."""

    cutoff = now - timedelta(days=days)
    counts = {mood: 0 for mood in KNOWN_MOODS}
    for entry in entries:
        if entry.timestamp > cutoff and entry.mood in counts:
            counts[entry.mood] += 1
    return counts


__all__ = ["mood_counts"]
