"""Typed payloads shared by the API, the entry store and the client."""

from .mood import KNOWN_MOODS, MoodCreate, MoodEntry, MoodEntryList, MoodStats
from .weather import ProviderWeather, WeatherSnapshot

__all__ = [
    "KNOWN_MOODS",
    "MoodCreate",
    "MoodEntry",
    "MoodEntryList",
    "MoodStats",
    "ProviderWeather",
    "WeatherSnapshot",
]
