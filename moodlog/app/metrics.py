from __future__ import annotations

from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "moodlog_requests_total",
    "Total HTTP requests processed by Moodlog",
    ("method", "path", "status"),
)

REQUEST_LATENCY = Histogram(
    "moodlog_request_latency_seconds",
    "HTTP request latency in seconds",
    ("method", "path"),
)

REQUEST_ERRORS = Counter(
    "moodlog_request_errors_total",
    "HTTP requests resulting in server errors",
    ("method", "path", "status"),
)

ENTRIES_CREATED = Counter(
    "moodlog_entries_created_total",
    "Mood entries persisted",
    ("mood",),
)

WEATHER_FALLBACKS = Counter(
    "moodlog_weather_fallbacks_total",
    "Weather lookups answered with the fallback snapshot",
    ("reason",),
)

__all__ = [
    "ENTRIES_CREATED",
    "REQUEST_COUNT",
    "REQUEST_ERRORS",
    "REQUEST_LATENCY",
    "WEATHER_FALLBACKS",
]
