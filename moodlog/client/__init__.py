"""Client-side mood form: state machine, presentation and API access."""

from .api import MoodApiClient, MoodApiError
from .controller import MoodController
from .presenter import HistoryItem, HistoryView, format_relative_time, weekly_stats
from .state import FormPhase, FormState, InvalidTransition

__all__ = [
    "FormPhase",
    "FormState",
    "HistoryItem",
    "HistoryView",
    "InvalidTransition",
    "MoodApiClient",
    "MoodApiError",
    "MoodController",
    "format_relative_time",
    "weekly_stats",
]
