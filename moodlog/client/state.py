"""Mood form state machine.

The form moves ``idle -> mood_selected -> submitting`` and back. Every
transition is a pure function returning a new :class:`FormState`, so the whole
flow can be exercised without a rendered UI or a server.
"""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict

from moodlog.app.schemas.mood import MoodCreate
from moodlog.app.schemas.weather import WeatherSnapshot

SUBMIT_LABEL = "Log Mood"
SUBMITTING_LABEL = "Saving..."
SUCCESS_MESSAGE = "Mood logged successfully! 🎉"
FAILURE_MESSAGE = "Failed to save mood. Please try again."


class FormPhase(str, Enum):
    IDLE = "idle"
    MOOD_SELECTED = "mood_selected"
    SUBMITTING = "submitting"


class Notice(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["success", "error"]
    message: str


class FormState(BaseModel):
    model_config = ConfigDict(frozen=True)

    phase: FormPhase = FormPhase.IDLE
    selected_mood: str | None = None
    note: str = ""
    weather: WeatherSnapshot | None = None
    notice: Notice | None = None

    @property
    def submit_enabled(self) -> bool:
        return self.phase == FormPhase.MOOD_SELECTED

    @property
    def submit_label(self) -> str:
        return SUBMITTING_LABEL if self.phase == FormPhase.SUBMITTING else SUBMIT_LABEL

    def is_selected(self, mood: str) -> bool:
        return self.selected_mood == mood


class InvalidTransition(RuntimeError):
    """Raised when a transition is not allowed from the current phase."""


def select_mood(state: FormState, mood: str) -> FormState:
    if state.phase == FormPhase.SUBMITTING:
        return state
    return state.model_copy(update={"phase": FormPhase.MOOD_SELECTED, "selected_mood": mood})


def edit_note(state: FormState, text: str) -> FormState:
    return state.model_copy(update={"note": text})


def set_weather(state: FormState, snapshot: WeatherSnapshot | None) -> FormState:
    return state.model_copy(update={"weather": snapshot})


def begin_submit(state: FormState) -> tuple[FormState, MoodCreate]:
    if state.phase != FormPhase.MOOD_SELECTED or not state.selected_mood:
        raise InvalidTransition(f"cannot submit from {state.phase.value}")
    payload = MoodCreate(
        mood=state.selected_mood,
        note=state.note.strip(),
        weather=state.weather,
    )
    return state.model_copy(update={"phase": FormPhase.SUBMITTING, "notice": None}), payload


def submit_succeeded(state: FormState) -> FormState:
    return state.model_copy(
        update={
            "phase": FormPhase.IDLE,
            "selected_mood": None,
            "note": "",
            "notice": Notice(kind="success", message=SUCCESS_MESSAGE),
        }
    )


def submit_failed(state: FormState, message: str = FAILURE_MESSAGE) -> FormState:
    # Selection and note survive so the user can retry as-is.
    return state.model_copy(
        update={
            "phase": FormPhase.MOOD_SELECTED,
            "notice": Notice(kind="error", message=message),
        }
    )


def dismiss_notice(state: FormState, notice: Notice | None = None) -> FormState:
    """Clear the notice, or only ``notice`` when given and still current."""

    if notice is not None and state.notice is not notice:
        return state
    return state.model_copy(update={"notice": None})


__all__ = [
    "FAILURE_MESSAGE",
    "SUCCESS_MESSAGE",
    "FormPhase",
    "FormState",
    "InvalidTransition",
    "Notice",
    "begin_submit",
    "dismiss_notice",
    "edit_note",
    "select_mood",
    "set_weather",
    "submit_failed",
    "submit_succeeded",
]
