from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

OPENWEATHER_URL = "https://api.openweathermap.org/data/2.5/weather"


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
    )

    port: int = Field(default=3000, alias="PORT")
    moods_file: Path = Field(default=Path("data/moods.json"), alias="MOODS_FILE")
    max_entries: int = Field(default=50, alias="MAX_ENTRIES")
    log_file: Path = Field(default=Path("logs/moodlog.log"), alias="LOG_FILE")

    # Weather provider
    weather_api_key: str | None = Field(default=None, alias="WEATHER_API_KEY")
    weather_api_url: str = Field(default=OPENWEATHER_URL, alias="WEATHER_API_URL")
    weather_timeout_seconds: float = Field(default=5.0, alias="WEATHER_TIMEOUT_SECONDS")
    weather_retry_attempts: int = Field(default=1, alias="WEATHER_RETRY_ATTEMPTS")

    version: str = Field(default_factory=lambda: Settings._load_version())

    @staticmethod
    def _load_version() -> str:
        version_env = os.getenv("VERSION")
        if version_env:
            return version_env
        version_file = Path("VERSION")
        if version_file.exists():
            return version_file.read_text(encoding="utf-8").strip()
        return "0.0.0"

    @field_validator("log_file", "moods_file", mode="before")
    @classmethod
    def _ensure_parent_dir(cls, value: Path | str) -> Path:
        path = Path(value)
        if not path.parent.exists():
            path.parent.mkdir(parents=True, exist_ok=True)
        return path

    @field_validator("max_entries", "weather_retry_attempts", mode="before")
    @classmethod
    def _validate_positive(cls, value: int | str) -> int:
        return max(int(value), 1)

    @field_validator("weather_api_key", mode="before")
    @classmethod
    def _blank_key_is_missing(cls, value: str | None) -> str | None:
        if value is None or not str(value).strip():
            return None
        return str(value).strip()


@lru_cache
def get_settings() -> Settings:
    """Cached settings accessor."""

    return Settings()
