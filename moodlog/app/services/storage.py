from __future__ import annotations

import asyncio
import json
import logging
import os
import secrets
import tempfile
import time
from collections.abc import Sequence
from datetime import UTC, datetime
from pathlib import Path

from pydantic import ValidationError

from ..schemas.mood import MoodEntry, MoodEntryList
from ..schemas.weather import WeatherSnapshot

logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 50
_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


class EntryStoreError(RuntimeError):
    """Raised when the mood document cannot be written."""


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits: list[str] = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def new_entry_id() -> str:
    """Millisecond clock in base 36 followed by a random suffix."""

    return _to_base36(time.time_ns() // 1_000_000) + secrets.token_hex(5)


class JsonEntryStore:
    """Persist mood entries as a single pretty-printed JSON array, newest first."""

    def __init__(self, path: Path, max_entries: int = DEFAULT_MAX_ENTRIES) -> None:
        self._path = Path(path)
        self._max_entries = max(1, max_entries)
        self._write_lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def max_entries(self) -> int:
        return self._max_entries

    async def initialize(self) -> None:
        """Create the document holding an empty collection if it does not exist."""

        await asyncio.to_thread(self._initialize_sync)

    async def healthcheck(self) -> None:
        await asyncio.to_thread(self._path.read_bytes)

    async def list_entries(self) -> list[MoodEntry]:
        return await asyncio.to_thread(self._read_sync)

    async def append(self, entry: MoodEntry) -> list[MoodEntry]:
        """Prepend ``entry``, drop anything beyond the cap and rewrite the document."""

        async with self._write_lock:
            entries = await asyncio.to_thread(self._read_sync)
            entries.insert(0, entry)
            del entries[self._max_entries :]
            await asyncio.to_thread(self._write_sync, entries)
            return entries

    async def create(
        self,
        mood: str,
        note: str | None = None,
        weather: WeatherSnapshot | None = None,
    ) -> MoodEntry:
        entry = MoodEntry(
            id=new_entry_id(),
            mood=mood,
            note=note or "",
            weather=weather,
            timestamp=datetime.now(UTC),
        )
        await self.append(entry)
        return entry

    # -- file helpers ----------------------------------------------------
    def _initialize_sync(self) -> None:
        if self._path.exists():
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._write_sync([])
        logger.info(
            "Created empty mood document",
            extra={"extra_fields": {"file": str(self._path)}},
        )

    def _read_sync(self) -> list[MoodEntry]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Mood document unreadable, treating as empty: %s", exc)
            return []

        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning("Mood document is not valid JSON, treating as empty: %s", exc)
            return []

        if not isinstance(payload, list):
            logger.warning("Mood document is not an array, treating as empty")
            return []

        entries: list[MoodEntry] = []
        for position, item in enumerate(payload):
            try:
                entries.append(MoodEntry.model_validate(item))
            except ValidationError as exc:
                logger.warning(
                    "Skipping invalid mood entry",
                    extra={"extra_fields": {"position": position, "errors": exc.error_count()}},
                )
        return entries

    def _write_sync(self, entries: Sequence[MoodEntry]) -> None:
        data = MoodEntryList.dump_json(list(entries), indent=2)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.", suffix=".tmp", dir=self._path.parent
            )
            try:
                with os.fdopen(fd, "wb") as handle:
                    handle.write(data)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise EntryStoreError(f"unable to write {self._path}: {exc}") from exc


__all__ = ["DEFAULT_MAX_ENTRIES", "EntryStoreError", "JsonEntryStore", "new_entry_id"]
