"""Store for structured validation failures returned by bulk saves."""

import itertools
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any


@dataclass
class ErrorLogEntry:
    id: int
    logged_at: datetime
    sector: str | None
    form: str | None
    payload: Any


class ErrorLog:
    """Ordered log of backend error payloads, newest last.

    The payload is kept exactly as the backend returned it.
    """

    def __init__(self, max_entries: int = 200):
        self._entries: list[ErrorLogEntry] = []
        self._ids = itertools.count(1)
        self._max_entries = max_entries

    def add(self, payload: Any, sector: str | None = None, form: str | None = None) -> ErrorLogEntry:
        entry = ErrorLogEntry(
            id=next(self._ids),
            logged_at=datetime.now(timezone.utc),
            sector=sector,
            form=form,
            payload=payload,
        )
        self._entries.append(entry)
        del self._entries[: -self._max_entries]
        return entry

    @property
    def entries(self) -> list[ErrorLogEntry]:
        return list(self._entries)

    @property
    def latest(self) -> ErrorLogEntry | None:
        return self._entries[-1] if self._entries else None

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
