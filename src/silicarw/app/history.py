"""Persisted read history: a JSON array of entries, newest first."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path

lg = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y/%m/%d %H:%M:%S"


@dataclass(frozen=True)
class HistoryEntry:
    id: int
    timestamp: str
    content: str


class HistoryStore:
    """Read history kept in a JSON file.

    The file is read once on construction and rewritten after every
    change. Load and save failures are logged, not raised: losing the
    history must not stop a tag operation.
    """

    def __init__(self, path: str | Path, clock=time.time) -> None:
        self._path = Path(path)
        self._clock = clock
        self._entries: list[HistoryEntry] = self._load()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> list[HistoryEntry]:
        if not self._path.exists():
            return []
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
            return [
                HistoryEntry(
                    id=int(obj.get("id", 0)),
                    timestamp=str(obj.get("timestamp", "")),
                    content=str(obj.get("content", "")),
                )
                for obj in raw
            ]
        except (OSError, ValueError, TypeError, AttributeError) as exc:
            lg.error("failed to load history %s: %s", self._path, exc)
            return []

    def _save(self) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            data = [asdict(entry) for entry in self._entries]
            self._path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
        except OSError as exc:
            lg.error("failed to save history %s: %s", self._path, exc)

    def append(self, content: str) -> HistoryEntry:
        """Add *content* as the newest entry."""
        now = self._clock()
        entry_id = int(now * 1000)
        if self._entries and entry_id <= max(e.id for e in self._entries):
            entry_id = max(e.id for e in self._entries) + 1
        entry = HistoryEntry(
            id=entry_id,
            timestamp=datetime.fromtimestamp(now).strftime(TIMESTAMP_FORMAT),
            content=content,
        )
        self._entries.insert(0, entry)
        self._save()
        return entry

    def list(self) -> list[HistoryEntry]:
        return list(self._entries)

    def delete(self, entry_id: int) -> bool:
        """Remove one entry. Returns False if no entry has that id."""
        for i, entry in enumerate(self._entries):
            if entry.id == entry_id:
                del self._entries[i]
                self._save()
                return True
        return False

    def clear(self) -> None:
        if self._entries:
            self._entries.clear()
            self._save()
