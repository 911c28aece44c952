"""Mini README: Session context and visit history.

Structure:
    * HistoryEntry - denormalised record of one viewed item.
    * SessionTracker - records commits into the session context and history.

The session context is the ordered, duplicate-free list of item ids seen
since the process started; narration uses it to connect exhibits and it is
never persisted. The history keeps at most one entry per item, newest
first: viewing an item again replaces its entry and moves it to the front.
When a ``history_path`` is given the history is written to JSON after each
change and read back on start-up. A failed write is logged and the
in-memory history is kept, so recording a view never fails on disk errors.
"""

from __future__ import annotations

import json
import os
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, List, Optional

from ..catalog import Item
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class HistoryEntry:
    """Snapshot of an item taken when it was viewed."""

    item_id: str
    name: str
    category: str
    viewed_at: datetime
    dynasty: Optional[str] = None
    listened_seconds: float = 0.0

    def as_dict(self) -> Dict[str, object]:
        return {
            "item_id": self.item_id,
            "name": self.name,
            "category": self.category,
            "dynasty": self.dynasty,
            "viewed_at": self.viewed_at.isoformat(),
            "listened_seconds": self.listened_seconds,
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, object]) -> "HistoryEntry":
        return cls(
            item_id=str(payload["item_id"]),
            name=str(payload["name"]),
            category=str(payload["category"]),
            dynasty=payload.get("dynasty") or None,  # type: ignore[arg-type]
            viewed_at=datetime.fromisoformat(str(payload["viewed_at"])),
            listened_seconds=float(payload.get("listened_seconds", 0.0)),  # type: ignore[arg-type]
        )


class SessionTracker:
    """Track what the visitor has seen this session and overall."""

    def __init__(
        self,
        *,
        history_path: Optional[Path] = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.history_path = history_path
        self._clock = clock
        self._lock = threading.Lock()
        self._session: List[str] = []
        self._history: List[HistoryEntry] = self._load_history()
        LOGGER.debug("SessionTracker initialised with %s history entries", len(self._history))

    @property
    def session_context(self) -> List[str]:
        """Item ids seen since start-up, in first-seen order."""

        with self._lock:
            return list(self._session)

    @property
    def history(self) -> List[HistoryEntry]:
        """History entries, most recently viewed first."""

        with self._lock:
            return list(self._history)

    def record(self, item: Item) -> HistoryEntry:
        """Register a committed identification of ``item``."""

        entry = HistoryEntry(
            item_id=item.item_id,
            name=item.name,
            category=item.category.value,
            dynasty=item.dynasty,
            viewed_at=self._clock(),
        )
        with self._lock:
            if item.item_id not in self._session:
                self._session.append(item.item_id)
            self._history = [entry] + [
                existing for existing in self._history if existing.item_id != item.item_id
            ]
            self._save_history()
        LOGGER.info("Recorded view of %s (%s)", item.item_id, item.name)
        return entry

    def update_listened(self, item_id: str, seconds: float) -> Optional[HistoryEntry]:
        """Store how long the visitor listened to the narration of ``item_id``."""

        with self._lock:
            for entry in self._history:
                if entry.item_id == item_id:
                    entry.listened_seconds = max(0.0, float(seconds))
                    self._save_history()
                    return entry
        return None

    def clear_history(self) -> None:
        """Forget the visit history; the session context is untouched."""

        with self._lock:
            self._history = []
            self._save_history()
        LOGGER.info("History cleared")

    def clear_session(self) -> None:
        """Forget the session context; the history is untouched."""

        with self._lock:
            self._session = []

    def _load_history(self) -> List[HistoryEntry]:
        if self.history_path is None or not self.history_path.exists():
            return []
        try:
            payload = json.loads(self.history_path.read_text(encoding="utf-8"))
            if not isinstance(payload, dict):
                raise ValueError("history file must hold a JSON object")
            return [HistoryEntry.from_dict(entry) for entry in payload.get("history", [])]
        except (OSError, KeyError, TypeError, ValueError) as error:
            LOGGER.warning("Ignoring unreadable history file %s: %s", self.history_path, error)
            return []

    def _save_history(self) -> None:
        if self.history_path is None:
            return
        payload = {"history": [entry.as_dict() for entry in self._history]}
        staging = self.history_path.with_name(self.history_path.name + ".tmp")
        try:
            self.history_path.parent.mkdir(parents=True, exist_ok=True)
            staging.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
            os.replace(staging, self.history_path)
        except OSError as error:
            # The in-memory history stays authoritative until the next successful write.
            LOGGER.warning("Could not persist history to %s: %s", self.history_path, error)
