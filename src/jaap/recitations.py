"""Locally saved recitations, the source for statistics."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable

from .store import SAVED_RECITATIONS_KEY, LocalStore
from .sync.models import Recitation

logger = logging.getLogger(__name__)


@dataclass
class SavedRecitation:
    """A recitation as kept in the local log."""

    id: str
    recitation: Recitation

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, **self.recitation.to_dict()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SavedRecitation":
        return cls(id=str(data["id"]), recitation=Recitation.from_dict(data))


class RecitationLog:
    """Append-only list of logged recitations in the local store."""

    def __init__(
        self, store: LocalStore, clock: Callable[[], datetime] = datetime.now
    ) -> None:
        self.store = store
        self.clock = clock

    def entries(self) -> list[SavedRecitation]:
        stored = self.store.get(SAVED_RECITATIONS_KEY)
        if not isinstance(stored, list):
            return []

        saved = []
        for record in stored:
            try:
                saved.append(SavedRecitation.from_dict(record))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed saved recitation: {e}")
        return saved

    def add(self, recitation: Recitation) -> SavedRecitation:
        """Save a recitation, stamping its timestamp if it has none."""
        now = self.clock()
        if recitation.timestamp is None:
            recitation.timestamp = now

        saved = self.entries()
        taken = {item.id for item in saved}
        stamp = int(now.timestamp() * 1000)
        while str(stamp) in taken:
            stamp += 1

        entry = SavedRecitation(id=str(stamp), recitation=recitation)
        saved.append(entry)
        self.store.set(SAVED_RECITATIONS_KEY, [item.to_dict() for item in saved])
        return entry

    def clear(self) -> None:
        self.store.remove(SAVED_RECITATIONS_KEY)
