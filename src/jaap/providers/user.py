"""User-submitted catalog entries kept in the local store."""

import logging
from datetime import datetime
from typing import Any, Callable

from ..catalog.models import MantraEntry, Provenance
from ..store import USER_ENTRIES_KEY, LocalStore
from .base import CatalogProvider

logger = logging.getLogger(__name__)


class UserSubmissionStore(CatalogProvider):
    """The definitive local record of user-added mantras.

    Every write rewrites the whole collection under the user-entries key.
    """

    name = "user"

    def __init__(
        self, store: LocalStore, clock: Callable[[], datetime] = datetime.now
    ) -> None:
        self.store = store
        self.clock = clock

    def _records(self) -> list[Any]:
        stored = self.store.get(USER_ENTRIES_KEY)
        return stored if isinstance(stored, list) else []

    @staticmethod
    def _parse(record: Any) -> MantraEntry | None:
        try:
            return MantraEntry.from_dict(record)
        except (AttributeError, TypeError, ValueError) as e:
            logger.warning(f"Skipping malformed user entry {record!r}: {e}")
            return None

    def entries(self) -> list[MantraEntry]:
        """Read all user entries, skipping malformed records."""
        parsed = (self._parse(record) for record in self._records())
        return [entry for entry in parsed if entry is not None]

    async def load(self) -> list[MantraEntry]:
        return self.entries()

    def add(self, partial: dict[str, Any]) -> MantraEntry:
        """Stamp and append a new user entry.

        Records that cannot be read are written back untouched.

        Args:
            partial: Entry fields; id, source and submitted_at are assigned here

        Returns:
            The stored entry
        """
        now = self.clock()
        values = {
            k: v
            for k, v in partial.items()
            if k not in ("id", "source", "submitted_at")
        }
        taken = {entry.id for entry in self.entries()}
        stamp = int(now.timestamp() * 1000)
        while f"user-{stamp}" in taken:
            stamp += 1

        entry = MantraEntry(
            id=f"user-{stamp}",
            source=Provenance.USER,
            submitted_at=now,
            **values,
        )

        self.store.set(USER_ENTRIES_KEY, self._records() + [entry.to_dict()])
        logger.info(f"Added user mantra '{entry.name}' as {entry.id}")
        return entry

    def delete(self, entry_id: str) -> bool:
        """Remove the entry with entry_id.

        Returns:
            True if an entry was removed
        """
        records = self._records()
        remaining = [
            record
            for record in records
            if not (isinstance(record, dict) and record.get("id") == entry_id)
        ]
        if len(remaining) == len(records):
            return False
        self.store.set(USER_ENTRIES_KEY, remaining)
        logger.info(f"Deleted user mantra {entry_id}")
        return True
