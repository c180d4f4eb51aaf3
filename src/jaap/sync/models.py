"""Sync queue data models with validation."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any


@dataclass
class Recitation:
    """One logged recitation session.

    Args:
        mantra_name: Name of the recited mantra
        count: Number of repetitions (must be positive)
        mantra_id: Catalog id, if the mantra came from the catalog
        duration_minutes: Session length in minutes
        timestamp: When the session happened
        notes: Free-text notes
    """

    mantra_name: str
    count: int
    mantra_id: str | None = None
    duration_minutes: float = 0
    timestamp: datetime | None = None
    notes: str | None = None

    def __post_init__(self) -> None:
        """Validate recitation."""
        if not self.mantra_name or not self.mantra_name.strip():
            raise ValueError("mantra_name cannot be empty")
        if self.count <= 0:
            raise ValueError("count must be positive")
        if self.duration_minutes < 0:
            raise ValueError("duration_minutes cannot be negative")

    def to_dict(self) -> dict[str, Any]:
        return {
            "mantra_name": self.mantra_name,
            "count": self.count,
            "mantra_id": self.mantra_id,
            "duration_minutes": self.duration_minutes,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Recitation":
        timestamp = data.get("timestamp")
        return cls(
            mantra_name=data["mantra_name"],
            count=int(data["count"]),
            mantra_id=data.get("mantra_id"),
            duration_minutes=data.get("duration_minutes") or 0,
            timestamp=datetime.fromisoformat(timestamp) if timestamp else None,
            notes=data.get("notes"),
        )

    def to_payload(self, user_id: str) -> dict[str, Any]:
        """Build the backend POST /recitations body."""
        payload: dict[str, Any] = {
            "mantra_id": self.mantra_id or "default",
            "user_id": user_id,
            "count": self.count,
            "duration_minutes": self.duration_minutes,
        }
        if self.notes:
            payload["notes"] = self.notes
        return payload


@dataclass
class PendingRecitation:
    """A recitation waiting for remote delivery.

    Attributes:
        queue_id: Collision-resistant id assigned at enqueue
        recitation: The payload to deliver
        enqueued_at: Enqueue time in epoch milliseconds
        retries: Failed delivery attempts so far
    """

    queue_id: str
    recitation: Recitation
    enqueued_at: int
    retries: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.queue_id,
            "recitation": self.recitation.to_dict(),
            "timestamp": self.enqueued_at,
            "retries": self.retries,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PendingRecitation":
        return cls(
            queue_id=data["id"],
            recitation=Recitation.from_dict(data["recitation"]),
            enqueued_at=int(data["timestamp"]),
            retries=int(data.get("retries", 0)),
        )


@dataclass(frozen=True)
class SyncStatus:
    """Observable state of the sync queue. Timestamps are epoch milliseconds."""

    pending: int = 0
    syncing: bool = False
    last_sync_attempt: int | None = None
    last_successful_sync: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "pending": self.pending,
            "syncing": self.syncing,
            "last_sync_attempt": self.last_sync_attempt,
            "last_successful_sync": self.last_successful_sync,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SyncStatus":
        return cls(
            pending=int(data.get("pending", 0)),
            syncing=bool(data.get("syncing", False)),
            last_sync_attempt=data.get("last_sync_attempt"),
            last_successful_sync=data.get("last_successful_sync"),
        )

    def updated(self, **changes: Any) -> "SyncStatus":
        return replace(self, **changes)


@dataclass
class FlushReport:
    """Outcome of one flush() call."""

    delivered: list[str] = field(default_factory=list)
    retained: list[str] = field(default_factory=list)
    dropped: list[str] = field(default_factory=list)
    skipped: str | None = None
