"""Offline-tolerant delivery of logged recitations."""

from .models import FlushReport, PendingRecitation, Recitation, SyncStatus
from .notifier import StatusNotifier
from .queue import SyncQueue

__all__ = [
    "FlushReport",
    "PendingRecitation",
    "Recitation",
    "StatusNotifier",
    "SyncQueue",
    "SyncStatus",
]
