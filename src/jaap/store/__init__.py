"""Local durable key/value storage for jaap."""

from .storage import (
    CORE_CATALOG_KEY,
    SAVED_RECITATIONS_KEY,
    SPREADSHEET_CATALOG_KEY,
    SYNC_QUEUE_KEY,
    SYNC_STATUS_KEY,
    USER_ENTRIES_KEY,
    LocalStore,
)

__all__ = [
    "CORE_CATALOG_KEY",
    "SAVED_RECITATIONS_KEY",
    "SPREADSHEET_CATALOG_KEY",
    "SYNC_QUEUE_KEY",
    "SYNC_STATUS_KEY",
    "USER_ENTRIES_KEY",
    "LocalStore",
]
