"""Observer registration and dispatch for sync status."""

import logging
from typing import Callable

from .models import SyncStatus

logger = logging.getLogger(__name__)

StatusListener = Callable[[SyncStatus], None]


class StatusNotifier:
    """Delivers every sync status change to registered listeners."""

    def __init__(self) -> None:
        self._listeners: list[StatusListener] = []

    def subscribe(
        self, listener: StatusListener, current: SyncStatus | None = None
    ) -> Callable[[], None]:
        """Register a listener.

        Args:
            listener: Called with each new status
            current: If given, the listener is called with it immediately

        Returns:
            Function that removes the listener; calling it twice is harmless
        """
        self._listeners.append(listener)
        if current is not None:
            self._dispatch(listener, current)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, status: SyncStatus) -> None:
        """Send status to every listener registered at call time."""
        for listener in list(self._listeners):
            self._dispatch(listener, status)

    def _dispatch(self, listener: StatusListener, status: SyncStatus) -> None:
        try:
            listener(status)
        except Exception:
            logger.exception(f"Sync status listener {listener!r} failed")

    def __len__(self) -> int:
        return len(self._listeners)
