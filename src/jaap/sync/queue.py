"""Durable queue of recitations awaiting delivery to the backend.

Queue states: Idle (nothing queued) -> Pending (items queued) -> Flushing
(drain in progress) -> Pending or Idle. Items leave the queue when delivered
or after max_retries failed attempts; the queue itself never stops.
"""

import asyncio
import logging
import time
import uuid
from typing import Any, Callable, Protocol

from ..store import SYNC_QUEUE_KEY, SYNC_STATUS_KEY, LocalStore
from .models import FlushReport, PendingRecitation, Recitation, SyncStatus
from .notifier import StatusListener, StatusNotifier

logger = logging.getLogger(__name__)

DEFAULT_MAX_RETRIES = 5
DEFAULT_INTERVAL = 30.0
DEFAULT_DELIVERY_TIMEOUT = 15.0


class DeliveryTarget(Protocol):
    """What the queue needs from the backend client."""

    async def health(self) -> bool: ...

    async def create_recitation(self, payload: dict[str, Any]) -> str: ...


class SyncQueue:
    """Persists pending recitations and drains them against the backend.

    Example:
        queue = SyncQueue(store, RemoteClient("http://localhost:8000"))
        unsubscribe = queue.subscribe(lambda s: print(s.pending))
        queue.enqueue(Recitation(mantra_name="Waheguru", count=108))
        queue.start_auto_sync(30.0)
        ...
        queue.stop_auto_sync()
        unsubscribe()
    """

    def __init__(
        self,
        store: LocalStore,
        remote: DeliveryTarget,
        notifier: StatusNotifier | None = None,
        max_retries: int = DEFAULT_MAX_RETRIES,
        delivery_timeout: float = DEFAULT_DELIVERY_TIMEOUT,
        user_id: str = "local-user",
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize sync queue.

        Args:
            store: Durable store holding the queue and status
            remote: Backend client used for health checks and delivery
            notifier: Status notifier; a private one is created if omitted
            max_retries: Failed attempts after which an item is dropped
            delivery_timeout: Seconds allowed for a single delivery
            user_id: Identity sent with each recitation
            clock: Returns the current time in epoch seconds
        """
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")

        self.store = store
        self.remote = remote
        self.notifier = notifier or StatusNotifier()
        self.max_retries = max_retries
        self.delivery_timeout = delivery_timeout
        self.user_id = user_id
        self.clock = clock

        self._flushing = False
        self._task: asyncio.Task[None] | None = None
        self._current: asyncio.Future[FlushReport] | None = None

    def _now_ms(self) -> int:
        return int(self.clock() * 1000)

    # --- persisted state -------------------------------------------------

    def get_queue(self) -> list[PendingRecitation]:
        """Return all queued items in FIFO order."""
        stored = self.store.get(SYNC_QUEUE_KEY)
        if not isinstance(stored, list):
            return []

        items = []
        for record in stored:
            try:
                items.append(PendingRecitation.from_dict(record))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed queue item {record!r}: {e}")
        return items

    def _write_queue(self, items: list[PendingRecitation]) -> None:
        self.store.set(SYNC_QUEUE_KEY, [item.to_dict() for item in items])

    @property
    def size(self) -> int:
        return len(self.get_queue())

    def get_status(self) -> SyncStatus:
        """Return the persisted sync status."""
        stored = self.store.get(SYNC_STATUS_KEY)
        if isinstance(stored, dict):
            try:
                return SyncStatus.from_dict(stored)
            except (TypeError, ValueError) as e:
                logger.warning(f"Ignoring malformed sync status: {e}")
        return SyncStatus()

    def _update_status(self, **changes: Any) -> SyncStatus:
        status = self.get_status().updated(pending=self.size, **changes)
        self.store.set(SYNC_STATUS_KEY, status.to_dict())
        self.notifier.publish(status)
        return status

    # --- operations ------------------------------------------------------

    def enqueue(self, recitation: Recitation) -> str:
        """Append a recitation to the queue and persist it immediately.

        Returns:
            The generated queue id
        """
        now = self._now_ms()
        item = PendingRecitation(
            queue_id=f"queued-{now}-{uuid.uuid4().hex[:9]}",
            recitation=recitation,
            enqueued_at=now,
        )
        queue = self.get_queue()
        queue.append(item)
        self._write_queue(queue)
        self._update_status()
        logger.debug(f"Queued recitation {item.queue_id}; {len(queue)} pending")
        return item.queue_id

    def clear(self) -> None:
        """Discard every queued item."""
        self.store.remove(SYNC_QUEUE_KEY)
        self._update_status()
        logger.info("Cleared sync queue")

    async def _deliver(self, item: PendingRecitation) -> None:
        payload = item.recitation.to_payload(self.user_id)
        await asyncio.wait_for(
            self.remote.create_recitation(payload), timeout=self.delivery_timeout
        )

    async def flush(self) -> FlushReport:
        """Attempt delivery of every queued item once.

        Returns immediately when the queue is empty, when another flush is
        running, or when the backend fails its health check (the attempt
        time is recorded; retry counters are untouched).

        Returns:
            FlushReport listing delivered, retained and dropped queue ids
        """
        report = FlushReport()
        if self._flushing:
            logger.debug("Flush already in progress, skipping")
            report.skipped = "busy"
            return report

        snapshot = self.get_queue()
        if not snapshot:
            report.skipped = "empty"
            return report

        self._flushing = True
        try:
            if not await self.remote.health():
                logger.info("Backend not available, skipping sync")
                self._update_status(last_sync_attempt=self._now_ms())
                report.skipped = "unreachable"
                return report

            self._update_status(syncing=True, last_sync_attempt=self._now_ms())

            retained: list[PendingRecitation] = []
            processed = 0
            try:
                for item in snapshot:
                    try:
                        await self._deliver(item)
                    except Exception as e:
                        item.retries += 1
                        if item.retries < self.max_retries:
                            logger.error(
                                f"Failed to sync recitation {item.queue_id} "
                                f"(attempt {item.retries}/{self.max_retries}): {e!r}"
                            )
                            retained.append(item)
                            report.retained.append(item.queue_id)
                        else:
                            logger.warning(
                                f"Max retries reached for recitation "
                                f"{item.queue_id}, removing from queue"
                            )
                            report.dropped.append(item.queue_id)
                    else:
                        logger.debug(f"Synced recitation {item.queue_id}")
                        report.delivered.append(item.queue_id)
                    processed += 1
            finally:
                # Runs on cancellation too: unattempted items go back unchanged
                self._finish_drain(snapshot, retained, processed)

            logger.info(
                f"Sync complete: {len(report.delivered)} synced, "
                f"{len(retained)} remaining, {len(report.dropped)} dropped"
            )
            return report
        finally:
            self._flushing = False

    def _finish_drain(
        self,
        snapshot: list[PendingRecitation],
        retained: list[PendingRecitation],
        processed: int,
    ) -> None:
        """Persist the outcome of a drain and clear the syncing flag.

        Args:
            snapshot: Items the drain started with
            retained: Attempted items that failed and stay queued
            processed: Number of snapshot items attempted
        """
        unattempted = snapshot[processed:]
        if unattempted:
            logger.warning(
                f"Sync interrupted, keeping {len(unattempted)} unattempted recitation(s)"
            )

        # Keep anything enqueued while the drain was suspended
        seen = {item.queue_id for item in snapshot}
        arrived = [item for item in self.get_queue() if item.queue_id not in seen]
        self._write_queue(retained + unattempted + arrived)

        now = self._now_ms()
        changes: dict[str, Any] = {"syncing": False, "last_sync_attempt": now}
        if not retained and not unattempted:
            changes["last_successful_sync"] = now
        self._update_status(**changes)

    # --- background sync -------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _run(self, interval: float) -> None:
        while True:
            self._current = asyncio.ensure_future(self.flush())
            try:
                # Shielded so stop_auto_sync() never interrupts a drain
                await asyncio.shield(self._current)
            except Exception:
                logger.exception("Background sync failed")
            await asyncio.sleep(interval)

    async def wait_for_flush(self) -> None:
        """Wait for a background flush still running after stop_auto_sync()."""
        current, self._current = self._current, None
        if current is None or current.done():
            return
        logger.debug("Waiting for in-flight sync to finish")
        try:
            await current
        except Exception:
            logger.exception("Background sync failed")

    def start_auto_sync(self, interval: float = DEFAULT_INTERVAL) -> None:
        """Flush now and then every interval seconds until stopped.

        Must be called from a running event loop. A second call while the
        background task is running does nothing.
        """
        if self.is_running:
            return
        if interval <= 0:
            raise ValueError("interval must be positive")

        logger.info(f"Starting auto-sync every {interval}s")
        self._task = asyncio.get_running_loop().create_task(self._run(interval))

    def stop_auto_sync(self) -> None:
        """Cancel the background task. Safe to call when not running."""
        if self._task is None:
            return
        self._task.cancel()
        self._task = None
        logger.info("Stopped auto-sync")

    def subscribe(self, listener: StatusListener) -> Callable[[], None]:
        """Register a status listener, calling it now with the current status.

        Returns:
            Function that removes the listener
        """
        return self.notifier.subscribe(listener, current=self.get_status())
