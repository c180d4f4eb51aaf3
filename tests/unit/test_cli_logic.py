"""Unit tests for CLI helpers."""

import asyncio
import sys
from datetime import datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

# Add src to path for testing
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from jaap.cli import format_ms, format_status, watch_queue
from jaap.store import LocalStore
from jaap.sync.models import Recitation, SyncStatus
from jaap.sync.queue import SyncQueue
from test_helpers import FakeClock, FakeRemote


def test_format_ms_never() -> None:
    """Test that a missing timestamp renders as never."""
    assert format_ms(None) == "never"


def test_format_ms_local_time() -> None:
    """Test that epoch milliseconds render as local time to the second."""
    when = datetime(2024, 5, 1, 5, 30, 15)
    ms = int(when.timestamp() * 1000) + 250

    assert format_ms(ms) == "2024-05-01 05:30:15"


def test_format_status_idle() -> None:
    """Test the one-line status for an idle queue."""
    assert format_status(SyncStatus(pending=3)) == "3 pending (idle)"


def test_format_status_syncing() -> None:
    """Test the one-line status during a drain."""
    assert format_status(SyncStatus(pending=1, syncing=True)) == "1 pending (syncing)"


@pytest.mark.asyncio
async def test_watch_queue_waits_for_in_flight_drain(
    store: LocalStore, remote: FakeRemote, clock: FakeClock
) -> None:
    """Test that the watch window ends only after a running drain finishes."""
    remote.gate = asyncio.Event()
    queue = SyncQueue(store, remote, clock=clock)
    queue.enqueue(Recitation(mantra_name="Om", count=108))
    asyncio.get_running_loop().call_later(0.1, remote.gate.set)

    await watch_queue(SimpleNamespace(queue=queue), interval=10.0, duration=0.02)

    assert queue.size == 0
    assert queue.get_status().syncing is False
    assert not queue.is_running
