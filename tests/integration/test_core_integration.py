"""Integration tests for assembling and using a Tracker."""

import sys
from datetime import datetime
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from jaap.catalog.cache import CachedProvider
from jaap.catalog.moderation import ModerationClient
from jaap.config import parse_config
from jaap.core import build_tracker
from jaap.providers import RemoteAPIProvider, SpreadsheetProvider
from jaap.store import SAVED_RECITATIONS_KEY
from test_helpers import FakeBackend, make_tracker


class TestBuildTracker:
    """Test the production component graph."""

    def test_default_graph_uses_backend_catalog(self, tmp_path: Path) -> None:
        """Test that without spreadsheet settings the backend feeds the catalog."""
        tracker = build_tracker(parse_config({}), data_dir=tmp_path)

        (provider,) = tracker.catalog.providers
        assert isinstance(provider, CachedProvider)
        assert isinstance(provider.provider, RemoteAPIProvider)
        assert provider.provider.client.base_url == "http://localhost:8000"
        assert tracker.catalog.moderation is None
        assert tracker.queue.max_retries == 5
        assert tracker.queue.user_id == "local-user"
        assert (tmp_path / "store.db").exists()

    def test_spreadsheet_replaces_backend_catalog(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test that complete spreadsheet settings switch the core provider."""
        monkeypatch.setenv("JAAP_SHEETS_CLIENT_ID", "cid")
        monkeypatch.setenv("JAAP_SHEETS_API_KEY", "key")
        monkeypatch.setenv("JAAP_SHEET_ID", "sheet")
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
        config = parse_config({"sheets": {"sheet_names": ["Banis"]}})

        tracker = build_tracker(config, data_dir=tmp_path)

        (provider,) = tracker.catalog.providers
        assert isinstance(provider.provider, SpreadsheetProvider)
        assert provider.provider.sheet_names == ["Banis"]
        assert provider.name == "spreadsheet"

    def test_moderation_configured(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test that Airtable settings enable review submissions."""
        monkeypatch.setenv("JAAP_AIRTABLE_BASE_ID", "app1")
        monkeypatch.setenv("JAAP_AIRTABLE_API_KEY", "key")

        tracker = build_tracker(parse_config({}), data_dir=tmp_path)

        assert isinstance(tracker.catalog.moderation, ModerationClient)
        assert tracker.catalog.moderation.base_id == "app1"


class TestTracker:
    """Test Tracker operations over a real store."""

    def test_log_recitation_saves_and_queues(self, tmp_path: Path) -> None:
        """Test that one call writes the local log and the sync queue."""
        tracker = make_tracker(tmp_path, FakeBackend())

        saved, queue_id = tracker.log_recitation(
            "Japji", 1, duration_minutes=20, mantra_id="b1"
        )

        assert saved.recitation.timestamp is not None
        assert tracker.store.get(SAVED_RECITATIONS_KEY)[0]["id"] == saved.id
        (pending,) = tracker.queue.get_queue()
        assert pending.queue_id == queue_id
        assert pending.recitation.mantra_id == "b1"
        assert tracker.queue.get_status().pending == 1

    def test_invalid_recitation_writes_nothing(self, tmp_path: Path) -> None:
        """Test that validation happens before anything is persisted."""
        tracker = make_tracker(tmp_path, FakeBackend())

        with pytest.raises(ValueError, match="count must be positive"):
            tracker.log_recitation("Om", 0)

        assert tracker.log.entries() == []
        assert tracker.queue.size == 0

    def test_stats_over_logged_recitations(self, tmp_path: Path) -> None:
        """Test that stats and daily stats read the local log."""
        tracker = make_tracker(tmp_path, FakeBackend())
        tracker.log_recitation(
            "Om", 108, duration_minutes=10, timestamp=datetime(2024, 5, 1, 6)
        )
        tracker.log_recitation(
            "Om", 108, duration_minutes=12, timestamp=datetime(2024, 5, 2, 6)
        )
        tracker.log_recitation("Japji", 1, timestamp=datetime(2024, 5, 2, 5))

        stats = tracker.stats()
        days = tracker.daily_stats()

        assert stats.total_count == 217
        assert stats.most_recited_mantra == "Om"
        assert [(d.date, d.count) for d in days] == [
            ("2024-05-01", 108),
            ("2024-05-02", 109),
        ]
