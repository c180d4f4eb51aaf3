"""Unit tests for user-submitted catalog entries."""

import sys
from datetime import datetime
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from jaap.catalog.models import Provenance
from jaap.providers.user import UserSubmissionStore
from jaap.store import USER_ENTRIES_KEY, LocalStore

NOW = datetime(2024, 5, 1, 5, 0, 0)


class TestUserSubmissionStore:
    """Test adding, listing and deleting user entries."""

    def test_empty_store(self, store: LocalStore) -> None:
        """Test that no user entries are listed initially."""
        assert UserSubmissionStore(store).entries() == []

    def test_add_assigns_id_provenance_and_time(self, store: LocalStore) -> None:
        """Test that add stamps the entry and ignores caller-supplied ids."""
        users = UserSubmissionStore(store, clock=lambda: NOW)

        entry = users.add(
            {"id": "spoofed", "name": "My Mantra", "traditional_count": 108}
        )

        assert entry.id == f"user-{int(NOW.timestamp() * 1000)}"
        assert entry.source is Provenance.USER
        assert entry.submitted_at == NOW
        assert users.entries() == [entry]

    def test_add_appends(self, store: LocalStore) -> None:
        """Test that entries are kept in insertion order."""
        times = iter([NOW, NOW.replace(minute=1)])
        users = UserSubmissionStore(store, clock=lambda: next(times))

        users.add({"name": "First"})
        users.add({"name": "Second"})

        assert [e.name for e in users.entries()] == ["First", "Second"]

    def test_delete_existing(self, store: LocalStore) -> None:
        """Test that delete removes only the matching entry."""
        users = UserSubmissionStore(store, clock=lambda: NOW)
        entry = users.add({"name": "My Mantra"})

        assert users.delete(entry.id) is True
        assert users.entries() == []

    def test_delete_missing(self, store: LocalStore) -> None:
        """Test that deleting an unknown id reports False and changes nothing."""
        users = UserSubmissionStore(store, clock=lambda: NOW)
        users.add({"name": "My Mantra"})
        before = store.get(USER_ENTRIES_KEY)

        assert users.delete("user-0") is False
        assert store.get(USER_ENTRIES_KEY) == before

    def test_malformed_records_skipped(self, store: LocalStore) -> None:
        """Test that unreadable stored records are skipped."""
        store.set(
            USER_ENTRIES_KEY,
            [{"id": "user-1", "name": "Ok", "source": "user"}, {"name": "no id"}],
        )

        assert [e.id for e in UserSubmissionStore(store).entries()] == ["user-1"]

    def test_non_dict_records_skipped(self, store: LocalStore) -> None:
        """Test that a stored record that is not a mapping does not raise."""
        store.set(USER_ENTRIES_KEY, ["garbage", 42, {"id": "user-1", "name": "Ok"}])

        assert [e.id for e in UserSubmissionStore(store).entries()] == ["user-1"]

    def test_unreadable_records_survive_rewrites(self, store: LocalStore) -> None:
        """Test that add and delete write unreadable records back untouched."""
        original = ["garbage", {"name": "no id"}]
        store.set(USER_ENTRIES_KEY, list(original))
        users = UserSubmissionStore(store, clock=lambda: NOW)

        entry = users.add({"name": "My Mantra"})
        assert store.get(USER_ENTRIES_KEY)[:2] == original
        assert [e.id for e in users.entries()] == [entry.id]

        assert users.delete(entry.id) is True
        assert store.get(USER_ENTRIES_KEY) == original

    @pytest.mark.asyncio
    async def test_fetch_reads_store(self, store: LocalStore) -> None:
        """Test that the provider interface returns the stored entries."""
        users = UserSubmissionStore(store, clock=lambda: NOW)
        entry = users.add({"name": "My Mantra"})

        assert await users.fetch() == [entry]

    def test_same_millisecond_adds_get_distinct_ids(self, store: LocalStore) -> None:
        """Test that two adds at the same instant do not collide."""
        users = UserSubmissionStore(store, clock=lambda: NOW)

        first = users.add({"name": "First"})
        second = users.add({"name": "Second"})

        assert first.id != second.id
        assert users.delete(first.id) is True
        assert [e.name for e in users.entries()] == ["Second"]
