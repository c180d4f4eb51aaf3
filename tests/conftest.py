"""Pytest configuration and fixtures for jaap tests."""

import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from jaap.store import LocalStore
from test_helpers import FakeClock, FakeRemote


@pytest.fixture
def store(tmp_path: Path) -> LocalStore:
    """Fresh store in a per-test directory."""
    return LocalStore(tmp_path / "data")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def remote() -> FakeRemote:
    return FakeRemote()


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer credentials and cached config out of tests."""
    for name in (
        "JAAP_API_URL",
        "JAAP_SYNC_INTERVAL",
        "JAAP_USER_ID",
        "JAAP_SHEETS_CLIENT_ID",
        "JAAP_SHEETS_CLIENT_SECRET",
        "JAAP_SHEETS_API_KEY",
        "JAAP_SHEET_ID",
        "JAAP_AIRTABLE_BASE_ID",
        "JAAP_AIRTABLE_API_KEY",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("jaap.config._cached_config", None)
