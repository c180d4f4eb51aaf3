"""Unit tests for catalog models and spreadsheet row parsing."""

import sys
from datetime import datetime
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from jaap.catalog.models import (
    CUSTOM_ENTRY_ID,
    MantraEntry,
    Provenance,
    SheetRow,
    default_count,
    normalize_header,
    parse_count,
)
from jaap.providers.sheets import parse_sheet


class TestDefaultCount:
    """Test category target counts."""

    @pytest.mark.parametrize(
        ("category", "expected"),
        [
            ("Daily Banis", 1),
            ("Core Mantras", 125000),
            ("Paurees", 11),
            ("Simran", 125000),
            ("Devotion", 108),
            (None, 108),
            ("", 108),
        ],
    )
    def test_default_count(self, category: str | None, expected: int) -> None:
        """Test the count for known, unknown and missing categories."""
        assert default_count(category) == expected


class TestMantraEntry:
    """Test MantraEntry serialization."""

    def test_to_dict_omits_unset_fields(self) -> None:
        """Test that None fields are left out of the stored form."""
        entry = MantraEntry(id="m1", name="Om", category="Devotion")

        assert entry.to_dict() == {
            "id": "m1",
            "name": "Om",
            "source": "core",
            "category": "Devotion",
        }

    def test_from_dict_restores_user_entry(self) -> None:
        """Test that provenance and submission time are restored."""
        submitted = datetime(2024, 3, 1, 6, 30)
        entry = MantraEntry(
            id="user-1",
            name="My Mantra",
            source=Provenance.USER,
            submitted_at=submitted,
            traditional_count=108,
        )

        restored = MantraEntry.from_dict(entry.to_dict())

        assert restored == entry
        assert restored.source is Provenance.USER
        assert restored.submitted_at == submitted

    def test_from_dict_ignores_unknown_keys(self) -> None:
        """Test that extra keys in stored records are ignored."""
        entry = MantraEntry.from_dict({"id": "m1", "name": "Om", "legacy": True})

        assert entry.id == "m1"
        assert entry.source is Provenance.CORE

    def test_from_dict_rejects_unknown_source(self) -> None:
        """Test that an invalid provenance raises ValueError."""
        with pytest.raises(ValueError):
            MantraEntry.from_dict({"id": "m1", "name": "Om", "source": "alien"})

    def test_custom_sentinel(self) -> None:
        """Test the free-text sentinel entry."""
        custom = MantraEntry.custom()

        assert custom.id == CUSTOM_ENTRY_ID == "custom"
        assert custom.name == "Custom"
        assert custom.source is Provenance.CORE


class TestParsing:
    """Test header normalization and count parsing."""

    def test_normalize_header(self) -> None:
        """Test that whitespace is removed and case folded."""
        assert normalize_header("Target Recitations") == "targetrecitations"
        assert normalize_header("  Guru\tNumber ") == "gurunumber"

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("125,000", 125000),
            ("11 times", 11),
            ("  108", 108),
            ("1_000", 1000),
            ("many", None),
            ("", None),
            (None, None),
        ],
    )
    def test_parse_count(self, value: str | None, expected: int | None) -> None:
        """Test lenient count parsing."""
        assert parse_count(value) == expected


class TestSheetRow:
    """Test SheetRow validation and conversion."""

    HEADERS = [
        normalize_header(h)
        for h in [
            "ID",
            "Mantra",
            "Gurmukhi",
            "Category",
            "Target Recitations",
            "Guru Number",
            "Significance",
        ]
    ]

    def test_empty_name_rejected(self) -> None:
        """Test that a SheetRow cannot be built without a name."""
        with pytest.raises(ValueError, match="name cannot be empty"):
            SheetRow(name="  ")

    def test_row_without_name_is_skipped(self) -> None:
        """Test that from_cells returns None for a nameless row."""
        assert SheetRow.from_cells(self.HEADERS, ["x1", "", "ਵਾਹਿਗੁਰੂ"]) is None

    def test_short_row_fills_missing_cells(self) -> None:
        """Test that trailing missing cells become None."""
        row = SheetRow.from_cells(self.HEADERS, ["", "Mool Mantar"])

        assert row is not None
        assert row.name == "Mool Mantar"
        assert row.id is None
        assert row.category is None
        assert row.target_recitations is None

    def test_to_entry_uses_target_recitations(self) -> None:
        """Test that the target column wins over the category default."""
        row = SheetRow.from_cells(
            self.HEADERS,
            ["s1", "Japji", "ਜਪੁ", "Daily Banis", "5", "1", "Morning prayer"],
        )
        assert row is not None

        entry = row.to_entry("Banis", 1)

        assert entry.id == "s1"
        assert entry.traditional_count == 5
        assert entry.target_recitations == 5
        assert entry.guru_number == 1
        assert entry.translation == "Morning prayer"
        assert entry.source is Provenance.CORE

    def test_to_entry_defaults(self) -> None:
        """Test synthesized id, default category and category count."""
        row = SheetRow(name="Waheguru")

        entry = row.to_entry("Simran Tab", 3)

        assert entry.id == "gsheet-Simran Tab-3"
        assert entry.category == "Other"
        assert entry.traditional_count == 108

    def test_parse_sheet(self) -> None:
        """Test parsing a whole tab with a header row and a blank row."""
        rows = [
            ["Mantra", "Category", "Traditional Count"],
            ["Waheguru", "Simran"],
            [],
            ["Chaupai", "Paurees", "25"],
        ]

        entries = parse_sheet("Main", rows)

        assert [e.name for e in entries] == ["Waheguru", "Chaupai"]
        assert entries[0].id == "gsheet-Main-1"
        assert entries[0].traditional_count == 125000
        assert entries[1].id == "gsheet-Main-3"
        assert entries[1].traditional_count == 25

    def test_parse_empty_sheet(self) -> None:
        """Test that a tab with no rows yields no entries."""
        assert parse_sheet("Empty", []) == []
