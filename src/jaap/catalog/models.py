"""Catalog data models."""

import re
from dataclasses import asdict, dataclass, fields
from datetime import datetime
from enum import Enum
from typing import Any

CUSTOM_ENTRY_ID = "custom"

DEFAULT_TARGET_COUNT = 108

# Categories whose practice has a traditional target other than a mala (108)
CATEGORY_TARGET_COUNTS: dict[str, int] = {
    "Daily Banis": 1,
    "Core Mantras": 125000,
    "Paurees": 11,
    "Simran": 125000,
}

GURMUKHI_LANGUAGES = frozenset({"gurmukhi", "punjabi", "pa"})


class Provenance(str, Enum):
    """Which provider produced a catalog entry."""

    CORE = "core"
    USER = "user"
    PENDING = "pending"


def default_count(category: str | None) -> int:
    """Return the traditional target count for a category.

    Args:
        category: Category label, or None when unknown

    Returns:
        Target count; 108 for unknown or unlisted categories
    """
    if not category:
        return DEFAULT_TARGET_COUNT
    return CATEGORY_TARGET_COUNTS.get(category, DEFAULT_TARGET_COUNT)


@dataclass
class MantraEntry:
    """One mantra in the unified catalog.

    Attributes:
        id: Identifier, unique within its provider's namespace
        name: Display name
        source: Provenance of the entry
        sanskrit: Devanagari/transliterated script variant
        gurmukhi: Gurmukhi script variant
        category: Category label
        traditional_count: Canonical target count
        audio_url: Audio reference
        submitted_by: Submitter identity for user entries
        submitted_at: Submission time for user entries
    """

    id: str
    name: str
    source: Provenance = Provenance.CORE
    sanskrit: str | None = None
    gurmukhi: str | None = None
    translation: str | None = None
    category: str | None = None
    traditional_count: int | None = None
    audio_url: str | None = None
    submitted_by: str | None = None
    submitted_at: datetime | None = None
    optimal_time: str | None = None
    optionality: str | None = None
    target_recitations: int | None = None
    guru_authorship: str | None = None
    guru_number: int | None = None
    significance: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict, omitting unset fields."""
        data = asdict(self)
        data["source"] = self.source.value
        if self.submitted_at is not None:
            data["submitted_at"] = self.submitted_at.isoformat()
        return {k: v for k, v in data.items() if v is not None}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MantraEntry":
        """Rebuild an entry from to_dict() output, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        values["source"] = Provenance(values.get("source", Provenance.CORE.value))
        if values.get("submitted_at"):
            values["submitted_at"] = datetime.fromisoformat(values["submitted_at"])
        return cls(**values)

    @classmethod
    def custom(cls) -> "MantraEntry":
        """The free-text sentinel always appended to the catalog."""
        return cls(id=CUSTOM_ENTRY_ID, name="Custom", source=Provenance.CORE)


def normalize_header(header: str) -> str:
    """Normalize a spreadsheet header cell into a field key.

    "Target Recitations" -> "targetrecitations"
    """
    return re.sub(r"\s+", "", str(header)).lower()


def parse_count(value: str | None) -> int | None:
    """Parse a count cell leniently.

    Thousands separators are ignored and the leading integer is taken,
    so "125,000" gives 125000 and "11 times" gives 11.

    Returns:
        Parsed integer, or None when the cell holds no leading digits
    """
    if value is None:
        return None
    match = re.match(r"\s*([+-]?\d+)", str(value).replace(",", "").replace("_", ""))
    if not match:
        return None
    return int(match.group(1))


@dataclass
class SheetRow:
    """A spreadsheet row validated and resolved into typed fields.

    Built once from the header-keyed cells of a row; every optional text
    field is None when its cell is blank or its column is absent.
    """

    name: str
    id: str | None = None
    gurmukhi: str | None = None
    category: str | None = None
    optimal_time: str | None = None
    optionality: str | None = None
    target_recitations: int | None = None
    guru_authorship: str | None = None
    guru_number: int | None = None
    significance: str | None = None
    traditional_count: int | None = None
    translation: str | None = None

    def __post_init__(self) -> None:
        """Validate row data."""
        if not self.name or not self.name.strip():
            raise ValueError("name cannot be empty")

    @classmethod
    def from_cells(cls, headers: list[str], cells: list[Any]) -> "SheetRow | None":
        """Resolve a raw row against normalized headers.

        Args:
            headers: Normalized header keys from row 1
            cells: Raw cell values; may be shorter than headers

        Returns:
            SheetRow, or None when the row has no name
        """
        raw: dict[str, str] = {}
        for index, header in enumerate(headers):
            cell = cells[index] if index < len(cells) else ""
            raw[header] = str(cell).strip() if cell is not None else ""

        def text(key: str) -> str | None:
            return raw.get(key) or None

        name = text("mantra") or text("name")
        if not name:
            return None

        return cls(
            name=name,
            id=text("id"),
            gurmukhi=text("gurmukhi"),
            category=text("category"),
            optimal_time=text("optimaltime"),
            optionality=text("optionality"),
            target_recitations=parse_count(text("targetrecitations")),
            guru_authorship=text("guruauthorship"),
            guru_number=parse_count(text("gurunumber")),
            significance=text("significance"),
            traditional_count=parse_count(text("traditionalcount")),
            translation=text("translation"),
        )

    def to_entry(self, sheet_name: str, row_index: int) -> MantraEntry:
        """Convert to a catalog entry.

        Args:
            sheet_name: Tab the row came from, used for synthesized ids
            row_index: Row position below the header (1-based)
        """
        category = self.category or "Other"
        count = self.target_recitations
        if count is None:
            count = self.traditional_count
        if count is None:
            count = default_count(category)

        return MantraEntry(
            id=self.id or f"gsheet-{sheet_name}-{row_index}",
            name=self.name,
            source=Provenance.CORE,
            gurmukhi=self.gurmukhi,
            translation=self.significance or self.translation,
            category=category,
            traditional_count=count,
            optimal_time=self.optimal_time,
            optionality=self.optionality,
            target_recitations=self.target_recitations,
            guru_authorship=self.guru_authorship,
            guru_number=self.guru_number,
            significance=self.significance,
        )
