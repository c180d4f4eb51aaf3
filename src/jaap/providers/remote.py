"""Backend API catalog provider."""

from typing import Any

from ..catalog.models import GURMUKHI_LANGUAGES, MantraEntry, Provenance, default_count
from ..remote.client import RemoteClient
from .base import CatalogProvider


def entry_from_record(record: dict[str, Any]) -> MantraEntry:
    """Map a backend mantra record {id, name, category, text, language}.

    The record's text goes to the script field matching its language:
    Gurmukhi/Punjabi text fills gurmukhi, anything else fills sanskrit.

    Raises:
        ValueError: If the record has no id or name
    """
    mantra_id = record.get("id")
    name = record.get("name")
    if not mantra_id or not name:
        raise ValueError(f"Mantra record missing id or name: {record!r}")

    category = record.get("category") or None
    text = record.get("text") or None
    language = str(record.get("language") or "").strip().lower()
    is_gurmukhi = language in GURMUKHI_LANGUAGES

    return MantraEntry(
        id=str(mantra_id),
        name=str(name),
        source=Provenance.CORE,
        gurmukhi=text if is_gurmukhi else None,
        sanskrit=None if is_gurmukhi else text,
        category=category,
        traditional_count=default_count(category),
    )


class RemoteAPIProvider(CatalogProvider):
    """Catalog entries from the backend's mantra collection."""

    name = "remote"

    def __init__(self, client: RemoteClient) -> None:
        self.client = client

    async def load(self) -> list[MantraEntry]:
        records = await self.client.get_mantras()
        return [entry_from_record(record) for record in records]
