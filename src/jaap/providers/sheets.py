"""Google Sheets catalog provider."""

import asyncio
import logging

from ..catalog.models import MantraEntry, SheetRow, normalize_header
from ..sheets.session import SheetsSession
from .base import CatalogProvider

logger = logging.getLogger(__name__)


def parse_sheet(sheet_name: str, rows: list[list[str]]) -> list[MantraEntry]:
    """Turn a tab's rows into catalog entries.

    Row 1 is the header row. Rows without a name are skipped.

    Args:
        sheet_name: Tab title, used for synthesized ids
        rows: Raw cell rows as returned by the sheet

    Returns:
        Entries in row order
    """
    if not rows:
        logger.info(f"No data found in sheet: {sheet_name}")
        return []

    headers = [normalize_header(cell) for cell in rows[0]]
    entries = []
    for index, cells in enumerate(rows[1:], start=1):
        row = SheetRow.from_cells(headers, cells)
        if row is None:
            continue
        entries.append(row.to_entry(sheet_name, index))
    return entries


class SpreadsheetProvider(CatalogProvider):
    """Catalog entries read from one or more tabs of a spreadsheet."""

    name = "spreadsheet"

    def __init__(
        self, session: SheetsSession, sheet_names: list[str] | None = None
    ) -> None:
        """Initialize provider.

        Args:
            session: Signed-in (or sign-in capable) spreadsheet session
            sheet_names: Tabs to read; None or empty reads every tab
        """
        self.session = session
        self.sheet_names = list(sheet_names or [])

    async def _load_sheet(self, sheet_name: str) -> list[MantraEntry]:
        try:
            rows = await self.session.read_range(sheet_name)
            return parse_sheet(sheet_name, rows)
        except Exception as e:
            logger.error(f"Error fetching mantras from sheet {sheet_name}: {e}")
            return []

    async def load(self) -> list[MantraEntry]:
        if not self.session.is_signed_in():
            await self.session.sign_in()

        sheet_names = self.sheet_names or await self.session.list_sheet_names()
        per_sheet = await asyncio.gather(
            *(self._load_sheet(name) for name in sheet_names)
        )
        entries = [entry for sheet in per_sheet for entry in sheet]
        logger.info(f"Fetched {len(entries)} mantras from {len(sheet_names)} sheet(s)")
        return entries
