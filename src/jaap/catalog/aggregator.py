"""Catalog aggregator: fans out to every provider and merges the results."""

import asyncio
import logging
from typing import Any

from ..providers.base import CatalogProvider
from ..providers.user import UserSubmissionStore
from .cache import CachedProvider
from .models import MantraEntry
from .moderation import ModerationClient

logger = logging.getLogger(__name__)


class CatalogAggregator:
    """Builds the unified catalog from independent providers.

    Example:
        aggregator = CatalogAggregator(
            providers=[CachedProvider(RemoteAPIProvider(client), cache)],
            user_store=UserSubmissionStore(store),
        )
        entries = await aggregator.get_all_entries()
        # [<remote entries>..., <user entries>..., MantraEntry(id="custom")]

    Entries from different providers are never merged, even when they name
    the same mantra; each keeps its own provenance.
    """

    def __init__(
        self,
        providers: list[CatalogProvider],
        user_store: UserSubmissionStore,
        moderation: ModerationClient | None = None,
    ) -> None:
        """Initialize aggregator.

        Args:
            providers: Core providers in precedence order (usually cached)
            user_store: Local user submissions, always last before the sentinel
            moderation: Optional moderation client; None disables submissions
        """
        self.providers = list(providers)
        self.user_store = user_store
        self.moderation = moderation

    async def get_all_entries(self) -> list[MantraEntry]:
        """Return every provider's entries followed by the custom sentinel."""
        sources = [*self.providers, self.user_store]
        results = await asyncio.gather(
            *(provider.fetch() for provider in sources), return_exceptions=True
        )

        entries: list[MantraEntry] = []
        for provider, result in zip(sources, results):
            if isinstance(result, BaseException):
                logger.error(f"Provider '{provider.name}' raised: {result!r}")
                continue
            entries.extend(result)

        entries.append(MantraEntry.custom())
        logger.debug(f"Catalog assembled with {len(entries)} entries")
        return entries

    async def refresh(self) -> list[MantraEntry]:
        """Invalidate every cached provider and rebuild the catalog."""
        for provider in self.providers:
            if isinstance(provider, CachedProvider):
                provider.invalidate()
        return await self.get_all_entries()

    def add_user_entry(self, partial: dict[str, Any]) -> MantraEntry:
        """Add a user mantra; id, provenance and timestamp are assigned."""
        return self.user_store.add(partial)

    def delete_user_entry(self, entry_id: str) -> bool:
        """Delete a user mantra. Returns True if it existed."""
        return self.user_store.delete(entry_id)

    async def submit_for_review(self, entry: MantraEntry) -> bool:
        """Best-effort submission to moderation; never raises."""
        if self.moderation is None:
            logger.debug("Moderation not configured, skipping submission")
            return False
        try:
            return await self.moderation.submit(entry)
        except Exception as e:
            logger.error(f"Error submitting mantra for review: {e}")
            return False
