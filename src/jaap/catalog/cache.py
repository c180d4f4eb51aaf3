"""Per-provider catalog cache with lazy expiry."""

import logging
import time
from datetime import timedelta
from typing import Callable

from ..providers.base import CatalogProvider
from ..store import CORE_CATALOG_KEY, SPREADSHEET_CATALOG_KEY, LocalStore
from .models import MantraEntry

logger = logging.getLogger(__name__)

DEFAULT_EXPIRY = timedelta(hours=24)

# Provider name -> store key
CACHE_KEYS: dict[str, str] = {
    "remote": CORE_CATALOG_KEY,
    "spreadsheet": SPREADSHEET_CATALOG_KEY,
}


class CatalogCache:
    """Stores each provider's last successful result as {data, timestamp}.

    Freshness is checked when an entry is read; a stale or malformed entry
    is removed from the store and reported as absent.
    """

    def __init__(
        self,
        store: LocalStore,
        expiry: timedelta = DEFAULT_EXPIRY,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize cache.

        Args:
            store: Durable store holding the cache entries
            expiry: Age after which an entry is treated as absent
            clock: Returns the current time in epoch seconds
        """
        self.store = store
        self.expiry = expiry
        self.clock = clock

    @staticmethod
    def key_for(provider_key: str) -> str:
        return CACHE_KEYS.get(provider_key, f"{provider_key}-catalog-cache")

    def _now_ms(self) -> int:
        return int(self.clock() * 1000)

    def get(self, provider_key: str) -> list[MantraEntry] | None:
        """Return the cached entries for a provider.

        Args:
            provider_key: Provider name

        Returns:
            Cached entries, or None when absent, expired or malformed
        """
        key = self.key_for(provider_key)
        cached = self.store.get(key)
        if cached is None:
            return None

        try:
            timestamp = int(cached["timestamp"])
            records = cached["data"]
            age_ms = self._now_ms() - timestamp
            if age_ms >= self.expiry.total_seconds() * 1000:
                logger.debug(f"Cache for '{provider_key}' expired ({age_ms} ms old)")
                self.store.remove(key)
                return None
            return [MantraEntry.from_dict(record) for record in records]
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Discarding malformed cache for '{provider_key}': {e}")
            self.store.remove(key)
            return None

    def put(self, provider_key: str, entries: list[MantraEntry]) -> None:
        """Cache entries for a provider, stamped with the current time."""
        self.store.set(
            self.key_for(provider_key),
            {
                "data": [entry.to_dict() for entry in entries],
                "timestamp": self._now_ms(),
            },
        )

    def invalidate(self, provider_key: str) -> None:
        """Drop a provider's cached entries."""
        self.store.remove(self.key_for(provider_key))
        logger.debug(f"Invalidated cache for '{provider_key}'")


class CachedProvider(CatalogProvider):
    """Serves a provider from the cache, loading and caching on a miss."""

    def __init__(self, provider: CatalogProvider, cache: CatalogCache) -> None:
        self.provider = provider
        self.cache = cache
        self.name = provider.name

    async def load(self) -> list[MantraEntry]:
        cached = self.cache.get(self.name)
        if cached is not None:
            logger.debug(f"Cache hit for '{self.name}' ({len(cached)} entries)")
            return cached

        entries, ok = await self.provider.fetch_outcome()
        if ok:
            self.cache.put(self.name, entries)
        return entries

    def invalidate(self) -> None:
        self.cache.invalidate(self.name)
