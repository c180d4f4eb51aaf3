"""Abstract base class for catalog providers.

This module defines the interface that all catalog providers must implement,
ensuring consistent fail-open behavior across data sources.
"""

import logging
from abc import ABC, abstractmethod

from ..catalog.models import MantraEntry

logger = logging.getLogger(__name__)


class CatalogProvider(ABC):
    """Abstract base class for catalog providers.

    Subclasses implement load(), which may raise on network, auth or
    parse errors. Callers use fetch(), which never raises: one provider's
    outage must not block the rest of the catalog.
    """

    name: str = "provider"

    @abstractmethod
    async def load(self) -> list[MantraEntry]:
        """Load entries from the underlying source.

        Returns:
            Normalized catalog entries

        Raises:
            Exception: If the source cannot be read
        """
        pass

    async def fetch_outcome(self) -> tuple[list[MantraEntry], bool]:
        """Load entries and report whether the load succeeded.

        Returns:
            Tuple of (entries, ok); entries is empty when ok is False
        """
        try:
            entries = await self.load()
        except Exception as e:
            logger.warning(f"Provider '{self.name}' failed, using empty result: {e}")
            return [], False
        logger.debug(f"Provider '{self.name}' returned {len(entries)} entries")
        return entries, True

    async def fetch(self) -> list[MantraEntry]:
        """Return entries from this provider, or [] on any failure."""
        entries, _ = await self.fetch_outcome()
        return entries
