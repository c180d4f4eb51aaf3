"""Catalog provider abstraction.

This module provides a registry pattern for the catalog's data sources,
allowing the aggregator to be assembled from providers by name.
"""

from typing import ClassVar

from .base import CatalogProvider
from .remote import RemoteAPIProvider
from .sheets import SpreadsheetProvider
from .user import UserSubmissionStore

__all__ = [
    "CatalogProvider",
    "ProviderRegistry",
    "RemoteAPIProvider",
    "SpreadsheetProvider",
    "UserSubmissionStore",
]


class ProviderRegistry:
    """Registry for catalog provider classes.

    This class maintains a registry of available catalog providers,
    allowing registration and retrieval by name.
    """

    _providers: ClassVar[dict[str, type[CatalogProvider]]] = {}

    @classmethod
    def register(cls, name: str, provider_class: type[CatalogProvider]) -> None:
        """Register a catalog provider.

        Args:
            name: Name to register the provider under
            provider_class: Provider class that implements CatalogProvider
        """
        cls._providers[name] = provider_class

    @classmethod
    def get(cls, name: str) -> type[CatalogProvider]:
        """Get a provider class by name.

        Args:
            name: Name of the provider to retrieve

        Returns:
            Provider class

        Raises:
            KeyError: If provider name not found
        """
        if name not in cls._providers:
            available = ", ".join(cls._providers.keys()) if cls._providers else "none"
            raise KeyError(
                f"Provider '{name}' not found. Available providers: {available}"
            )
        return cls._providers[name]

    @classmethod
    def names(cls) -> list[str]:
        """Return registered provider names in registration order."""
        return list(cls._providers)


# Register providers built from config by name
ProviderRegistry.register(RemoteAPIProvider.name, RemoteAPIProvider)
ProviderRegistry.register(SpreadsheetProvider.name, SpreadsheetProvider)
