"""Unified mantra catalog: models, cache and aggregation."""

from .models import MantraEntry, Provenance, default_count

__all__ = ["MantraEntry", "Provenance", "default_count"]
