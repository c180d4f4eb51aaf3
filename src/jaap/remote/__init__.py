"""Client for the jaap backend service."""

from .client import RemoteClient

__all__ = ["RemoteClient"]
