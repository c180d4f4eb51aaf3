"""jaap - offline-tolerant mantra recitation tracker."""

__version__ = "0.1.0"
__all__ = ["Tracker", "build_tracker"]


def __getattr__(name: str):  # type: ignore[no-untyped-def]
    if name in ("Tracker", "build_tracker"):
        from . import core

        return getattr(core, name)
    raise AttributeError(f"module 'jaap' has no attribute {name!r}")
