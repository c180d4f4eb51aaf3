"""Test package structure and imports."""

import sys
from pathlib import Path

# Add src to path for testing
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))


def test_package_imports() -> None:
    """Test that jaap package can be imported."""
    import jaap

    assert jaap.__version__ == "0.1.0"


def test_main_module_imports() -> None:
    """Test that main module can be imported without error."""
    from jaap.__main__ import main

    assert callable(main)


def test_lazy_tracker_export() -> None:
    """Test that Tracker and build_tracker are reachable from the package."""
    import jaap
    from jaap.core import Tracker, build_tracker

    assert jaap.Tracker is Tracker
    assert jaap.build_tracker is build_tracker
