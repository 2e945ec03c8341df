"""Pytest configuration for recordgen test suite."""

import shutil
import sys
from pathlib import Path

import pytest

# Add repository root to path for recordgen imports
sys.path.insert(0, str(Path(__file__).parent.parent))


def pytest_addoption(parser):
    """Add --target option."""
    parser.addoption(
        "--target",
        action="append",
        default=[],
        help="Run app tests only for specified targets (can be used multiple times)",
    )


@pytest.fixture
def java_tools() -> tuple[str, str]:
    """javac and java executables; skips when no JDK is installed."""
    javac = shutil.which("javac")
    java = shutil.which("java")
    if javac is None or java is None:
        pytest.skip("no JDK on PATH")
    return (javac, java)
