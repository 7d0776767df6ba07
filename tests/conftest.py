"""
Pytest configuration file.

Ensures the repo root is on sys.path so that 'import utilkit...' works without
an editable install, and provides shared fixtures.
"""
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add the repo root to sys.path
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from utilkit.config.settings import reset_settings  # noqa: E402
from utilkit.utils.time import FrozenClock  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_settings():
    """Make every test read settings from its own environment."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def frozen_clock():
    """Clock pinned to 2024-03-01 12:00 UTC."""
    return FrozenClock(datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc))
