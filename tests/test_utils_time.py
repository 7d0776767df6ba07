"""
Tests for utilkit/utils/time.py

These tests verify the clock abstraction used to timestamp fetch errors.
"""

from datetime import datetime, timezone
import time

from utilkit.utils.time import (
    FrozenClock,
    SystemClock,
    resolve_clock,
)


def test_system_clock_returns_current_utc_time():
    """Test that SystemClock returns a time close to actual current time."""
    clock = SystemClock()

    before = datetime.now(timezone.utc)
    clock_time = clock.now()
    after = datetime.now(timezone.utc)

    assert before <= clock_time <= after
    assert clock_time.tzinfo == timezone.utc


def test_system_clock_advances():
    """Test that SystemClock returns different times on successive calls."""
    clock = SystemClock()

    time1 = clock.now()
    time.sleep(0.01)
    time2 = clock.now()

    assert time2 > time1


def test_frozen_clock_is_pinned(frozen_clock):
    """Test that the shared fixture stays on its timestamp across calls."""
    stamps = {frozen_clock.now() for _ in range(3)}

    assert stamps == {datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)}


def test_frozen_clock_keeps_given_timezone():
    """Test that FrozenClock hands back exactly the datetime it was built with."""
    stamp = datetime(2023, 12, 31, 23, 59, 59, tzinfo=timezone.utc)

    assert FrozenClock(stamp).now() is stamp


def test_resolve_clock_defaults_to_system_clock():
    """Test that resolve_clock() falls back to a SystemClock."""
    assert isinstance(resolve_clock(None), SystemClock)


def test_resolve_clock_keeps_injected_clock(frozen_clock):
    """Test that an injected clock is returned unchanged."""
    assert resolve_clock(frozen_clock) is frozen_clock
