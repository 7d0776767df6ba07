"""
Clock abstraction for timestamping fetch errors.

Fetch error records carry the time at which the failure was observed. Rather
than calling datetime.now() inside the fetch wrapper, callers (and tests) can
inject a clock, which makes the error records deterministic under test.
"""

from datetime import datetime, timezone
from typing import Optional, Protocol


class Clock(Protocol):
    """
    Abstract time source protocol.

    **Conceptual**: A Clock is any object that can answer "what time is it
    right now?". The fetch wrapper accepts an optional Clock and stamps every
    FetchErrorRecord with clock.now(). In production the default SystemClock
    is used; in tests a FrozenClock pins the timestamp.

    **Example**:
        >>> record = construct_fetch_error("loader", url, [], None, clock=FrozenClock(ts))
        >>> record.time == ts
        True
    """

    def now(self) -> datetime:
        """Return the current time according to this clock (timezone-aware)."""
        ...


class SystemClock:
    """Clock backed by the system wall clock, always in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FrozenClock:
    """
    Clock that always returns a fixed timestamp.

    Use this in tests to assert on the `time` field of error records
    without racing the system clock.
    """

    def __init__(self, fixed_now: datetime):
        self._fixed_now = fixed_now

    def now(self) -> datetime:
        return self._fixed_now


def resolve_clock(clock: Optional[Clock] = None) -> Clock:
    """
    Return the given clock, or a SystemClock when none is supplied.

    Args:
        clock: Optional injected clock.

    Returns:
        A usable Clock instance.
    """
    return clock if clock is not None else SystemClock()
