"""Pagination cursors, time windows and duration parsing."""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime, timedelta

_PAIR = re.compile(r"([0-9]+)([a-zA-Z]+)")

_UNITS = {
    "s": "seconds",
    "second": "seconds",
    "seconds": "seconds",
    "m": "minutes",
    "minute": "minutes",
    "minutes": "minutes",
    "h": "hours",
    "hour": "hours",
    "hours": "hours",
    "d": "days",
    "day": "days",
    "days": "days",
    "w": "weeks",
    "week": "weeks",
    "weeks": "weeks",
}

RFC3339_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def parse_duration(text: str) -> timedelta:
    """
    Parse a human duration such as ``"1week"`` or ``"2d12h"``.

    Every ``<number><unit>`` pair found in the text is summed. Unknown units
    are ignored, so text without a recognised pair yields a zero duration.

    Args:
        text: Duration text

    Returns:
        The summed duration
    """
    total = timedelta(0)
    for number, unit in _PAIR.findall(text):
        name = _UNITS.get(unit.lower())
        if name is not None:
            total += timedelta(**{name: int(number)})
    return total


def next_cursor(current: str | None, returned: str | None) -> str | None:
    """
    Decide the cursor for the next page request.

    Args:
        current: Cursor used for the request that was just made
        returned: Cursor found in that response

    Returns:
        The cursor to request next, or None when pagination must stop
        because the cursor is absent or did not change
    """
    if not returned:
        return None
    if current and returned == current:
        return None
    return returned


@dataclass(frozen=True)
class TimeWindow:
    """Half-open ``[start, end)`` interval used to scope clip listings."""

    start: datetime
    end: datetime

    @property
    def started_at(self) -> str:
        """Window start in RFC 3339 form."""
        return self.start.strftime(RFC3339_FORMAT)

    @property
    def ended_at(self) -> str:
        """Window end in RFC 3339 form."""
        return self.end.strftime(RFC3339_FORMAT)

    def __str__(self) -> str:
        """Human-readable string representation."""
        return f"[{self.started_at}, {self.ended_at})"


def iter_time_windows(now: datetime, range_: timedelta, interval: timedelta) -> Iterator[TimeWindow]:
    """
    Walk windows of ``interval`` from ``now - range_`` forward to ``now``.

    The first window is always produced. Windows keep coming until the next
    start lies after ``now``; a zero or negative interval therefore never
    terminates and callers are expected to pass a positive one.

    Args:
        now: Upper bound of the walk
        range_: How far back the first window starts
        interval: Width of each window

    Yields:
        Consecutive time windows
    """
    start = now - range_
    while True:
        yield TimeWindow(start=start, end=start + interval)
        start += interval
        if start > now:
            return
