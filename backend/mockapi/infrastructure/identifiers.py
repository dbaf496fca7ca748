"""Identifiers & Clock — unique, time-ordered ids and wire timestamps.

Invariants:
    - next_id() is strictly increasing within a process, even within one microsecond
    - Ids are 16-digit decimal strings until year 2286: lexical order == numeric order
    - wire_timestamp() renders UTC ISO-8601 with milliseconds and a "Z" suffix

Design Decisions:
    - Microsecond clock + bump-on-collision instead of UUIDs: record ids double as the
      newest-first tie-breaker when two rows share a created_at
    - Generator and clock are injectable so tests can pin them
"""

import time
from datetime import datetime, timezone
from functools import lru_cache
from typing import Callable


class IdGenerator:
    """Monotonic identifier source."""

    def __init__(self, clock_ns: Callable[[], int] = time.time_ns):
        self._clock_ns = clock_ns
        self._last = 0

    def next_id(self) -> str:
        value = max(self._clock_ns() // 1000, self._last + 1)
        self._last = value
        return str(value)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def wire_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC with millisecond precision, e.g. 2024-05-01T12:00:00.000Z."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return (
        moment.astimezone(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


@lru_cache
def get_id_generator() -> IdGenerator:
    return IdGenerator()
