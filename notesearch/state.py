"""Caller-owned mutable state of the search engine.

The only state that outlives a single search is the per-note access
counter used for popularity. It lives on an explicit object the caller
creates and passes around; there is no module-level instance.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from datetime import UTC, datetime


def utc_today() -> datetime:
    """Current UTC time truncated to midnight.

    Day resolution keeps repeated searches on the same day bit-identical;
    freshness and recency change on a scale of days anyway.
    """
    return datetime.now(UTC).replace(hour=0, minute=0, second=0, microsecond=0)


class SearchEngineState:
    """Access counters plus the clock used for freshness.

    ``track_access`` is the only mutator and is serialised by a lock, so one
    instance may be shared between threads. Searches read a copy obtained
    from ``snapshot`` and never write back.

    Args:
        clock: Returns the current time (UTC). Defaults to ``utc_today``;
            inject a fixed clock for reproducible freshness scores.
    """

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self._access_counts: dict[str, int] = {}
        self._lock = threading.Lock()
        self._clock = clock or utc_today

    def track_access(self, note_id: str) -> int:
        """Increment and return the access count of *note_id*."""
        with self._lock:
            count = self._access_counts.get(note_id, 0) + 1
            self._access_counts[note_id] = count
            return count

    def access_count(self, note_id: str) -> int:
        with self._lock:
            return self._access_counts.get(note_id, 0)

    def snapshot(self) -> dict[str, int]:
        """Return a point-in-time copy of all access counts."""
        with self._lock:
            return dict(self._access_counts)

    def now(self) -> datetime:
        return self._clock()
