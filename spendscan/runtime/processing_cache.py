"""Upload deduplication cache for receipt processing.

Tracks which uploads (keyed by a file fingerprint) are in flight or recently
finished, and rate-limits how often a new processing run may start. Instances
are explicitly constructed and passed to whatever serves uploads; there is no
module-level state.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from spendscan.runtime.logging import get_logger

logger = get_logger(__name__)

MIN_PROCESS_INTERVAL_SECONDS = 1.0
RESULT_TTL_SECONDS = 10.0
ENTRY_TTL_SECONDS = 30 * 60.0


def file_fingerprint(name: str, size: int, modified: float | int | str | None = None) -> str:
    """Build the dedupe key for an uploaded file from its name, size and mtime."""
    return f"{name}-{size}-{modified if modified is not None else ''}"


@dataclass
class _Entry:
    timestamp: float
    in_progress: bool
    result: Any = None


class ProcessingCache:
    """Thread-safe in-flight/complete tracker with TTL eviction and a rate limit.

    Args:
        min_interval: Minimum seconds between two processing starts
        result_ttl: Seconds a completed result stays retrievable
        entry_ttl: Seconds after which any entry is evicted
        clock: Monotonic time source, injectable for tests
    """

    def __init__(
        self,
        *,
        min_interval: float = MIN_PROCESS_INTERVAL_SECONDS,
        result_ttl: float = RESULT_TTL_SECONDS,
        entry_ttl: float = ENTRY_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.min_interval = min_interval
        self.result_ttl = result_ttl
        self.entry_ttl = entry_ttl
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: dict[str, _Entry] = {}
        self._last_start: float | None = None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _rate_limited(self, now: float) -> bool:
        return self._last_start is not None and now - self._last_start < self.min_interval

    def _can_process_locked(self, fingerprint: str, now: float) -> bool:
        if self._rate_limited(now):
            logger.debug("Rate limit: request too soon")
            return False
        entry = self._entries.get(fingerprint)
        if entry is not None and entry.in_progress:
            logger.debug("File already being processed: %s", fingerprint)
            return False
        return True

    def can_process(self, fingerprint: str) -> bool:
        """Return True if not rate limited and the fingerprint is not in flight."""
        with self._lock:
            return self._can_process_locked(fingerprint, self._clock())

    def mark_in_progress(self, fingerprint: str) -> None:
        with self._lock:
            now = self._clock()
            self._last_start = now
            self._entries[fingerprint] = _Entry(timestamp=now, in_progress=True)

    def begin(self, fingerprint: str) -> bool:
        """Atomically check ``can_process`` and mark in progress.

        Returns False (and changes nothing) when processing may not start.
        """
        with self._lock:
            now = self._clock()
            self._evict_expired_locked(now)
            if not self._can_process_locked(fingerprint, now):
                return False
            self._last_start = now
            self._entries[fingerprint] = _Entry(timestamp=now, in_progress=True)
            return True

    def mark_complete(self, fingerprint: str, result: Any = None) -> None:
        with self._lock:
            self._entries[fingerprint] = _Entry(timestamp=self._clock(), in_progress=False, result=result)

    def release(self, fingerprint: str) -> None:
        """Forget a fingerprint, e.g. after processing failed."""
        with self._lock:
            self._entries.pop(fingerprint, None)

    def get_cached_result(self, fingerprint: str) -> Any | None:
        """Return the stored result if it completed less than ``result_ttl`` ago."""
        with self._lock:
            entry = self._entries.get(fingerprint)
            if entry is None or entry.in_progress or entry.result is None:
                return None
            if self._clock() - entry.timestamp < self.result_ttl:
                return entry.result
            return None

    def _evict_expired_locked(self, now: float) -> int:
        expired = [key for key, entry in self._entries.items() if now - entry.timestamp > self.entry_ttl]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def evict_expired(self) -> int:
        """Drop entries older than ``entry_ttl``. Returns how many were removed."""
        with self._lock:
            removed = self._evict_expired_locked(self._clock())
        if removed:
            logger.debug("Evicted %d expired processing cache entries", removed)
        return removed
