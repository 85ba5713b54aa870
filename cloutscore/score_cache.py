"""Expiring cache of optimistic scores shown before aggregation catches up.

After voting, a client displays the score it expects a profile to have. The
authoritative value only changes on the next aggregation tick, so the
optimistic value is kept for roughly one tick and then dropped.
"""

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from cloutscore.constants import SCORE_CACHE_TTL_SECONDS


@dataclass
class CachedScore:
    score: int
    stored_at: float


class ScoreCache:
    def __init__(
        self,
        ttl_seconds: float = SCORE_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CachedScore] = {}
        self._lock = threading.Lock()

    def _expired(self, entry: CachedScore, now: float) -> bool:
        return now - entry.stored_at > self.ttl_seconds

    def get(self, profile_id: str) -> int | None:
        """Return the cached score, or None if absent or expired.

        Expired entries are removed on read.
        """
        with self._lock:
            entry = self._entries.get(profile_id)
            if entry is None:
                return None
            if self._expired(entry, self._clock()):
                del self._entries[profile_id]
                return None
            return entry.score

    def set(self, profile_id: str, score: int) -> None:
        with self._lock:
            self._entries[profile_id] = CachedScore(score=score, stored_at=self._clock())

    def clear_expired(self) -> int:
        """Drop every expired entry. Returns how many were removed."""
        with self._lock:
            now = self._clock()
            expired = [pid for pid, entry in self._entries.items() if self._expired(entry, now)]
            for profile_id in expired:
                del self._entries[profile_id]
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
