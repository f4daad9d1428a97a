"""In-memory token bucket rate limiting keyed by client address.

Every key owns a bucket holding at most ``capacity`` tokens that refills at one
token per ``refill_seconds``. A request consumes one token or is rejected; the
limiter never blocks or queues.

Buckets untouched for ``idle_seconds`` are dropped during a periodic sweep so
the map does not grow with every address ever seen. Keys are raw peer
addresses, so clients behind one NAT or proxy share a bucket.
"""

import time
from dataclasses import dataclass
from threading import Lock
from typing import Callable


@dataclass
class _Bucket:
    tokens: float
    updated_at: float


class TokenBucketRateLimiter:
    def __init__(
        self,
        capacity: int = 5,
        refill_seconds: float = 60.0,
        idle_seconds: float = 600.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        if refill_seconds <= 0:
            raise ValueError("refill_seconds must be positive")

        self.capacity = capacity
        self.refill_seconds = refill_seconds
        # A bucket is only safe to forget once it would have refilled completely.
        self.idle_seconds = max(idle_seconds, capacity * refill_seconds)
        self._clock = clock
        self._buckets: dict[str, _Bucket] = {}
        self._lock = Lock()
        self._last_sweep = clock()

    def allow(self, key: str) -> bool:
        with self._lock:
            now = self._clock()
            self._sweep(now)

            bucket = self._buckets.get(key)
            if bucket is None:
                bucket = _Bucket(tokens=float(self.capacity), updated_at=now)
                self._buckets[key] = bucket
            else:
                elapsed = max(0.0, now - bucket.updated_at)
                bucket.tokens = min(float(self.capacity), bucket.tokens + elapsed / self.refill_seconds)
                bucket.updated_at = now

            if bucket.tokens < 1:
                return False

            bucket.tokens -= 1
            return True

    def tracked_keys(self) -> int:
        with self._lock:
            return len(self._buckets)

    def _sweep(self, now: float) -> None:
        if now - self._last_sweep < self.idle_seconds:
            return

        cutoff = now - self.idle_seconds
        for key in [key for key, bucket in self._buckets.items() if bucket.updated_at <= cutoff]:
            del self._buckets[key]
        self._last_sweep = now
