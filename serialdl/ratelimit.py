"""
Token bucket gating how often a new fetch may start.

Thin policy layer over pyrate-limiter: the limiter runs in blocking mode so
``acquire_one`` sleeps the calling worker thread until a slot frees up.
"""

import logging
from typing import List

from pyrate_limiter import Duration, InMemoryBucket, Limiter, Rate

logger = logging.getLogger(__name__)

# Allow a waiter to block for a very long time (about a year) before giving up.
_BLOCKING_MAX_DELAY_MS = int(Duration.DAY) * 365

_BUCKET_NAME = "fetch"

# Windows per unit of capacity. Beyond the longest window a bucket drained
# without pause may let up to capacity - 1 extra tokens through.
_WINDOWS_PER_TOKEN = 16


def bucket_rates(interval_ms: int, capacity: int) -> List[Rate]:
    """
    Sliding windows that together behave like a token bucket.

    A bucket holding ``capacity`` tokens and refilled once per interval lets
    through at most ``capacity + n - 1`` acquisitions in any window of ``n``
    intervals. One window per ``n`` enforces that bound.
    """
    if capacity == 1:
        return [Rate(1, interval_ms)]
    return [
        Rate(capacity + n - 1, interval_ms * n)
        for n in range(1, capacity * _WINDOWS_PER_TOKEN + 1)
    ]


class RateLimiter:
    """
    Hands out one token per ``interval_ms``, bursting up to ``capacity``.

    The bucket starts with ``initial`` tokens. Waiters are not queued fairly:
    whichever blocked thread retries first after a refill gets the token.
    Only the start of a fetch is gated; a fetch holding a token runs on
    regardless of the limiter.
    """

    def __init__(self, interval_ms: int, capacity: int = 1, initial: int = 1):
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        if not 0 <= initial <= capacity:
            raise ValueError(f"initial must be within [0, {capacity}], got {initial}")

        self.interval_ms = interval_ms
        self.capacity = capacity
        self.initial = initial

        self._limiter = Limiter(
            InMemoryBucket(bucket_rates(interval_ms, capacity)),
            raise_when_fail=False,
            max_delay=_BLOCKING_MAX_DELAY_MS,
            retry_until_max_delay=True,
        )

        # Spending the missing tokens now leaves the bucket refilling from here,
        # so the first of them comes back one interval later
        missing = capacity - initial
        if missing:
            self._limiter.try_acquire(_BUCKET_NAME, weight=missing)

        logger.debug(
            "Rate limiter ready: one token every %d ms, capacity %d, initial %d",
            interval_ms, capacity, initial,
        )

    def acquire_one(self) -> None:
        """Block until a token is available, then consume it"""
        if not self._limiter.try_acquire(_BUCKET_NAME, weight=1):
            # Only happens once the year-long max delay is exhausted
            raise RuntimeError("rate limiter gave up waiting for a token")
