"""Client-side request pacing.

Notion allows an average of three requests per second per integration.
:class:`AsyncTokenBucket` spaces out the requests of one event loop so a
sync run stays under that limit rather than leaning on 429 responses.
"""

from __future__ import annotations

import asyncio
import time


class AsyncTokenBucket:
    """Token bucket shared by every request a transport makes.

    Tokens accrue at *rate_rps* up to *burst*.  A caller that finds the
    bucket short reserves its tokens ahead of time and sleeps until they
    exist, so concurrent callers queue behind one another instead of all
    waking at once.

    Parameters
    ----------
    rate_rps:
        Sustained refill rate in tokens per second.
    burst:
        Maximum number of tokens the bucket can hold.
    """

    __slots__ = ("_lock", "burst", "last_refill", "rate", "tokens")

    def __init__(self, rate_rps: float, burst: int = 10) -> None:
        if rate_rps <= 0:
            raise ValueError(f"rate_rps must be > 0, got {rate_rps}")
        if burst < 1:
            raise ValueError(f"burst must be >= 1, got {burst}")

        self.rate: float = rate_rps
        self.burst: int = burst
        self.tokens: float = float(burst)
        # May lie in the future while earlier callers hold reservations.
        self.last_refill: float = time.monotonic()
        self._lock = asyncio.Lock()

    def _refill(self, now: float) -> None:
        if now > self.last_refill:
            self.tokens = min(self.burst, self.tokens + (now - self.last_refill) * self.rate)
            self.last_refill = now

    async def acquire(self, tokens: int = 1) -> float:
        """Take *tokens*, sleeping until they are available.

        Returns the seconds waited, ``0.0`` when the bucket had them.
        """
        async with self._lock:
            now = time.monotonic()
            self._refill(now)
            reserved_until = max(0.0, self.last_refill - now)
            if not reserved_until and self.tokens >= tokens:
                self.tokens -= tokens
                return 0.0
            wait = reserved_until + (tokens - self.tokens) / self.rate
            self.tokens = 0.0
            self.last_refill = now + wait

        await asyncio.sleep(wait)
        return wait
