"""Async token bucket that paces every request to the market data API.

`rate` tokens are added every `per` seconds up to `capacity`. Each request
takes one token; when none is left the caller sleeps until one refills.
`pause()` blocks all callers for a while after the upstream signals
throttling.

Clock and sleep are injectable so the rate contract can be tested without
wall-clock delays.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable

from sniper.logging import get_logger

logger = get_logger(__name__)


class TokenBucketRateLimiter:
    """Token bucket with burst capacity and an explicit pause.

    Args:
        rate: Tokens added per period.
        per: Period length in seconds.
        capacity: Maximum tokens held (burst size). Defaults to `rate`.
        clock: Monotonic time source.
        sleep: Coroutine used to wait.
    """

    def __init__(
        self,
        rate: float,
        per: float = 1.0,
        capacity: float | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if rate <= 0 or per <= 0:
            raise ValueError("rate and per must be positive")
        self._refill_per_second = rate / per
        self._capacity = float(capacity if capacity is not None else rate)
        if self._capacity < 1:
            raise ValueError("capacity must allow at least one request")
        self._clock = clock
        self._sleep = sleep
        self._tokens = self._capacity
        self._last_refill = clock()
        self._paused_until = 0.0
        self._lock = asyncio.Lock()

    @property
    def tokens(self) -> float:
        """Tokens available right now (after refill)."""
        self._refill()
        return self._tokens

    def _refill(self) -> None:
        now = self._clock()
        elapsed = now - self._last_refill
        if elapsed > 0:
            self._tokens = min(
                self._capacity, self._tokens + elapsed * self._refill_per_second
            )
            self._last_refill = now

    async def acquire(self) -> None:
        """Wait until a request may be issued, then take a token."""
        async with self._lock:
            while True:
                now = self._clock()
                if now < self._paused_until:
                    await self._sleep(self._paused_until - now)
                    continue

                self._refill()
                if self._tokens >= 1:
                    self._tokens -= 1
                    return

                wait = (1 - self._tokens) / self._refill_per_second
                logger.debug("rate_limiter_waiting", wait_seconds=round(wait, 3))
                await self._sleep(wait)

    def pause(self, seconds: float) -> None:
        """Block all acquirers for `seconds` from now."""
        until = self._clock() + seconds
        if until > self._paused_until:
            self._paused_until = until
            logger.info("rate_limiter_paused", seconds=seconds)
