"""Tests for TokenBucketRateLimiter using a fake clock."""

import pytest

from sniper.market_data.rate_limiter import TokenBucketRateLimiter


class FakeClock:
    """Monotonic clock advanced only by the fake sleep."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


def _limiter(clock: FakeClock, **kwargs) -> TokenBucketRateLimiter:
    # 1 request per 2 seconds, burst of 2
    params = {"rate": 1, "per": 2.0, "capacity": 2}
    params.update(kwargs)
    return TokenBucketRateLimiter(clock=clock, sleep=clock.sleep, **params)


class TestConstruction:
    @pytest.mark.parametrize("kwargs", [{"rate": 0}, {"per": 0}, {"rate": -1}])
    def test_non_positive_rate_rejected(self, clock: FakeClock, kwargs) -> None:
        with pytest.raises(ValueError):
            _limiter(clock, **kwargs)

    def test_capacity_below_one_rejected(self, clock: FakeClock) -> None:
        with pytest.raises(ValueError):
            _limiter(clock, capacity=0.5)

    def test_capacity_defaults_to_rate(self, clock: FakeClock) -> None:
        limiter = TokenBucketRateLimiter(rate=3, per=1.0, clock=clock, sleep=clock.sleep)
        assert limiter.tokens == 3


class TestAcquire:
    @pytest.mark.asyncio
    async def test_burst_is_served_without_waiting(self, clock: FakeClock) -> None:
        limiter = _limiter(clock)
        await limiter.acquire()
        await limiter.acquire()
        assert clock.sleeps == []
        assert limiter.tokens == 0

    @pytest.mark.asyncio
    async def test_waits_for_refill_when_empty(self, clock: FakeClock) -> None:
        limiter = _limiter(clock)
        for _ in range(3):
            await limiter.acquire()
        assert clock.sleeps == [2.0]
        assert clock.now == 2.0

    @pytest.mark.asyncio
    async def test_sustained_rate(self, clock: FakeClock) -> None:
        limiter = _limiter(clock)
        for _ in range(6):
            await limiter.acquire()
        # 2 from the burst, then one every 2 seconds
        assert clock.now == 8.0

    @pytest.mark.asyncio
    async def test_refill_is_capped_at_capacity(self, clock: FakeClock) -> None:
        limiter = _limiter(clock)
        await limiter.acquire()
        clock.now += 100.0
        assert limiter.tokens == 2


class TestPause:
    @pytest.mark.asyncio
    async def test_pause_delays_next_acquire(self, clock: FakeClock) -> None:
        limiter = _limiter(clock)
        limiter.pause(5.0)
        await limiter.acquire()
        assert clock.sleeps == [5.0]
        assert clock.now == 5.0

    @pytest.mark.asyncio
    async def test_shorter_pause_does_not_shorten_longer_one(self, clock: FakeClock) -> None:
        limiter = _limiter(clock)
        limiter.pause(5.0)
        limiter.pause(1.0)
        await limiter.acquire()
        assert clock.now == 5.0
