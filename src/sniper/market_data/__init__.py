"""Market data layer -- Birdeye token discovery and enrichment behind a paced client."""

from sniper.market_data.birdeye_client import BirdeyeClient
from sniper.market_data.client import MarketDataClient
from sniper.market_data.rate_limiter import TokenBucketRateLimiter

__all__ = ["BirdeyeClient", "MarketDataClient", "TokenBucketRateLimiter"]
