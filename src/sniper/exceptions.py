"""Custom exceptions for the token sniper.

The market data client raises these internally; its public read methods
translate them into empty results so nothing escapes the scan core.
"""


class SniperError(Exception):
    """Base exception for all sniper errors."""


class MarketDataError(SniperError):
    """Raised when a market data request fails (transport, status, or format)."""


class RateLimitedError(MarketDataError):
    """Raised when the market data API answers with a rate-limit status (HTTP 429)."""

    def __init__(self, endpoint: str) -> None:
        super().__init__(f"rate limited on {endpoint}")
        self.endpoint = endpoint


class AlertDeliveryError(SniperError):
    """Raised when an alert cannot be delivered to the messaging service."""
