"""Abstract market data client interface.

The scan core depends only on this contract. Read methods never raise for
"not found" or for upstream trouble: they degrade to empty values, and the
token list reports throttling through CandidateBatch.throttled.
"""

from abc import ABC, abstractmethod

from sniper.models import CandidateBatch, Overview, SecurityProfile


class MarketDataClient(ABC):
    """Abstract base class for token market data sources."""

    @abstractmethod
    async def connect(self) -> None:
        """Open the underlying HTTP session."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release the underlying HTTP session."""
        ...

    @abstractmethod
    async def list_candidates(self) -> CandidateBatch:
        """Return the ranked list of recently traded tokens.

        Bounded to the configured number of candidates. On a rate-limit
        response the batch is empty and `throttled` is set; the client does
        not retry.
        """
        ...

    @abstractmethod
    async def get_overview(self, address: str) -> Overview:
        """Return the market snapshot for a token (possibly empty)."""
        ...

    @abstractmethod
    async def get_security(self, address: str) -> SecurityProfile:
        """Return the security snapshot for a token.

        Empty when the data could not be fetched; callers treat that as unsafe.
        """
        ...

    @abstractmethod
    async def check_api_key(self) -> bool:
        """Probe the API with the configured key. Never raises."""
        ...
