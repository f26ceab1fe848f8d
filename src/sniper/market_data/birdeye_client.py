"""Birdeye public API client implementation via aiohttp.

Endpoints used:
- /defi/tokenlist       ranked token list (discovery)
- /defi/token_overview  price, market cap, volume, liquidity, timing
- /defi/token_security  authorities, taxes, holder concentration

Every request waits on the shared token bucket first. Errors are raised
internally as MarketDataError / RateLimitedError and translated by the
public methods into empty results, so a scan never sees an exception from
here.
"""

from typing import Any

import aiohttp

from sniper.config import BirdeyeSettings
from sniper.exceptions import MarketDataError, RateLimitedError
from sniper.logging import get_logger
from sniper.market_data.client import MarketDataClient
from sniper.market_data.rate_limiter import TokenBucketRateLimiter
from sniper.models import Candidate, CandidateBatch, Overview, SecurityProfile

logger = get_logger(__name__)

TOKEN_LIST_PATH = "/defi/tokenlist"
TOKEN_OVERVIEW_PATH = "/defi/token_overview"
TOKEN_SECURITY_PATH = "/defi/token_security"


def _extract_token_rows(body: Any) -> list[dict]:
    """Pull token rows out of a token list response.

    The list sits either directly under "data" or under "data.tokens".
    Anything else (missing body, missing data) is an empty list.
    """
    if not isinstance(body, dict):
        return []
    data = body.get("data")
    if isinstance(data, dict):
        data = data.get("tokens")
    if not isinstance(data, list):
        return []
    return [row for row in data if isinstance(row, dict)]


def _extract_data(body: Any) -> dict:
    if not isinstance(body, dict):
        return {}
    data = body.get("data")
    return data if isinstance(data, dict) else {}


class BirdeyeClient(MarketDataClient):
    """Concrete market data client for the Birdeye public API."""

    def __init__(
        self,
        settings: BirdeyeSettings,
        rate_limiter: TokenBucketRateLimiter | None = None,
    ) -> None:
        self._settings = settings
        self._rate_limiter = rate_limiter or TokenBucketRateLimiter(
            rate=settings.requests_per_period,
            per=settings.period_seconds,
            capacity=settings.burst,
        )
        self._session: aiohttp.ClientSession | None = None

    @property
    def rate_limiter(self) -> TokenBucketRateLimiter:
        return self._rate_limiter

    async def connect(self) -> None:
        """Create the shared HTTP session."""
        if self._session is not None and not self._session.closed:
            return
        self._session = aiohttp.ClientSession(
            base_url=self._settings.base_url,
            headers={
                "accept": "application/json",
                "X-API-KEY": self._settings.api_key.get_secret_value(),
                "x-chain": self._settings.chain,
            },
        )
        logger.info("birdeye_session_opened", base_url=self._settings.base_url)

    async def close(self) -> None:
        """Close the HTTP session. Must be called to avoid leaking connections."""
        if self._session is not None:
            await self._session.close()
            self._session = None
            logger.info("birdeye_session_closed")

    async def _get_json(
        self, path: str, params: dict[str, Any], timeout: float
    ) -> Any:
        """Issue one paced GET and return the decoded JSON body.

        Raises:
            RateLimitedError: on HTTP 429.
            MarketDataError: on any other non-200 status, transport error,
                or undecodable body.
        """
        if self._session is None:
            await self.connect()
        assert self._session is not None

        await self._rate_limiter.acquire()
        try:
            async with self._session.get(
                path,
                params=params,
                timeout=aiohttp.ClientTimeout(total=timeout),
            ) as resp:
                if resp.status == 429:
                    raise RateLimitedError(path)
                if resp.status != 200:
                    body = await resp.text()
                    raise MarketDataError(
                        f"{path} returned HTTP {resp.status}: {body[:200]}"
                    )
                try:
                    return await resp.json(content_type=None)
                except ValueError as e:
                    raise MarketDataError(f"{path} returned invalid JSON: {e}") from e
        except (aiohttp.ClientError, TimeoutError) as e:
            raise MarketDataError(f"{path} request failed: {e!r}") from e

    async def list_candidates(self) -> CandidateBatch:
        """Fetch the token list sorted by 24h volume, truncated to max_candidates."""
        params = {
            "sort_by": self._settings.sort_by,
            "sort_type": "desc",
            "offset": 0,
            "limit": self._settings.list_limit,
        }
        try:
            body = await self._get_json(
                TOKEN_LIST_PATH, params, self._settings.list_timeout
            )
        except RateLimitedError:
            logger.warning("token_list_rate_limited")
            return CandidateBatch(throttled=True)
        except MarketDataError as e:
            logger.error("token_list_fetch_failed", error=str(e))
            return CandidateBatch()

        rows = _extract_token_rows(body)
        if not rows:
            logger.info("token_list_empty")
            return CandidateBatch()

        candidates = [
            Candidate.from_payload(row)
            for row in rows[: self._settings.max_candidates]
        ]
        candidates = [c for c in candidates if c.address]
        logger.info(
            "token_list_fetched",
            total=len(rows),
            candidates=len(candidates),
        )
        return CandidateBatch(candidates=candidates)

    async def get_overview(self, address: str) -> Overview:
        """Fetch the market overview for a token; empty on any failure."""
        try:
            body = await self._get_json(
                TOKEN_OVERVIEW_PATH,
                {"address": address},
                self._settings.detail_timeout,
            )
        except RateLimitedError:
            logger.warning(
                "token_overview_rate_limited",
                address=address,
                pause_seconds=self._settings.overview_throttle_pause,
            )
            self._rate_limiter.pause(self._settings.overview_throttle_pause)
            return Overview.empty()
        except MarketDataError as e:
            logger.warning("token_overview_fetch_failed", address=address, error=str(e))
            return Overview.empty()

        overview = Overview.from_payload(_extract_data(body))
        logger.debug(
            "token_overview_fetched",
            address=address,
            liquidity=overview.liquidity,
            market_cap=overview.market_cap,
        )
        return overview

    async def get_security(self, address: str) -> SecurityProfile:
        """Fetch the security profile for a token; empty (unsafe) on any failure."""
        try:
            body = await self._get_json(
                TOKEN_SECURITY_PATH,
                {"address": address},
                self._settings.detail_timeout,
            )
        except MarketDataError as e:
            logger.warning(
                "token_security_fetch_failed_treating_as_unsafe",
                address=address,
                error=str(e),
            )
            return SecurityProfile.empty()

        security = SecurityProfile.from_payload(_extract_data(body))
        logger.debug(
            "token_security_fetched",
            address=address,
            mint_authority=security.mint_authority_active,
            freeze_authority=security.freeze_authority_active,
        )
        return security

    async def check_api_key(self) -> bool:
        """Probe the token list with limit=1 to confirm the key works."""
        if not self._settings.api_key.get_secret_value():
            logger.error("birdeye_api_key_missing", env_var="BIRDEYE_API_KEY")
            return False
        try:
            await self._get_json(
                TOKEN_LIST_PATH, {"limit": 1}, self._settings.detail_timeout
            )
        except MarketDataError as e:
            logger.error("birdeye_api_key_check_failed", error=str(e))
            return False
        logger.info("birdeye_api_key_ok")
        return True
