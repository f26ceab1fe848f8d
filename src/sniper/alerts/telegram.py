"""Telegram Bot API alert sink via aiohttp."""

from typing import Any

import aiohttp

from sniper.alerts.formatter import format_alert
from sniper.alerts.sink import AlertSink
from sniper.config import TelegramSettings
from sniper.exceptions import AlertDeliveryError
from sniper.logging import get_logger
from sniper.models import Candidate, Overview, SecurityProfile

logger = get_logger(__name__)


class TelegramAlertSink(AlertSink):
    """Sends alerts to one Telegram chat with sendMessage."""

    def __init__(self, settings: TelegramSettings) -> None:
        self._settings = settings
        self._session: aiohttp.ClientSession | None = None

    @property
    def _send_url(self) -> str:
        token = self._settings.bot_token.get_secret_value()
        return f"{self._settings.api_base}/bot{token}/sendMessage"

    async def connect(self) -> None:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()

    async def close(self) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def _send(self, payload: dict[str, Any]) -> None:
        """POST one message.

        Raises:
            AlertDeliveryError: on transport failure or a non-ok response.
        """
        if self._session is None:
            await self.connect()
        assert self._session is not None

        try:
            async with self._session.post(
                self._send_url,
                json=payload,
                timeout=aiohttp.ClientTimeout(total=self._settings.timeout),
            ) as resp:
                if resp.status != 200:
                    body = await resp.text()
                    raise AlertDeliveryError(
                        f"telegram returned HTTP {resp.status}: {body[:200]}"
                    )
        except (aiohttp.ClientError, TimeoutError) as e:
            raise AlertDeliveryError(f"telegram request failed: {e!r}") from e

    async def publish(
        self,
        candidate: Candidate,
        overview: Overview,
        security: SecurityProfile,
    ) -> bool:
        payload = {
            "chat_id": self._settings.chat_id,
            "text": format_alert(candidate, overview, security),
            "parse_mode": "Markdown",
            "disable_web_page_preview": True,
        }
        try:
            await self._send(payload)
        except AlertDeliveryError as e:
            logger.error(
                "alert_send_failed",
                address=candidate.address,
                symbol=candidate.symbol,
                error=str(e),
            )
            return False
        logger.info(
            "alert_sent",
            address=candidate.address,
            symbol=candidate.symbol,
        )
        return True
