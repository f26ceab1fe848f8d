"""Alert sink interface plus a log-only implementation.

A sink reports delivery success as a bool. The scan core logs failures and
never retries them.
"""

from abc import ABC, abstractmethod

from sniper.alerts.formatter import format_alert
from sniper.logging import get_logger
from sniper.models import Candidate, Overview, SecurityProfile

logger = get_logger(__name__)


class AlertSink(ABC):
    """Destination for accepted-token alerts."""

    async def connect(self) -> None:
        """Acquire transport resources. No-op by default."""

    async def close(self) -> None:
        """Release transport resources. No-op by default."""

    @abstractmethod
    async def publish(
        self,
        candidate: Candidate,
        overview: Overview,
        security: SecurityProfile,
    ) -> bool:
        """Deliver one alert. Returns True on success."""
        ...


class LogAlertSink(AlertSink):
    """Writes alerts to the log. Used when no messaging service is configured."""

    def __init__(self) -> None:
        self.published: list[str] = []

    async def publish(
        self,
        candidate: Candidate,
        overview: Overview,
        security: SecurityProfile,
    ) -> bool:
        text = format_alert(candidate, overview, security)
        self.published.append(candidate.address)
        logger.warning(
            "token_alert",
            address=candidate.address,
            symbol=candidate.symbol,
            message=text,
        )
        return True
