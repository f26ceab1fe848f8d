"""Scan orchestrator -- one discover-enrich-decide-alert cycle.

Each cycle:
  1. DISCOVER: fetch the ranked token list (one read)
  2. FILTER: skip seen tokens, mark-and-skip denylisted ones before any I/O
  3. ENRICH: overview + security for one token, concurrently
  4. DECIDE: run the acceptance policy, mark the token seen either way
  5. ALERT: publish accepted tokens, then wait the fixed alert delay

Tokens are processed strictly one after another, in list order, to stay
inside the shared API rate budget; the enrichment pair is the only
concurrent work. A failure inside one token is logged and the loop moves
on; a failure while listing aborts only the current cycle.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable

from sniper.alerts.sink import AlertSink
from sniper.config import MonitorSettings
from sniper.criteria.evaluator import CriteriaEvaluator
from sniper.logging import bind_scan_context, clear_scan_context, get_logger
from sniper.market_data.client import MarketDataClient
from sniper.models import (
    Candidate,
    MonitorSwitch,
    Overview,
    ScanSummary,
    SecurityProfile,
)
from sniper.monitor.seen_store import SeenStore

logger = get_logger(__name__)


class ScanOrchestrator:
    """Runs scan cycles against the market data client.

    Args:
        client: Market data source.
        evaluator: Acceptance policy.
        seen_store: Addresses already processed.
        switch: Monitor on/off state (read only here).
        sink: Destination for alerts.
        settings: Cooldown and alert delay.
        sleep: Coroutine used for the cooldown and alert delay.
        clock: Wall clock (Unix seconds) passed to the evaluator.
    """

    def __init__(
        self,
        client: MarketDataClient,
        evaluator: CriteriaEvaluator,
        seen_store: SeenStore,
        switch: MonitorSwitch,
        sink: AlertSink,
        settings: MonitorSettings | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._client = client
        self._evaluator = evaluator
        self._seen = seen_store
        self._switch = switch
        self._sink = sink
        self._settings = settings or MonitorSettings()
        self._sleep = sleep
        self._clock = clock
        self._cycle_lock = asyncio.Lock()
        self._scans_completed = 0
        self._last_summary: ScanSummary | None = None

    @property
    def seen_store(self) -> SeenStore:
        return self._seen

    @property
    def scans_completed(self) -> int:
        return self._scans_completed

    @property
    def last_summary(self) -> ScanSummary | None:
        return self._last_summary

    async def run_scan(self) -> ScanSummary:
        """Run one cycle. No-op while monitoring is stopped.

        Cycles never overlap; a second caller waits for the running one.
        """
        summary = ScanSummary(started_at=self._clock())
        if not self._switch.is_active:
            logger.debug("scan_skipped_monitor_stopped")
            summary.total_processed = len(self._seen)
            summary.finished_at = self._clock()
            return summary

        async with self._cycle_lock:
            scan_id = self._scans_completed + 1
            bind_scan_context(scan_id=scan_id)
            logger.info("scan_started")
            try:
                await self._scan(summary)
            finally:
                summary.total_processed = len(self._seen)
                summary.finished_at = self._clock()
                self._scans_completed = scan_id
                self._last_summary = summary
                logger.info(
                    "scan_complete",
                    listed=summary.listed,
                    evaluated=summary.evaluated,
                    accepted=summary.accepted,
                    errors=summary.errors,
                    total_processed=summary.total_processed,
                )
                clear_scan_context("scan_id")
        return summary

    async def _scan(self, summary: ScanSummary) -> None:
        try:
            batch = await self._client.list_candidates()
        except Exception:
            summary.aborted = True
            logger.error("scan_aborted_listing_failed", exc_info=True)
            return

        if batch.throttled:
            summary.throttled = True
            logger.warning(
                "scan_throttled_cooling_down",
                cooldown_seconds=self._settings.throttle_cooldown,
            )
            await self._sleep(self._settings.throttle_cooldown)
            return

        if not batch:
            logger.info("no_candidates_found")
            return

        summary.listed = len(batch)
        for candidate in batch.candidates:
            if self._seen.has(candidate.address):
                summary.skipped_seen += 1
                logger.debug("candidate_already_processed", address=candidate.address)
                continue

            if self._evaluator.is_denylisted(candidate.symbol):
                self._seen.mark(candidate.address)
                summary.skipped_denylisted += 1
                logger.debug("candidate_denylisted", symbol=candidate.symbol)
                continue

            try:
                await self._process_candidate(candidate, summary)
            except Exception:
                self._seen.mark(candidate.address)
                summary.errors += 1
                logger.error(
                    "candidate_processing_failed",
                    address=candidate.address,
                    symbol=candidate.symbol,
                    exc_info=True,
                )

    async def _process_candidate(
        self, candidate: Candidate, summary: ScanSummary
    ) -> None:
        logger.info(
            "analyzing_candidate",
            address=candidate.address,
            name=candidate.name,
            symbol=candidate.symbol,
        )
        overview, security = await self._enrich(candidate.address)

        verdict = self._evaluator.evaluate(
            candidate, overview, security, now=self._clock()
        )
        self._seen.mark(candidate.address)
        summary.evaluated += 1

        if not verdict.accepted:
            summary.rejected += 1
            return

        summary.accepted += 1
        try:
            delivered = await self._sink.publish(candidate, overview, security)
        except Exception:
            delivered = False
            logger.error(
                "alert_publish_raised", address=candidate.address, exc_info=True
            )
        if not delivered:
            summary.alerts_failed += 1
            logger.warning("alert_not_delivered", address=candidate.address)

        await self._sleep(self._settings.alert_delay)

    async def _enrich(self, address: str) -> tuple[Overview, SecurityProfile]:
        """Fetch overview and security concurrently.

        A failure of either call degrades that value to empty without
        affecting the other.
        """
        overview_result, security_result = await asyncio.gather(
            self._client.get_overview(address),
            self._client.get_security(address),
            return_exceptions=True,
        )

        if isinstance(overview_result, BaseException):
            logger.warning(
                "overview_enrichment_failed",
                address=address,
                error=repr(overview_result),
            )
            overview_result = Overview.empty()
        if isinstance(security_result, BaseException):
            logger.warning(
                "security_enrichment_failed",
                address=address,
                error=repr(security_result),
            )
            security_result = SecurityProfile.empty()

        return overview_result, security_result
