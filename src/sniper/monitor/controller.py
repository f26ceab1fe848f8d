"""Monitor controller -- Stopped/Active state machine and the periodic scan loop."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

from sniper.config import MonitorSettings
from sniper.logging import get_logger
from sniper.models import MonitorSwitch
from sniper.monitor.orchestrator import ScanOrchestrator

logger = get_logger(__name__)


class MonitorController:
    """Starts and stops periodic scanning.

    start() flips the switch to ACTIVE and launches a background loop that
    scans immediately, then once per poll interval. stop() flips it back;
    a scan already running is left to finish and the loop exits the next
    time it wakes. Each start() bumps a generation counter so a loop from
    an earlier start never keeps running after a quick stop/start.

    Args:
        orchestrator: Runs one scan cycle.
        switch: Shared monitor state, also read by the orchestrator.
        settings: Poll interval.
        sleep: Coroutine used between cycles.
    """

    def __init__(
        self,
        orchestrator: ScanOrchestrator,
        switch: MonitorSwitch,
        settings: MonitorSettings | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._orchestrator = orchestrator
        self._switch = switch
        self._settings = settings or MonitorSettings()
        self._sleep = sleep
        self._generation = 0
        self._task: asyncio.Task | None = None  # type: ignore[type-arg]
        # Every loop task not yet finished, including ones from earlier starts
        self._loops: set[asyncio.Task] = set()  # type: ignore[type-arg]

    @property
    def is_active(self) -> bool:
        return self._switch.is_active

    @property
    def task(self) -> asyncio.Task | None:  # type: ignore[type-arg]
        """The current monitor loop task, if one was started."""
        return self._task

    async def start(self) -> bool:
        """Begin monitoring. Returns False if monitoring was already active."""
        if not self._switch.activate():
            logger.info("monitor_already_active")
            return False

        self._generation += 1
        self._task = asyncio.create_task(self._run_loop(self._generation))
        self._loops.add(self._task)
        self._task.add_done_callback(self._loops.discard)
        logger.info(
            "monitor_started",
            poll_interval=self._settings.poll_interval,
            generation=self._generation,
        )
        return True

    async def stop(self) -> bool:
        """Stop monitoring. Idempotent; returns whether the state changed."""
        changed = self._switch.deactivate()
        if changed:
            logger.info("monitor_stopped")
        else:
            logger.debug("monitor_already_stopped")
        return changed

    async def shutdown(self) -> None:
        """Stop and cancel every loop task. Used on process exit only."""
        await self.stop()
        pending = [task for task in self._loops if not task.done()]
        for task in pending:
            task.cancel()
        for task in pending:
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._loops.clear()
        self._task = None

    def _is_current(self, generation: int) -> bool:
        return self._switch.is_active and generation == self._generation

    async def _run_loop(self, generation: int) -> None:
        """Scan now, then every poll interval, while this generation is current."""
        try:
            while self._is_current(generation):
                try:
                    await self._orchestrator.run_scan()
                except Exception:
                    logger.error("monitor_scan_error", exc_info=True)
                await self._sleep(self._settings.poll_interval)
        finally:
            logger.debug("monitor_loop_exited", generation=generation)

    def status(self) -> dict:
        """Current state and counters for the command surface."""
        last = self._orchestrator.last_summary
        return {
            "state": self._switch.state.value,
            "total_processed": len(self._orchestrator.seen_store),
            "scans_completed": self._orchestrator.scans_completed,
            "last_scan_at": last.finished_at if last is not None else None,
        }
