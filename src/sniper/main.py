"""Entry point for the token sniper.

Wires all components together, optionally embeds the FastAPI control API,
and starts monitoring. When the control API is enabled (default), the
monitor and the API share a single asyncio event loop via uvicorn's
programmatic API and FastAPI's lifespan context manager.

Handles SIGINT/SIGTERM for graceful shutdown.

Component wiring order (in _build_components):
1. TokenBucketRateLimiter (request pacing)
2. BirdeyeClient (market data)
3. CriteriaEvaluator (acceptance policy)
4. SeenStore + MonitorSwitch (state that survives across scans)
5. AlertSink (Telegram, or log-only when not configured)
6. ScanOrchestrator (one scan cycle)
7. MonitorController (start/stop + periodic loop)
"""

import asyncio
import signal
from contextlib import asynccontextmanager
from typing import Any

import uvicorn
from fastapi import FastAPI

from sniper.alerts.sink import AlertSink, LogAlertSink
from sniper.alerts.telegram import TelegramAlertSink
from sniper.config import AppSettings
from sniper.criteria.evaluator import CriteriaEvaluator
from sniper.logging import get_logger, setup_logging
from sniper.market_data.birdeye_client import BirdeyeClient
from sniper.market_data.rate_limiter import TokenBucketRateLimiter
from sniper.models import MonitorSwitch
from sniper.monitor.controller import MonitorController
from sniper.monitor.orchestrator import ScanOrchestrator
from sniper.monitor.seen_store import SeenStore


def _build_components(settings: AppSettings) -> dict[str, Any]:
    """Build all components from settings.

    Does NOT open any HTTP session; that happens in _startup().

    Returns:
        Dict mapping component names to instances.
    """
    logger = get_logger("sniper.main")

    rate_limiter = TokenBucketRateLimiter(
        rate=settings.birdeye.requests_per_period,
        per=settings.birdeye.period_seconds,
        capacity=settings.birdeye.burst,
    )
    client = BirdeyeClient(settings.birdeye, rate_limiter=rate_limiter)
    evaluator = CriteriaEvaluator(settings.criteria)
    seen_store = SeenStore()
    switch = MonitorSwitch()

    sink: AlertSink
    if settings.telegram.enabled:
        sink = TelegramAlertSink(settings.telegram)
    else:
        logger.warning(
            "telegram_not_configured",
            note="Alerts will only be written to the log. "
            "Set TELEGRAM_BOT_TOKEN and TELEGRAM_CHAT_ID to deliver them.",
        )
        sink = LogAlertSink()

    orchestrator = ScanOrchestrator(
        client=client,
        evaluator=evaluator,
        seen_store=seen_store,
        switch=switch,
        sink=sink,
        settings=settings.monitor,
    )
    controller = MonitorController(orchestrator, switch, settings.monitor)

    return {
        "rate_limiter": rate_limiter,
        "client": client,
        "evaluator": evaluator,
        "seen_store": seen_store,
        "switch": switch,
        "sink": sink,
        "orchestrator": orchestrator,
        "controller": controller,
    }


async def _auto_start(controller: MonitorController, delay: float) -> None:
    """Start monitoring after a short warm-up delay."""
    await asyncio.sleep(delay)
    get_logger("sniper.main").info("auto_starting_monitor")
    await controller.start()


async def _startup(settings: AppSettings, components: dict[str, Any]) -> asyncio.Task | None:
    """Open sessions, probe the API key and schedule auto-start."""
    await components["client"].connect()
    await components["sink"].connect()
    await components["client"].check_api_key()

    if settings.monitor.auto_start:
        return asyncio.create_task(
            _auto_start(components["controller"], settings.monitor.auto_start_delay)
        )
    return None


async def _shutdown(components: dict[str, Any], auto_start_task: asyncio.Task | None) -> None:
    if auto_start_task is not None and not auto_start_task.done():
        auto_start_task.cancel()
        try:
            await auto_start_task
        except asyncio.CancelledError:
            pass
    await components["controller"].shutdown()
    await components["sink"].close()
    await components["client"].close()


def _setup_signal_handlers(stop_event: asyncio.Event) -> None:
    """SIGINT/SIGTERM set the stop event. Must run inside the event loop."""
    logger = get_logger("sniper.main")
    loop = asyncio.get_running_loop()

    def _graceful_handler() -> None:
        logger.info("graceful_shutdown_signal")
        stop_event.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, _graceful_handler)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage component lifecycle within the FastAPI application.

    On startup: exposes components on app.state, opens sessions and
    schedules auto-start. On shutdown: stops monitoring and closes sessions.
    """
    logger = get_logger("sniper.main")
    settings = app.state.settings
    components = app.state.components

    app.state.controller = components["controller"]
    app.state.orchestrator = components["orchestrator"]
    app.state.evaluator = components["evaluator"]

    auto_start_task = await _startup(settings, components)
    logger.info("lifespan_started")

    yield

    await _shutdown(components, auto_start_task)
    logger.info("token_sniper_stopped")


async def run() -> None:
    """Run the token sniper.

    With the control API enabled (DASHBOARD_ENABLED=true, the default) the
    lifespan owns startup/shutdown and uvicorn handles signals. Otherwise
    the monitor runs until SIGINT/SIGTERM.
    """
    settings = AppSettings()

    setup_logging(settings.log_level)
    logger = get_logger("sniper.main")

    components = _build_components(settings)

    if settings.dashboard.enabled:
        from sniper.dashboard.app import create_dashboard_app

        app = create_dashboard_app(lifespan=lifespan)
        app.state.settings = settings
        app.state.components = components

        logger.info(
            "starting_with_control_api",
            host=settings.dashboard.host,
            port=settings.dashboard.port,
        )

        config = uvicorn.Config(
            app,
            host=settings.dashboard.host,
            port=settings.dashboard.port,
            log_level="warning",
        )
        server = uvicorn.Server(config)
        await server.serve()
        return

    stop_event = asyncio.Event()
    _setup_signal_handlers(stop_event)
    logger.info(
        "starting_without_control_api",
        poll_interval=settings.monitor.poll_interval,
    )

    auto_start_task = None
    try:
        auto_start_task = await _startup(settings, components)
        await stop_event.wait()
    finally:
        await _shutdown(components, auto_start_task)
        logger.info("token_sniper_stopped")


def main() -> None:
    """Synchronous entry point."""
    asyncio.run(run())


if __name__ == "__main__":
    main()
