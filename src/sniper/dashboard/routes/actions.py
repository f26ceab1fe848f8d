"""POST endpoints that start and stop monitoring."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

log = structlog.get_logger(__name__)

router = APIRouter()


@router.post("/monitor/start")
async def start_monitor(request: Request) -> JSONResponse:
    """Start monitoring; reports started=False if it was already active."""
    controller = request.app.state.controller

    started = await controller.start()
    if started:
        log.info("monitor_started_via_api")
    else:
        log.info("monitor_start_ignored_already_active")

    return JSONResponse({"started": started, **controller.status()})


@router.post("/monitor/stop")
async def stop_monitor(request: Request) -> JSONResponse:
    """Stop monitoring; the scan in progress (if any) finishes first."""
    controller = request.app.state.controller

    stopped = await controller.stop()
    log.info("monitor_stop_requested_via_api", changed=stopped)

    return JSONResponse({"stopped": stopped, **controller.status()})
