"""JSON read endpoints: monitor status, acceptance criteria, last scan."""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

router = APIRouter()


@router.get("/status")
async def get_status(request: Request) -> JSONResponse:
    """Monitor state and number of tokens processed so far."""
    return JSONResponse(request.app.state.controller.status())


@router.get("/criteria")
async def get_criteria(request: Request) -> JSONResponse:
    """Human-readable acceptance policy."""
    return JSONResponse({"criteria": request.app.state.evaluator.describe()})


@router.get("/last-scan")
async def get_last_scan(request: Request) -> JSONResponse:
    """Counters from the most recent scan cycle, or null before the first one."""
    summary = request.app.state.orchestrator.last_summary
    return JSONResponse(summary.to_dict() if summary is not None else None)
