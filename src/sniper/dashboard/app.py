"""FastAPI control surface: start/stop monitoring and read status."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI

from sniper.dashboard.routes import actions, api


def create_dashboard_app(lifespan: Any = None) -> FastAPI:
    """Create the control API application.

    Route handlers read `controller`, `orchestrator` and `evaluator` from
    app.state; main.py sets them (directly or inside the lifespan).

    Args:
        lifespan: Optional async context manager for startup/shutdown.
    """
    app = FastAPI(
        title="Token Sniper Control",
        lifespan=lifespan,
    )

    app.include_router(api.router, prefix="/api")
    app.include_router(actions.router, prefix="/actions")

    return app
