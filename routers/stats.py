import time
from datetime import datetime, timezone

from fastapi import APIRouter, Request

from schemas.stats import HealthResponse, StatsResponse

stats_router = APIRouter(tags=["stats"])


@stats_router.get("/stats", response_model=StatsResponse)
async def get_stats(request: Request):
    """Current number of connected peers, waiting peers and active rooms."""
    return request.app.state.controller.stats()


@stats_router.get("/health", response_model=HealthResponse)
async def health(request: Request):
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(timezone.utc).isoformat(),
        uptime=time.monotonic() - request.app.state.started_at,
    )
