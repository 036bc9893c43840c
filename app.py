import asyncio
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from constants import CORS_ORIGINS, LOG_FILE, LOG_LEVEL, QUEUE_SWEEP_INTERVAL_SECONDS, QUEUE_TIMEOUT_SECONDS
from logging_config import get_logger, setup_logging
from routers.signaling import signaling_router
from routers.stats import stats_router
from signaling.lifecycle import ConnectionLifecycleController, run_queue_sweeper

# Setup logging
setup_logging(log_level=LOG_LEVEL, log_file=LOG_FILE)
logger = get_logger(__name__)


def create_app(
    controller: Optional[ConnectionLifecycleController] = None,
    sweep_interval: float = QUEUE_SWEEP_INTERVAL_SECONDS,
) -> FastAPI:
    """Build the FastAPI app around one broker instance.

    Each app owns its own controller; nothing is shared between instances.
    """
    controller = controller or ConnectionLifecycleController(queue_timeout=QUEUE_TIMEOUT_SECONDS)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        sweeper = None
        if controller.queue_timeout:
            sweeper = asyncio.create_task(run_queue_sweeper(controller, sweep_interval))
        yield
        if sweeper:
            sweeper.cancel()
            try:
                await sweeper
            except asyncio.CancelledError:
                pass

    app = FastAPI(title="Pairing signaling broker", lifespan=lifespan)
    app.state.controller = controller
    app.state.started_at = time.monotonic()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(signaling_router)
    app.include_router(stats_router)

    logger.info("FastAPI application initialized")
    return app


app = create_app()
