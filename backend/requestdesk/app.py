"""FastAPI application factory"""

import logging
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from requestdesk import __version__
from requestdesk.core.config import get_settings
from requestdesk.core.dependencies import close_trello_api, get_config_holder, get_trello_api
from requestdesk.core.logging import setup_logging
from requestdesk.routers import admin_router, events_router, submit_router
from requestdesk.routers.errors import request_validation_handler
from requestdesk.services import LabelProvisioner

logger = logging.getLogger(__name__)

# Track server start time
_start_time: float = 0.0


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle startup and shutdown"""
    global _start_time
    _start_time = time.time()

    settings = get_settings()

    # Startup
    logger.info("Starting request desk server")
    logger.info(f"Environment: {settings.environment}")

    # A broken board configuration stops startup here
    config = get_config_holder().config
    logger.info(f"Events: {', '.join(config.event_names) or '(none enabled)'}")

    if settings.verify_labels_on_startup:
        report = await LabelProvisioner(config, get_trello_api()).verify_labels()
        if not report.ok:
            logger.warning(f"Label verification finished with {len(report.failures)} failures")
    else:
        logger.info("Label verification on startup is disabled")

    if not settings.api_enabled:
        logger.info("API_KEY not set, privileged routes are disabled")

    yield

    # Shutdown
    logger.info("Shutting down request desk server")
    try:
        await close_trello_api()
    except Exception as e:
        logger.exception(f"Error during shutdown: {e}")


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    settings = get_settings()

    # Setup logging first
    setup_logging(settings)

    app = FastAPI(
        title="Request Desk API",
        description="Turns team help requests into Trello cards",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, request_validation_handler)  # type: ignore[arg-type]

    # Register routers
    app.include_router(submit_router.router)
    app.include_router(events_router.router)
    app.include_router(admin_router.router)

    # Root endpoint
    @app.get("/")
    async def root():
        """Root endpoint - minimal service info"""
        return {"service": "requestdesk", "status": "running"}

    # Liveness probe, no external dependency
    @app.get("/health")
    async def health():
        """Liveness check (no board service dependency)"""
        return {
            "status": "healthy",
            "uptime_seconds": int(time.time() - _start_time),
        }

    @app.api_route("/ping", methods=["GET", "HEAD"], response_class=PlainTextResponse)
    async def ping():
        """Ping endpoint"""
        return "pong"

    logger.info("FastAPI application configured")

    return app
