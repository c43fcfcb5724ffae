from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from src.portal.api.middlewares import setup_middlewares
from src.portal.api.v1.router import api_router
from src.portal.core.config import get_settings
from src.portal.core.db import dispose_engine
from src.portal.core.exceptions import setup_exception_handlers
from src.portal.core.health import setup_health_endpoint, setup_metrics
from src.portal.core.logging import get_logger, setup_logging
from src.portal.core.rate_limit import limiter
from src.portal.core.redis import close_redis
from src.portal.core.shutdown import request_tracker

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan - startup and graceful shutdown."""
    settings = get_settings()
    setup_logging(settings.debug)
    logger.info(f"Starting {settings.app_name}", environment=settings.app_env)

    yield

    grace_period = settings.shutdown_grace_period
    logger.info(
        "Shutdown initiated, draining in-flight requests",
        in_flight=request_tracker.in_flight_count,
    )
    await request_tracker.start_shutdown()

    drained = await request_tracker.wait_for_drain(timeout=grace_period)
    if not drained:
        logger.warning(
            f"Shutdown timeout after {grace_period}s",
            in_flight=request_tracker.in_flight_count,
        )

    await close_redis()
    await dispose_engine()
    logger.info("Shutdown complete")


OPENAPI_TAGS = [
    {"name": "auth", "description": "Signup, login and token management"},
    {"name": "users", "description": "Current user profile"},
    {"name": "tenants", "description": "Tenant settings, members and invitations"},
    {"name": "projects", "description": "Projects of the current tenant"},
    {"name": "env-vars", "description": "Encrypted environment variables (owner/admin)"},
    {"name": "bugs", "description": "Bug tracking"},
    {"name": "features", "description": "Feature requests"},
    {"name": "tasks", "description": "Tasks"},
    {"name": "milestones", "description": "Milestones"},
    {"name": "channels", "description": "Team chat channels and messages"},
    {"name": "pages", "description": "Page payloads for the selected project"},
    {"name": "public", "description": "Public bug and feature boards"},
]


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Multi-tenant project management API",
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
        openapi_url="/openapi.json" if settings.enable_openapi else None,
        docs_url="/docs" if settings.enable_openapi else None,
        redoc_url="/redoc" if settings.enable_openapi else None,
    )

    setup_exception_handlers(app)

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore[arg-type]

    setup_middlewares(app, settings)

    app.include_router(api_router)
    setup_metrics(app)
    setup_health_endpoint(app)

    return app


app = create_app()
