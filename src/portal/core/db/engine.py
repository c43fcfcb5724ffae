"""Database engine management."""

import ssl
from typing import Any

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from src.portal.core.config import get_settings

_engine: AsyncEngine | None = None


def _get_connect_args() -> dict[str, Any]:
    """asyncpg connect args carrying the configured SSL mode."""
    ssl_mode = get_settings().database_ssl_mode
    if ssl_mode == "disable":
        return {}

    ssl_context = ssl.create_default_context()
    if ssl_mode in ("prefer", "require"):
        ssl_context.check_hostname = False
        ssl_context.verify_mode = ssl.CERT_NONE
    else:  # verify-ca, verify-full
        ssl_context.check_hostname = ssl_mode == "verify-full"
        ssl_context.verify_mode = ssl.CERT_REQUIRED
    return {"ssl": ssl_context}


def create_engine(url: str | None = None) -> AsyncEngine:
    """Create a new engine. Scripts use this to avoid the shared singleton."""
    settings = get_settings()
    return create_async_engine(
        url or settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        pool_pre_ping=True,
        connect_args=_get_connect_args(),
    )


def get_engine() -> AsyncEngine:
    """Get or create the database engine singleton."""
    global _engine
    if _engine is None:
        _engine = create_engine()
    return _engine


async def dispose_engine() -> None:
    """Dispose the database engine. Call during shutdown."""
    global _engine
    if _engine is not None:
        await _engine.dispose()
        _engine = None
