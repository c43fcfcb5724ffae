"""Optional Redis connection with graceful fallback.

When REDIS_URL is unset or the server is unreachable, `get_redis()` returns
None and callers degrade to in-process behaviour.
"""

from redis.asyncio import ConnectionPool, Redis

from src.portal.core.config import get_settings
from src.portal.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_REDIS_URL = "redis://localhost:6379"

_pool: ConnectionPool | None = None
_redis: Redis | None = None
_connection_attempted: bool = False


def create_redis_client(url: str | None = None) -> Redis:
    """Create a standalone client (no shared pool), used by maintenance scripts."""
    return Redis.from_url(url or DEFAULT_REDIS_URL, decode_responses=True)


async def get_redis() -> Redis | None:
    """Get the shared Redis client, or None if unavailable.

    The connection is attempted once and reused. A failed attempt is not
    retried until `close_redis()` resets the state.
    """
    global _pool, _redis, _connection_attempted

    if _redis is not None:
        return _redis
    if _connection_attempted:
        return None

    _connection_attempted = True
    settings = get_settings()

    if not settings.redis_url:
        logger.info("Redis not configured (REDIS_URL not set)")
        return None

    try:
        _pool = ConnectionPool.from_url(
            settings.redis_url,
            max_connections=settings.redis_pool_size,
            decode_responses=True,
        )
        _redis = Redis(connection_pool=_pool)
        await _redis.ping()  # type: ignore[misc]
        logger.info("Redis connected successfully")
        return _redis
    except Exception as e:
        logger.warning("Redis connection failed, falling back to non-Redis mode", error=str(e))
        if _redis:
            await _redis.aclose()
            _redis = None
        if _pool:
            await _pool.disconnect()
            _pool = None
        return None


async def close_redis() -> None:
    """Close the shared connection pool. Called during shutdown."""
    global _pool, _redis, _connection_attempted

    if _redis:
        await _redis.aclose()
        logger.info("Redis connection closed")
    if _pool:
        await _pool.disconnect()

    _redis = None
    _pool = None
    _connection_attempted = False


def reset_redis_state() -> None:
    """Forget the shared client so tests can reinitialize it."""
    global _pool, _redis, _connection_attempted
    _redis = None
    _pool = None
    _connection_attempted = False
