"""Redis-backed key helpers: revoked token blacklist and rate limit keys.

Every helper degrades when Redis is unavailable instead of raising.
"""

from limits.storage import RedisStorage
from redis.asyncio import Redis

from src.portal.core.config import get_settings
from src.portal.core.redis import get_redis

PREFIX_TOKEN_BLACKLIST = "token_blacklist"

# Endpoint limits live in the `limits` Redis storage as
# "LIMITS:LIMITER/<prefix>/<client>/<endpoint>/<amount>/<multiples>/<granularity>"
LIMITS_STORAGE_NAMESPACE = f"{RedisStorage.PREFIX}:LIMITER"


def rate_limit_key(identifier: str) -> str:
    """Namespaced key for a rate limit bucket."""
    return f"{get_settings().rate_limit_key_prefix}:{identifier}"


def rate_limit_patterns(prefix: str | None = None) -> tuple[str, str]:
    """Glob patterns for the global bucket keys and the endpoint limiter keys."""
    prefix = prefix or get_settings().rate_limit_key_prefix
    return f"{prefix}:*", f"{LIMITS_STORAGE_NAMESPACE}/{prefix}/*"


async def blacklist_token(token_hash: str, ttl: int) -> bool:
    """Mark a token as revoked for `ttl` seconds.

    Returns:
        True if stored in Redis, False if Redis is unavailable.
    """
    redis = await get_redis()
    if not redis:
        return False
    await redis.setex(f"{PREFIX_TOKEN_BLACKLIST}:{token_hash}", max(ttl, 1), "1")
    return True


async def is_token_blacklisted(token_hash: str) -> bool | None:
    """Check the blacklist.

    Returns:
        True if revoked, False if Redis confirmed it is not, None if Redis is
        unavailable and the caller must decide without it.
    """
    redis = await get_redis()
    if not redis:
        return None
    result = await redis.get(f"{PREFIX_TOKEN_BLACKLIST}:{token_hash}")
    return result is not None


async def clear_rate_limit_keys(redis: Redis, prefix: str | None = None) -> int:
    """Delete every rate limit key in bulk and return how many were removed."""
    keys = [
        key
        for pattern in rate_limit_patterns(prefix)
        async for key in redis.scan_iter(match=pattern)
    ]
    if not keys:
        return 0
    await redis.delete(*keys)
    return len(keys)
