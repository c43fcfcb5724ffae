"""Rate limiting with an optional Redis backend.

Two layers:
1. Global middleware: token bucket per client IP on every request.
2. Endpoint decorators (slowapi): tighter limits on auth routes.

Global buckets are stored as `rl:global:<ip>`. slowapi hands its keys to the
`limits` Redis storage, which files them under `LIMITS:LIMITER/rl/...`.
`src.portal.core.cache.clear_rate_limit_keys` sweeps both.
"""

import asyncio
import time
from collections import defaultdict

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.middleware.base import RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from src.portal.core.cache import rate_limit_key
from src.portal.core.config import get_settings
from src.portal.core.logging import get_logger
from src.portal.core.redis import get_redis

logger = get_logger(__name__)

EXEMPT_PATHS = frozenset({"/health", "/metrics", "/docs", "/openapi.json", "/redoc"})

# In-memory fallback buckets, per process
_rate_limit_buckets: dict[str, dict[str, float]] = defaultdict(dict)
_rate_limit_lock = asyncio.Lock()

# Atomic token bucket executed server-side
_REDIS_TOKEN_BUCKET_SCRIPT = """
local key = KEYS[1]
local rate = tonumber(ARGV[1])
local burst = tonumber(ARGV[2])
local now = tonumber(ARGV[3])
local ttl = tonumber(ARGV[4])

local bucket = redis.call('HMGET', key, 'tokens', 'last_update')
local tokens = tonumber(bucket[1]) or burst
local last_update = tonumber(bucket[2]) or now

tokens = math.min(burst, tokens + (now - last_update) * rate)

local allowed = 0
if tokens >= 1 then
    tokens = tokens - 1
    allowed = 1
end
redis.call('HSET', key, 'tokens', tokens, 'last_update', now)
redis.call('EXPIRE', key, ttl)
return allowed
"""

_script_sha: str | None = None


def get_rate_limit_key(request: Request) -> str:
    """Rate limit by client IP only. Never key on user-controlled headers."""
    return get_remote_address(request) or "unknown"


def create_limiter() -> Limiter:
    """Create the endpoint limiter. Disabled in the testing environment."""
    settings = get_settings()

    if settings.app_env == "testing":
        logger.info("Rate limiter disabled (testing environment)")
        return Limiter(key_func=get_rate_limit_key, enabled=False)

    if settings.redis_url:
        logger.info("Rate limiter using Redis backend")
        return Limiter(
            key_func=get_rate_limit_key,
            key_prefix=settings.rate_limit_key_prefix,
            storage_uri=settings.redis_url,
        )
    logger.info("Rate limiter using in-memory backend (not distributed)")
    return Limiter(key_func=get_rate_limit_key, key_prefix=settings.rate_limit_key_prefix)


# Settings are read at import time; reconfiguring requires a restart
limiter = create_limiter()


async def _check_in_memory_rate_limit(client_ip: str) -> bool:
    """Token bucket in process memory. Returns True if the request is allowed."""
    settings = get_settings()
    rate = settings.global_rate_limit_per_second
    burst = settings.global_rate_limit_burst
    now = time.time()

    async with _rate_limit_lock:
        bucket = _rate_limit_buckets[client_ip]
        if not bucket:
            bucket.update(tokens=float(burst), last_update=now)

        elapsed = now - bucket["last_update"]
        bucket["tokens"] = min(burst, bucket["tokens"] + elapsed * rate)
        bucket["last_update"] = now

        if bucket["tokens"] >= 1:
            bucket["tokens"] -= 1
            return True
        return False


async def _get_or_register_script(redis: object) -> str:
    """Load the Lua script once and reuse its SHA for EVALSHA."""
    global _script_sha
    if _script_sha is None:
        _script_sha = await redis.script_load(_REDIS_TOKEN_BUCKET_SCRIPT)  # type: ignore[attr-defined]
    return _script_sha


async def _check_redis_rate_limit(redis: object, client_ip: str) -> bool:
    """Distributed token bucket. Returns True if the request is allowed."""
    settings = get_settings()
    rate = settings.global_rate_limit_per_second
    burst = settings.global_rate_limit_burst
    # Long enough to refill a full bucket
    ttl = int(burst / rate) + 60

    script_sha = await _get_or_register_script(redis)
    result = await redis.evalsha(  # type: ignore[attr-defined]
        script_sha,
        1,
        rate_limit_key(f"global:{client_ip}"),
        str(rate),
        str(burst),
        str(time.time()),
        str(ttl),
    )
    return bool(int(result) == 1)


async def check_global_rate_limit(client_ip: str) -> bool:
    """Check the global limit, preferring Redis and falling back to memory."""
    global _script_sha

    if get_settings().app_env == "testing":
        return True

    redis = await get_redis()
    if redis:
        try:
            return await _check_redis_rate_limit(redis, client_ip)
        except Exception as e:
            logger.warning(
                "Redis rate limit check failed, falling back to in-memory",
                error=str(e),
                client_ip=client_ip,
            )
            # Script cache is lost if Redis restarted
            _script_sha = None

    return await _check_in_memory_rate_limit(client_ip)


async def global_rate_limit_middleware(
    request: Request, call_next: RequestResponseEndpoint
) -> Response:
    """Reject clients that exceed the global per-IP token bucket with 429."""
    if request.url.path in EXEMPT_PATHS:
        return await call_next(request)

    client_ip = get_rate_limit_key(request)
    if not await check_global_rate_limit(client_ip):
        logger.warning("Global rate limit exceeded", client_ip=client_ip, path=request.url.path)
        return JSONResponse(
            status_code=429,
            content={"detail": "Too many requests. Please slow down.", "retry_after": 1},
            headers={"Retry-After": "1"},
        )

    return await call_next(request)
