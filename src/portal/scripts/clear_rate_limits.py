"""
Delete every rate limit bucket stored in Redis.

Run with:
    uv run python -m src.portal.scripts.clear_rate_limits
"""

import argparse
import asyncio
import os
from collections.abc import Sequence

from redis.asyncio import Redis

from src.portal.core.cache import clear_rate_limit_keys
from src.portal.core.redis import DEFAULT_REDIS_URL, create_redis_client

RATE_LIMIT_PREFIX = "rl"


async def clear_rate_limits(client: Redis, prefix: str = RATE_LIMIT_PREFIX) -> int | None:
    """Clear `prefix:*` keys and report on stdout.

    Returns the number of keys removed, or None when Redis could not be
    reached. The client is always closed.
    """
    try:
        await client.ping()  # type: ignore[misc]
        print("Connected to Redis")

        count = await clear_rate_limit_keys(client, prefix)
        if count:
            print(f"Cleared {count} rate limit keys")
        else:
            print("No rate limit keys found")

        print("\nTip: You can also restart the backend server to clear rate limits")
        return count
    except Exception as e:
        print(f"Error: {e}")
        print(
            "\nRate limits are likely stored in memory. "
            "Restart the backend server to clear them."
        )
        return None
    finally:
        await client.aclose()


def main(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Clear rate limit keys from Redis")
    parser.add_argument(
        "--url",
        default=os.environ.get("REDIS_URL") or DEFAULT_REDIS_URL,
        help="Redis URL (default: $REDIS_URL or redis://localhost:6379)",
    )
    parser.add_argument(
        "--prefix",
        default=os.environ.get("RATE_LIMIT_KEY_PREFIX") or RATE_LIMIT_PREFIX,
        help="Rate limit key prefix (default: rl)",
    )
    args = parser.parse_args(argv)
    asyncio.run(clear_rate_limits(create_redis_client(args.url), args.prefix))


if __name__ == "__main__":
    main()
