"""Redis client factory — connectivity is verified at startup and by /health.

Redis holds only purchase Idempotency-Key records
(see ce_coins.infrastructure.idempotency). Balances and payout reservations
never live in Redis; PostgreSQL is the single source of truth for the ledger.
"""

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from config.settings import settings

_redis_pool: aioredis.Redis | None = None


async def get_redis() -> aioredis.Redis:
    """Get or create the Redis connection pool."""
    global _redis_pool  # noqa: PLW0603
    if _redis_pool is None:
        _redis_pool = aioredis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
        )
    return _redis_pool


async def ping_redis() -> bool:
    """True when Redis answers PING."""
    client = await get_redis()
    try:
        return bool(await client.ping())
    except RedisError:
        return False


async def close_redis() -> None:
    """Close the Redis connection pool."""
    global _redis_pool  # noqa: PLW0603
    if _redis_pool is not None:
        await _redis_pool.aclose()
        _redis_pool = None
