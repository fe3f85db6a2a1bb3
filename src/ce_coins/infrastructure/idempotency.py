"""Idempotency-Key replay protection for coin purchases, stored in Redis.

A key is claimed with ``SET NX`` as a pending marker before the card is
charged. On success the marker is replaced by the serialized response, so a
retried request returns the original result instead of charging again. On
failure the key is released so the client may retry.

    idem:purchase:{user_id}:{key}  ->  "__pending__" | PurchaseResponse JSON
"""

import logging
from typing import Protocol

from src.ce_common.errors import DuplicateRequestError
from src.ce_common.redis_client import get_redis

logger = logging.getLogger(__name__)

_PENDING = "__pending__"
_TTL_SECONDS = 24 * 60 * 60


class IdempotencyStoreProtocol(Protocol):
    async def begin(self, user_id: str, key: str) -> str | None:
        """Claim ``key``. None means the caller owns it; otherwise the stored
        response of the completed request is returned."""
        ...

    async def complete(self, user_id: str, key: str, response_json: str) -> None: ...

    async def release(self, user_id: str, key: str) -> None: ...


class RedisIdempotencyStore:
    def __init__(self, ttl_seconds: int = _TTL_SECONDS) -> None:
        self._ttl = ttl_seconds

    @staticmethod
    def _redis_key(user_id: str, key: str) -> str:
        return f"idem:purchase:{user_id}:{key}"

    async def begin(self, user_id: str, key: str) -> str | None:
        redis = await get_redis()
        redis_key = self._redis_key(user_id, key)
        if await redis.set(redis_key, _PENDING, nx=True, ex=self._ttl):
            return None
        stored = await redis.get(redis_key)
        if stored is None or stored == _PENDING:
            raise DuplicateRequestError(key)
        logger.info("Replaying purchase for %s (Idempotency-Key %s)", user_id, key)
        return str(stored)

    async def complete(self, user_id: str, key: str, response_json: str) -> None:
        redis = await get_redis()
        await redis.set(self._redis_key(user_id, key), response_json, ex=self._ttl)

    async def release(self, user_id: str, key: str) -> None:
        redis = await get_redis()
        await redis.delete(self._redis_key(user_id, key))
