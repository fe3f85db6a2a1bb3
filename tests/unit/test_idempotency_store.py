"""Tests for the Redis-backed purchase Idempotency-Key store (mocked client)."""

from unittest.mock import AsyncMock, patch

import pytest

from src.ce_coins.infrastructure.idempotency import RedisIdempotencyStore
from src.ce_common.errors import DuplicateRequestError

_KEY = "idem:purchase:user-1:key-1"


@pytest.fixture
def redis() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def store(redis: AsyncMock):  # type: ignore[no-untyped-def]
    with patch(
        "src.ce_coins.infrastructure.idempotency.get_redis",
        AsyncMock(return_value=redis),
    ):
        yield RedisIdempotencyStore(ttl_seconds=60)


class TestBegin:
    async def test_first_claim_owns_key(
        self, store: RedisIdempotencyStore, redis: AsyncMock
    ) -> None:
        redis.set.return_value = True
        assert await store.begin("user-1", "key-1") is None
        redis.set.assert_awaited_once_with(_KEY, "__pending__", nx=True, ex=60)

    async def test_completed_key_returns_stored_response(
        self, store: RedisIdempotencyStore, redis: AsyncMock
    ) -> None:
        redis.set.return_value = None
        redis.get.return_value = '{"package_id": 3}'
        assert await store.begin("user-1", "key-1") == '{"package_id": 3}'

    async def test_pending_key_is_duplicate(
        self, store: RedisIdempotencyStore, redis: AsyncMock
    ) -> None:
        redis.set.return_value = None
        redis.get.return_value = "__pending__"
        with pytest.raises(DuplicateRequestError) as exc_info:
            await store.begin("user-1", "key-1")
        assert exc_info.value.http_status == 409


class TestCompleteAndRelease:
    async def test_complete_stores_response(
        self, store: RedisIdempotencyStore, redis: AsyncMock
    ) -> None:
        await store.complete("user-1", "key-1", "{}")
        redis.set.assert_awaited_once_with(_KEY, "{}", ex=60)

    async def test_release_deletes_key(
        self, store: RedisIdempotencyStore, redis: AsyncMock
    ) -> None:
        await store.release("user-1", "key-1")
        redis.delete.assert_awaited_once_with(_KEY)
