"""
Concurrency safety tests.

Demonstrates:
1. The reorder lock prevents two writers applying an order to one tour.
2. The optimizer shares no state between calls, so parallel requests
   on worker threads get identical answers.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from unittest.mock import AsyncMock

import pytest

from tourplanner.domain.entities import Stop
from tourplanner.domain.optimizer import optimize_route
from tourplanner.infrastructure.locks import DistributedLock, LockNotAcquired


class TestDistributedLock:
    """Tests the Redis distributed lock logic (mocked Redis)."""

    @pytest.mark.asyncio
    async def test_acquire_succeeds(self):
        mock_redis = AsyncMock()
        mock_redis.set = AsyncMock(return_value=True)

        lock = DistributedLock(mock_redis, "test-key", ttl_seconds=10)
        assert await lock.acquire() is True
        mock_redis.set.assert_awaited_once_with(
            "lock:test-key", lock.token, nx=True, ex=10
        )

    @pytest.mark.asyncio
    async def test_acquire_fails_if_held(self):
        mock_redis = AsyncMock()
        mock_redis.set = AsyncMock(return_value=None)

        lock = DistributedLock(mock_redis, "test-key", ttl_seconds=10)
        assert await lock.acquire() is False

    @pytest.mark.asyncio
    async def test_release_calls_eval_with_token(self):
        mock_redis = AsyncMock()
        mock_redis.set = AsyncMock(return_value=True)
        mock_redis.eval = AsyncMock(return_value=1)

        lock = DistributedLock(mock_redis, "test-key", ttl_seconds=10)
        await lock.acquire()
        await lock.release()

        mock_redis.eval.assert_awaited_once()
        _, numkeys, key, token = mock_redis.eval.call_args.args
        assert (numkeys, key, token) == (1, "lock:test-key", lock.token)

    @pytest.mark.asyncio
    async def test_context_manager_acquire_fail_raises(self):
        mock_redis = AsyncMock()
        mock_redis.set = AsyncMock(return_value=False)

        lock = DistributedLock(mock_redis, "test-key", ttl_seconds=10)
        with pytest.raises(LockNotAcquired, match="Could not acquire lock"):
            async with lock:
                pass
        mock_redis.eval.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_context_manager_releases_on_error(self):
        mock_redis = AsyncMock()
        mock_redis.set = AsyncMock(return_value=True)
        mock_redis.eval = AsyncMock(return_value=1)

        with pytest.raises(ValueError):
            async with DistributedLock(mock_redis, "test-key"):
                raise ValueError("boom")
        mock_redis.eval.assert_awaited_once()

    def test_tour_reorder_key(self):
        lock = DistributedLock.for_tour_reorder(AsyncMock(), 7, ttl_seconds=5)
        assert lock.key == "lock:tour-reorder:7"
        assert lock.ttl == 5

    def test_tokens_are_unique(self):
        client = AsyncMock()
        first = DistributedLock.for_tour_reorder(client, 7)
        second = DistributedLock.for_tour_reorder(client, 7)
        assert first.token != second.token


class TestParallelOptimization:
    def test_threads_get_identical_routes(self):
        stops = [
            Stop(
                id=i,
                latitude=30.20 + (i * 7 % 11) / 100,
                longitude=-97.80 + (i * 5 % 13) / 100,
            )
            for i in range(12)
        ]
        expected = optimize_route(stops)

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda _: optimize_route(stops), range(32)))

        for result in results:
            assert result == expected
