"""Unit tests for transition lock adapters and the in-flight guard."""

from unittest.mock import AsyncMock, patch

import pytest

from app.adapters.outbound.transition_lock import InMemoryTransitionLock, RedisTransitionLock
from app.adapters.outbound.transition_lock.redis_transition_lock import RELEASE_SCRIPT
from app.application.use_cases.in_flight import in_flight
from app.domain.errors import TransitionInFlight, TransportFailure

FROM_URL = "app.adapters.outbound.transition_lock.redis_transition_lock.aioredis.from_url"


@pytest.mark.asyncio
async def test_in_memory_lock_refuses_second_acquire():
    lock = InMemoryTransitionLock()

    token = await lock.acquire("lead:1", 60)
    assert token is not None
    assert await lock.acquire("lead:1", 60) is None
    assert await lock.acquire("lead:2", 60) is not None

    await lock.release("lead:1", token)
    assert await lock.acquire("lead:1", 60) is not None


@pytest.mark.asyncio
async def test_in_memory_lock_expires():
    lock = InMemoryTransitionLock()

    assert await lock.acquire("lead:1", 0) is not None
    assert await lock.acquire("lead:1", 60) is not None


@pytest.mark.asyncio
async def test_in_memory_release_with_stale_token_keeps_new_holder():
    lock = InMemoryTransitionLock()
    stale = await lock.acquire("lead:1", 0)
    current = await lock.acquire("lead:1", 60)

    await lock.release("lead:1", stale)

    assert await lock.acquire("lead:1", 60) is None
    await lock.release("lead:1", current)
    assert await lock.acquire("lead:1", 60) is not None


@pytest.mark.asyncio
async def test_in_flight_releases_on_error():
    lock = InMemoryTransitionLock()

    with pytest.raises(RuntimeError):
        async with in_flight(lock, "lead", "1", 60):
            raise RuntimeError("backend exploded")

    assert await lock.acquire("lead:1", 60) is not None


@pytest.mark.asyncio
async def test_in_flight_refuses_reentry():
    lock = InMemoryTransitionLock()

    async with in_flight(lock, "lead", "1", 60):
        with pytest.raises(TransitionInFlight):
            async with in_flight(lock, "lead", "1", 60):
                pass


@pytest.mark.asyncio
async def test_redis_lock_sets_token_with_nx_and_ttl():
    client = AsyncMock()
    client.set = AsyncMock(return_value=True)
    lock = RedisTransitionLock("redis://localhost:6379/0")

    with patch(FROM_URL, new_callable=AsyncMock) as mock_from_url:
        mock_from_url.return_value = client

        token = await lock.acquire("lead:1", 30)
        assert token
        client.set.assert_called_once_with("transition:inflight:lead:1", token, nx=True, ex=30)

        client.set.return_value = None
        assert await lock.acquire("lead:1", 30) is None


@pytest.mark.asyncio
async def test_redis_lock_tokens_differ_per_acquisition():
    client = AsyncMock()
    client.set = AsyncMock(return_value=True)
    lock = RedisTransitionLock("redis://localhost:6379/0")

    with patch(FROM_URL, new_callable=AsyncMock) as mock_from_url:
        mock_from_url.return_value = client

        first = await lock.acquire("lead:1", 30)
        second = await lock.acquire("lead:1", 30)

    assert first != second


@pytest.mark.asyncio
async def test_redis_release_compares_token_before_delete():
    client = AsyncMock()
    client.set = AsyncMock(return_value=True)
    client.eval = AsyncMock(return_value=0)
    lock = RedisTransitionLock("redis://localhost:6379/0")

    with patch(FROM_URL, new_callable=AsyncMock) as mock_from_url:
        mock_from_url.return_value = client

        token = await lock.acquire("lead:1", 30)
        await lock.release("lead:1", token)

    client.eval.assert_called_once_with(RELEASE_SCRIPT, 1, "transition:inflight:lead:1", token)
    client.delete.assert_not_called()
    assert 'redis.call("get", KEYS[1]) == ARGV[1]' in RELEASE_SCRIPT


@pytest.mark.asyncio
async def test_redis_release_error_is_logged_not_raised():
    client = AsyncMock()
    client.eval = AsyncMock(side_effect=ConnectionError("redis down"))
    lock = RedisTransitionLock("redis://localhost:6379/0")

    with patch(FROM_URL, new_callable=AsyncMock) as mock_from_url:
        mock_from_url.return_value = client

        await lock.release("lead:1", "token-1")

    client.eval.assert_called_once()


@pytest.mark.asyncio
async def test_redis_lock_unreachable_is_transport_failure():
    client = AsyncMock()
    client.set = AsyncMock(side_effect=ConnectionError("redis down"))
    lock = RedisTransitionLock("redis://localhost:6379/0")

    with patch(FROM_URL, new_callable=AsyncMock) as mock_from_url:
        mock_from_url.return_value = client

        with pytest.raises(TransportFailure):
            await lock.acquire("lead:1", 30)
