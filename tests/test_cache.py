import asyncio

from brainbytes.services.cache import cache_result, redis_cache
from brainbytes.services.chat.gateway import InferenceGateway
from brainbytes.services.chat.guard import FALLBACK_REPLY, guarded_reply


def _memory_cache(monkeypatch):
    store = {}

    async def get(key):
        return store.get(key)

    async def set(key, value, ttl=3600):
        store[key] = value

    monkeypatch.setattr(redis_cache, "get", get)
    monkeypatch.setattr(redis_cache, "set", set)
    return store


async def test_cache_result_reuses_stored_value(monkeypatch):
    _memory_cache(monkeypatch)
    calls = []

    @cache_result(ttl=10)
    async def expensive_operation(x: int):
        calls.append(x)
        return x * x

    assert await expensive_operation(5) == 25
    assert await expensive_operation(5) == 25
    assert await expensive_operation(x=6) == 36
    assert calls == [5, 6]


async def test_falsy_results_are_not_cached(monkeypatch):
    store = _memory_cache(monkeypatch)

    @cache_result()
    async def empty_answer(question: str):
        return ""

    await empty_answer("?")
    assert store == {}


async def test_disabled_cache_is_a_no_op():
    # The test fixtures turn the cache off
    assert redis_cache.enabled is False
    assert await redis_cache.get("anything") is None
    await redis_cache.set("anything", {"foo": "bar"})


async def test_stalled_cache_does_not_block_the_deadline(monkeypatch):
    async def stalled_get(key):
        await asyncio.Event().wait()

    monkeypatch.setattr(redis_cache, "get", stalled_get)

    gateway = InferenceGateway()
    result = await asyncio.wait_for(guarded_reply(gateway.generate("What is an atom?", "Science"), timeout=0.1), timeout=2)
    assert result == FALLBACK_REPLY
