# Reply cache (Redis, asyncio client)
import os
import json
import logging
import inspect
from functools import wraps
from typing import Optional

import redis
import redis.asyncio as aioredis

REDIS_URL = os.getenv("REDIS_URL")
REDIS_HOST = os.getenv("REDIS_HOST", "localhost")
REDIS_PORT = int(os.getenv("REDIS_PORT", 6379))
REDIS_PASSWORD = os.getenv("REDIS_PASSWORD", None)
REDIS_TIMEOUT = float(os.getenv("REDIS_TIMEOUT", 2))

class RedisCache:
    """
    Async Redis wrapper used for tutor replies.

    The connection is checked on first use; ``enabled`` stays None until
    then. Every Redis error is logged and treated as a cache miss.
    """

    def __init__(self):
        options = dict(decode_responses=True, socket_connect_timeout=REDIS_TIMEOUT, socket_timeout=REDIS_TIMEOUT)
        if REDIS_URL:
            self.client = aioredis.from_url(REDIS_URL, **options)
        else:
            self.client = aioredis.Redis(host=REDIS_HOST, port=REDIS_PORT, password=REDIS_PASSWORD, db=0, **options)
        self.enabled: Optional[bool] = None

    async def _ready(self) -> bool:
        if self.enabled is None:
            try:
                await self.client.ping()
                self.enabled = True
                logging.info(f"Reply cache connected to Redis ({REDIS_URL or f'{REDIS_HOST}:{REDIS_PORT}'})")
            except (redis.RedisError, OSError) as e:
                logging.warning(f"Redis unavailable, reply cache disabled: {e}")
                self.enabled = False
        return self.enabled

    async def get(self, key: str):
        if not await self._ready():
            return None
        try:
            val = await self.client.get(key)
            if val:
                return json.loads(val)
        except (redis.RedisError, OSError) as e:
            logging.error(f"Redis get error: {e}")
        return None

    async def set(self, key: str, value, ttl: int = 3600):
        if not await self._ready():
            return
        try:
            await self.client.setex(key, ttl, json.dumps(value))
        except (redis.RedisError, OSError) as e:
            logging.error(f"Redis set error: {e}")

redis_cache = RedisCache()

def cache_result(ttl: int = 3600):
    """Cache the truthy return value of an async function, keyed by its arguments."""
    def decorator(func):
        arg_names = list(inspect.signature(func).parameters.keys())

        @wraps(func)
        async def wrapper(*args, **kwargs):
            args_dict = dict(zip(arg_names, args))
            args_dict.update(kwargs)
            args_dict.pop("self", None)
            key = f"{func.__module__}:{func.__name__}:{str(sorted(args_dict.items()))}"

            cached_val = await redis_cache.get(key)
            if cached_val is not None:
                logging.info(f"[CACHE HIT] {func.__name__}")
                return cached_val

            result = await func(*args, **kwargs)
            if result:
                await redis_cache.set(key, result, ttl)
            return result
        return wrapper
    return decorator
