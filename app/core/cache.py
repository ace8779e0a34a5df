import json
from typing import Any, Optional, Protocol

from redis.asyncio import Redis

from app.core.config import settings

_redis: Optional[Redis] = None


def get_redis() -> Redis:
    global _redis
    if _redis is None:
        _redis = Redis.from_url(settings.REDIS_URL, decode_responses=True)
    return _redis


class JsonCache(Protocol):
    async def get(self, key: str) -> Optional[Any]:
        ...

    async def set(self, key: str, data: Any, ttl: int) -> None:
        ...


class RedisJsonCache:
    def __init__(self, redis: Optional[Redis] = None) -> None:
        self._redis = redis

    @property
    def redis(self) -> Redis:
        return self._redis or get_redis()

    async def get(self, key: str) -> Optional[Any]:
        val = await self.redis.get(key)
        return json.loads(val) if val else None

    async def set(self, key: str, data: Any, ttl: int) -> None:
        await self.redis.set(key, json.dumps(data), ex=ttl)


async def close_redis() -> None:
    global _redis
    if _redis is not None:
        await _redis.aclose()
        _redis = None
