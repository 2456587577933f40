import json
from abc import ABC, abstractmethod
from typing import Optional

from wager_engine.redis_client import get_redis


class KeyedStore(ABC):
    """Small durable key → JSON value store."""

    @abstractmethod
    async def get(self, key: str) -> Optional[dict]:
        ...

    @abstractmethod
    async def put(self, key: str, value: dict) -> None:
        ...


class RedisKeyedStore(KeyedStore):

    def __init__(self, redis_factory=get_redis):
        self._redis_factory = redis_factory

    async def get(self, key):
        redis = await self._redis_factory()
        raw = await redis.get(key)
        return json.loads(raw) if raw else None

    async def put(self, key, value):
        redis = await self._redis_factory()
        await redis.set(key, json.dumps(value))


class MemoryKeyedStore(KeyedStore):

    def __init__(self):
        self._data = {}

    async def get(self, key):
        raw = self._data.get(key)
        return json.loads(raw) if raw else None

    async def put(self, key, value):
        self._data[key] = json.dumps(value)
