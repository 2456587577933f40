import redis.asyncio as aioredis
from wager_engine.config import settings

_redis: aioredis.Redis = None

async def get_redis() -> aioredis.Redis:
    global _redis
    if _redis is None:
        _redis = aioredis.from_url(settings.REDIS_URL, decode_responses=True)
    return _redis

async def close_redis():
    global _redis
    if _redis is not None:
        await _redis.aclose()
        _redis = None

async def over_rate_limit(user_id: str, limit: int, window: int = 60) -> bool:
    """Count one request for ``user_id``; True once it exceeds ``limit`` in the window."""
    redis = await get_redis()
    key   = f"rl:{user_id}"
    count = await redis.incr(key)
    if count == 1:
        await redis.expire(key, window)
    return count > limit
