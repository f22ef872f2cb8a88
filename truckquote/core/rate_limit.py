from fastapi import HTTPException
from truckquote.core.redis import get_redis
from truckquote.core.config import settings
from truckquote.core.metrics import rate_limit_exceeded

async def check_rate_limit(client_key: str):
    redis = get_redis()
    if redis is None:
        return
    key = f"rl:{client_key}"
    count = await redis.incr(key)
    if count == 1:
        await redis.expire(key, settings.RATE_LIMIT_WINDOW)
    if count > settings.RATE_LIMIT:
        rate_limit_exceeded.inc()
        raise HTTPException(status_code=429, detail="Rate limit exceeded")
