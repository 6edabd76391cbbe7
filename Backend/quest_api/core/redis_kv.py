from typing import Optional
import redis

from quest_api.config import REDIS_URL

_client: Optional[redis.Redis] = None


def get_redis() -> redis.Redis:
    """Shared client, created on first use so the API can run without Redis."""
    global _client
    if _client is None:
        if not REDIS_URL:
            raise RuntimeError("REDIS_URL is not configured")
        _client = redis.Redis.from_url(REDIS_URL, decode_responses=True)
    return _client
