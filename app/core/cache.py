import redis

from app.core.config import settings

_redis_client = None


def cache_enabled() -> bool:
    return settings.cache_driver == "redis"


def get_redis_client():
    global _redis_client
    if _redis_client is None:
        # Use simple redis client (synchronous) for lightweight operations
        _redis_client = redis.Redis.from_url(
            settings.redis_url, socket_connect_timeout=2, socket_timeout=2
        )
    return _redis_client
