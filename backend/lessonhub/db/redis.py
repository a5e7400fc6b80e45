"""Redis client for request rate limiting"""
import logging

import redis

from lessonhub.core.config import settings

logger = logging.getLogger(__name__)

# Lazy initialization - no connection at import time
_client = None


def get_redis_client():
    """Get or create Redis client (lazy initialization)

    This prevents connection attempts during import, allowing mocks to be applied first.
    """
    global _client
    if _client is None:
        _client = redis.from_url(settings.REDIS_URL, decode_responses=True)
    return _client


def set_redis_client(client) -> None:
    """Swap the Redis client (tests use fakeredis)"""
    global _client
    _client = client


def increment_rate_limit(identifier: str, window: int) -> int:
    """Increment rate limit counter and return current count.
    The TTL is only set on a key that has none yet (fixed window rate limiting)."""
    key = f"ratelimit:{identifier}"
    client = get_redis_client()

    pipe = client.pipeline()
    pipe.incr(key)
    pipe.ttl(key)
    count, ttl = pipe.execute()

    if ttl is None or int(ttl) < 0:
        client.expire(key, window)
    return int(count)


def check_rate_limit(identifier: str, strict: bool = False) -> bool:
    """Check if request is within rate limit using Redis. Returns True if allowed, False if rate limited."""
    window = settings.RATE_LIMIT_STRICT_WINDOW if strict else settings.RATE_LIMIT_WINDOW
    max_requests = settings.RATE_LIMIT_STRICT_REQUESTS if strict else settings.RATE_LIMIT_REQUESTS

    current_count = increment_rate_limit(identifier, window)
    return current_count <= max_requests


def get_rate_limit_count(identifier: str) -> int:
    """Get current rate limit count"""
    count = get_redis_client().get(f"ratelimit:{identifier}")
    return int(count) if count else 0
