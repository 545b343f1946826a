import logging
from typing import Optional

import redis.exceptions

from shortlinks.core.config import settings
from shortlinks.db.Connection import database

logger = logging.getLogger(__name__)


def _cache_key(short_code: str) -> str:
    return f"url:{short_code}"


def get(short_code: str) -> Optional[str]:
    if database.redis_client is None:
        return None

    try:
        cached_url = database.redis_client.get(_cache_key(short_code))
    except redis.exceptions.RedisError:
        logger.warning(f"Redis lookup failed for {short_code}")
        return None

    if cached_url:
        if isinstance(cached_url, (bytes, bytearray)):
            cached_url = cached_url.decode()
        logger.debug(f"Redirect cache HIT for {short_code}")
        return cached_url

    return None


def put(short_code: str, url: str) -> None:
    if database.redis_client is None:
        return

    try:
        database.redis_client.setex(_cache_key(short_code), settings.CACHE_TTL, url)
        logger.debug(f"Cached {short_code} -> {url[:50]}")
    except redis.exceptions.RedisError:
        logger.warning(f"Failed to cache {short_code}, Redis unavailable")


def invalidate(short_code: str) -> None:
    """Evict a code's cached target. Redis errors propagate to the caller."""
    if database.redis_client is None:
        return

    try:
        database.redis_client.delete(_cache_key(short_code))
    except redis.exceptions.RedisError:
        logger.warning(f"Failed to invalidate cache for {short_code}, Redis unavailable")
        raise


def discard(short_code: str) -> None:
    """Best-effort eviction for a code whose key was already removed earlier in the request."""
    try:
        invalidate(short_code)
    except redis.exceptions.RedisError:
        pass
