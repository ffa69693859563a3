"""Redis connection used as the snapcraft data cache.

One async client per process, created lazily on first use. Routes receive it
through the `get_cache` dependency so tests can swap in a fake.
"""

import logging
from typing import Optional

import redis.asyncio as aioredis

from buildhook.core.config import get_settings

logger = logging.getLogger(__name__)

_async_redis: Optional[aioredis.Redis] = None


def get_cache() -> aioredis.Redis:
    global _async_redis
    if _async_redis is None:
        url = get_settings().redis_url
        _async_redis = aioredis.Redis.from_url(url, decode_responses=True)
        logger.debug("Created Redis client for snapcraft data cache")
    return _async_redis


async def close_cache() -> None:
    """Close the process-wide client, if one was created."""
    global _async_redis
    if _async_redis is not None:
        await _async_redis.aclose()
        _async_redis = None
