"""
Django cache adapter.

The backend is Redis in production and the local-memory cache in tests.
An unreachable Redis is logged and reads as a miss, so the dashboard falls
back to querying the database.
"""

import logging
from typing import Any, Optional

from asgiref.sync import sync_to_async
from django.core.cache import cache
from redis.exceptions import RedisError

from core.infrastructure.cache import CachePort

logger = logging.getLogger(__name__)

NAMESPACE_VERSION_KEY = "cache-namespace:{}"

# Raised by the Redis client when the server is down or unreachable
BACKEND_ERRORS = (RedisError, OSError)


class DjangoCacheAdapter(CachePort):
    async def get(self, key: str) -> Optional[Any]:
        try:
            value = await sync_to_async(cache.get)(key)
        except BACKEND_ERRORS as e:
            logger.error("Cache read of %s failed: %s", key, e)
            return None
        logger.debug("Cache %s: %s", "hit" if value is not None else "miss", key)
        return value

    async def set(self, key: str, value: Any, timeout: Optional[int] = None) -> None:
        try:
            await sync_to_async(cache.set)(key, value, timeout=timeout)
        except BACKEND_ERRORS as e:
            logger.error("Cache write of %s failed: %s", key, e)

    async def namespace_version(self, namespace: str) -> int:
        try:
            version = await sync_to_async(cache.get_or_set)(NAMESPACE_VERSION_KEY.format(namespace), 1, None)
        except BACKEND_ERRORS as e:
            logger.error("Cache namespace %s unreadable: %s", namespace, e)
            return 1
        return int(version or 1)

    async def bump_namespace(self, namespace: str) -> int:
        key = NAMESPACE_VERSION_KEY.format(namespace)
        try:
            try:
                version = await sync_to_async(cache.incr)(key)
            except ValueError:
                # Missing key means the namespace was still on version 1
                version = 2
                await sync_to_async(cache.set)(key, version, None)
        except BACKEND_ERRORS as e:
            logger.error("Cache namespace %s not bumped: %s", namespace, e)
            return 0
        logger.info("Cache namespace %s now at v%s", namespace, version)
        return version


cache_adapter = DjangoCacheAdapter()
