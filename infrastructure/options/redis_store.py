"""Redis-backed OptionStore.

Options live under ``option:<name>`` with no expiry so every worker process
sees keys saved through the settings page.
"""

from typing import Optional

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from shared.logging import get_logger

log = get_logger(__name__)


class RedisOptionStore:
    def __init__(self, redis_client: aioredis.Redis, prefix: str = "option") -> None:
        self._redis = redis_client
        self._prefix = prefix

    def _key(self, name: str) -> str:
        return f"{self._prefix}:{name}"

    async def get(self, name: str) -> Optional[str]:
        return await self._redis.get(self._key(name))

    async def set(self, name: str, value: str) -> None:
        try:
            await self._redis.set(self._key(name), value)
        except RedisError as e:
            log.error("option_store_set_error", option=name, error=str(e))
            raise

    async def ping(self) -> bool:
        try:
            return bool(await self._redis.ping())
        except RedisError as e:
            log.warning("option_store_ping_failed", error=str(e))
            return False


async def create_redis_client(redis_uri: str) -> Optional[aioredis.Redis]:
    """Connect to Redis and return a client, or None on failure."""
    try:
        client: aioredis.Redis = aioredis.from_url(redis_uri, decode_responses=True)
        await client.ping()
        log.info("redis_connected", uri=redis_uri.split("@")[-1])  # mask credentials
        return client
    except RedisError as e:
        log.warning(
            "redis_connection_failed", error=str(e), error_type=type(e).__name__
        )
        return None
