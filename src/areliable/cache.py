r"""Key-value cache backed by Redis.

Values are stored as JSON so their type survives a round trip. The
cache is optional: without ``Settings.redis_host`` it is disabled and
every call raises ``CacheDisabledError``.
"""

from __future__ import annotations

__all__ = ["RedisCache"]

import json
from typing import TYPE_CHECKING, Any

import redis.asyncio as redis

from areliable.exceptions import CacheDisabledError
from areliable.logger import get_logger

if TYPE_CHECKING:
    from areliable.logger import AppLogger
    from areliable.settings import Settings


class RedisCache:
    """JSON key-value cache over ``redis.asyncio.Redis``.

    Args:
        settings: Settings providing the connection parameters and the
            default expiration.
        logger: Optional logger. If ``None``, the ``areliable.cache``
            logger is used.
        client: Optional pre-built Redis client, used instead of creating
            one from the settings.

    Example:
        ```pycon
        >>> import asyncio
        >>> from areliable.cache import RedisCache
        >>> from areliable.settings import Settings
        >>> async def main():  # doctest: +SKIP
        ...     cache = RedisCache(Settings(redis_host="localhost"))
        ...     await cache.set_key("user:42", {"name": "Jane"}, expiration=60)
        ...     return await cache.get_key("user:42")
        ...
        >>> asyncio.run(main())  # doctest: +SKIP
        {'name': 'Jane'}

        ```
    """

    def __init__(
        self,
        settings: Settings,
        logger: AppLogger | None = None,
        client: redis.Redis | None = None,
    ) -> None:
        self.settings = settings
        self.logger = logger if logger is not None else get_logger(__name__)
        self._client = client

        if self._client is None and settings.redis_host:
            self._client = redis.Redis(
                host=settings.redis_host,
                port=settings.redis_port,
                password=settings.redis_password,
                decode_responses=True,
            )

        if self._client is None:
            self.logger.warning("Redis client DISABLED", local_only=True)
        else:
            self.logger.success("Redis client ENABLED", local_only=True)

    @property
    def enabled(self) -> bool:
        return self._client is not None

    def _ensure_client(self) -> redis.Redis:
        if self._client is None:
            msg = "Redis client is DISABLED"
            raise CacheDisabledError(msg)
        return self._client

    async def set_key(self, key: str, value: Any, expiration: float | None = None) -> None:
        """Store a JSON-serializable value.

        Args:
            key: The cache key.
            value: The value to store.
            expiration: Time to live in seconds. Defaults to
                ``settings.redis_default_expiration``.

        Raises:
            CacheDisabledError: If the cache is disabled.
        """
        client = self._ensure_client()
        string_value = json.dumps(value)
        ttl = expiration if expiration is not None else self.settings.redis_default_expiration
        self.logger.debug(f"Redis: Setting key {key} as {string_value}...")
        await client.set(key, string_value, px=int(ttl * 1000))

    async def get_key(self, key: str) -> Any:
        """Read and decode a value.

        Returns:
            The stored value, or ``None`` when the key does not exist.

        Raises:
            CacheDisabledError: If the cache is disabled.
        """
        client = self._ensure_client()
        self.logger.debug(f"Redis: Reading key {key}...")
        reply = await client.get(key)
        if reply is None:
            return None
        return json.loads(reply)

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
