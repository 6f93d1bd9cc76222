"""Key-value access for cart snapshots."""
from typing import Optional, Protocol

from foodcart.db import get_redis, RedisKeys, TTL


class KeyValueStore(Protocol):
    """Passive string-blob store the cart reconciles with."""

    async def get(self, key: str) -> Optional[str]:
        ...

    async def set(self, key: str, value: str) -> bool:
        ...


class RedisKeyValueStore:
    """
    KeyValueStore over Upstash Redis.

    Keys are namespaced with ``prefix`` so each checkout session gets its
    own cartItems / promoApplied pair.
    """

    def __init__(self, redis=None, prefix: str = "", ttl: int = TTL.CART):
        self._redis = redis  # Lazy initialization
        self.prefix = prefix
        self.ttl = ttl

    @property
    def redis(self):
        """Get Redis client (lazy initialization)."""
        if self._redis is None:
            self._redis = get_redis()
        return self._redis

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    async def get(self, key: str) -> Optional[str]:
        data = await self.redis.get(self._key(key))
        if isinstance(data, bytes):
            data = data.decode("utf-8")
        return data

    async def set(self, key: str, value: str) -> bool:
        if self.ttl:
            result = await self.redis.set(self._key(key), value, ex=self.ttl)
        else:
            result = await self.redis.set(self._key(key), value)
        return bool(result)


def session_store(session_id: str) -> RedisKeyValueStore:
    """Storage for a single checkout session."""
    return RedisKeyValueStore(prefix=RedisKeys.session_prefix(session_id))


__all__ = ["KeyValueStore", "RedisKeyValueStore", "RedisKeys", "session_store"]
