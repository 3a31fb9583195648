"""
Storage Module - key-value backends for the persisted cart.

Provides:
- CartStorage: the async get/set contract the cart store relies on
- MemoryStorage: in-process dict, for tests and local runs
- RedisStorage: Upstash Redis over REST
"""

import os
from abc import ABC, abstractmethod
from typing import Optional

from upstash_redis.asyncio import Redis as AsyncRedis

from cartstore.errors import ERROR_STORAGE_NOT_CONFIGURED, CartStorageError
from cartstore.logging import get_logger

logger = get_logger(__name__)


# Upstash Redis - standard env var names per docs
UPSTASH_REDIS_REST_URL = os.environ.get("UPSTASH_REDIS_REST_URL", "")
UPSTASH_REDIS_REST_TOKEN = os.environ.get("UPSTASH_REDIS_REST_TOKEN", "")


class StorageKeys:
    """Keys used in the backing store."""

    # JSON array of cart entries. Kept stable so carts written by
    # earlier app versions still hydrate.
    PRODUCTS = os.environ.get("CART_STORAGE_KEY", "@cart:products")


class TTL:
    """Time-to-live constants (in seconds). 0 means the key never expires."""

    CART = int(os.environ.get("CART_TTL_SECONDS", "0"))


class CartStorage(ABC):
    """Async string key-value store holding the cart blob."""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None when the key is absent."""

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Overwrite the value stored under key."""


class MemoryStorage(CartStorage):
    """
    Dict-backed storage.

    Survives store re-creation within one process, which is enough to
    exercise hydration. `writes` counts set() calls.
    """

    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self._data: dict[str, str] = dict(initial or {})
        self.writes = 0

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value
        self.writes += 1


_redis_client: Optional[AsyncRedis] = None


def get_redis() -> AsyncRedis:
    """
    Get async Upstash Redis client (singleton).

    Uses standard Upstash env var names:
    - UPSTASH_REDIS_REST_URL
    - UPSTASH_REDIS_REST_TOKEN
    """
    global _redis_client

    if _redis_client is None:
        if not UPSTASH_REDIS_REST_URL or not UPSTASH_REDIS_REST_TOKEN:
            raise CartStorageError(ERROR_STORAGE_NOT_CONFIGURED)
        _redis_client = AsyncRedis(url=UPSTASH_REDIS_REST_URL, token=UPSTASH_REDIS_REST_TOKEN)

    return _redis_client


class RedisStorage(CartStorage):
    """Upstash Redis storage. Client errors are logged and re-raised."""

    def __init__(self, client: Optional[AsyncRedis] = None, ttl: int = TTL.CART) -> None:
        self._redis = client  # Lazy initialization
        self.ttl = ttl

    @property
    def redis(self) -> AsyncRedis:
        """Get Redis client (lazy initialization)."""
        if self._redis is None:
            self._redis = get_redis()
        return self._redis

    async def get(self, key: str) -> Optional[str]:
        try:
            return await self.redis.get(key)
        except CartStorageError:
            raise
        except Exception as e:
            logger.error(f"Failed to read {key} from Redis: {e}")
            raise

    async def set(self, key: str, value: str) -> None:
        try:
            if self.ttl > 0:
                await self.redis.set(key, value, ex=self.ttl)
            else:
                await self.redis.set(key, value)
        except CartStorageError:
            raise
        except Exception as e:
            logger.error(f"Failed to write {key} to Redis: {e}")
            raise


__all__ = [
    "CartStorage",
    "MemoryStorage",
    "RedisStorage",
    "StorageKeys",
    "TTL",
    "get_redis",
]
