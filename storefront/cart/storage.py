"""Key-value storage for persisted cart state."""
import json
from typing import Dict, Optional

from storefront.db import get_redis, RedisKeys, TTL
from storefront.logging import get_logger
from .models import CartState

logger = get_logger(__name__)


def serialize_cart(state: CartState) -> str:
    """Encode a cart as the JSON stored in its slot."""
    return json.dumps(state.to_dict())


def deserialize_cart(raw: Optional[str]) -> Optional[CartState]:
    """
    Decode a stored cart.

    Returns None for an absent or unreadable value; the caller starts
    from an empty cart in that case.
    """
    if not raw:
        return None
    try:
        return CartState.from_dict(json.loads(raw))
    except (json.JSONDecodeError, KeyError, TypeError, ValueError, ArithmeticError) as e:
        logger.warning(f"Corrupted cart data ignored: {e}")
        return None


class CartStorage:
    """
    Durable key-value slot store.

    Subclasses implement `load`, `save` and `delete`. They may raise on
    backend errors; CartSession decides what to do with failures.
    """

    async def load(self, key: str) -> Optional[str]:
        raise NotImplementedError

    async def save(self, key: str, value: str) -> bool:
        raise NotImplementedError

    async def delete(self, key: str) -> bool:
        raise NotImplementedError


class MemoryCartStorage(CartStorage):
    """Process-local storage for development and tests."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    async def load(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def save(self, key: str, value: str) -> bool:
        self.data[key] = value
        return True

    async def delete(self, key: str) -> bool:
        return self.data.pop(key, None) is not None


class RedisCartStorage(CartStorage):
    """
    Cart slots in Upstash Redis.

    Every save refreshes the slot TTL, so carts untouched for
    `ttl` seconds are dropped by Redis.
    """

    def __init__(self, redis=None, ttl: int = TTL.CART):
        self._redis = redis  # Lazy initialization
        self.ttl = ttl

    @property
    def redis(self):
        if self._redis is None:
            self._redis = get_redis()
        return self._redis

    async def load(self, key: str) -> Optional[str]:
        data = await self.redis.get(key)
        if data is None:
            return None
        if isinstance(data, bytes):
            return data.decode("utf-8")
        return str(data)

    async def save(self, key: str, value: str) -> bool:
        result = await self.redis.set(key, value, ex=self.ttl)
        return bool(result)

    async def delete(self, key: str) -> bool:
        return bool(await self.redis.delete(key))


def cart_storage_key(session_id: str) -> str:
    """Storage slot for one shopper session."""
    return RedisKeys.cart_key(session_id)


def create_storage(backend: str) -> CartStorage:
    """Build the storage named by CART_STORAGE_BACKEND."""
    if backend == "redis":
        return RedisCartStorage()
    if backend == "memory":
        return MemoryCartStorage()
    raise ValueError(f"Unknown cart storage backend: {backend}")
