"""
Database Module - Upstash Redis client

Provides a singleton async Upstash Redis client and the key layout used
for persisted cart state.
"""

from typing import Optional

from upstash_redis.asyncio import Redis as AsyncRedis

from storefront import config


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
        if not config.UPSTASH_REDIS_REST_URL or not config.UPSTASH_REDIS_REST_TOKEN:
            raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")
        _redis_client = AsyncRedis(
            url=config.UPSTASH_REDIS_REST_URL,
            token=config.UPSTASH_REDIS_REST_TOKEN,
        )

    return _redis_client


class RedisKeys:
    """Redis key prefixes for different data types."""

    # One slot per shopper session: cart-storage:{session_id}
    CART = "cart-storage"

    @staticmethod
    def cart_key(session_id: str) -> str:
        return f"{RedisKeys.CART}:{session_id}"


class TTL:
    """Time-to-live constants for Redis keys (seconds)."""

    CART = config.CART_TTL_SECONDS
