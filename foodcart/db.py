"""
Storage Module - Upstash Redis Client

Provides a singleton instance of the async Upstash Redis client used as the
durable key-value store behind checkout carts.
"""

import os
from typing import Optional

from upstash_redis.asyncio import Redis as AsyncRedis


# Upstash uses REST_URL and REST_TOKEN
UPSTASH_REDIS_REST_URL = os.environ.get("UPSTASH_REDIS_REST_URL", "")
UPSTASH_REDIS_REST_TOKEN = os.environ.get("UPSTASH_REDIS_REST_TOKEN", "")


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
            raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")
        _redis_client = AsyncRedis(url=UPSTASH_REDIS_REST_URL, token=UPSTASH_REDIS_REST_TOKEN)

    return _redis_client


class RedisKeys:
    """Redis keys used by the checkout screen."""

    # Ordered list of line items (JSON array)
    CART_ITEMS = "cartItems"

    # Promotion flag handed to the payment step (JSON bool)
    PROMO_APPLIED = "promoApplied"

    # Per-session namespace
    CHECKOUT = "checkout:"  # checkout:{session_id}:{key}

    @staticmethod
    def session_prefix(session_id: str) -> str:
        return f"{RedisKeys.CHECKOUT}{session_id}:"


class TTL:
    """Time-to-live constants for Redis keys (0 = keep forever)."""

    CART = int(os.environ.get("CART_TTL_SECONDS", "0"))
