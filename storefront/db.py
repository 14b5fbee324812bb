"""
Database Module - Redis client

Provides the singleton Upstash Redis client used as the persisted
key-value medium for carts.
"""

from typing import Optional

from upstash_redis import Redis

from storefront import config

_redis_client: Optional[Redis] = None


def get_redis_sync() -> Redis:
    """
    Get sync Upstash Redis client (singleton).
    
    Uses standard Upstash env var names:
    - UPSTASH_REDIS_REST_URL
    - UPSTASH_REDIS_REST_TOKEN
    """
    global _redis_client
    
    if _redis_client is None:
        if not config.UPSTASH_REDIS_REST_URL or not config.UPSTASH_REDIS_REST_TOKEN:
            raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")
        _redis_client = Redis(url=config.UPSTASH_REDIS_REST_URL, token=config.UPSTASH_REDIS_REST_TOKEN)
    
    return _redis_client


# Redis key prefixes for organization
class RedisKeys:
    """Redis key prefixes for different data types."""
    
    CART = "cart:"  # cart:{slot}
    
    @staticmethod
    def cart_key(slot: str) -> str:
        return f"{RedisKeys.CART}{slot}"
