"""Storage media for the persisted cart slot."""
from typing import Optional, Protocol

from storefront.db import RedisKeys, get_redis_sync
from storefront.errors import ERROR_STORAGE_UNAVAILABLE, StorageUnavailableError
from storefront.logging import get_logger

logger = get_logger(__name__)


class CartStorage(Protocol):
    """
    Opaque key-value slot holding the serialized cart.
    
    ``read`` returns None when nothing has been written yet. ``write``
    replaces the whole slot.
    """
    
    key: str
    
    def read(self) -> Optional[str]: ...
    
    def write(self, data: str) -> None: ...


class InMemoryStorage:
    """Process-local slot; used by tests and single-process front ends."""
    
    def __init__(self, key: str = "cartItems", initial: Optional[str] = None):
        self.key = key
        self._data = initial
    
    def read(self) -> Optional[str]:
        return self._data
    
    def write(self, data: str) -> None:
        self._data = data


class RedisStorage:
    """Slot stored under a single Upstash Redis key."""
    
    def __init__(self, key: str = "cartItems", redis=None):
        self.key = key
        self._redis = redis  # Lazy initialization
    
    @property
    def redis(self):
        """Get Redis client (lazy initialization)."""
        if self._redis is None:
            try:
                self._redis = get_redis_sync()
            except ValueError as e:
                raise StorageUnavailableError(f"{ERROR_STORAGE_UNAVAILABLE}: {e}") from e
        return self._redis
    
    @property
    def redis_key(self) -> str:
        return RedisKeys.cart_key(self.key)
    
    def read(self) -> Optional[str]:
        try:
            data = self.redis.get(self.redis_key)
        except StorageUnavailableError:
            raise
        except Exception as e:
            logger.error(f"Failed to read cart from Redis: {e}")
            raise StorageUnavailableError(f"{ERROR_STORAGE_UNAVAILABLE}: {e}") from e
        if data is None:
            return None
        if isinstance(data, bytes):
            return data.decode("utf-8")
        return str(data)
    
    def write(self, data: str) -> None:
        try:
            self.redis.set(self.redis_key, data)
        except StorageUnavailableError:
            raise
        except Exception as e:
            logger.error(f"Failed to save cart to Redis: {e}")
            raise StorageUnavailableError(f"{ERROR_STORAGE_UNAVAILABLE}: {e}") from e


def create_storage(backend: str, key: str) -> CartStorage:
    """
    Build the configured storage medium.
    
    Args:
        backend: "memory" or "redis"
        key: Slot name
    """
    if backend == "memory":
        return InMemoryStorage(key=key)
    if backend == "redis":
        return RedisStorage(key=key)
    raise ValueError(f"Unknown cart storage backend: {backend!r}")
