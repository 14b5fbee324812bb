"""Cart package: models, storage, store, and view synchronizer."""
from .identity import derive_identity
from .models import Cart, CartLine
from .service import CartStore, get_cart_store
from .storage import CartStorage, InMemoryStorage, RedisStorage
from .views import (
    CartView,
    ViewSynchronizer,
    get_view_synchronizer,
    line_total,
    order_total,
    subtotal,
    total_item_count,
)

__all__ = [
    "Cart",
    "CartLine",
    "CartStorage",
    "CartStore",
    "CartView",
    "InMemoryStorage",
    "RedisStorage",
    "ViewSynchronizer",
    "derive_identity",
    "get_cart_store",
    "get_view_synchronizer",
    "line_total",
    "order_total",
    "subtotal",
    "total_item_count",
]
