"""Pytest configuration and fixtures"""
import os
from decimal import Decimal

import pytest

# Set test environment variables
os.environ.setdefault("CART_STORAGE_BACKEND", "memory")
os.environ.setdefault("CART_STORAGE_KEY", "cartItems")

from storefront.cart import CartLine, CartStore, InMemoryStorage, ViewSynchronizer


@pytest.fixture
def storage():
    """Empty in-memory cart slot"""
    return InMemoryStorage(key="cartItems")


@pytest.fixture
def synchronizer():
    """View synchronizer with the default $15.00 flat shipping"""
    return ViewSynchronizer(flat_shipping_fee=Decimal("15.00"))


@pytest.fixture
def store(storage, synchronizer):
    """Cart store over the in-memory slot"""
    return CartStore(storage, synchronizer)


@pytest.fixture
def red_mug():
    """Sample line as built by the listing page"""
    return CartLine(
        id="red_mug_9.99",
        title="Red Mug",
        price=Decimal("9.99"),
        image="img/red-mug.jpg",
        quantity=1,
    )


@pytest.fixture
def blue_plate():
    """Second sample line"""
    return CartLine(
        id="blue_plate_24.5",
        title="Blue Plate",
        price=Decimal("24.50"),
        image="img/blue-plate.jpg",
        quantity=2,
    )
