"""
Cart engine configuration.

All values come from environment variables; defaults match the storefront
pages (single `cartItems` slot, flat $15.00 shipping).
"""
import os
from decimal import Decimal

from storefront.services.money import to_decimal

# Storage
CART_STORAGE_KEY = os.environ.get("CART_STORAGE_KEY", "cartItems")
CART_STORAGE_BACKEND = os.environ.get("CART_STORAGE_BACKEND", "memory").lower()

# Upstash Redis - standard env var names per docs
UPSTASH_REDIS_REST_URL = os.environ.get("UPSTASH_REDIS_REST_URL", "")
UPSTASH_REDIS_REST_TOKEN = os.environ.get("UPSTASH_REDIS_REST_TOKEN", "")

# Display
CURRENCY_SYMBOL = os.environ.get("CURRENCY_SYMBOL", "$")

DEFAULT_FLAT_SHIPPING_FEE = Decimal("15.00")


def get_flat_shipping_fee() -> Decimal:
    """
    Read the flat shipping fee from FLAT_SHIPPING_FEE.

    Raises:
        ValueError: If the configured value is not a non-negative number
    """
    raw = os.environ.get("FLAT_SHIPPING_FEE")
    if raw is None or not raw.strip():
        return DEFAULT_FLAT_SHIPPING_FEE

    fee = to_decimal(raw.strip(), strict=True)
    if not fee.is_finite() or fee < 0:
        raise ValueError(f"FLAT_SHIPPING_FEE must be a non-negative number, got {raw!r}")
    return fee


__all__ = [
    "CART_STORAGE_KEY",
    "CART_STORAGE_BACKEND",
    "UPSTASH_REDIS_REST_URL",
    "UPSTASH_REDIS_REST_TOKEN",
    "CURRENCY_SYMBOL",
    "DEFAULT_FLAT_SHIPPING_FEE",
    "get_flat_shipping_fee",
]
