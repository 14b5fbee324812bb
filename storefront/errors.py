"""
Cart Errors

Centralized error messages and the exception types raised by the cart engine.
"""

# Storage errors
ERROR_CORRUPT_STATE = "Stored cart data is corrupted"
ERROR_STORAGE_UNAVAILABLE = "Cart storage unavailable"

# Input errors
ERROR_INVALID_ID = "Line id must be a non-empty string"
ERROR_INVALID_TITLE = "Product title must be a non-empty string"
ERROR_INVALID_PRICE = "Product price must be a non-negative number"
ERROR_INVALID_QUANTITY = "Quantity must be a positive integer"
ERROR_PRICE_PRECISION = "Price has more precision than can be stored"


class CartError(Exception):
    """Base class for cart engine errors."""


class CorruptStateError(CartError):
    """Persisted cart data is present but cannot be parsed as a cart."""

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"{ERROR_CORRUPT_STATE} (slot '{key}'): {reason}")


class InvalidInputError(CartError, ValueError):
    """Raised at the input boundary when a value cannot be normalized."""


class StorageUnavailableError(CartError):
    """The storage medium failed to read or write the cart slot."""
