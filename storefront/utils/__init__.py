# Utilities Module
from .validators import parse_price, sanitize_quantity, validate_title

__all__ = [
    "parse_price",
    "sanitize_quantity",
    "validate_title",
]
