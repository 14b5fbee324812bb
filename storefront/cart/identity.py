"""Deterministic product identity derived from title and price."""
import re

from storefront.services.money import Number, format_plain

_WHITESPACE_RUN = re.compile(r"\s+")


def normalize_title(title: str) -> str:
    """Trim, lowercase, and collapse whitespace runs to single underscores."""
    return _WHITESPACE_RUN.sub("_", title.strip().lower())


def derive_identity(title: str, price: Number) -> str:
    """
    Build the cart line id for a product.
    
    Two products are "the same" exactly when their normalized titles and
    prices match; there is no separate catalog lookup.
    
    >>> derive_identity("  Red   Mug ", "9.99")
    'red_mug_9.99'
    """
    return f"{normalize_title(title)}_{format_plain(price)}"
