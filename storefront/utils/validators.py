"""Input sanitization for values read from page markup and form fields."""
import re
from decimal import Decimal
from typing import Union

from storefront.errors import ERROR_INVALID_PRICE, ERROR_INVALID_TITLE, InvalidInputError
from storefront.services.money import to_decimal

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_LEADING_NUMBER = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def sanitize_quantity(raw: Union[str, int, float, None]) -> int:
    """
    Normalize a quantity typed into the cart page.

    Reads the leading integer (``"3 pcs"`` -> 3). Anything that is not a
    number, or is negative, becomes 1. Zero is kept so that typing 0
    removes the line.
    """
    if raw is None or isinstance(raw, bool):
        return 1
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, float):
        if raw != raw or raw in (float("inf"), float("-inf")):
            return 1
        value = int(raw)
    else:
        match = _LEADING_INT.match(str(raw))
        if not match:
            return 1
        try:
            value = int(match.group(1))
        except ValueError:
            # more digits than int() will convert
            return 1

    if value < 0:
        return 1
    return value


def parse_price(raw: Union[str, int, float, Decimal, None]) -> Decimal:
    """
    Parse a product price attribute (``data-price="9.99"``).

    Raises:
        InvalidInputError: Value is not a non-negative number
    """
    if isinstance(raw, str):
        match = _LEADING_NUMBER.match(raw)
        if not match:
            raise InvalidInputError(f"{ERROR_INVALID_PRICE}: {raw!r}")
        raw = match.group(1)

    try:
        price = to_decimal(raw, strict=True)
    except ValueError as e:
        raise InvalidInputError(f"{ERROR_INVALID_PRICE}: {raw!r}") from e

    if not price.is_finite() or price < 0:
        raise InvalidInputError(f"{ERROR_INVALID_PRICE}: {raw!r}")
    return price


def validate_title(raw: Union[str, None]) -> str:
    """
    Return the product title unchanged if it has visible text.

    Raises:
        InvalidInputError: Title is missing or blank
    """
    if not isinstance(raw, str) or not raw.strip():
        raise InvalidInputError(ERROR_INVALID_TITLE)
    return raw
