"""
Money Utilities - Safe Decimal operations for monetary values.

Avoids float precision issues by using Decimal throughout.
"""
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Union

# Default precision for money operations (2 decimal places)
MONEY_PRECISION = Decimal("0.01")

Number = Union[str, int, float, Decimal]


def to_decimal(value: Union[Number, None], strict: bool = False) -> Decimal:
    """
    Convert any value to Decimal safely.
    
    Args:
        value: Value to convert (str, int, float, Decimal, or None)
        strict: Raise ValueError instead of falling back to zero
        
    Returns:
        Decimal representation of the value, or Decimal("0") if None/invalid
    """
    if value is None or isinstance(value, bool):
        if strict:
            raise ValueError(f"Not a number: {value!r}")
        return Decimal("0")
    
    if isinstance(value, Decimal):
        return value
    
    try:
        # Convert via string to avoid float precision issues
        if isinstance(value, float):
            return Decimal(str(value))
        return Decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        if strict:
            raise ValueError(f"Not a number: {value!r}")
        return Decimal("0")


def round_money(value: Number) -> Decimal:
    """Round monetary value to two decimal places (half up)."""
    return to_decimal(value).quantize(MONEY_PRECISION, rounding=ROUND_HALF_UP)


def format_money(value: Number, symbol: str = "$") -> str:
    """
    Format monetary value for display, e.g. ``$1,234.50``.
    
    Args:
        value: Value to format
        symbol: Currency symbol placed before the amount
    """
    return f"{symbol}{round_money(value):,.2f}"


def format_plain(value: Number) -> str:
    """
    Shortest plain decimal string for a number: ``10``, ``9.5``, ``9.99``.
    
    Never uses exponent notation, so it is safe to embed in identifiers.
    """
    normalized = to_decimal(value).normalize()
    if normalized == 0:
        return "0"
    return format(normalized, "f")


def to_float(value: Number) -> float:
    """
    Convert Decimal to float for JSON serialization or external APIs.
    
    Use only at API boundaries, not for internal calculations.
    """
    return float(to_decimal(value))


def add(a: Number, b: Number) -> Decimal:
    """Safe addition of monetary values."""
    return to_decimal(a) + to_decimal(b)


def multiply(value: Number, factor: Number) -> Decimal:
    """Safe multiplication of monetary value by a factor."""
    return to_decimal(value) * to_decimal(factor)
