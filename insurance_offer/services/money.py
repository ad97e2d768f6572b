"""
Money Utilities - Safe Decimal operations for monetary values.

Storefront prices arrive as decimal strings ("4.99"); they stay Decimal
until formatted for display.
"""
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

# Default precision for money operations (2 decimal places)
MONEY_PRECISION = Decimal("0.01")

# Precision for integer currencies (JPY, KRW, etc.)
INTEGER_PRECISION = Decimal("1")

Number = Union[str, int, float, Decimal, None]


def to_decimal(value: Number) -> Decimal:
    """
    Convert any value to Decimal safely.

    Args:
        value: Value to convert (str, int, float, Decimal, or None)

    Returns:
        Decimal representation of the value, or Decimal("0") if None/invalid
    """
    if value is None:
        return Decimal("0")

    if isinstance(value, Decimal):
        return value

    try:
        # Go through str so 0.1 stays 0.1
        if isinstance(value, float):
            return Decimal(str(value))
        return Decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        return Decimal("0")


def round_money(value: Number, to_int: bool = False) -> Decimal:
    """
    Round monetary value to appropriate precision.

    Args:
        value: Value to round
        to_int: If True, round to integer (for JPY, KRW, etc.)

    Returns:
        Rounded Decimal value
    """
    decimal_value = to_decimal(value)
    precision = INTEGER_PRECISION if to_int else MONEY_PRECISION
    return decimal_value.quantize(precision, rounding=ROUND_HALF_UP)


def format_amount(value: Number, to_int: bool = False, thousands: str = ",", decimal_point: str = ".") -> str:
    """Format a rounded amount with the given separators, without a currency symbol."""
    rounded = round_money(value, to_int=to_int)
    formatted = f"{int(rounded):,}" if to_int else f"{rounded:,.2f}"
    # Swap through a placeholder so "," and "." can trade places
    return formatted.replace(",", "\0").replace(".", decimal_point).replace("\0", thousands)
