"""
Conversion between human decimal strings and integer base units.

Base-unit math is done on strings and Python ints only; nothing here passes
through float. Conversion policy:
- to_base_units() pads or truncates the fraction to the token's decimals,
  never rounds, and maps anything unparseable to 0
- from_base_units() renders the exact value with trailing zeros stripped
- format_display_balance() is presentation only and may round
"""

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Optional, Union

from .constants import DEFAULT_TOKEN_DECIMALS, ZERO_AMOUNT
from .utils import get_logger

logger = get_logger(__name__)

_DIGITS = re.compile(r"[0-9]+")
AMOUNT_PATTERN = re.compile(r"[0-9]*\.?[0-9]*")

# Enough digits for a uint256 scaled by any realistic decimals count.
_DISPLAY_PRECISION = 100

_DISPLAY_BUCKETS = (
    (Decimal("0.001"), 8),
    (Decimal("1"), 6),
    (Decimal("1000"), 4),
)


def to_base_units(value: Optional[str], decimals: int) -> int:
    """
    Convert a decimal string to integer base units.

    Args:
        value: Sanitized decimal string (e.g. "1.5", ".25", "3.")
        decimals: Number of fractional digits of the asset

    Returns:
        value * 10**decimals with excess fractional digits dropped, or 0 for
        empty, transient or malformed input
    """
    if not value or value == ZERO_AMOUNT:
        return 0
    if not AMOUNT_PATTERN.fullmatch(value):
        return 0

    decimals = max(int(decimals), 0)
    integer_part, _, fraction_part = value.partition(".")
    integer_part = integer_part or "0"
    fraction_part = fraction_part[:decimals].ljust(decimals, "0")

    digits = integer_part + fraction_part
    if not _DIGITS.fullmatch(digits):
        return 0
    return int(digits)


def from_base_units(amount: int, decimals: int) -> str:
    """
    Render integer base units as an exact decimal string.

    Args:
        amount: Non-negative amount in base units
        decimals: Number of fractional digits of the asset

    Returns:
        "quotient" or "quotient.fraction" with trailing zeros removed

    Raises:
        ValueError: If amount is negative
    """
    amount = int(amount)
    if amount < 0:
        raise ValueError(f"amount must be non-negative: {amount}")
    if amount == 0:
        return ZERO_AMOUNT

    decimals = max(int(decimals), 0)
    if decimals == 0:
        return str(amount)

    quotient, remainder = divmod(amount, 10**decimals)
    fraction = str(remainder).rjust(decimals, "0").rstrip("0")
    if not fraction:
        return str(quotient)
    return f"{quotient}.{fraction}"


def truncate_decimals(value: str, max_decimals: int) -> str:
    """Cut the fractional part to max_decimals digits without rounding."""
    integer_part, separator, fraction_part = value.partition(".")
    if not separator or len(fraction_part) <= max_decimals:
        return value
    if max_decimals <= 0:
        return integer_part or ZERO_AMOUNT
    return f"{integer_part}.{fraction_part[:max_decimals]}"


def strip_trailing_zeros(value: str) -> str:
    """Drop trailing fractional zeros ("1.500" -> "1.5", "2.0" -> "2")."""
    if "." not in value:
        return value
    stripped = value.rstrip("0").rstrip(".")
    return stripped or ZERO_AMOUNT


def is_positive_amount(value: Optional[str]) -> bool:
    """True only for well-formed decimal strings strictly greater than zero."""
    if not value or not AMOUNT_PATTERN.fullmatch(value):
        return False
    try:
        return Decimal(value) > 0
    except InvalidOperation:
        # "." and other transient states
        return False


def resolve_decimals(
    raw: Optional[Union[int, str]], default: int = DEFAULT_TOKEN_DECIMALS
) -> int:
    """
    Decimals to use for a token whose decimals() read may not have landed.

    An unknown value (None) falls back to the configured default. A real 0
    is kept as 0.
    """
    if raw is None:
        logger.debug(f"Token decimals unknown, falling back to {default}")
        return default
    return int(raw)


def format_display_balance(value: Optional[Union[str, int, Decimal]]) -> str:
    """
    Format a balance for display only; never feed the result back into math.

    Precision buckets:
        below 0.001  -> 8 fractional digits
        [0.001, 1)   -> 6 fractional digits
        [1, 1000)    -> 4 fractional digits
        1000 and up  -> thousands grouped, at most 2 fractional digits

    Args:
        value: Decimal value (string or number)

    Returns:
        Display string, "0.00" if the value cannot be parsed
    """
    if value is None:
        return "0.00"

    with localcontext() as ctx:
        ctx.prec = _DISPLAY_PRECISION
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation:
            return "0.00"
        if not amount.is_finite():
            return "0.00"

        for upper_bound, places in _DISPLAY_BUCKETS:
            if amount < upper_bound:
                quantum = Decimal(1).scaleb(-places)
                return f"{amount.quantize(quantum, rounding=ROUND_HALF_UP):f}"

        grouped = f"{amount.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP):,.2f}"
        return grouped.rstrip("0").rstrip(".")
