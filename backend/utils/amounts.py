"""
XLM <-> stroop conversion.

Amounts travel as decimal strings and are converted with Decimal so that
"1.5" is exactly 15000000 stroops.
"""
from decimal import ROUND_FLOOR, Decimal, InvalidOperation

from domain.constants import MAX_STROOPS, STROOPS_PER_XLM
from domain.errors import InvalidAmountError

# smallest XLM value that floors past the int64 stroop range
XLM_CEILING = Decimal(MAX_STROOPS + 1) / STROOPS_PER_XLM


def to_stroops(amount: str | int | float | Decimal) -> int:
    """
    Convert a decimal XLM amount to an integer number of stroops.

    Sub-stroop precision is truncated (floor).

    Raises:
        InvalidAmountError: not a positive finite number, below one stroop,
            or above the ledger's int64 maximum
    """
    if isinstance(amount, bool):
        raise InvalidAmountError()

    try:
        value = Decimal(str(amount).strip())
    except (InvalidOperation, ValueError):
        raise InvalidAmountError()

    if not value.is_finite() or value <= 0:
        raise InvalidAmountError()
    if value >= XLM_CEILING:
        raise InvalidAmountError("Amount exceeds the maximum representable XLM amount")

    stroops = int((value * STROOPS_PER_XLM).to_integral_value(rounding=ROUND_FLOOR))
    if stroops <= 0:
        raise InvalidAmountError("Amount must be at least 0.0000001 XLM")
    return stroops


def to_xlm(stroops: int) -> str:
    """Format a stroop count as a plain decimal XLM string ("1.5", "10")."""
    value = (Decimal(stroops) / STROOPS_PER_XLM).normalize()
    return format(value, "f")
