"""
Amount Handling Module

Converts user-supplied amounts to Decimal and rounds them to the ledger's
precision. NEVER uses float arithmetic for monetary values.
"""

from decimal import Decimal, ROUND_HALF_UP, InvalidOperation, getcontext

from .exceptions import InvalidAmountError

# High precision for intermediate calculations
getcontext().prec = 28

ZERO = Decimal('0')


def to_decimal(value) -> Decimal:
    """
    Convert a number or numeric string to Decimal

    Floats are converted through their string form so that 0.1 stays 0.1.

    Raises:
        InvalidAmountError: If the value is not a finite number
    """
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise InvalidAmountError(f"Cannot convert {value!r} to an amount")
    else:
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            raise InvalidAmountError(f"Cannot convert {value!r} to an amount") from None

    if not result.is_finite():
        raise InvalidAmountError(f"Amount must be finite, got {value!r}")
    return result


def quantize_amount(value: Decimal, places: int) -> Decimal:
    """Round a Decimal to the given number of places (ROUND_HALF_UP)"""
    return value.quantize(Decimal('0.1') ** places, rounding=ROUND_HALF_UP)


def require_positive(value, label: str = "Amount") -> Decimal:
    """Convert and check that an amount is strictly positive"""
    amount = to_decimal(value)
    if amount <= ZERO:
        raise InvalidAmountError(f"{label} must be positive")
    return amount
