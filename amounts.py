import logging
from decimal import Decimal
from typing import Optional, Tuple, Union

from solana_constants import U64_MAX
from transfer_errors import CreateTransactionError

logger = logging.getLogger(__name__)


def to_decimal(amount: Union[Decimal, int, str]) -> Decimal:
    """
    Normalize a caller-supplied amount to a Decimal.

    Floats are refused since they can't carry an exact decimal value.
    Negative and non-finite amounts are refused as well.
    """
    if isinstance(amount, float):
        raise TypeError("Amount must be a Decimal, int or str, not float")
    if not isinstance(amount, Decimal):
        amount = Decimal(amount)
    if not amount.is_finite():
        raise ValueError(f"Amount must be finite, got {amount}")
    if amount < 0:
        raise ValueError(f"Amount must not be negative, got {amount}")
    return amount


def decimal_places(amount: Decimal) -> int:
    """Count the significant fractional digits of an amount, ignoring trailing zeros."""
    _, digits, exponent = amount.as_tuple()
    if exponent >= 0 or not any(digits):
        return 0
    places = -exponent
    for digit in reversed(digits):
        if digit != 0 or places == 0:
            break
        places -= 1
    return places


def to_integer_amount(amount: Decimal, precision: int) -> Tuple[Optional[int], Optional[CreateTransactionError]]:
    """
    Convert a decimal amount to base units at the given precision.

    Args:
        amount: The decimal amount entered by the user
        precision: Number of decimals of the asset (9 for SOL, mint decimals for tokens)

    Returns:
        tuple: (integer_amount, error)
    """
    places = decimal_places(amount)
    if places > precision:
        logger.warning(f"Amount {amount} has {places} decimal places, more than the {precision} allowed")
        return None, CreateTransactionError.AMOUNT_INVALID_DECIMALS

    _, digits, exponent = amount.as_tuple()
    if not any(digits):
        return 0, None

    # 20 or more digits in base units is above U64_MAX, no balance can cover it
    if amount.adjusted() + precision >= len(str(U64_MAX)):
        logger.warning(f"Amount {amount} is above the u64 range at precision {precision}")
        return U64_MAX + 1, None

    # Exact integer arithmetic. With trailing zeros dropped the exponent is at least
    # -precision, so the result is a whole number of base units
    digits = list(digits)
    while digits[-1] == 0:
        digits.pop()
        exponent += 1
    coefficient = int(''.join(str(digit) for digit in digits))
    integer_amount = coefficient * 10 ** (exponent + precision)

    logger.debug(f"Converted {amount} to {integer_amount} base units at precision {precision}")
    return integer_amount, None


def require_at_least(have: int, need: int, error: CreateTransactionError) -> Optional[CreateTransactionError]:
    """Return the given error when the available balance doesn't cover the required amount."""
    if need > have:
        logger.warning(f"Insufficient funds: need {need} base units, have {have}")
        return error
    return None
