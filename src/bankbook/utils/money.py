"""Money values.

Amounts and running balances are ``Decimal`` values with two places.
"""

from decimal import ROUND_HALF_UP, Decimal

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value) -> Decimal:
    """Convert an int, float, string or Decimal amount to cents.

    None is treated as zero. Floats are converted through their shortest
    repr, so 0.1 becomes Decimal("0.10") rather than its binary expansion.
    """
    if value is None:
        return ZERO
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)
