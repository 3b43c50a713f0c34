"""Currency arithmetic for orders.

All amounts are :class:`~decimal.Decimal` values quantized to cents with
half-up rounding, the way a receipt is printed.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

CENTS = Decimal("0.01")
MAX_UNIT_PRICE = Decimal("1000000")
MAX_QUANTITY = 1000
ZERO = Decimal("0.00")
SERVICE_FEE_RATE = Decimal("0.10")

Amount = Union[Decimal, int, str]


def to_currency(value: Amount) -> Decimal:
    """Quantize a value to currency precision.

    Args:
        value: Any value accepted by the Decimal constructor. Floats are
            rejected by callers; pass strings for fractional literals.

    Returns:
        The value rounded half-up to two decimal places.

    Raises:
        ValueError: If the value is too large to be represented in cents.

    Examples:
        >>> to_currency("10.005")
        Decimal('10.01')
        >>> to_currency(3)
        Decimal('3.00')
    """
    try:
        return Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValueError(f"{value} is not a representable currency amount") from None


def service_fee_for(subtotal: Decimal) -> Decimal:
    """Compute the 10% service fee for a subtotal."""
    return to_currency(subtotal * SERVICE_FEE_RATE)


def format_currency(value: Decimal) -> str:
    """Format an amount for display in Brazilian reais.

    Examples:
        >>> format_currency(Decimal("1234.5"))
        'R$ 1.234,50'
        >>> format_currency(Decimal("-3"))
        '-R$ 3,00'
    """
    amount = to_currency(value)
    sign = "-" if amount < 0 else ""
    # Swap separators: 1,234.50 -> 1.234,50
    grouped = f"{abs(amount):,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}R$ {grouped}"
