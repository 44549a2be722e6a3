"""Number formatting for amounts and running totals."""

from decimal import Decimal, ROUND_HALF_EVEN
from typing import Callable, Mapping, Union

CENTS = Decimal("0.01")

NumberFormatter = Callable[[Decimal], str]


def to_cents(amount: Union[float, Decimal, None]) -> Decimal:
    """Convert an amount to a Decimal rounded to two places.

    None counts as zero. Floats go through ``str`` so that 0.1 becomes
    Decimal("0.10") rather than its binary expansion.
    """
    if amount is None:
        return Decimal("0.00")
    if not isinstance(amount, Decimal):
        amount = Decimal(str(amount))
    return amount.quantize(CENTS, rounding=ROUND_HALF_EVEN)


def format_number(value: Decimal) -> str:
    """Format a number with thousands grouping and two decimals."""
    return f"{value:,.2f}"


def format_totals(
    totals: Mapping[str, Decimal], formatter: NumberFormatter = format_number
) -> str:
    """Render per-currency totals, one currency per line.

    Each line is ``"<currency> <amount>"``; the currency is omitted when it
    is the empty string. Lines keep the mapping's iteration order.
    """
    parts = []
    for currency, value in totals.items():
        if currency:
            parts.append(f"{currency} {formatter(value)}")
        else:
            parts.append(formatter(value))
    return "\n".join(parts)
