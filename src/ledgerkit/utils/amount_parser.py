"""Amount parsing utilities."""

import math
import re
from typing import Optional

_CURRENCY_SYMBOLS = re.compile(r"[$€£¥]")
_WHITESPACE = re.compile(r"\s+")
_DECIMAL_COMMA = re.compile(r",\d{1,2}$")


def parse_amount(amount_str: Optional[str], negate: bool = False) -> Optional[float]:
    """Parse a free-form amount string into a float.

    Handles various formats:
    - "1500", "-1500", "+1500"
    - "1,500", "1,234,567" (comma thousands separators)
    - "1 500" (space thousands separators)
    - "1,234.56" and "1.234,56" (whichever separator comes last is decimal)
    - "12,5" (lone comma with one or two trailing digits is a decimal comma)
    - "$123.45", "(123.45)" (currency symbol, negative in parentheses)

    Args:
        amount_str: Amount string, may be None
        negate: If True, the parsed value is negated

    Returns:
        Parsed amount, or None if the string is blank or not a number
    """
    if amount_str is None or not amount_str.strip():
        return None

    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    amount_str = _CURRENCY_SYMBOLS.sub("", amount_str)
    amount_str = _WHITESPACE.sub("", amount_str)
    amount_str = _normalize_separators(amount_str)

    try:
        amount = float(amount_str)
    except ValueError:
        return None
    if math.isnan(amount) or math.isinf(amount):
        return None

    if is_negative:
        amount = -amount
    if negate:
        amount = -amount
    return amount


def _normalize_separators(amount_str: str) -> str:
    """Rewrite thousands and decimal separators to plain ``.`` decimal form."""
    if "," in amount_str and "." in amount_str:
        if amount_str.rfind(",") > amount_str.rfind("."):
            return amount_str.replace(".", "").replace(",", ".")
        return amount_str.replace(",", "")

    if amount_str.count(",") == 1 and _DECIMAL_COMMA.search(amount_str):
        return amount_str.replace(",", ".")

    return amount_str.replace(",", "")
