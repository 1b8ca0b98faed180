"""Amount parsing utilities."""

import re
from decimal import Decimal, InvalidOperation

from bankbook.domain.errors import ValidationError

_CURRENCY_SYMBOLS = re.compile(r"[$€£¥]|\b[A-Z]{3}\b")


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount typed on the command line.

    Handles "123.45", "-€123.45", "1,234.56", European "1.234,56" and
    "12,5", and accounting notation "(123.45)" for negatives.

    Raises:
        ValidationError: If the text is not an amount
    """
    if not amount_str or not amount_str.strip():
        raise ValidationError("Empty amount")

    text = amount_str.strip()
    negative = text.startswith("(") and text.endswith(")")
    if negative:
        text = text[1:-1]
    text = _CURRENCY_SYMBOLS.sub("", text).replace(" ", "")

    # The right-most separator is the decimal point when both appear
    if "," in text and "." in text:
        if text.rfind(",") > text.rfind("."):
            text = text.replace(".", "").replace(",", ".")
        else:
            text = text.replace(",", "")
    elif "," in text:
        whole, _, fraction = text.rpartition(",")
        if len(fraction) == 3 and whole.lstrip("-"):
            text = text.replace(",", "")
        else:
            text = whole.replace(",", "") + "." + fraction

    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise ValidationError(f"Could not parse amount '{amount_str}'")
    if not amount.is_finite():
        raise ValidationError(f"Could not parse amount '{amount_str}'")
    return -amount if negative else amount
