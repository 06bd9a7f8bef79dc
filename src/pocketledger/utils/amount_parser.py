"""Amount parsing utilities."""

import re
from decimal import Decimal, InvalidOperation

from pocketledger.domain.errors import InvalidArgument


def parse_amount(amount_str: str) -> Decimal:
    """Parse a user supplied amount into a positive Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45", "€10"
    - "1,234.56"

    The direction (income or expense) is chosen separately, so negative
    and zero amounts are rejected.

    Raises:
        InvalidArgument: If amount string cannot be parsed or is not positive
    """
    if not amount_str or not amount_str.strip():
        raise InvalidArgument("Empty amount string")

    cleaned = re.sub(r"[$€£¥₽]", "", amount_str.strip())
    cleaned = cleaned.replace(",", "").strip()

    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        raise InvalidArgument(f"Could not parse amount '{amount_str}'")

    if not amount.is_finite() or amount <= 0:
        raise InvalidArgument(f"Amount must be positive, got '{amount_str}'")
    return amount
