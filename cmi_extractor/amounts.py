"""
Decimal-comma amount parsing and formatting
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Final

from .errors import AmountFormatError

# Thousands groups may be separated by a space, a (narrow) no-break space or a
# dot, but one amount never mixes separators. The comma is always decimal.
AMOUNT_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?P<sign>-)?"
    r"(?:(?P<grouped>\d{1,3}(?P<sep>[ .\u00a0\u202f])\d{3}(?:(?P=sep)\d{3})*)|(?P<plain>\d+))"
    r"(?:,(?P<fraction>\d+))?$"
)


def parse_amount(value: str | None) -> Decimal | None:
    """Parse a decimal-comma amount such as ``"1 234,56"``.

    :param value: Amount text, empty for no amount
    :type value: str | None
    :return: The amount, or None for an empty value
    :rtype: Decimal | None
    :raises AmountFormatError: If the text does not follow the grammar
    """
    if value is None:
        return None

    stripped: str = value.strip()
    if not stripped:
        return None

    match = AMOUNT_PATTERN.match(stripped)
    if match is None:
        raise AmountFormatError(value)

    integer_part: str = re.sub(r"\D", "", match.group("grouped") or match.group("plain"))
    fraction: str = match.group("fraction") or "0"

    try:
        amount = Decimal(f"{integer_part}.{fraction}")
    except InvalidOperation as e:
        raise AmountFormatError(value) from e

    return -amount if match.group("sign") else amount


def format_amount(amount: Decimal) -> str:
    """Format an amount with two decimals, space thousands and a decimal comma."""
    # 1,234.56 -> 1 234,56
    return f"{amount:,.2f}".replace(",", " ").replace(".", ",")


def normalize_amount(value: str) -> str:
    """Rewrite a valid amount in canonical form, keep empty values empty.

    :raises AmountFormatError: If the text does not follow the grammar
    """
    amount: Decimal | None = parse_amount(value)
    if amount is None:
        return ""
    return format_amount(amount)
