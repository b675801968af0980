"""Money parsing, formatting and id generation.

All monetary amounts are in minor units (Money type).
"""

import random
import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from budgetrule.domain.models import ExpenseId, Money

_NON_AMOUNT_CHARS = re.compile(r"[^0-9.]")


def parse_amount(text: str) -> Money:
    """Convert user-typed text to minor units.

    Anything other than digits and dots is dropped, and at most two digits
    after the first dot are kept. "12.345" becomes 1234, "$1,000" becomes
    100000.

    Args:
        text: Raw amount text.

    Returns:
        Amount in minor units, or 0 if nothing parseable remains.
    """
    cleaned = _NON_AMOUNT_CHARS.sub("", text)
    parts = cleaned.split(".")
    formatted = parts[0]
    if len(parts) > 1:
        formatted += "." + parts[1][:2]

    if not formatted.strip("."):
        return Money(0)

    try:
        value = Decimal(formatted)
    except InvalidOperation:
        return Money(0)

    return Money(int((value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)))


def format_money(amount: Money, symbol: str = "$") -> str:
    """Format minor units for display (e.g., "$1,234.56", "-$12.00")."""
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount) / 100:,.2f}"


def generate_id() -> ExpenseId:
    """Generate a random UUID-v4 style identifier.

    Uses the non-cryptographic ``random`` source. Collisions are negligible
    for a single local store but ids are not safe to merge across devices.
    """
    bits = random.getrandbits(128)
    hex_digits = f"{bits:032x}"
    variant = "89ab"[int(hex_digits[16], 16) & 0x3]
    return ExpenseId(
        f"{hex_digits[:8]}-{hex_digits[8:12]}-4{hex_digits[13:16]}-{variant}{hex_digits[17:20]}-{hex_digits[20:32]}"
    )
