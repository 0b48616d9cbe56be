"""Even cost split across attendees."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Optional

ZERO = Decimal("0")


def parse_amount(raw: object) -> Optional[Decimal]:
    """Parse a raw amount; ``None`` for anything that is not a finite number."""
    if raw is None:
        return None
    text = str(raw).strip()
    if not text:
        return None
    try:
        value = Decimal(text)
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value


def split_cost(amount_raw: object, attendee_count: int) -> Decimal:
    """Cost per person for ``amount_raw`` shared by ``attendee_count`` people.

    Returns zero instead of raising for incomplete input (no attendees,
    unparsable or non-positive amount). No rounding is applied.
    """
    if attendee_count <= 0:
        return ZERO
    amount = parse_amount(amount_raw)
    if amount is None or amount <= 0:
        return ZERO
    return amount / attendee_count
