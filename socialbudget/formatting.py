"""Display helpers: currency, fiscal quarters and attendee labels."""

from __future__ import annotations

import datetime as dt
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

from socialbudget.config import get_settings
from socialbudget.modules.roster.models import Employee

Number = Union[Decimal, float, int]

CENT = Decimal("0.01")


def format_currency(value: Optional[Number], symbol: Optional[str] = None) -> str:
    """Format ``value`` as ``$1,234.50``; negatives as ``-$12.00``, unknown as ``—``."""
    if value is None:
        return "—"
    if symbol is None:
        symbol = get_settings().currency_symbol
    amount = Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def quarter_from_date(date: dt.date) -> int:
    return (date.month - 1) // 3 + 1


def year_options(today: Optional[dt.date] = None) -> list[int]:
    """Years offered by the period picker: previous, current and next."""
    year = (today or dt.date.today()).year
    return [year - 1, year, year + 1]


def attendee_label(employee: Employee) -> str:
    return f"{employee.name} · {employee.team}"
