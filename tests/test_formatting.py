"""Tests for display helpers."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal

import pytest

from socialbudget.formatting import attendee_label, format_currency, quarter_from_date, year_options
from socialbudget.modules.budgets import FiscalPeriod
from socialbudget.modules.roster import Employee


class TestFormatCurrency:
    @pytest.mark.parametrize("value, expected", [
        (Decimal("1234.5"), "$1,234.50"),
        (Decimal("0"), "$0.00"),
        (Decimal("-12"), "-$12.00"),
        (Decimal("33.335"), "$33.34"),
        (30, "$30.00"),
        (0.1, "$0.10"),
    ])
    def test_formats(self, value, expected) -> None:
        assert format_currency(value) == expected

    def test_unknown(self) -> None:
        assert format_currency(None) == "—"

    def test_custom_symbol(self) -> None:
        assert format_currency(Decimal("5"), symbol="€") == "€5.00"


class TestPeriods:
    @pytest.mark.parametrize("month, quarter", [(1, 1), (3, 1), (4, 2), (6, 2), (7, 3), (9, 3), (10, 4), (12, 4)])
    def test_quarter_from_date(self, month, quarter) -> None:
        assert quarter_from_date(dt.date(2024, month, 15)) == quarter

    def test_year_options(self) -> None:
        assert year_options(dt.date(2025, 3, 1)) == [2024, 2025, 2026]

    def test_fiscal_period(self) -> None:
        period = FiscalPeriod.current(dt.date(2024, 8, 1))
        assert (period.year, period.quarter) == (2024, 3)
        assert period.contains(dt.date(2024, 9, 30))
        assert not period.contains(dt.date(2024, 10, 1))
        assert not period.contains(dt.date(2023, 8, 1))
        assert period.as_params() == {"year": 2024, "quarter": 3}
        assert str(period) == "Q3 2024"

    def test_fiscal_period_rejects_bad_quarter(self) -> None:
        with pytest.raises(ValueError):
            FiscalPeriod(year=2024, quarter=5)


def test_attendee_label() -> None:
    assert attendee_label(Employee(id="1", name="Ada", team="Platform")) == "Ada · Platform"
