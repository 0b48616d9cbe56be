"""Tests for the cost splitter."""

from __future__ import annotations

from decimal import Decimal

import pytest

from socialbudget.modules.expenses import parse_amount, split_cost


class TestParseAmount:
    @pytest.mark.parametrize("raw, expected", [
        ("90", Decimal("90")),
        (" 12.50 ", Decimal("12.50")),
        ("1e3", Decimal("1000")),
        ("-4", Decimal("-4")),
    ])
    def test_parses_numbers(self, raw, expected) -> None:
        assert parse_amount(raw) == expected

    @pytest.mark.parametrize("raw", ["", "   ", "abc", "12,50", "NaN", "Infinity", None])
    def test_rejects_non_numbers(self, raw) -> None:
        assert parse_amount(raw) is None


class TestSplitCost:
    """Tests for split_cost."""

    def test_even_split(self) -> None:
        assert split_cost("90", 3) == Decimal("30")

    @pytest.mark.parametrize("raw", ["", "abc", "NaN", "-inf", "0", "-10", None])
    def test_bad_or_non_positive_amount_is_zero(self, raw) -> None:
        assert split_cost(raw, 4) == Decimal("0")

    @pytest.mark.parametrize("count", [0, -1])
    def test_no_attendees_is_zero(self, count) -> None:
        assert split_cost("100", count) == Decimal("0")

    @pytest.mark.parametrize("amount, count", [
        ("100", 3),
        ("0.01", 7),
        ("123456.78", 11),
        ("59.99", 6),
    ])
    def test_share_times_count_recovers_amount(self, amount, count) -> None:
        share = split_cost(amount, count)
        assert abs(share * count - Decimal(amount)) < Decimal("1e-20")

    def test_keeps_full_precision(self) -> None:
        """No currency rounding happens here."""
        share = split_cost("100", 3)
        assert share != Decimal("33.33")
        assert str(share).startswith("33.3333333333")
