"""Shared test fixtures and configuration."""

from __future__ import annotations

import datetime as dt
import os
from decimal import Decimal
from typing import Optional

import pytest

os.environ.setdefault("SOCIALBUDGET_ENV", "test")
os.environ.setdefault("SOCIALBUDGET_LOG_LEVEL", "WARNING")
os.environ.setdefault("API_BASE_URL", "http://budget.test")
os.environ.setdefault("API_RETRY_ATTEMPTS", "1")

from socialbudget.config import Settings
from socialbudget.modules.expenses.models import Expense
from socialbudget.modules.roster.models import Employee
from socialbudget.modules.roster.service import RosterIndex, build_roster


@pytest.fixture
def settings() -> Settings:
    """Return test settings."""
    return Settings(
        socialbudget_env="test",
        socialbudget_log_level="WARNING",
        api_base_url="http://budget.test",
        api_retry_attempts=1,
        attendee_blur_delay_ms=20,
        toast_duration_seconds=0.05,
        _env_file=None,
    )


@pytest.fixture
def employees() -> list[Employee]:
    """Two teams in Engineering, one in People, and an employee without a department."""
    return [
        Employee(id="e1", name="Ada Lovelace", team="Platform", department="Engineering"),
        Employee(id="e2", name="Alan Turing", team="Platform", department="Engineering"),
        Employee(id="e3", name="Grace Hopper", team="Compilers", department="Engineering"),
        Employee(id="e4", name="Frances Allen", team="Talent", department="People"),
        Employee(id="e5", name="Edsger Dijkstra", team="Compilers"),
    ]


@pytest.fixture
def roster(employees: list[Employee]) -> RosterIndex:
    return build_roster(employees)


def _make_expense(
    expense_id: str,
    attendees: list[Employee],
    amount: str,
    date: dt.date = dt.date(2024, 5, 10),
    cost_per_person: Optional[str] = None,
) -> Expense:
    """Build a server-confirmed expense with an even split."""
    total = Decimal(amount)
    share = Decimal(cost_per_person) if cost_per_person else total / len(attendees)
    return Expense(
        id=expense_id,
        date=date,
        description=f"Event {expense_id}",
        amount=total,
        cost_per_person=share,
        attendees=attendees,
        receipt_url="https://receipts.test/r.pdf",
    )


@pytest.fixture
def make_expense():
    """Factory for confirmed expenses."""
    return _make_expense
