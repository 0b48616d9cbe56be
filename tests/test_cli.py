"""Tests for the socialbudget command line."""

from __future__ import annotations

import httpx
import pytest
from rich.console import Console
from typer.testing import CliRunner

from socialbudget.cli import commands
from socialbudget.cli.commands import app
from socialbudget.modules.api.client import SocialBudgetClient

runner = CliRunner()

EMPLOYEES = [
    {"id": "e1", "name": "Ada Lovelace", "team": "Platform", "department": "Engineering"},
    {"id": "e2", "name": "Alan Turing", "team": "Platform", "department": "Engineering"},
    {"id": "e4", "name": "Frances Allen", "team": "Talent", "department": "People"},
]

EXPENSE = {
    "id": "exp_1",
    "date": "2024-05-10",
    "description": "Team lunch",
    "amount": 90,
    "cost_per_person": 45,
    "attendees": EMPLOYEES[:2],
    "receipt_url": "https://receipts.test/lunch.pdf",
}

BUDGETS = {
    "year": 2024,
    "quarter": 2,
    "department_totals": [{"department": "Engineering", "allocated": 240, "spent": 0, "remaining": 240}],
    "team_totals": [{"team": "Platform", "department": "Engineering", "headcount": 2,
                     "allocated": 50, "spent": 0, "remaining": 50}],
}


class FakeApi:
    """Routes MockTransport requests to canned payloads."""

    def __init__(self) -> None:
        self.fail = False
        self.posts: list[bytes] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if self.fail:
            return httpx.Response(500, json={"error": "down"})
        if request.method == "POST":
            self.posts.append(request.content)
            return httpx.Response(201, json=EXPENSE)
        if request.url.path == "/api/employees":
            return httpx.Response(200, json=EMPLOYEES)
        if request.url.path == "/api/expenses":
            return httpx.Response(200, json={"expenses": [EXPENSE]})
        if request.url.path == "/api/budgets":
            return httpx.Response(200, json=BUDGETS)
        return httpx.Response(404)


@pytest.fixture(autouse=True)
def cli_output(monkeypatch) -> None:
    """Wide console so table cells stay on one line; logging left unconfigured
    so structlog never binds to the runner's temporary stderr."""
    monkeypatch.setattr(commands, "console", Console(width=200))
    monkeypatch.setattr(commands, "setup_logging", lambda: None)


@pytest.fixture
def api(monkeypatch) -> FakeApi:
    fake = FakeApi()
    monkeypatch.setattr(
        commands,
        "_make_client",
        lambda: SocialBudgetClient(
            base_url="http://budget.test",
            retry_attempts=1,
            transport=httpx.MockTransport(fake),
        ),
    )
    return fake


def test_employees(api) -> None:
    result = runner.invoke(app, ["employees"])
    assert result.exit_code == 0
    assert "Ada Lovelace" in result.output
    assert "Talent" in result.output


def test_employees_load_failure(api) -> None:
    api.fail = True
    result = runner.invoke(app, ["employees"])
    assert result.exit_code == 1
    assert "Failed to load employees" in result.output


def test_expenses_with_details(api) -> None:
    result = runner.invoke(app, ["expenses", "--year", "2024", "--quarter", "2", "--details"])
    assert result.exit_code == 0
    assert "Team lunch" in result.output
    assert "$45.00" in result.output
    assert "Ada Lovelace · Platform" in result.output


def test_expenses_rejects_bad_quarter(api) -> None:
    result = runner.invoke(app, ["expenses", "--quarter", "5"])
    assert result.exit_code != 0


def test_budgets(api) -> None:
    result = runner.invoke(app, ["budgets", "-y", "2024", "-q", "2"])
    assert result.exit_code == 0
    assert "Engineering" in result.output
    # 90 split between two Platform attendees against a 50 allocation
    assert "-$40.00" in result.output


def test_split() -> None:
    result = runner.invoke(app, ["split", "90", "3"])
    assert result.exit_code == 0
    assert "$30.00" in result.output


def test_split_without_attendees() -> None:
    result = runner.invoke(app, ["split", "90", "0"])
    assert "$0.00" in result.output


def test_submit(api) -> None:
    result = runner.invoke(app, [
        "submit", "-m", "Team lunch", "-a", "90", "-p", "platform",
        "-u", "https://receipts.test/lunch.pdf",
    ])
    assert result.exit_code == 0
    assert "Expense submitted successfully." in result.output
    assert "exp_1" in result.output
    assert "$45.00 each" in result.output
    assert len(api.posts) == 1
    assert api.posts[0].count(b'name="attendeeIds[]"') == 2


def test_submit_unknown_attendee(api) -> None:
    result = runner.invoke(app, [
        "submit", "-m", "Lunch", "-a", "90", "-p", "Nobody", "-u", "https://receipts.test/r.pdf",
    ])
    assert result.exit_code == 1
    assert "Unknown attendee or team: Nobody" in result.output
    assert api.posts == []


def test_submit_requires_receipt(api) -> None:
    result = runner.invoke(app, ["submit", "-m", "Lunch", "-a", "90", "-p", "e1"])
    assert result.exit_code == 1
    assert "Add a receipt upload or receipt URL before submitting." in result.output
    assert api.posts == []
