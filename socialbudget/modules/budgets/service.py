"""Budget rollups: attribute per-person expense shares to teams and departments."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Optional

from socialbudget.logging_config import get_logger
from socialbudget.modules.budgets.models import (
    BudgetReport,
    BudgetRollup,
    DepartmentBudget,
    FiscalPeriod,
    TeamBudget,
)
from socialbudget.modules.expenses.models import Expense
from socialbudget.modules.roster.models import Employee
from socialbudget.modules.roster.service import RosterIndex

logger = get_logger(__name__)

ZERO = Decimal("0")


def _resolve(attendee: Employee, roster: RosterIndex) -> Employee:
    # The roster is authoritative for team/department; the expense payload
    # is the fallback for people who have since left it.
    return roster.get(attendee.id) or attendee


def _remaining(allocated: Optional[Decimal], spent: Decimal) -> Optional[Decimal]:
    return None if allocated is None else allocated - spent


def aggregate_budgets(
    expenses: Iterable[Expense],
    roster: RosterIndex,
    report: Optional[BudgetReport] = None,
    period: Optional[FiscalPeriod] = None,
) -> BudgetRollup:
    """Roll expenses up into team and department figures.

    Every attendee's team is charged the expense's ``cost_per_person``,
    and the same share goes to that team's department, so department
    figures are always the sum of their teams. ``allocated`` and
    ``headcount`` come from ``report``; allocation is never invented for
    scopes the report does not cover.
    Lines are ordered by first appearance in ``expenses``, followed by
    report-only lines in report order.
    """
    team_spent: dict[str, Decimal] = {}
    team_department: dict[str, Optional[str]] = {}
    department_spent: dict[str, Decimal] = {}
    counted = 0

    for expense in expenses:
        if period is not None and not period.contains(expense.date):
            continue
        counted += 1
        share = expense.cost_per_person
        for attendee in expense.attendees:
            employee = _resolve(attendee, roster)
            team_spent[employee.team] = team_spent.get(employee.team, ZERO) + share
            department = team_department.get(employee.team)
            if department is None:
                department = roster.team_department(employee.team) or employee.department
                team_department[employee.team] = department
            # departments aggregate over teams
            if department:
                department_spent[department] = department_spent.get(department, ZERO) + share

    team_allocations = {t.team: t for t in report.team_totals} if report else {}
    department_allocations = {d.department: d for d in report.department_totals} if report else {}

    team_order = list(team_spent) + [t for t in team_allocations if t not in team_spent]
    department_order = list(department_spent) + [
        d for d in department_allocations if d not in department_spent
    ]

    teams: list[TeamBudget] = []
    for team in team_order:
        allocation = team_allocations.get(team)
        spent = team_spent.get(team, ZERO)
        allocated = allocation.allocated if allocation else None
        department = team_department.get(team)
        if department is None and allocation is not None:
            department = allocation.department
        teams.append(TeamBudget(
            team=team,
            department=department,
            headcount=allocation.headcount if allocation else len(roster.members_of_team(team)),
            allocated=allocated,
            spent=spent,
            remaining=_remaining(allocated, spent),
        ))

    departments: list[DepartmentBudget] = []
    for name in department_order:
        allocation = department_allocations.get(name)
        spent = department_spent.get(name, ZERO)
        allocated = allocation.allocated if allocation else None
        departments.append(DepartmentBudget(
            department=name,
            allocated=allocated,
            spent=spent,
            remaining=_remaining(allocated, spent),
        ))

    logger.debug(
        "budgets_aggregated",
        expenses=counted,
        teams=len(teams),
        departments=len(departments),
        period=str(period) if period else None,
    )
    return BudgetRollup(department_totals=tuple(departments), team_totals=tuple(teams))
