"""Roster index: lookup structures derived from the flat employee list."""

from __future__ import annotations

import warnings
from dataclasses import dataclass, field
from typing import Iterable, Optional

from socialbudget.logging_config import get_logger
from socialbudget.modules.roster.models import Employee

logger = get_logger(__name__)


class EmptyRosterWarning(UserWarning):
    """The roster was built from an empty employee list."""


@dataclass(frozen=True)
class RosterIndex:
    """Read-only view over the employee list.

    ``team_names`` keeps the order in which each team first appears in the
    input; suggestion ordering depends on it.
    """

    employees: tuple[Employee, ...] = ()
    by_id: dict[str, Employee] = field(default_factory=dict)
    team_names: tuple[str, ...] = ()
    _members: dict[str, frozenset[str]] = field(default_factory=dict, repr=False)
    _team_departments: dict[str, str] = field(default_factory=dict, repr=False)

    def __len__(self) -> int:
        return len(self.employees)

    def __contains__(self, employee_id: object) -> bool:
        return employee_id in self.by_id

    @property
    def is_empty(self) -> bool:
        return not self.employees

    def get(self, employee_id: str) -> Optional[Employee]:
        return self.by_id.get(employee_id)

    def members_of_team(self, team: str) -> frozenset[str]:
        """Return the ids of everyone on ``team`` (empty for unknown teams)."""
        return self._members.get(team, frozenset())

    def team_members(self, team: str) -> list[Employee]:
        """Members of ``team`` in roster order."""
        return [e for e in self.employees if e.team == team]

    def find_team(self, name: str) -> Optional[str]:
        """Case-insensitive exact team lookup on a trimmed name."""
        needle = name.strip().lower()
        if not needle:
            return None
        for team in self.team_names:
            if team.lower() == needle:
                return team
        return None

    def team_department(self, team: str) -> Optional[str]:
        """Department of the first member of ``team`` that has one."""
        return self._team_departments.get(team)

    def department_of(self, employee_id: str) -> Optional[str]:
        employee = self.by_id.get(employee_id)
        return employee.department if employee else None


def build_roster(employees: Iterable[Employee]) -> RosterIndex:
    """Build a :class:`RosterIndex` in a single pass.

    An empty input is not an error: an :class:`EmptyRosterWarning` is issued
    and a usable empty index is returned so the dashboard can still render.
    Later duplicates of an id are dropped so that every id belongs to exactly
    one team.
    """
    kept: list[Employee] = []
    by_id: dict[str, Employee] = {}
    team_names: list[str] = []
    members: dict[str, set[str]] = {}
    team_departments: dict[str, str] = {}

    for employee in employees:
        if employee.id in by_id:
            logger.warning("roster_duplicate_id", employee_id=employee.id, name=employee.name)
            continue
        kept.append(employee)
        by_id[employee.id] = employee
        if employee.team not in members:
            members[employee.team] = set()
            team_names.append(employee.team)
        members[employee.team].add(employee.id)
        if employee.department and employee.team not in team_departments:
            team_departments[employee.team] = employee.department

    if not kept:
        logger.warning("roster_empty")
        warnings.warn("employee roster is empty", EmptyRosterWarning, stacklevel=2)

    return RosterIndex(
        employees=tuple(kept),
        by_id=by_id,
        team_names=tuple(team_names),
        _members={team: frozenset(ids) for team, ids in members.items()},
        _team_departments=team_departments,
    )
