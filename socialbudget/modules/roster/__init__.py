"""Roster Module — employee lookups by id, team and department."""

from socialbudget.modules.roster.models import UNASSIGNED_TEAM, Employee
from socialbudget.modules.roster.service import EmptyRosterWarning, RosterIndex, build_roster

__all__ = ["UNASSIGNED_TEAM", "Employee", "EmptyRosterWarning", "RosterIndex", "build_roster"]
