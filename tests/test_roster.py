"""Tests for the roster index."""

from __future__ import annotations

import pytest

from socialbudget.modules.roster import UNASSIGNED_TEAM, Employee, EmptyRosterWarning, build_roster


class TestEmployee:
    """Tests for Employee normalisation."""

    def test_blank_team_becomes_unassigned(self) -> None:
        employee = Employee(id="x", name="X", team="  ")
        assert employee.team == UNASSIGNED_TEAM

    def test_blank_department_is_none(self) -> None:
        employee = Employee(id="x", name="X", team="T", department="")
        assert employee.department is None

    def test_fields_are_stripped(self) -> None:
        employee = Employee.model_validate({"id": " x ", "name": " Ada ", "team": " Platform "})
        assert (employee.id, employee.name, employee.team) == ("x", "Ada", "Platform")

    def test_search_text(self) -> None:
        employee = Employee(id="x", name="Ada Lovelace", team="Platform")
        assert employee.search_text == "ada lovelace platform"


class TestBuildRoster:
    """Tests for build_roster."""

    def test_by_id(self, roster, employees) -> None:
        assert roster.by_id["e3"] == employees[2]
        assert "e1" in roster
        assert "missing" not in roster
        assert len(roster) == 5

    def test_team_names_first_seen_order(self) -> None:
        """Teams keep input order, not alphabetical."""
        roster = build_roster([
            Employee(id="1", name="A", team="Zeta"),
            Employee(id="2", name="B", team="Alpha"),
            Employee(id="3", name="C", team="Zeta"),
            Employee(id="4", name="D", team="Mid"),
        ])
        assert roster.team_names == ("Zeta", "Alpha", "Mid")

    def test_members_of_team(self, roster) -> None:
        assert roster.members_of_team("Platform") == frozenset({"e1", "e2"})
        assert roster.members_of_team("Nope") == frozenset()

    def test_every_id_in_exactly_one_team(self, roster) -> None:
        for employee_id in roster.by_id:
            owners = [t for t in roster.team_names if employee_id in roster.members_of_team(t)]
            assert len(owners) == 1

    def test_duplicate_ids_keep_first(self) -> None:
        roster = build_roster([
            Employee(id="1", name="A", team="X"),
            Employee(id="1", name="A again", team="Y"),
        ])
        assert roster.by_id["1"].name == "A"
        assert roster.team_names == ("X",)
        assert len(roster) == 1

    def test_team_department(self, roster) -> None:
        assert roster.team_department("Compilers") == "Engineering"
        assert roster.team_department("Talent") == "People"
        assert roster.team_department("Nope") is None

    def test_department_of(self, roster) -> None:
        assert roster.department_of("e1") == "Engineering"
        assert roster.department_of("e5") is None
        assert roster.department_of("missing") is None

    def test_find_team_case_insensitive(self, roster) -> None:
        assert roster.find_team("  platform ") == "Platform"
        assert roster.find_team("plat") is None
        assert roster.find_team("") is None

    def test_empty_roster_warns_but_is_usable(self) -> None:
        with pytest.warns(EmptyRosterWarning):
            roster = build_roster([])
        assert roster.is_empty
        assert roster.team_names == ()
        assert roster.members_of_team("anything") == frozenset()
