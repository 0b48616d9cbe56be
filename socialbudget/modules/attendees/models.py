"""Attendee selector state and event models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Iterable, Optional, Union

from socialbudget.modules.roster.models import Employee


@dataclass(frozen=True)
class AttendeeSelection:
    """Ordered, duplicate-free attendee ids.

    ``members`` is derived from ``ids`` on construction and never mutated on
    its own.
    """

    ids: tuple[str, ...] = ()
    members: frozenset[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        seen: dict[str, None] = dict.fromkeys(self.ids)
        if len(seen) != len(self.ids):
            object.__setattr__(self, "ids", tuple(seen))
        object.__setattr__(self, "members", frozenset(seen))

    def __len__(self) -> int:
        return len(self.ids)

    def __iter__(self):
        return iter(self.ids)

    def __contains__(self, employee_id: object) -> bool:
        return employee_id in self.members

    @property
    def last(self) -> Optional[str]:
        return self.ids[-1] if self.ids else None

    def add(self, employee_ids: Iterable[str]) -> AttendeeSelection:
        """Append ids not already selected, keeping their given order."""
        new_ids = [i for i in dict.fromkeys(employee_ids) if i not in self.members]
        if not new_ids:
            return self
        return AttendeeSelection(self.ids + tuple(new_ids))

    def remove(self, employee_id: str) -> AttendeeSelection:
        if employee_id not in self.members:
            return self
        return AttendeeSelection(tuple(i for i in self.ids if i != employee_id))

    def pop(self) -> AttendeeSelection:
        """Drop the most recently added id."""
        if not self.ids:
            return self
        return AttendeeSelection(self.ids[:-1])


@dataclass(frozen=True)
class TeamSuggestion:
    """Dropdown entry that adds a whole team."""
    name: str

    @property
    def label(self) -> str:
        return f"Add team: {self.name}"


@dataclass(frozen=True)
class PersonSuggestion:
    """Dropdown entry that adds a single employee."""
    employee: Employee

    @property
    def label(self) -> str:
        return f"{self.employee.name} — {self.employee.team}"


SuggestionEntry = Union[TeamSuggestion, PersonSuggestion]


@dataclass(frozen=True)
class SelectorState:
    """Combobox state. ``close_pending`` is set by blur and cleared by any
    interaction that must keep the dropdown open."""

    is_open: bool = False
    query: str = ""
    highlight_index: int = 0
    selection: AttendeeSelection = field(default_factory=AttendeeSelection)
    close_pending: bool = False


class SelectorEventKind(StrEnum):
    """Input events understood by the attendee selector."""
    FOCUS = "focus"
    CLICK = "click"
    QUERY_CHANGED = "query_changed"
    BLUR = "blur"
    CLOSE_ELAPSED = "close_elapsed"
    ESCAPE = "escape"
    ARROW_DOWN = "arrow_down"
    ARROW_UP = "arrow_up"
    ENTER = "enter"
    BACKSPACE = "backspace"
    SELECT = "select"
    REMOVE = "remove"
    RESET = "reset"


@dataclass(frozen=True)
class SelectorEvent:
    kind: SelectorEventKind
    query: str = ""
    entry: Optional[SuggestionEntry] = None
    employee_id: str = ""

    @classmethod
    def query_changed(cls, query: str) -> SelectorEvent:
        return cls(SelectorEventKind.QUERY_CHANGED, query=query)

    @classmethod
    def select(cls, entry: SuggestionEntry) -> SelectorEvent:
        return cls(SelectorEventKind.SELECT, entry=entry)

    @classmethod
    def remove(cls, employee_id: str) -> SelectorEvent:
        return cls(SelectorEventKind.REMOVE, employee_id=employee_id)
