"""Attendee Module — multi-select combobox over people and teams."""

from socialbudget.modules.attendees.models import (
    AttendeeSelection,
    PersonSuggestion,
    SelectorEvent,
    SelectorEventKind,
    SelectorState,
    SuggestionEntry,
    TeamSuggestion,
)
from socialbudget.modules.attendees.service import (
    activate,
    add_person,
    add_team,
    apply_event,
    current_suggestions,
    highlighted,
    iter_suggestions,
    suggestions,
)

__all__ = [
    "AttendeeSelection",
    "PersonSuggestion",
    "SelectorEvent",
    "SelectorEventKind",
    "SelectorState",
    "SuggestionEntry",
    "TeamSuggestion",
    "activate",
    "add_person",
    "add_team",
    "apply_event",
    "current_suggestions",
    "highlighted",
    "iter_suggestions",
    "suggestions",
]
