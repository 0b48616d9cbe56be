"""Attendee combobox: suggestion derivation and the state reducer.

Everything here is a pure function of (roster, state, event). Suggestions are
never cached; they are recomputed from the current selection and query each
time they are needed.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterator, Optional

from socialbudget.logging_config import get_logger
from socialbudget.modules.attendees.models import (
    AttendeeSelection,
    PersonSuggestion,
    SelectorEvent,
    SelectorEventKind,
    SelectorState,
    SuggestionEntry,
    TeamSuggestion,
)
from socialbudget.modules.roster.service import RosterIndex

logger = get_logger(__name__)


def iter_suggestions(
    roster: RosterIndex,
    selection: AttendeeSelection,
    query: str,
) -> Iterator[SuggestionEntry]:
    """Yield matching teams (roster team order) then matching people (roster order).

    A team is only offered while it still has an unselected member.
    """
    needle = query.strip().lower()

    for team in roster.team_names:
        if not roster.members_of_team(team) - selection.members:
            continue
        if needle and needle not in team.lower():
            continue
        yield TeamSuggestion(team)

    for employee in roster.employees:
        if employee.id in selection:
            continue
        if needle and needle not in employee.search_text:
            continue
        yield PersonSuggestion(employee)


def suggestions(
    roster: RosterIndex,
    selection: AttendeeSelection,
    query: str,
) -> tuple[SuggestionEntry, ...]:
    return tuple(iter_suggestions(roster, selection, query))


def current_suggestions(roster: RosterIndex, state: SelectorState) -> tuple[SuggestionEntry, ...]:
    """Suggestions for ``state``; what the open dropdown renders."""
    return suggestions(roster, state.selection, state.query)


def highlighted(roster: RosterIndex, state: SelectorState) -> Optional[SuggestionEntry]:
    items = current_suggestions(roster, state)
    if 0 <= state.highlight_index < len(items):
        return items[state.highlight_index]
    return None


def add_team(roster: RosterIndex, state: SelectorState, team: str) -> SelectorState:
    """Append every unselected member of ``team`` in roster order."""
    to_add = [e.id for e in roster.team_members(team) if e.id not in state.selection]
    logger.debug("attendee_team_added", team=team, added=len(to_add))
    return replace(
        state,
        selection=state.selection.add(to_add),
        query="",
        is_open=True,
        close_pending=False,
    )


def add_person(state: SelectorState, employee_id: str) -> SelectorState:
    return replace(
        state,
        selection=state.selection.add([employee_id]),
        query="",
        is_open=True,
        close_pending=False,
    )


def activate(roster: RosterIndex, state: SelectorState, entry: SuggestionEntry) -> SelectorState:
    if isinstance(entry, TeamSuggestion):
        return add_team(roster, state, entry.name)
    return add_person(state, entry.employee.id)


def apply_event(roster: RosterIndex, state: SelectorState, event: SelectorEvent) -> SelectorState:
    """Return the state that follows ``event``.

    After every transition the highlight is reset to 0 if the query or the
    number of suggestions changed, then clamped to the suggestion list.
    """
    items = current_suggestions(roster, state)
    new_state = _transition(roster, state, event, items)
    return _settle_highlight(roster, state, new_state, len(items))


def _transition(
    roster: RosterIndex,
    state: SelectorState,
    event: SelectorEvent,
    items: tuple[SuggestionEntry, ...],
) -> SelectorState:
    kind = event.kind

    if kind in (SelectorEventKind.FOCUS, SelectorEventKind.CLICK):
        return replace(state, is_open=True, close_pending=False)

    if kind == SelectorEventKind.QUERY_CHANGED:
        return replace(state, query=event.query, is_open=True, close_pending=False)

    if kind == SelectorEventKind.BLUR:
        return replace(state, close_pending=True) if state.is_open else state

    if kind == SelectorEventKind.CLOSE_ELAPSED:
        if not state.close_pending:
            return state
        return replace(state, is_open=False, close_pending=False)

    if kind == SelectorEventKind.ESCAPE:
        return replace(state, is_open=False, close_pending=False)

    if kind == SelectorEventKind.ARROW_DOWN:
        if not items:
            return replace(state, is_open=True)
        return replace(state, is_open=True, highlight_index=min(state.highlight_index + 1, len(items) - 1))

    if kind == SelectorEventKind.ARROW_UP:
        if not items:
            return replace(state, is_open=True)
        return replace(state, is_open=True, highlight_index=max(state.highlight_index - 1, 0))

    if kind == SelectorEventKind.ENTER:
        if not state.is_open or not items:
            return state
        team = roster.find_team(state.query)
        if team is not None:
            return add_team(roster, state, team)
        if 0 <= state.highlight_index < len(items):
            return activate(roster, state, items[state.highlight_index])
        return state

    if kind == SelectorEventKind.BACKSPACE:
        if state.query or not state.selection:
            return state
        return replace(state, selection=state.selection.pop())

    if kind == SelectorEventKind.SELECT:
        if event.entry is None:
            return state
        return activate(roster, state, event.entry)

    if kind == SelectorEventKind.REMOVE:
        return replace(state, selection=state.selection.remove(event.employee_id))

    if kind == SelectorEventKind.RESET:
        return SelectorState()

    raise ValueError(f"Unknown selector event: {kind}")


def _settle_highlight(
    roster: RosterIndex,
    before: SelectorState,
    after: SelectorState,
    count_before: int,
) -> SelectorState:
    count = len(current_suggestions(roster, after))
    index = after.highlight_index
    if after.query != before.query or count != count_before:
        index = 0
    index = max(0, min(index, count - 1))
    if index == after.highlight_index:
        return after
    return replace(after, highlight_index=index)
