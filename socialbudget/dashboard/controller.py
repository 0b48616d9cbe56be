"""Dashboard controller: explicit UI state plus the async load/submit flows."""

from __future__ import annotations

import asyncio
import datetime as dt
import warnings
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Any, Callable, Optional

from socialbudget.config import Settings, get_settings
from socialbudget.errors import LoadError, SubmissionError
from socialbudget.logging_config import get_logger
from socialbudget.modules.api.client import SocialBudgetClient
from socialbudget.modules.attendees.models import (
    SelectorEvent,
    SelectorEventKind,
    SelectorState,
    SuggestionEntry,
)
from socialbudget.modules.attendees.service import apply_event, current_suggestions
from socialbudget.modules.budgets.models import BudgetReport, BudgetRollup, FiscalPeriod
from socialbudget.modules.budgets.service import aggregate_budgets
from socialbudget.modules.expenses.models import Expense, ExpenseDraft, ReceiptFile
from socialbudget.modules.expenses.splitter import split_cost
from socialbudget.modules.expenses.validators import ValidationResult, validate_draft
from socialbudget.modules.roster.models import Employee
from socialbudget.modules.roster.service import EmptyRosterWarning, RosterIndex, build_roster

logger = get_logger(__name__)

SUBMITTED_TOAST = "Expense submitted successfully."


@dataclass
class DashboardState:
    """Everything the dashboard renders."""
    period: FiscalPeriod
    draft: ExpenseDraft
    employees: list[Employee] = field(default_factory=list)
    roster: RosterIndex = field(default_factory=RosterIndex)
    expenses: list[Expense] = field(default_factory=list)
    budgets: Optional[BudgetReport] = None
    rollup: BudgetRollup = field(default_factory=BudgetRollup)
    is_loading: bool = False
    is_submitting: bool = False
    error: Optional[str] = None
    validation: Optional[ValidationResult] = None
    toast: str = ""
    expanded_expenses: set[str] = field(default_factory=set)


class BudgetDashboard:
    """Drives a :class:`DashboardState` from user actions and API responses.

    Period reloads are sequenced last-request-wins: each reload takes a
    sequence number and results belonging to a superseded reload are
    dropped.
    """

    def __init__(
        self,
        client: SocialBudgetClient,
        settings: Optional[Settings] = None,
        today: Callable[[], dt.date] = dt.date.today,
    ) -> None:
        self._client = client
        self._settings = settings or get_settings()
        self._today = today
        self._load_seq = 0
        self._close_handle: Optional[asyncio.TimerHandle] = None
        self._toast_handle: Optional[asyncio.TimerHandle] = None
        now = today()
        self.state = DashboardState(
            period=FiscalPeriod.current(now),
            draft=ExpenseDraft.blank(now),
        )

    # ── Loading ──────────────────────────────────────────────────────

    async def load(self) -> bool:
        """Initial load: roster, then expenses and budgets for the period."""
        return await self._refresh(include_roster=True)

    async def reload(self) -> bool:
        return await self._refresh(include_roster=False)

    async def change_period(self, year: Optional[int] = None, quarter: Optional[int] = None) -> bool:
        period = FiscalPeriod(
            year=year if year is not None else self.state.period.year,
            quarter=quarter if quarter is not None else self.state.period.quarter,
        )
        self.state.period = period
        self.state.expanded_expenses.clear()
        logger.info("dashboard_period_changed", period=str(period))
        return await self._refresh(include_roster=False)

    async def _refresh(self, *, include_roster: bool) -> bool:
        self._load_seq += 1
        seq = self._load_seq
        period = self.state.period
        self.state.is_loading = True
        self.state.error = None

        try:
            if include_roster:
                self._set_roster(await self._client.fetch_employees())
            expenses, report = await self._fetch_quarter(period)
        except LoadError as exc:
            logger.warning("dashboard_load_failed", period=str(period), error=exc.message)
            if seq == self._load_seq:
                self.state.error = exc.message
                self.state.is_loading = False
            return False

        if seq != self._load_seq:
            logger.info("dashboard_stale_load_discarded", period=str(period), seq=seq, latest=self._load_seq)
            return False

        self.state.expenses = expenses
        self.state.budgets = report
        self.state.is_loading = False
        self._recompute_rollup()
        return True

    async def _fetch_quarter(self, period: FiscalPeriod) -> tuple[list[Expense], BudgetReport]:
        """Fetch expenses and the budget report concurrently.

        If either request fails the other is cancelled before the error
        propagates.
        """
        tasks = (
            asyncio.create_task(self._client.fetch_expenses(period)),
            asyncio.create_task(self._client.fetch_budgets(period)),
        )
        try:
            expenses, report = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            raise
        return expenses, report

    def _set_roster(self, employees: list[Employee]) -> None:
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always", EmptyRosterWarning)
            roster = build_roster(employees)
        if caught:
            logger.info("dashboard_roster_empty")
        self.state.employees = list(roster.employees)
        self.state.roster = roster
        self._recompute_rollup()

    def _recompute_rollup(self) -> None:
        self.state.rollup = aggregate_budgets(
            self.state.expenses,
            self.state.roster,
            report=self.state.budgets,
        )

    # ── Attendee selector ────────────────────────────────────────────

    @property
    def attendees(self) -> SelectorState:
        return self.state.draft.attendees

    @property
    def suggestions(self) -> tuple[SuggestionEntry, ...]:
        """Entries the dropdown shows; empty while it is closed."""
        if not self.attendees.is_open:
            return ()
        return current_suggestions(self.state.roster, self.attendees)

    def attendee_event(self, event: SelectorEvent) -> SelectorState:
        new_state = apply_event(self.state.roster, self.attendees, event)
        self.state.draft.attendees = new_state
        if not new_state.close_pending:
            self._cancel_close()
        return new_state

    def select_suggestion(self, entry: SuggestionEntry) -> SelectorState:
        """Pointer-down on a suggestion; lands before any pending close."""
        return self.attendee_event(SelectorEvent.select(entry))

    def remove_attendee(self, employee_id: str) -> SelectorState:
        return self.attendee_event(SelectorEvent.remove(employee_id))

    def blur_attendees(self) -> SelectorState:
        """Mark the selector for closing after ``attendee_blur_delay_ms``.

        Without a running event loop nothing is scheduled; call
        :meth:`close_elapsed` to deliver the close explicitly.
        """
        new_state = self.attendee_event(SelectorEvent(SelectorEventKind.BLUR))
        self._cancel_close()
        if new_state.close_pending:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                return new_state
            self._close_handle = loop.call_later(self._settings.attendee_blur_delay, self.close_elapsed)
        return new_state

    def close_elapsed(self) -> SelectorState:
        self._close_handle = None
        return self.attendee_event(SelectorEvent(SelectorEventKind.CLOSE_ELAPSED))

    def _cancel_close(self) -> None:
        if self._close_handle is not None:
            self._close_handle.cancel()
            self._close_handle = None

    # ── Draft ────────────────────────────────────────────────────────

    def update_draft(self, **changes: Any) -> ExpenseDraft:
        """Set draft form fields (``date``, ``description``, ``amount_raw``, ``receipt_url``)."""
        if "attendees" in changes:
            raise TypeError("attendees change through attendee_event()")
        self.state.draft = replace(self.state.draft, **changes)
        return self.state.draft

    def set_receipt_file(self, receipt: Optional[ReceiptFile]) -> ExpenseDraft:
        return self.update_draft(receipt_file=receipt)

    @property
    def cost_per_person(self) -> Decimal:
        draft = self.state.draft
        return split_cost(draft.amount_raw, len(draft.selection))

    async def submit(self) -> Optional[Expense]:
        """Validate and submit the draft.

        The draft survives validation and submission failures so the user can
        retry without re-entering anything; it is reset only on success.
        """
        if self.state.is_submitting:
            return None
        self.state.error = None

        result = validate_draft(self.state.draft)
        self.state.validation = result
        if not result.ok:
            logger.info("expense_draft_invalid", codes=[str(c) for c in result.codes])
            self.state.error = result.message
            return None

        self.state.is_submitting = True
        try:
            expense = await self._client.submit_expense(self.state.draft)
        except SubmissionError as exc:
            self.state.error = exc.message
            return None
        finally:
            self.state.is_submitting = False

        self._cancel_close()
        self.state.draft = ExpenseDraft.blank(self._today())
        self.state.validation = None
        self._show_toast(SUBMITTED_TOAST)
        await self.reload()
        return expense

    # ── Toast & expense list ─────────────────────────────────────────

    def _show_toast(self, message: str) -> None:
        self.state.toast = message
        if self._toast_handle is not None:
            self._toast_handle.cancel()
            self._toast_handle = None
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._toast_handle = loop.call_later(self._settings.toast_duration_seconds, self.dismiss_toast)

    def dismiss_toast(self) -> None:
        self.state.toast = ""
        self._toast_handle = None

    def toggle_expanded(self, expense_id: str) -> bool:
        """Flip the attendee details row of an expense; returns the new state."""
        expanded = self.state.expanded_expenses
        if expense_id in expanded:
            expanded.discard(expense_id)
            return False
        expanded.add(expense_id)
        return True

    @staticmethod
    def teams_impacted(expense: Expense) -> list[str]:
        return expense.teams_impacted

    def close(self) -> None:
        """Cancel pending timers."""
        self._cancel_close()
        if self._toast_handle is not None:
            self._toast_handle.cancel()
            self._toast_handle = None
