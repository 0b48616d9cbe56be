"""Submission gate for expense drafts."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from enum import StrEnum

from socialbudget.errors import DraftValidationError
from socialbudget.modules.expenses.models import ExpenseDraft
from socialbudget.modules.expenses.splitter import parse_amount


class ValidationCode(StrEnum):
    """Reasons a draft cannot be submitted."""
    MISSING_RECEIPT = "missing_receipt"
    MISSING_DATE = "missing_date"
    INVALID_DATE = "invalid_date"
    MISSING_DESCRIPTION = "missing_description"
    INVALID_AMOUNT = "invalid_amount"
    NO_ATTENDEES = "no_attendees"


@dataclass(frozen=True)
class ValidationIssue:
    code: ValidationCode
    field: str
    message: str


@dataclass(frozen=True)
class ValidationResult:
    issues: tuple[ValidationIssue, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.issues

    @property
    def codes(self) -> list[ValidationCode]:
        return [issue.code for issue in self.issues]

    @property
    def message(self) -> str:
        """Message of the first issue, shown in the banner."""
        return self.issues[0].message if self.issues else ""

    def has(self, code: ValidationCode) -> bool:
        return code in self.codes


def validate_draft(draft: ExpenseDraft) -> ValidationResult:
    """Check a draft before submission.

    The receipt is checked first because it spans two alternative inputs
    (file upload or URL); either one is enough.
    """
    issues: list[ValidationIssue] = []

    if not draft.has_receipt:
        issues.append(ValidationIssue(
            ValidationCode.MISSING_RECEIPT,
            "receipt",
            "Add a receipt upload or receipt URL before submitting.",
        ))

    date_text = draft.date.strip()
    if not date_text:
        issues.append(ValidationIssue(ValidationCode.MISSING_DATE, "date", "Choose the expense date."))
    else:
        try:
            dt.date.fromisoformat(date_text)
        except ValueError:
            issues.append(ValidationIssue(
                ValidationCode.INVALID_DATE, "date", "Date must be in YYYY-MM-DD format.",
            ))

    if not draft.description.strip():
        issues.append(ValidationIssue(
            ValidationCode.MISSING_DESCRIPTION, "description", "Add a description.",
        ))

    amount = parse_amount(draft.amount_raw)
    if amount is None or amount <= 0:
        issues.append(ValidationIssue(
            ValidationCode.INVALID_AMOUNT, "amount", "Amount must be greater than 0.",
        ))

    if not draft.selection:
        issues.append(ValidationIssue(
            ValidationCode.NO_ATTENDEES, "attendees", "Add at least one attendee.",
        ))

    return ValidationResult(tuple(issues))


def ensure_valid(draft: ExpenseDraft) -> ValidationResult:
    """Like :func:`validate_draft` but raises :class:`DraftValidationError`."""
    result = validate_draft(draft)
    if not result.ok:
        raise DraftValidationError(result)
    return result
