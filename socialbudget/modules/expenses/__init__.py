"""Expense Module — drafts, cost splitting and submission validation."""

from socialbudget.modules.expenses.models import Expense, ExpenseDraft, ReceiptFile
from socialbudget.modules.expenses.splitter import parse_amount, split_cost
from socialbudget.modules.expenses.validators import (
    ValidationCode,
    ValidationIssue,
    ValidationResult,
    ensure_valid,
    validate_draft,
)

__all__ = [
    "Expense",
    "ExpenseDraft",
    "ReceiptFile",
    "ValidationCode",
    "ValidationIssue",
    "ValidationResult",
    "ensure_valid",
    "parse_amount",
    "split_cost",
    "validate_draft",
]
