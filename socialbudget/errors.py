"""Error taxonomy shared by the client, validator and dashboard."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from socialbudget.modules.expenses.validators import ValidationResult


class SocialBudgetError(Exception):
    """Base class for all recoverable SocialBudget failures."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class LoadError(SocialBudgetError):
    """Roster, expense or budget data could not be fetched."""


class SubmissionError(SocialBudgetError):
    """The expense submission failed (network error or non-2xx response)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DraftValidationError(SocialBudgetError):
    """The draft is not ready to be submitted."""

    def __init__(self, result: ValidationResult) -> None:
        super().__init__(result.message)
        self.result = result
