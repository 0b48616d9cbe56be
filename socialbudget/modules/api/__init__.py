"""API Module — HTTP access to employees, expenses and budgets."""

from socialbudget.modules.api.client import SocialBudgetClient, build_expense_form

__all__ = ["SocialBudgetClient", "build_expense_form"]
