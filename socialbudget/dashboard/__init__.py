"""Dashboard — state container for the expense form and budget views."""

from socialbudget.dashboard.controller import SUBMITTED_TOAST, BudgetDashboard, DashboardState

__all__ = ["SUBMITTED_TOAST", "BudgetDashboard", "DashboardState"]
