"""Budget Module — quarterly team and department rollups."""

from socialbudget.modules.budgets.models import (
    BudgetDepartment,
    BudgetReport,
    BudgetRollup,
    BudgetTeam,
    DepartmentBudget,
    FiscalPeriod,
    TeamBudget,
)
from socialbudget.modules.budgets.service import aggregate_budgets

__all__ = [
    "BudgetDepartment",
    "BudgetReport",
    "BudgetRollup",
    "BudgetTeam",
    "DepartmentBudget",
    "FiscalPeriod",
    "TeamBudget",
    "aggregate_budgets",
]
