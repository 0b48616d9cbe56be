"""Budget models: wire payloads, fiscal periods and rollup results."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from socialbudget.formatting import quarter_from_date


class FiscalPeriod(BaseModel):
    """A (year, quarter) pair selected on the dashboard."""

    model_config = ConfigDict(frozen=True)

    year: int = Field(gt=0)
    quarter: int = Field(ge=1, le=4)

    @classmethod
    def current(cls, today: Optional[dt.date] = None) -> FiscalPeriod:
        today = today or dt.date.today()
        return cls(year=today.year, quarter=quarter_from_date(today))

    def contains(self, date: dt.date) -> bool:
        return date.year == self.year and quarter_from_date(date) == self.quarter

    def as_params(self) -> dict[str, int]:
        return {"year": self.year, "quarter": self.quarter}

    def __str__(self) -> str:
        return f"Q{self.quarter} {self.year}"


class _Figures(BaseModel):
    model_config = ConfigDict(frozen=True)

    allocated: Decimal = Decimal("0")
    spent: Decimal = Decimal("0")
    remaining: Decimal = Decimal("0")

    @field_validator("allocated", "spent", "remaining", mode="before")
    @classmethod
    def validate_decimal(cls, v):
        if v is None:
            return Decimal("0")
        return Decimal(str(v))


class BudgetTeam(_Figures):
    """Server-computed budget line for one team."""
    team: str
    department: Optional[str] = None
    headcount: int = 0

    @field_validator("department", mode="before")
    @classmethod
    def blank_department_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class BudgetDepartment(_Figures):
    """Server-computed budget line for one department."""
    department: str


class BudgetReport(BaseModel):
    """Payload of ``GET /api/budgets``."""

    model_config = ConfigDict(frozen=True)

    year: int
    quarter: int
    department_totals: list[BudgetDepartment] = Field(default_factory=list)
    team_totals: list[BudgetTeam] = Field(default_factory=list)

    @field_validator("department_totals", "team_totals", mode="before")
    @classmethod
    def null_is_empty(cls, v):
        return [] if v is None else v

    @property
    def period(self) -> FiscalPeriod:
        return FiscalPeriod(year=self.year, quarter=self.quarter)


@dataclass(frozen=True)
class TeamBudget:
    """Rollup line for a team. ``allocated``/``remaining`` are ``None`` when
    no allocation was supplied for the team."""
    team: str
    department: Optional[str]
    headcount: int
    allocated: Optional[Decimal]
    spent: Decimal
    remaining: Optional[Decimal]


@dataclass(frozen=True)
class DepartmentBudget:
    department: str
    allocated: Optional[Decimal]
    spent: Decimal
    remaining: Optional[Decimal]


@dataclass(frozen=True)
class BudgetRollup:
    department_totals: tuple[DepartmentBudget, ...] = ()
    team_totals: tuple[TeamBudget, ...] = ()

    def team(self, name: str) -> Optional[TeamBudget]:
        return next((t for t in self.team_totals if t.team == name), None)

    def department(self, name: str) -> Optional[DepartmentBudget]:
        return next((d for d in self.department_totals if d.department == name), None)

    @property
    def total_spent(self) -> Decimal:
        """Spend attributed across all teams."""
        return sum((t.spent for t in self.team_totals), Decimal("0"))
