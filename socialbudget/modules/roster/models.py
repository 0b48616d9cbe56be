"""Employee roster models."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

UNASSIGNED_TEAM = "Unassigned"


class Employee(BaseModel):
    """An employee as returned by ``GET /api/employees``."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    team: str = UNASSIGNED_TEAM
    department: Optional[str] = None

    @field_validator("id", "name", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("team", mode="before")
    @classmethod
    def default_team(cls, v):
        if v is None:
            return UNASSIGNED_TEAM
        v = str(v).strip()
        return v or UNASSIGNED_TEAM

    @field_validator("department", mode="before")
    @classmethod
    def blank_department_is_none(cls, v):
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @property
    def search_text(self) -> str:
        """Lowercased ``"name team"`` used for suggestion matching."""
        return f"{self.name} {self.team}".lower()
