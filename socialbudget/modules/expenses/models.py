"""Expense data models: server-confirmed expenses and the local draft."""

from __future__ import annotations

import datetime as dt
import mimetypes
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from socialbudget.modules.attendees.models import AttendeeSelection, SelectorState
from socialbudget.modules.roster.models import Employee


class Expense(BaseModel):
    """A confirmed expense as returned by ``/api/expenses``."""

    model_config = ConfigDict(frozen=True)

    id: str
    date: dt.date
    description: str = ""
    amount: Decimal
    cost_per_person: Decimal
    attendees: list[Employee] = Field(default_factory=list)
    receipt_url: Optional[str] = None

    @field_validator("amount", "cost_per_person", mode="before")
    @classmethod
    def validate_decimal(cls, v):
        if v is None:
            return Decimal("0")
        return Decimal(str(v))

    @field_validator("receipt_url", mode="before")
    @classmethod
    def blank_url_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def teams_impacted(self) -> list[str]:
        """Distinct attendee teams in attendee order."""
        return list(dict.fromkeys(a.team for a in self.attendees))


@dataclass(frozen=True)
class ReceiptFile:
    """A receipt picked for upload."""
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"

    @classmethod
    def from_path(cls, path: str | Path) -> ReceiptFile:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Receipt file not found: {path}")
        content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        return cls(filename=path.name, content=path.read_bytes(), content_type=content_type)


@dataclass
class ExpenseDraft:
    """In-progress expense form state.

    ``date`` and ``amount_raw`` hold the raw form text; they are parsed by the
    validator and the cost splitter, never here.
    """
    date: str = ""
    description: str = ""
    amount_raw: str = ""
    attendees: SelectorState = field(default_factory=SelectorState)
    receipt_file: Optional[ReceiptFile] = None
    receipt_url: str = ""

    @classmethod
    def blank(cls, today: Optional[dt.date] = None) -> ExpenseDraft:
        """A fresh draft dated ``today``."""
        return cls(date=(today or dt.date.today()).isoformat())

    @property
    def selection(self) -> AttendeeSelection:
        return self.attendees.selection

    @property
    def has_receipt(self) -> bool:
        return self.receipt_file is not None or bool(self.receipt_url.strip())
