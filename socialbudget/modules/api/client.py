"""Async client for the social budget HTTP API."""

from __future__ import annotations

from typing import Any, Optional

import httpx
from pydantic import ValidationError
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from socialbudget.config import get_settings
from socialbudget.errors import LoadError, SubmissionError
from socialbudget.logging_config import get_logger
from socialbudget.modules.budgets.models import BudgetReport, FiscalPeriod
from socialbudget.modules.expenses.models import Expense, ExpenseDraft
from socialbudget.modules.roster.models import Employee

logger = get_logger(__name__)

DEFAULT_SUBMIT_ERROR = "Failed to create expense"

MultipartParts = list[tuple[str, tuple[Optional[str], bytes] | tuple[Optional[str], bytes, str]]]


def build_expense_form(draft: ExpenseDraft) -> MultipartParts:
    """Encode a draft as the multipart parts expected by ``POST /api/expenses``.

    Plain fields are sent as parts without a filename; attendees repeat the
    ``attendeeIds[]`` field in selection order.
    """
    def text(name: str, value: str) -> tuple[str, tuple[None, bytes]]:
        return name, (None, value.encode("utf-8"))

    parts: MultipartParts = [
        text("date", draft.date),
        text("description", draft.description),
        text("amount", draft.amount_raw.strip()),
    ]
    parts.extend(text("attendeeIds[]", employee_id) for employee_id in draft.selection)
    parts.append(text("receiptUrl", draft.receipt_url.strip()))
    if draft.receipt_file is not None:
        receipt = draft.receipt_file
        parts.append(("receipt", (receipt.filename, receipt.content, receipt.content_type)))
    return parts


def _error_message(response: httpx.Response, default: str) -> str:
    try:
        data = response.json()
    except ValueError:
        return default
    if isinstance(data, dict) and isinstance(data.get("error"), str) and data["error"]:
        return data["error"]
    return default


class SocialBudgetClient:
    """Thin wrapper over ``httpx.AsyncClient`` for the four budget endpoints.

    GET requests retry transport failures; any non-2xx response is turned
    into a :class:`LoadError` or :class:`SubmissionError`.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        retry_attempts: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        settings = get_settings()
        self._base_url = (base_url or settings.api_base_url).rstrip("/")
        self._retry_attempts = retry_attempts or settings.api_retry_attempts
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=timeout or settings.api_timeout_seconds,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> SocialBudgetClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def _get(self, path: str, resource: str, params: Optional[dict[str, Any]] = None) -> Any:
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self._retry_attempts),
                wait=wait_exponential(multiplier=0.5, max=5),
                retry=retry_if_exception_type(httpx.TransportError),
                reraise=True,
            ):
                with attempt:
                    response = await self._client.get(path, params=params)
        except httpx.HTTPError as exc:
            logger.error("api_load_failed", resource=resource, error=str(exc))
            raise LoadError(f"Failed to load {resource}") from exc

        if not response.is_success:
            logger.error("api_load_failed", resource=resource, status=response.status_code)
            raise LoadError(f"Failed to load {resource}")
        try:
            return response.json()
        except ValueError as exc:
            logger.error("api_invalid_json", resource=resource)
            raise LoadError(f"Failed to load {resource}") from exc

    async def fetch_employees(self) -> list[Employee]:
        """``GET /api/employees``."""
        data = await self._get("/api/employees", "employees")
        try:
            employees = [Employee.model_validate(item) for item in data or []]
        except (ValidationError, TypeError) as exc:
            logger.error("api_invalid_payload", resource="employees", error=str(exc))
            raise LoadError("Failed to load employees") from exc
        logger.info("employees_loaded", count=len(employees))
        return employees

    async def fetch_expenses(self, period: FiscalPeriod) -> list[Expense]:
        """``GET /api/expenses`` for one quarter."""
        data = await self._get("/api/expenses", "expenses", params=period.as_params())
        if not isinstance(data, dict):
            raise LoadError("Failed to load expenses")
        try:
            expenses = [Expense.model_validate(item) for item in data.get("expenses") or []]
        except ValidationError as exc:
            logger.error("api_invalid_payload", resource="expenses", error=str(exc))
            raise LoadError("Failed to load expenses") from exc
        logger.info("expenses_loaded", period=str(period), count=len(expenses))
        return expenses

    async def fetch_budgets(self, period: FiscalPeriod) -> BudgetReport:
        """``GET /api/budgets`` for one quarter."""
        data = await self._get("/api/budgets", "budgets", params=period.as_params())
        try:
            report = BudgetReport.model_validate(data)
        except ValidationError as exc:
            logger.error("api_invalid_payload", resource="budgets", error=str(exc))
            raise LoadError("Failed to load budgets") from exc
        logger.info("budgets_loaded", period=str(period), teams=len(report.team_totals))
        return report

    async def submit_expense(self, draft: ExpenseDraft) -> Expense:
        """``POST /api/expenses``; never retried, the draft is the caller's to keep."""
        try:
            response = await self._client.post("/api/expenses", files=build_expense_form(draft))
        except httpx.HTTPError as exc:
            logger.error("expense_submit_failed", error=str(exc))
            raise SubmissionError(DEFAULT_SUBMIT_ERROR) from exc

        if not response.is_success:
            message = _error_message(response, DEFAULT_SUBMIT_ERROR)
            logger.warning("expense_submit_rejected", status=response.status_code, error=message)
            raise SubmissionError(message, status_code=response.status_code)

        try:
            expense = Expense.model_validate(response.json())
        except ValueError as exc:
            logger.error("expense_submit_bad_response", status=response.status_code)
            raise SubmissionError(DEFAULT_SUBMIT_ERROR, status_code=response.status_code) from exc
        logger.info(
            "expense_submitted",
            expense_id=expense.id,
            amount=str(expense.amount),
            attendees=len(expense.attendees),
        )
        return expense
