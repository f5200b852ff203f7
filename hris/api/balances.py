# ruff: noqa: B008, TC001, TC003
"""Balance report and accrual trigger endpoints."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Query

from hris.api.deps import AdminDep, ApproverDep, AuthDep
from hris.db import SessionDep
from hris.schemas.balance import (
    BalanceReportResponse,
    BalanceRulesResponse,
    EmployeeBalanceResponse,
    RecalculationResponse,
)
from hris.services import balance as balance_service
from hris.services.accrual import recalculate_balances

balances_router = APIRouter(prefix="/balances", tags=["balances"])


@balances_router.get("", response_model=BalanceReportResponse)
async def get_balance_report(
    session: SessionDep,
    auth: ApproverDep,
) -> BalanceReportResponse:
    """Balances of every active employee (manager or admin)."""
    return await balance_service.get_balance_report(session)


@balances_router.get("/me", response_model=EmployeeBalanceResponse)
async def get_my_balance(
    session: SessionDep,
    auth: AuthDep,
) -> EmployeeBalanceResponse:
    return await balance_service.get_employee_balance(session, auth.user_id)


@balances_router.get("/rules", response_model=BalanceRulesResponse)
async def get_balance_rules(auth: AuthDep) -> BalanceRulesResponse:
    """Accrual rates and the same-month cutoff rule."""
    return balance_service.get_balance_rules()


@balances_router.post("/recalculate", response_model=RecalculationResponse)
async def recalculate(
    session: SessionDep,
    auth: AdminDep,
    as_of: date | None = Query(default=None),
) -> RecalculationResponse:
    """Run the accrual engine for a date (admin only).

    Useful for backfills. Re-running for the same date changes nothing.
    """
    result = await recalculate_balances(session, as_of)
    return balance_service.build_recalculation_response(result)
