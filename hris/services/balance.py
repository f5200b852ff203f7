# ruff: noqa: TC003
"""Read-side balance reporting: entitled, consumed and usable leave per employee."""

from __future__ import annotations

import uuid
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlmodel import col

from hris.models.employee import Employee
from hris.models.enums import EmployeeStatus, EmploymentType, RequestStatus
from hris.models.leave_request import LeaveRequest
from hris.schemas.balance import (
    BalanceDeltaResponse,
    BalanceReportResponse,
    BalanceRulesResponse,
    EmployeeBalanceResponse,
    RecalculationResponse,
)
from hris.services.accrual import (
    ACCRUAL_RATES,
    AVERAGE_MONTH_DAYS,
    CUTOFF_DAY,
    AccrualRunResult,
    compute_months_joined,
)
from hris.services.employee import get_employee_or_404, list_employees

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


async def _approved_days_by_employee(
    session: AsyncSession,
    employee_ids: list[uuid.UUID],
) -> dict[uuid.UUID, int]:
    """Sum days_requested over Approved requests, grouped by employee."""
    if not employee_ids:
        return {}
    result = await session.execute(
        select(LeaveRequest.employee_id, func.coalesce(func.sum(LeaveRequest.days_requested), 0))
        .where(
            col(LeaveRequest.employee_id).in_(employee_ids),
            col(LeaveRequest.status) == RequestStatus.APPROVED.value,
        )
        .group_by(col(LeaveRequest.employee_id))
    )
    return {employee_id: int(total) for employee_id, total in result.all()}


def _build_balance_row(employee: Employee, used_days: int, as_of_date: date) -> EmployeeBalanceResponse:
    entitled = float(employee.leave_balance)
    return EmployeeBalanceResponse(
        employee_id=employee.id,
        full_name=employee.full_name,
        email=employee.email,
        start_date=employee.start_date,
        months_joined=max(compute_months_joined(employee.start_date, as_of_date), 0),
        employment_type=EmploymentType(employee.employment_type),
        entitled_balance=entitled,
        used_days=used_days,
        usable_balance=entitled - used_days,
    )


async def get_balance_report(
    session: AsyncSession,
    as_of_date: date | None = None,
) -> BalanceReportResponse:
    """Balances of every active employee. Usable balance is derived, never stored."""
    if as_of_date is None:
        as_of_date = date.today()

    employees = await list_employees(session, status_filter=EmployeeStatus.ACTIVE)
    used = await _approved_days_by_employee(session, [e.id for e in employees])

    items = [_build_balance_row(e, used.get(e.id, 0), as_of_date) for e in employees]
    return BalanceReportResponse(items=items, total=len(items))


async def get_employee_balance(
    session: AsyncSession,
    employee_id: uuid.UUID,
    as_of_date: date | None = None,
) -> EmployeeBalanceResponse:
    """Balance row for a single employee."""
    if as_of_date is None:
        as_of_date = date.today()

    employee = await get_employee_or_404(session, employee_id)
    used = await _approved_days_by_employee(session, [employee.id])
    return _build_balance_row(employee, used.get(employee.id, 0), as_of_date)


def get_balance_rules() -> BalanceRulesResponse:
    return BalanceRulesResponse(
        permanent_rate=float(ACCRUAL_RATES[EmploymentType.PERMANENT]),
        contract_rate=float(ACCRUAL_RATES[EmploymentType.CONTRACT]),
        calculation_unit="per month",
        average_month_days=AVERAGE_MONTH_DAYS,
        cutoff_day=CUTOFF_DAY,
        cutoff_rule=(
            f"Employees who join after the {CUTOFF_DAY}th of the month "
            "do not receive leave balance for that month"
        ),
        balance_calculation="Entitled balance = floor(days since start / 30.44) x monthly rate",
    )


def build_recalculation_response(result: AccrualRunResult) -> RecalculationResponse:
    return RecalculationResponse(
        as_of_date=result.as_of_date,
        processed=result.processed,
        updated_count=result.updated_count,
        skipped=result.skipped,
        errors=result.errors,
        deltas=[
            BalanceDeltaResponse(
                employee_id=d.employee_id,
                employee_name=d.employee_name,
                old_balance=float(d.old_balance),
                new_balance=float(d.new_balance),
                months_joined=d.months_joined,
                employment_type=d.employment_type,
            )
            for d in result.deltas
        ],
    )
