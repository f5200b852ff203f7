"""Accrual engine: recompute each active employee's entitled leave balance from tenure."""

from __future__ import annotations

import logging
import math
import uuid
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import select, update
from sqlmodel import col

from hris.models.employee import Employee
from hris.models.enums import AuditAction, AuditEntityType, EmployeeStatus, EmploymentType
from hris.services.audit import SYSTEM_ACTOR_ID, write_audit_log

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

AVERAGE_MONTH_DAYS = 30.44
CUTOFF_DAY = 16
ACCRUAL_RATES: dict[EmploymentType, Decimal] = {
    EmploymentType.PERMANENT: Decimal("1.25"),
    EmploymentType.CONTRACT: Decimal("1.00"),
}
_CENTS = Decimal("0.01")

# ---------------------------------------------------------------------------
# Result dataclasses
# ---------------------------------------------------------------------------


@dataclass
class BalanceDelta:
    """Before/after balance for one employee whose stored balance changed."""

    employee_id: uuid.UUID
    employee_name: str
    old_balance: Decimal
    new_balance: Decimal
    months_joined: int
    employment_type: EmploymentType


@dataclass
class AccrualRunResult:
    """Summary of a balance recalculation run."""

    as_of_date: date
    processed: int = 0
    skipped: int = 0
    errors: int = 0
    deltas: list[BalanceDelta] = field(default_factory=list)

    @property
    def updated_count(self) -> int:
        return len(self.deltas)


# ---------------------------------------------------------------------------
# Pure computation helpers (no DB)
# ---------------------------------------------------------------------------


def compute_months_joined(start_date: date, as_of_date: date) -> int:
    """Whole average-length months between the start date and as_of_date.

    Uses a 30.44-day month, so the result is approximate rather than
    calendar exact.
    """
    return math.floor((as_of_date - start_date).days / AVERAGE_MONTH_DAYS)


def is_eligible_this_month(start_date: date, as_of_date: date) -> bool:
    """Employees who joined in the as-of month accrue only if they joined by the 16th."""
    if (start_date.year, start_date.month) == (as_of_date.year, as_of_date.month):
        return start_date.day <= CUTOFF_DAY
    return True


def accrual_rate(employment_type: EmploymentType) -> Decimal:
    return ACCRUAL_RATES[employment_type]


def compute_entitled_balance(employment_type: EmploymentType, months_joined: int) -> Decimal:
    """Entitled days: months joined times the employment-type monthly rate."""
    return (accrual_rate(employment_type) * months_joined).quantize(_CENTS)


# ---------------------------------------------------------------------------
# DB-backed orchestration
# ---------------------------------------------------------------------------


@dataclass
class _EmployeeRow:
    """Plain snapshot of the columns the engine reads."""

    id: uuid.UUID
    full_name: str
    start_date: date
    employment_type: EmploymentType
    leave_balance: Decimal


async def _load_active_employees(session: AsyncSession) -> list[_EmployeeRow]:
    result = await session.execute(
        select(
            Employee.id,
            Employee.full_name,
            Employee.start_date,
            Employee.employment_type,
            Employee.leave_balance,
        )
        .where(col(Employee.status) == EmployeeStatus.ACTIVE.value)
        .order_by(col(Employee.full_name))
    )
    return [
        _EmployeeRow(
            id=row.id,
            full_name=row.full_name,
            start_date=row.start_date,
            employment_type=EmploymentType(row.employment_type),
            leave_balance=Decimal(row.leave_balance),
        )
        for row in result.all()
    ]


async def _store_balance(session: AsyncSession, row: _EmployeeRow, new_balance: Decimal) -> bool:
    """Overwrite the stored balance if it still holds the value we read.

    Returns False when another writer changed the balance in between.
    """
    result = await session.execute(
        update(Employee)
        .where(
            col(Employee.id) == row.id,
            col(Employee.leave_balance) == row.leave_balance,
        )
        .values(leave_balance=new_balance)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1  # type: ignore[attr-defined]


async def recalculate_balances(
    session: AsyncSession,
    as_of_date: date | None = None,
) -> AccrualRunResult:
    """Recompute the entitled balance of every active employee.

    The computed value replaces the stored balance, so re-running for the
    same date with unchanged inputs produces no further changes. Each
    employee is committed on its own; a failure is logged and the run
    continues with the next employee.

    Args:
        session: Database session. Committed once per updated employee.
        as_of_date: Date to compute tenure against (defaults to today).
    """
    if as_of_date is None:
        as_of_date = date.today()

    result = AccrualRunResult(as_of_date=as_of_date)

    for row in await _load_active_employees(session):
        result.processed += 1
        try:
            if row.start_date > as_of_date or not is_eligible_this_month(row.start_date, as_of_date):
                result.skipped += 1
                continue

            months_joined = compute_months_joined(row.start_date, as_of_date)
            new_balance = compute_entitled_balance(row.employment_type, months_joined)
            if new_balance == row.leave_balance:
                result.skipped += 1
                continue

            if not await _store_balance(session, row, new_balance):
                await session.rollback()
                logger.warning("Balance of employee=%s changed during recalculation; skipped", row.id)
                result.errors += 1
                continue

            await write_audit_log(
                session,
                actor_id=SYSTEM_ACTOR_ID,
                entity_type=AuditEntityType.BALANCE,
                entity_id=row.id,
                action=AuditAction.RECALCULATE,
                before_json={"leave_balance": float(row.leave_balance)},
                after_json={
                    "leave_balance": float(new_balance),
                    "months_joined": months_joined,
                    "as_of_date": as_of_date.isoformat(),
                },
            )
            await session.commit()

            result.deltas.append(
                BalanceDelta(
                    employee_id=row.id,
                    employee_name=row.full_name,
                    old_balance=row.leave_balance,
                    new_balance=new_balance,
                    months_joined=months_joined,
                    employment_type=row.employment_type,
                )
            )

        except Exception:
            await session.rollback()
            logger.exception("Error recalculating leave balance for employee=%s", row.id)
            result.errors += 1

    logger.info(
        "Balance recalculation for %s: processed=%d updated=%d skipped=%d errors=%d",
        as_of_date,
        result.processed,
        result.updated_count,
        result.skipped,
        result.errors,
    )
    return result
