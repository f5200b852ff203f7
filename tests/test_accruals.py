"""Tests for the balance accrual engine: tenure math, cutoff rule, idempotency
and per-employee failure isolation.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import select
from sqlmodel import col

from hris.models.audit import AuditLog
from hris.models.enums import EmployeeStatus, EmploymentType, Role
from hris.services import accrual
from hris.services.accrual import (
    compute_entitled_balance,
    compute_months_joined,
    is_eligible_this_month,
    recalculate_balances,
)
from hris.services.audit import SYSTEM_ACTOR_ID

if TYPE_CHECKING:
    from httpx import AsyncClient
    from sqlalchemy.ext.asyncio import AsyncSession

    from tests.conftest import EmployeeFactory

AS_OF = date(2024, 4, 10)


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("start", "as_of", "expected"),
    [
        (date(2024, 1, 10), date(2024, 4, 10), 2),  # 91 days / 30.44 = 2.99
        (date(2024, 1, 10), date(2024, 1, 10), 0),
        (date(2024, 1, 1), date(2024, 1, 31), 0),  # 30 days
        (date(2024, 1, 1), date(2024, 2, 1), 1),  # 31 days
        (date(2023, 1, 1), date(2024, 1, 1), 11),  # 365 days / 30.44 = 11.99
        (date(2022, 1, 1), date(2024, 1, 1), 23),  # 730 days
    ],
)
def test_compute_months_joined(start: date, as_of: date, expected: int) -> None:
    assert compute_months_joined(start, as_of) == expected


@pytest.mark.parametrize(
    ("start", "eligible"),
    [
        (date(2024, 4, 1), True),
        (date(2024, 4, 16), True),
        (date(2024, 4, 17), False),
        (date(2024, 3, 30), True),
    ],
)
def test_same_month_cutoff(start: date, eligible: bool) -> None:
    assert is_eligible_this_month(start, date(2024, 4, 30)) is eligible


def test_entitled_balance_by_employment_type() -> None:
    assert compute_entitled_balance(EmploymentType.PERMANENT, 2) == Decimal("2.50")
    assert compute_entitled_balance(EmploymentType.CONTRACT, 2) == Decimal("2.00")
    assert compute_entitled_balance(EmploymentType.PERMANENT, 0) == Decimal("0.00")
    assert compute_entitled_balance(EmploymentType.PERMANENT, 23) == Decimal("28.75")


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


async def test_permanent_employee_example(
    db_session: AsyncSession, make_employee: EmployeeFactory
) -> None:
    employee = await make_employee(start_date=date(2024, 1, 10), leave_balance=Decimal("0"))

    result = await recalculate_balances(db_session, AS_OF)

    assert result.processed == 1
    assert result.updated_count == 1
    assert result.errors == 0
    delta = result.deltas[0]
    assert delta.employee_id == employee.id
    assert delta.months_joined == 2
    assert delta.old_balance == Decimal("0")
    assert delta.new_balance == Decimal("2.50")

    await db_session.refresh(employee)
    assert employee.leave_balance == Decimal("2.50")


async def test_contract_employee_rate(db_session: AsyncSession, make_employee: EmployeeFactory) -> None:
    employee = await make_employee(
        start_date=date(2024, 1, 10),
        employment_type=EmploymentType.CONTRACT.value,
        leave_balance=Decimal("0"),
    )
    await recalculate_balances(db_session, AS_OF)
    await db_session.refresh(employee)
    assert employee.leave_balance == Decimal("2.00")


async def test_rerun_same_date_changes_nothing(
    db_session: AsyncSession, make_employee: EmployeeFactory
) -> None:
    await make_employee(start_date=date(2024, 1, 10), leave_balance=Decimal("0"))
    await make_employee(start_date=date(2023, 6, 1), leave_balance=Decimal("0"))

    first = await recalculate_balances(db_session, AS_OF)
    second = await recalculate_balances(db_session, AS_OF)

    assert first.updated_count == 2
    assert second.processed == 2
    assert second.updated_count == 0
    assert second.skipped == 2


async def test_recalculation_overwrites_stale_balance(
    db_session: AsyncSession, make_employee: EmployeeFactory
) -> None:
    employee = await make_employee(start_date=date(2024, 1, 10), leave_balance=Decimal("17.00"))
    await recalculate_balances(db_session, AS_OF)
    await db_session.refresh(employee)
    assert employee.leave_balance == Decimal("2.50")


async def test_late_joiner_skipped_in_join_month(
    db_session: AsyncSession, make_employee: EmployeeFactory
) -> None:
    employee = await make_employee(start_date=date(2024, 4, 17), leave_balance=Decimal("0"))
    result = await recalculate_balances(db_session, date(2024, 4, 30))

    assert result.skipped == 1
    assert result.updated_count == 0
    await db_session.refresh(employee)
    assert employee.leave_balance == Decimal("0")


async def test_future_start_date_skipped(db_session: AsyncSession, make_employee: EmployeeFactory) -> None:
    employee = await make_employee(start_date=date(2024, 6, 1), leave_balance=Decimal("3.00"))
    result = await recalculate_balances(db_session, AS_OF)

    assert result.skipped == 1
    await db_session.refresh(employee)
    assert employee.leave_balance == Decimal("3.00")


async def test_inactive_employees_ignored(db_session: AsyncSession, make_employee: EmployeeFactory) -> None:
    employee = await make_employee(
        start_date=date(2024, 1, 10),
        status=EmployeeStatus.INACTIVE.value,
        leave_balance=Decimal("0"),
    )
    result = await recalculate_balances(db_session, AS_OF)

    assert result.processed == 0
    await db_session.refresh(employee)
    assert employee.leave_balance == Decimal("0")


async def test_recalculation_is_audited_as_system(
    db_session: AsyncSession, make_employee: EmployeeFactory
) -> None:
    employee = await make_employee(start_date=date(2024, 1, 10), leave_balance=Decimal("0"))
    await recalculate_balances(db_session, AS_OF)

    result = await db_session.execute(
        select(AuditLog).where(col(AuditLog.entity_id) == employee.id, col(AuditLog.action) == "RECALCULATE")
    )
    entry = result.scalar_one()
    assert entry.actor_id == SYSTEM_ACTOR_ID
    assert entry.entity_type == "BALANCE"
    assert entry.before_json == {"leave_balance": 0.0}
    assert entry.after_json["leave_balance"] == 2.5
    assert entry.after_json["months_joined"] == 2


async def test_failure_for_one_employee_does_not_stop_the_run(
    db_session: AsyncSession, make_employee: EmployeeFactory, monkeypatch: pytest.MonkeyPatch
) -> None:
    broken = await make_employee(full_name="A Broken", start_date=date(2024, 1, 10), leave_balance=Decimal("0"))
    healthy = await make_employee(full_name="B Healthy", start_date=date(2024, 1, 10), leave_balance=Decimal("0"))

    broken_id, healthy_id = broken.id, healthy.id
    original = accrual._store_balance

    async def _flaky_store(session, row, new_balance):  # type: ignore[no-untyped-def]
        if row.id == broken_id:
            msg = "simulated write failure"
            raise RuntimeError(msg)
        return await original(session, row, new_balance)

    monkeypatch.setattr(accrual, "_store_balance", _flaky_store)

    result = await recalculate_balances(db_session, AS_OF)

    assert result.processed == 2
    assert result.errors == 1
    assert [d.employee_id for d in result.deltas] == [healthy_id]
    await db_session.refresh(healthy)
    assert healthy.leave_balance == Decimal("2.50")


async def test_concurrent_balance_change_is_counted_as_error(
    db_session: AsyncSession, make_employee: EmployeeFactory, monkeypatch: pytest.MonkeyPatch
) -> None:
    await make_employee(start_date=date(2024, 1, 10), leave_balance=Decimal("0"))

    async def _lost_race(session, row, new_balance):  # type: ignore[no-untyped-def]
        return False

    monkeypatch.setattr(accrual, "_store_balance", _lost_race)

    result = await recalculate_balances(db_session, AS_OF)
    assert result.errors == 1
    assert result.updated_count == 0


# ---------------------------------------------------------------------------
# API
# ---------------------------------------------------------------------------


async def test_recalculate_endpoint(
    async_client: AsyncClient, make_employee: EmployeeFactory, headers_for
) -> None:
    admin = await make_employee(role=Role.ADMIN.value, start_date=date(2024, 1, 10), leave_balance=Decimal("2.50"))
    worker = await make_employee(
        full_name="Contract Worker",
        employment_type=EmploymentType.CONTRACT.value,
        start_date=date(2024, 1, 10),
        leave_balance=Decimal("0"),
    )

    resp = await async_client.post(
        "/balances/recalculate", params={"as_of": AS_OF.isoformat()}, headers=headers_for(admin)
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["as_of_date"] == "2024-04-10"
    assert data["processed"] == 2
    assert data["updated_count"] == 1
    assert data["skipped"] == 1
    assert data["errors"] == 0
    assert data["deltas"] == [
        {
            "employee_id": str(worker.id),
            "employee_name": "Contract Worker",
            "old_balance": 0.0,
            "new_balance": 2.0,
            "months_joined": 2,
            "employment_type": "Contract",
        }
    ]


async def test_recalculate_requires_admin(
    async_client: AsyncClient, make_employee: EmployeeFactory, headers_for
) -> None:
    manager = await make_employee(role=Role.MANAGER.value)
    resp = await async_client.post("/balances/recalculate", headers=headers_for(manager))
    assert resp.status_code == 403


async def test_recalculate_rejects_bad_date(
    async_client: AsyncClient, make_employee: EmployeeFactory, headers_for
) -> None:
    admin = await make_employee(role=Role.ADMIN.value)
    resp = await async_client.post(
        "/balances/recalculate", params={"as_of": "not-a-date"}, headers=headers_for(admin)
    )
    assert resp.status_code == 400
