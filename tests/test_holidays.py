"""Holiday reference data: CRUD, filters, authorization and audit."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import select
from sqlmodel import col

from hris.models.audit import AuditLog
from hris.models.enums import Role

if TYPE_CHECKING:
    from httpx import AsyncClient
    from sqlalchemy.ext.asyncio import AsyncSession

    from tests.conftest import EmployeeFactory

BASE_URL = "/holidays"


def _holiday_payload(date: str = "2025-08-17", name: str = "Independence Day") -> dict:
    return {"date": date, "name": name}


@pytest.fixture
async def admin_headers(make_employee: EmployeeFactory, headers_for) -> dict[str, str]:
    return headers_for(await make_employee(role=Role.ADMIN.value))


@pytest.fixture
async def employee_headers(make_employee: EmployeeFactory, headers_for) -> dict[str, str]:
    return headers_for(await make_employee())


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------


async def test_create_holiday(async_client: AsyncClient, admin_headers: dict[str, str]) -> None:
    resp = await async_client.post(BASE_URL, json=_holiday_payload(), headers=admin_headers)
    assert resp.status_code == 201
    data = resp.json()
    assert data["date"] == "2025-08-17"
    assert data["name"] == "Independence Day"
    assert data["is_active"] is True
    assert "id" in data


async def test_duplicate_date_rejected(async_client: AsyncClient, admin_headers: dict[str, str]) -> None:
    await async_client.post(BASE_URL, json=_holiday_payload(), headers=admin_headers)
    resp = await async_client.post(BASE_URL, json=_holiday_payload(name="Other"), headers=admin_headers)
    assert resp.status_code == 400
    assert resp.json()["error"] == "DuplicateHoliday"


async def test_employee_cannot_create(async_client: AsyncClient, employee_headers: dict[str, str]) -> None:
    resp = await async_client.post(BASE_URL, json=_holiday_payload(), headers=employee_headers)
    assert resp.status_code == 403


async def test_create_writes_audit(
    async_client: AsyncClient, db_session: AsyncSession, admin_headers: dict[str, str]
) -> None:
    resp = await async_client.post(BASE_URL, json=_holiday_payload(), headers=admin_headers)
    holiday_id = uuid.UUID(resp.json()["id"])
    result = await db_session.execute(select(AuditLog).where(col(AuditLog.entity_id) == holiday_id))
    entry = result.scalar_one()
    assert entry.entity_type == "HOLIDAY"
    assert entry.action == "CREATE"


# ---------------------------------------------------------------------------
# List
# ---------------------------------------------------------------------------


async def test_list_holidays_empty(async_client: AsyncClient, employee_headers: dict[str, str]) -> None:
    resp = await async_client.get(BASE_URL, headers=employee_headers)
    assert resp.status_code == 200
    assert resp.json() == {"items": [], "total": 0}


async def test_list_sorted_and_filtered_by_year(
    async_client: AsyncClient, admin_headers: dict[str, str], employee_headers: dict[str, str]
) -> None:
    for date, name in [("2025-12-25", "Christmas"), ("2025-01-01", "New Year"), ("2026-01-01", "New Year")]:
        await async_client.post(BASE_URL, json=_holiday_payload(date, name), headers=admin_headers)

    resp = await async_client.get(BASE_URL, headers=employee_headers)
    assert [h["date"] for h in resp.json()["items"]] == ["2025-01-01", "2025-12-25", "2026-01-01"]

    resp = await async_client.get(BASE_URL, params={"year": 2025}, headers=employee_headers)
    data = resp.json()
    assert data["total"] == 2
    assert [h["name"] for h in data["items"]] == ["New Year", "Christmas"]


async def test_list_pagination(async_client: AsyncClient, admin_headers: dict[str, str]) -> None:
    for day in range(1, 6):
        await async_client.post(
            BASE_URL, json=_holiday_payload(f"2025-03-0{day}", f"Day {day}"), headers=admin_headers
        )

    resp = await async_client.get(BASE_URL, params={"offset": 2, "limit": 2}, headers=admin_headers)
    data = resp.json()
    assert data["total"] == 5
    assert [h["name"] for h in data["items"]] == ["Day 3", "Day 4"]


# ---------------------------------------------------------------------------
# Toggle and delete
# ---------------------------------------------------------------------------


async def test_toggle_and_filter_inactive(
    async_client: AsyncClient, admin_headers: dict[str, str], employee_headers: dict[str, str]
) -> None:
    created = await async_client.post(BASE_URL, json=_holiday_payload(), headers=admin_headers)
    holiday_id = created.json()["id"]

    resp = await async_client.patch(f"{BASE_URL}/{holiday_id}/toggle", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["is_active"] is False

    resp = await async_client.get(BASE_URL, params={"include_inactive": "false"}, headers=employee_headers)
    assert resp.json()["total"] == 0
    resp = await async_client.get(BASE_URL, headers=employee_headers)
    assert resp.json()["total"] == 1

    resp = await async_client.patch(f"{BASE_URL}/{holiday_id}/toggle", headers=admin_headers)
    assert resp.json()["is_active"] is True


async def test_toggle_requires_admin(
    async_client: AsyncClient, admin_headers: dict[str, str], employee_headers: dict[str, str]
) -> None:
    created = await async_client.post(BASE_URL, json=_holiday_payload(), headers=admin_headers)
    resp = await async_client.patch(f"{BASE_URL}/{created.json()['id']}/toggle", headers=employee_headers)
    assert resp.status_code == 403


async def test_delete_holiday(async_client: AsyncClient, admin_headers: dict[str, str]) -> None:
    created = await async_client.post(BASE_URL, json=_holiday_payload(), headers=admin_headers)
    resp = await async_client.delete(f"{BASE_URL}/{created.json()['id']}", headers=admin_headers)
    assert resp.status_code == 204

    resp = await async_client.get(BASE_URL, headers=admin_headers)
    assert resp.json()["total"] == 0


async def test_delete_missing_holiday_404(async_client: AsyncClient, admin_headers: dict[str, str]) -> None:
    resp = await async_client.delete(f"{BASE_URL}/{uuid.uuid4()}", headers=admin_headers)
    assert resp.status_code == 404


# ---------------------------------------------------------------------------
# Read, update and the active calendar
# ---------------------------------------------------------------------------


async def test_get_holiday_by_id(
    async_client: AsyncClient, admin_headers: dict[str, str], employee_headers: dict[str, str]
) -> None:
    created = await async_client.post(BASE_URL, json=_holiday_payload(), headers=admin_headers)
    holiday_id = created.json()["id"]

    resp = await async_client.get(f"{BASE_URL}/{holiday_id}", headers=employee_headers)
    assert resp.status_code == 200
    assert resp.json() == created.json()

    resp = await async_client.get(f"{BASE_URL}/{uuid.uuid4()}", headers=employee_headers)
    assert resp.status_code == 404
    assert resp.json()["error"] == "NotFound"


async def test_update_changes_only_given_fields(
    async_client: AsyncClient, db_session: AsyncSession, admin_headers: dict[str, str]
) -> None:
    created = await async_client.post(BASE_URL, json=_holiday_payload(), headers=admin_headers)
    holiday_id = created.json()["id"]

    resp = await async_client.put(
        f"{BASE_URL}/{holiday_id}", json={"name": "  Hari Merdeka  "}, headers=admin_headers
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["name"] == "Hari Merdeka"
    assert data["date"] == "2025-08-17"
    assert data["is_active"] is True

    resp = await async_client.put(
        f"{BASE_URL}/{holiday_id}", json={"date": "2025-08-18", "is_active": False}, headers=admin_headers
    )
    data = resp.json()
    assert data["date"] == "2025-08-18"
    assert data["is_active"] is False
    assert data["name"] == "Hari Merdeka"

    result = await db_session.execute(
        select(AuditLog).where(
            col(AuditLog.entity_id) == uuid.UUID(holiday_id),
            col(AuditLog.action) == "UPDATE",
        )
    )
    assert len(result.scalars().all()) == 2


async def test_update_with_no_fields_rejected(async_client: AsyncClient, admin_headers: dict[str, str]) -> None:
    created = await async_client.post(BASE_URL, json=_holiday_payload(), headers=admin_headers)
    for body in ({}, {"name": None}):
        resp = await async_client.put(f"{BASE_URL}/{created.json()['id']}", json=body, headers=admin_headers)
        assert resp.status_code == 400
        assert resp.json()["error"] == "InvalidInput"


async def test_update_onto_taken_date_rejected(async_client: AsyncClient, admin_headers: dict[str, str]) -> None:
    await async_client.post(BASE_URL, json=_holiday_payload("2025-12-25", "Christmas"), headers=admin_headers)
    created = await async_client.post(BASE_URL, json=_holiday_payload(), headers=admin_headers)

    resp = await async_client.put(
        f"{BASE_URL}/{created.json()['id']}", json={"date": "2025-12-25"}, headers=admin_headers
    )
    assert resp.status_code == 400
    assert resp.json()["error"] == "DuplicateHoliday"


async def test_update_requires_admin(
    async_client: AsyncClient, admin_headers: dict[str, str], employee_headers: dict[str, str]
) -> None:
    created = await async_client.post(BASE_URL, json=_holiday_payload(), headers=admin_headers)
    resp = await async_client.put(
        f"{BASE_URL}/{created.json()['id']}", json={"name": "Renamed"}, headers=employee_headers
    )
    assert resp.status_code == 403


async def test_update_missing_holiday_404(async_client: AsyncClient, admin_headers: dict[str, str]) -> None:
    resp = await async_client.put(f"{BASE_URL}/{uuid.uuid4()}", json={"name": "Ghost"}, headers=admin_headers)
    assert resp.status_code == 404


async def test_active_calendar_hides_switched_off_holidays(
    async_client: AsyncClient, admin_headers: dict[str, str], employee_headers: dict[str, str]
) -> None:
    await async_client.post(BASE_URL, json=_holiday_payload("2025-01-01", "New Year"), headers=admin_headers)
    retired = await async_client.post(
        BASE_URL, json={"date": "2025-05-01", "name": "Labour Day", "is_active": False}, headers=admin_headers
    )
    assert retired.json()["is_active"] is False

    resp = await async_client.get(f"{BASE_URL}/active", headers=employee_headers)
    assert resp.status_code == 200
    assert [h["name"] for h in resp.json()["items"]] == ["New Year"]
