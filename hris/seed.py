"""Seed script for development data.

Run with:  python -m hris.seed
Inside Docker:  docker compose exec api python -m hris.seed

The admin account is inserted directly into the database (no API can create
the first admin); everything else goes through the HTTP API with the admin's
bearer token.
"""

from __future__ import annotations

import asyncio
import sys
import uuid
from datetime import date, timedelta

import httpx

from hris.db import dispose_engine, session_scope
from hris.models.employee import Employee
from hris.models.enums import EmployeeStatus, EmploymentType, Role
from hris.services.employee import get_employee
from hris.services.token import create_access_token

BASE_URL = "http://localhost:8000"

ADMIN_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")

# Well-known employee UUIDs
MAYA_ID = "00000000-0000-0000-0000-000000000002"
BOB_ID = "00000000-0000-0000-0000-000000000003"
CAROL_ID = "00000000-0000-0000-0000-000000000004"
DAVE_ID = "00000000-0000-0000-0000-000000000005"

EMPLOYEES = [
    {
        "id": MAYA_ID,
        "full_name": "Maya Putri",
        "email": "maya.putri@example.com",
        "role": "Manager",
        "employment_type": "Permanent",
        "start_date": "2022-02-01",
    },
    {
        "id": BOB_ID,
        "full_name": "Bob Santoso",
        "email": "bob.santoso@example.com",
        "role": "Employee",
        "employment_type": "Permanent",
        "start_date": "2024-01-10",
        "manager_id": MAYA_ID,
    },
    {
        "id": CAROL_ID,
        "full_name": "Carol Wijaya",
        "email": "carol.wijaya@example.com",
        "role": "Employee",
        "employment_type": "Contract",
        "start_date": "2024-06-03",
        "manager_id": MAYA_ID,
    },
    {
        "id": DAVE_ID,
        "full_name": "Dave Hartono",
        "email": "dave.hartono@example.com",
        "role": "Employee",
        "employment_type": "Permanent",
        "start_date": "2025-03-20",
        "manager_id": MAYA_ID,
    },
]

LEAVE_TYPES = [
    {"name": "Annual Leave", "description": "Paid leave deducted from the accrued balance"},
    {"name": "Sick Leave", "description": "Medical leave", "requires_document": True},
    {"name": "Maternity Leave", "description": "Maternity leave", "max_days_per_year": 90},
    {"name": "Unpaid Leave", "description": "Leave without pay"},
]

HOLIDAYS = [
    {"date": "2026-01-01", "name": "New Year's Day"},
    {"date": "2026-03-20", "name": "Eid al-Fitr"},
    {"date": "2026-05-01", "name": "Labour Day"},
    {"date": "2026-08-17", "name": "Independence Day"},
    {"date": "2026-12-25", "name": "Christmas Day"},
]

_DUPLICATE_KINDS = {"DuplicateName", "DuplicateHoliday"}


async def bootstrap_admin() -> None:
    """Insert the admin employee if it does not exist yet."""
    print("\n--- Bootstrapping admin ---")
    async with session_scope() as session:
        if await get_employee(session, ADMIN_ID) is not None:
            print("  [SKIP] Admin already exists")
            return
        session.add(
            Employee(
                id=ADMIN_ID,
                full_name="HR Admin",
                email="admin@example.com",
                role=Role.ADMIN.value,
                employment_type=EmploymentType.PERMANENT.value,
                start_date=date(2020, 1, 1),
                status=EmployeeStatus.ACTIVE.value,
            )
        )
        await session.commit()
        print("  [OK] Admin created")


def _headers(employee_id: uuid.UUID | str) -> dict[str, str]:
    token = create_access_token(uuid.UUID(str(employee_id)))
    return {"Content-Type": "application/json", "Authorization": f"Bearer {token}"}


HEADERS: dict[str, str] = {}


async def _safe_post(client: httpx.AsyncClient, url: str, json: dict, label: str) -> dict | None:
    """POST, treating duplicate-name errors as already seeded."""
    resp = await client.post(url, json=json, headers=HEADERS)
    if resp.status_code in (200, 201):
        print(f"  [OK] {label}")
        return resp.json()
    if resp.status_code == 400 and resp.json().get("error") in _DUPLICATE_KINDS:
        print(f"  [SKIP] {label} (already exists)")
        return None
    print(f"  [ERROR] {label}: {resp.status_code} {resp.text[:200]}")
    return None


async def _safe_put(client: httpx.AsyncClient, url: str, json: dict, label: str) -> dict | None:
    """PUT (upsert), naturally idempotent."""
    resp = await client.put(url, json=json, headers=HEADERS)
    if resp.status_code in (200, 201):
        print(f"  [OK] {label}")
        return resp.json()
    print(f"  [ERROR] {label}: {resp.status_code} {resp.text[:200]}")
    return None


async def seed_employees(client: httpx.AsyncClient) -> None:
    """Seed employees via PUT (upsert). Managers come first in the list."""
    print("\n--- Seeding employees ---")
    for emp in EMPLOYEES:
        emp_id = emp["id"]
        body = {k: v for k, v in emp.items() if k != "id"}
        await _safe_put(client, f"{BASE_URL}/employees/{emp_id}", body, emp["full_name"])


async def seed_leave_types(client: httpx.AsyncClient) -> dict[str, str]:
    """Seed leave types and return a name->id mapping."""
    print("\n--- Seeding leave types ---")
    for leave_type in LEAVE_TYPES:
        await _safe_post(client, f"{BASE_URL}/leave-types", leave_type, f"Leave type: {leave_type['name']}")

    resp = await client.get(f"{BASE_URL}/leave-types", headers=HEADERS)
    resp.raise_for_status()
    return {item["name"]: item["id"] for item in resp.json()["items"]}


async def seed_holidays(client: httpx.AsyncClient) -> None:
    """Seed holidays."""
    print("\n--- Seeding holidays ---")
    for holiday in HOLIDAYS:
        await _safe_post(client, f"{BASE_URL}/holidays", holiday, f"Holiday: {holiday['name']}")


async def seed_balances(client: httpx.AsyncClient) -> None:
    """Run the accrual engine so every employee starts with an entitled balance."""
    print("\n--- Recalculating balances ---")
    resp = await client.post(f"{BASE_URL}/balances/recalculate", headers=HEADERS)
    if resp.status_code != 200:
        print(f"  [ERROR] Recalculation: {resp.status_code} {resp.text[:200]}")
        return
    body = resp.json()
    print(f"  [OK] processed={body['processed']} updated={body['updated_count']} errors={body['errors']}")


def _next_business_day(start: date, days_ahead: int = 1) -> date:
    """First Mon-Fri at least days_ahead days after start."""
    candidate = start + timedelta(days=days_ahead)
    while candidate.weekday() >= 5:
        candidate += timedelta(days=1)
    return candidate


async def seed_requests(client: httpx.AsyncClient, leave_type_ids: dict[str, str]) -> None:
    """Seed one pending and one approved leave request."""
    print("\n--- Seeding requests ---")
    today = date.today()

    # Bob: three days of Annual Leave next week, stays Pending.
    bob_start = _next_business_day(today, days_ahead=7)
    resp = await client.post(
        f"{BASE_URL}/leave-requests",
        json={
            "leave_type_id": leave_type_ids["Annual Leave"],
            "start_date": bob_start.isoformat(),
            "end_date": (bob_start + timedelta(days=2)).isoformat(),
            "reason": "Family vacation",
        },
        headers=_headers(BOB_ID),
    )
    print(f"  [{'OK' if resp.status_code == 201 else 'SKIP'}] Bob annual leave ({resp.status_code})")

    # Carol: one day of Sick Leave, approved by Maya.
    carol_day = _next_business_day(today, days_ahead=3)
    resp = await client.post(
        f"{BASE_URL}/leave-requests",
        json={
            "leave_type_id": leave_type_ids["Sick Leave"],
            "start_date": carol_day.isoformat(),
            "end_date": carol_day.isoformat(),
            "reason": "Doctor appointment",
            "document_links": ["https://files.example.com/medical-note.pdf"],
        },
        headers=_headers(CAROL_ID),
    )
    if resp.status_code != 201:
        print(f"  [SKIP] Carol sick leave ({resp.status_code})")
        return
    request_id = resp.json()["id"]
    resp = await client.post(f"{BASE_URL}/leave-requests/{request_id}/approve", headers=_headers(MAYA_ID))
    if resp.status_code == 200:
        print("  [OK] Maya approved Carol's sick leave")
    else:
        print(f"  [ERROR] Approving Carol's request: {resp.status_code}")


async def main() -> None:
    print("=" * 60)
    print("  HRIS Leave Service - Development Seed Script")
    print("=" * 60)

    await bootstrap_admin()
    await dispose_engine()
    HEADERS.update(_headers(ADMIN_ID))

    async with httpx.AsyncClient(timeout=30.0) as client:
        try:
            resp = await client.get(f"{BASE_URL}/health")
            if resp.status_code != 200:
                print(f"API health check failed: {resp.status_code}")
                sys.exit(1)
            print("\n[OK] API is healthy")
        except httpx.ConnectError:
            print("ERROR: Cannot connect to API at", BASE_URL)
            print("Make sure the API is running (make up)")
            sys.exit(1)

        await seed_employees(client)
        leave_type_ids = await seed_leave_types(client)
        await seed_holidays(client)
        await seed_balances(client)
        await seed_requests(client, leave_type_ids)

    print("\n" + "=" * 60)
    print("  Seeding complete!")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
