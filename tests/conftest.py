from __future__ import annotations

import uuid
from collections.abc import Awaitable, Callable
from datetime import date, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING, Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from hris.db import get_session
from hris.main import app
from hris.models import Employee, LeaveType, SQLModel
from hris.models.enums import EmployeeStatus, EmploymentType, Role
from hris.services.token import create_access_token

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from sqlalchemy.ext.asyncio import AsyncEngine

EmployeeFactory = Callable[..., Awaitable[Employee]]
LeaveTypeFactory = Callable[..., Awaitable[LeaveType]]


@pytest.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    """In-memory SQLite engine with a fresh schema for every test."""
    _engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with _engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield _engine
    await _engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
async def async_client(db_session: AsyncSession) -> AsyncIterator[AsyncClient]:
    """Async HTTP client with the database session dependency overridden."""

    async def _override_get_session() -> AsyncIterator[AsyncSession]:
        yield db_session

    app.dependency_overrides[get_session] = _override_get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Data helpers
# ---------------------------------------------------------------------------


@pytest.fixture
def make_employee(db_session: AsyncSession) -> EmployeeFactory:
    """Insert an employee row. Keyword arguments override the defaults."""

    async def _make(**overrides: Any) -> Employee:
        suffix = uuid.uuid4().hex[:8]
        values: dict[str, Any] = {
            "full_name": f"Employee {suffix}",
            "email": f"{suffix}@example.com",
            "role": Role.EMPLOYEE.value,
            "employment_type": EmploymentType.PERMANENT.value,
            "start_date": date(2023, 1, 2),
            "status": EmployeeStatus.ACTIVE.value,
            "leave_balance": Decimal("12.00"),
        }
        values.update(overrides)
        employee = Employee(**values)
        db_session.add(employee)
        await db_session.commit()
        return employee

    return _make


@pytest.fixture
def make_leave_type(db_session: AsyncSession) -> LeaveTypeFactory:
    async def _make(name: str = "Annual Leave", **overrides: Any) -> LeaveType:
        leave_type = LeaveType(name=name, **overrides)
        db_session.add(leave_type)
        await db_session.commit()
        return leave_type

    return _make


def auth_headers(employee: Employee | uuid.UUID) -> dict[str, str]:
    employee_id = employee if isinstance(employee, uuid.UUID) else employee.id
    return {"Authorization": f"Bearer {create_access_token(employee_id)}"}


@pytest.fixture
def headers_for() -> Callable[[Employee | uuid.UUID], dict[str, str]]:
    """Bearer headers for an employee."""
    return auth_headers


@pytest.fixture
def next_monday() -> date:
    """The first Monday strictly after today."""
    today = date.today()
    return today + timedelta(days=7 - today.weekday())
