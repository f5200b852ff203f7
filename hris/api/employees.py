# ruff: noqa: TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter

from hris.api.deps import AdminDep, ApproverDep, AuthDep
from hris.db import SessionDep
from hris.schemas.employee import EmployeeListResponse, EmployeeResponse, UpsertEmployeeRequest
from hris.services import employee as employee_service

employees_router = APIRouter(prefix="/employees", tags=["employees"])


@employees_router.put(
    "/{employee_id}",
    response_model=EmployeeResponse,
)
async def upsert_employee(
    employee_id: uuid.UUID,
    payload: UpsertEmployeeRequest,
    session: SessionDep,
    auth: AdminDep,
) -> EmployeeResponse:
    """Create or update an employee (admin only)."""
    return await employee_service.upsert_employee(session, auth, employee_id, payload)


@employees_router.get(
    "/{employee_id}",
    response_model=EmployeeResponse,
)
async def get_employee(
    employee_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> EmployeeResponse:
    return await employee_service.read_employee(session, auth, employee_id)


@employees_router.get(
    "",
    response_model=EmployeeListResponse,
)
async def list_employees(
    session: SessionDep,
    auth: ApproverDep,
) -> EmployeeListResponse:
    """List employees: direct reports for managers, everyone for admins."""
    return await employee_service.list_employee_responses(session, auth)
