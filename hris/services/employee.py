# ruff: noqa: TC003
from __future__ import annotations

import uuid
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlmodel import col

from hris.exceptions import (
    AuthorizationError,
    InvalidInputError,
    InvalidReferenceError,
    NotFoundError,
    ValidationError,
)
from hris.models.employee import Employee
from hris.models.enums import AuditAction, AuditEntityType, EmployeeStatus, EmploymentType, Role
from hris.schemas.employee import EmployeeListResponse, EmployeeResponse, EmployeeSummary
from hris.services.audit import model_to_audit_dict, write_audit_log

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from hris.schemas.auth import AuthContext
    from hris.schemas.employee import UpsertEmployeeRequest


def build_employee_response(employee: Employee) -> EmployeeResponse:
    """Map an employee model to its response schema."""
    return EmployeeResponse(
        id=employee.id,
        full_name=employee.full_name,
        email=employee.email,
        role=Role(employee.role),
        employment_type=EmploymentType(employee.employment_type),
        start_date=employee.start_date,
        status=EmployeeStatus(employee.status),
        manager_id=employee.manager_id,
        leave_balance=float(employee.leave_balance),
    )


def build_employee_summary(employee: Employee) -> EmployeeSummary:
    return EmployeeSummary(id=employee.id, full_name=employee.full_name, email=employee.email)


async def get_employee(session: AsyncSession, employee_id: uuid.UUID) -> Employee | None:
    """Fetch an employee row. Returns None if not found."""
    result = await session.execute(
        select(Employee).where(col(Employee.id) == employee_id).execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_employee_or_404(session: AsyncSession, employee_id: uuid.UUID) -> Employee:
    employee = await get_employee(session, employee_id)
    if employee is None:
        raise NotFoundError("Employee not found")
    return employee


async def list_employees(
    session: AsyncSession,
    *,
    manager_id: uuid.UUID | None = None,
    status_filter: EmployeeStatus | None = None,
) -> list[Employee]:
    """List employees ordered by name, optionally restricted to one manager's reports."""
    filters = []
    if manager_id is not None:
        filters.append(col(Employee.manager_id) == manager_id)
    if status_filter is not None:
        filters.append(col(Employee.status) == status_filter.value)
    result = await session.execute(
        select(Employee)
        .where(*filters)
        .order_by(col(Employee.full_name))
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def list_employee_responses(
    session: AsyncSession,
    auth: AuthContext,
) -> EmployeeListResponse:
    """Admins see everyone; managers see their direct reports."""
    manager_id = auth.user_id if auth.role == Role.MANAGER else None
    employees = await list_employees(session, manager_id=manager_id)
    items = [build_employee_response(e) for e in employees]
    return EmployeeListResponse(items=items, total=len(items))


async def upsert_employee(
    session: AsyncSession,
    auth: AuthContext,
    employee_id: uuid.UUID,
    payload: UpsertEmployeeRequest,
) -> EmployeeResponse:
    """Create or replace an employee record (admin only).

    The stored leave balance is only overwritten when the payload carries one.
    """
    if payload.manager_id == employee_id:
        raise InvalidInputError("An employee cannot be their own manager")
    if payload.manager_id is not None:
        manager = await get_employee(session, payload.manager_id)
        if manager is None:
            raise InvalidReferenceError("Manager does not exist")

    employee = await get_employee(session, employee_id)
    before_dict = model_to_audit_dict(employee) if employee is not None else None

    if employee is None:
        employee = Employee(
            id=employee_id,
            full_name=payload.full_name,
            email=payload.email,
            start_date=payload.start_date,
        )
        session.add(employee)

    employee.full_name = payload.full_name
    employee.email = payload.email
    employee.role = payload.role.value
    employee.employment_type = payload.employment_type.value
    employee.start_date = payload.start_date
    employee.status = payload.status.value
    employee.manager_id = payload.manager_id
    if payload.leave_balance is not None:
        employee.leave_balance = Decimal(payload.leave_balance)

    try:
        await session.flush()
    except IntegrityError:
        await session.rollback()
        raise ValidationError(f"Email '{payload.email}' is already in use") from None

    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.EMPLOYEE,
        entity_id=employee.id,
        action=AuditAction.CREATE if before_dict is None else AuditAction.UPDATE,
        before_json=before_dict,
        after_json=model_to_audit_dict(employee),
    )

    await session.commit()
    await session.refresh(employee)
    return build_employee_response(employee)


async def read_employee(
    session: AsyncSession,
    auth: AuthContext,
    employee_id: uuid.UUID,
) -> EmployeeResponse:
    """Read one employee. Visible to the employee, their manager and admins."""
    employee = await get_employee_or_404(session, employee_id)
    visible = (
        auth.role == Role.ADMIN
        or employee.id == auth.user_id
        or (auth.role == Role.MANAGER and employee.manager_id == auth.user_id)
    )
    if not visible:
        raise AuthorizationError("Not authorized to view this employee")
    return build_employee_response(employee)
