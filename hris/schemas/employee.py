# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from hris.models.enums import EmployeeStatus, EmploymentType, Role


class UpsertEmployeeRequest(BaseModel):
    """Request body for creating or updating an employee record."""

    full_name: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=3, max_length=255)
    role: Role = Role.EMPLOYEE
    employment_type: EmploymentType = EmploymentType.PERMANENT
    start_date: date
    status: EmployeeStatus = EmployeeStatus.ACTIVE
    manager_id: uuid.UUID | None = None
    leave_balance: Decimal | None = Field(default=None, max_digits=8, decimal_places=2)


class EmployeeSummary(BaseModel):
    """Compact employee block embedded in leave request responses."""

    id: uuid.UUID
    full_name: str
    email: str


class EmployeeResponse(BaseModel):
    """Response schema for an employee."""

    id: uuid.UUID
    full_name: str
    email: str
    role: Role
    employment_type: EmploymentType
    start_date: date
    status: EmployeeStatus
    manager_id: uuid.UUID | None
    leave_balance: float


class EmployeeListResponse(BaseModel):
    """List of employees."""

    items: list[EmployeeResponse]
    total: int
