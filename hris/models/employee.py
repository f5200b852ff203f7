# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal

import sqlalchemy as sa
from sqlmodel import Field

from hris.models.base import TimestampMixin, UpdatedAtMixin, UUIDBase
from hris.models.enums import EmployeeStatus, EmploymentType, Role


class Employee(UUIDBase, TimestampMixin, UpdatedAtMixin, table=True):
    """An employee record with the fields the leave workflows read and write."""

    __tablename__ = "employee"
    __table_args__ = (sa.Index("ix_employee_status", "status"),)

    full_name: str = Field(max_length=255)
    email: str = Field(max_length=255, unique=True)
    role: str = Field(default=Role.EMPLOYEE, max_length=20)
    employment_type: str = Field(default=EmploymentType.PERMANENT, max_length=20)
    start_date: date
    status: str = Field(default=EmployeeStatus.ACTIVE, max_length=20)
    manager_id: uuid.UUID | None = Field(
        default=None,
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("employee.id", ondelete="SET NULL"), nullable=True, index=True),
    )
    # Entitled balance written by the accrual engine; approvals of Annual Leave decrement it.
    leave_balance: Decimal = Field(default=Decimal("0"), max_digits=8, decimal_places=2)
