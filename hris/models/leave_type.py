from __future__ import annotations

from sqlmodel import Field

from hris.models.base import TimestampMixin, UUIDBase


class LeaveType(UUIDBase, TimestampMixin, table=True):
    """Reference data: a named kind of leave an employee can request."""

    __tablename__ = "leave_type"

    name: str = Field(max_length=100, unique=True)
    description: str | None = None
    max_days_per_year: int | None = None
    requires_approval: bool = True
    requires_document: bool = False
    is_active: bool = Field(default=True, index=True)
