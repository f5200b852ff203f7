# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field, field_validator


class LeaveTypePayload(BaseModel):
    """Request body for creating or replacing a leave type."""

    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=1000)
    max_days_per_year: int | None = Field(default=None, ge=1, le=366)
    requires_approval: bool = True
    requires_document: bool = False
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            msg = "name must not be blank"
            raise ValueError(msg)
        return value


class LeaveTypeResponse(BaseModel):
    """Response schema for a leave type."""

    id: uuid.UUID
    name: str
    description: str | None
    max_days_per_year: int | None
    requires_approval: bool
    requires_document: bool
    is_active: bool
    created_at: datetime


class LeaveTypeListResponse(BaseModel):
    """All leave types, sorted by name."""

    items: list[LeaveTypeResponse]
    total: int
