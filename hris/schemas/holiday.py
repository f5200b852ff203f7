# ruff: noqa: TC003
from __future__ import annotations

import datetime
import uuid
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _clean_name(value: str) -> str:
    value = value.strip()
    if not value:
        msg = "name must not be blank"
        raise ValueError(msg)
    return value


class CreateHolidayRequest(BaseModel):
    """Request body for publishing a holiday."""

    date: datetime.date
    name: str = Field(min_length=1, max_length=255)
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        return _clean_name(value)


class UpdateHolidayRequest(BaseModel):
    """Partial update. Omitted or null fields keep their current value."""

    date: datetime.date | None = None
    name: str | None = Field(default=None, min_length=1, max_length=255)
    is_active: bool | None = None

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str | None) -> str | None:
        return None if value is None else _clean_name(value)

    def changes(self) -> dict[str, Any]:
        return {k: v for k, v in self.model_dump(exclude_unset=True).items() if v is not None}


class HolidayResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    date: datetime.date
    name: str
    is_active: bool


class HolidayListResponse(BaseModel):
    """Holidays in calendar order."""

    items: list[HolidayResponse]
    total: int
