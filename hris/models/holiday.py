from __future__ import annotations

import datetime

from sqlmodel import Field

from hris.models.base import TimestampMixin, UUIDBase


class Holiday(UUIDBase, TimestampMixin, table=True):
    """A public holiday shown on the calendar. Not used for business-day counting."""

    __tablename__ = "holiday"

    date: datetime.date = Field(unique=True)
    name: str = Field(max_length=255)
    is_active: bool = True
