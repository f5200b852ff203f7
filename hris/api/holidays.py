# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Query

from hris.api.deps import AdminDep, AuthDep
from hris.db import SessionDep
from hris.schemas.holiday import (
    CreateHolidayRequest,
    HolidayListResponse,
    HolidayResponse,
    UpdateHolidayRequest,
)
from hris.services import holiday as holiday_service

holidays_router = APIRouter(prefix="/holidays", tags=["holidays"])


@holidays_router.post(
    "",
    response_model=HolidayResponse,
    status_code=201,
)
async def create_holiday(
    payload: CreateHolidayRequest,
    session: SessionDep,
    auth: AdminDep,
) -> HolidayResponse:
    """Create a holiday (admin only)."""
    return await holiday_service.create_holiday(session, auth, payload)


@holidays_router.get(
    "",
    response_model=HolidayListResponse,
)
async def list_holidays(
    session: SessionDep,
    auth: AuthDep,
    year: int | None = Query(default=None),
    include_inactive: bool = Query(default=True),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
) -> HolidayListResponse:
    """List holidays with optional year filter."""
    return await holiday_service.list_holidays(session, year, include_inactive, offset, limit)


@holidays_router.get(
    "/active",
    response_model=HolidayListResponse,
)
async def list_active_holidays(
    session: SessionDep,
    auth: AuthDep,
    year: int | None = Query(default=None),
) -> HolidayListResponse:
    """Active holidays only, as shown on the leave calendar."""
    return await holiday_service.list_holidays(session, year, include_inactive=False, limit=366)


@holidays_router.get(
    "/{holiday_id}",
    response_model=HolidayResponse,
)
async def get_holiday(
    holiday_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> HolidayResponse:
    return await holiday_service.read_holiday(session, holiday_id)


@holidays_router.put(
    "/{holiday_id}",
    response_model=HolidayResponse,
)
async def update_holiday(
    holiday_id: uuid.UUID,
    payload: UpdateHolidayRequest,
    session: SessionDep,
    auth: AdminDep,
) -> HolidayResponse:
    """Edit a holiday's date, name or active flag (admin only)."""
    return await holiday_service.update_holiday(session, auth, holiday_id, payload)


@holidays_router.patch(
    "/{holiday_id}/toggle",
    response_model=HolidayResponse,
)
async def toggle_holiday(
    holiday_id: uuid.UUID,
    session: SessionDep,
    auth: AdminDep,
) -> HolidayResponse:
    """Activate or deactivate a holiday (admin only)."""
    return await holiday_service.toggle_holiday(session, auth, holiday_id)


@holidays_router.delete(
    "/{holiday_id}",
    status_code=204,
)
async def delete_holiday(
    holiday_id: uuid.UUID,
    session: SessionDep,
    auth: AdminDep,
) -> None:
    """Delete a holiday (admin only)."""
    await holiday_service.delete_holiday(session, auth, holiday_id)
