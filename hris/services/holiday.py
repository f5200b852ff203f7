"""Holiday calendar maintained by admins.

Holidays are calendar reference data only; business-day counting ignores them.
A retired holiday is switched off rather than removed, so readers that only
want the live calendar ask for active rows.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import extract, func, select
from sqlalchemy.exc import IntegrityError
from sqlmodel import col

from hris.exceptions import InvalidInputError, NotFoundError, ValidationError
from hris.models.enums import AuditAction, AuditEntityType
from hris.models.holiday import Holiday
from hris.schemas.holiday import HolidayListResponse, HolidayResponse
from hris.services.audit import model_to_audit_dict, write_audit_log

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession

    from hris.schemas.auth import AuthContext
    from hris.schemas.holiday import CreateHolidayRequest, UpdateHolidayRequest

logger = logging.getLogger(__name__)


async def get_holiday(session: AsyncSession, holiday_id: uuid.UUID) -> Holiday:
    holiday = await session.get(Holiday, holiday_id)
    if holiday is None:
        raise NotFoundError("Holiday not found")
    return holiday


async def _save(
    session: AsyncSession,
    auth: AuthContext,
    holiday: Holiday,
    action: AuditAction,
    before: dict[str, Any] | None = None,
) -> HolidayResponse:
    """Flush a new or edited holiday, audit it and commit.

    The date column is unique, so a clash surfaces here for inserts and edits alike.
    """
    try:
        await session.flush()
    except IntegrityError:
        await session.rollback()
        raise ValidationError("Holiday already exists on this date", kind="DuplicateHoliday") from None

    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.HOLIDAY,
        entity_id=holiday.id,
        action=action,
        before_json=before,
        after_json=model_to_audit_dict(holiday),
    )
    await session.commit()
    await session.refresh(holiday)
    logger.info("Holiday %s on %s saved (%s, active=%s)", holiday.id, holiday.date, action.value, holiday.is_active)
    return HolidayResponse.model_validate(holiday)


async def list_holidays(
    session: AsyncSession,
    year: int | None = None,
    include_inactive: bool = True,
    offset: int = 0,
    limit: int = 50,
) -> HolidayListResponse:
    """Holidays in date order, optionally for one year and only the active ones."""
    conditions: list[Any] = []
    if year is not None:
        conditions.append(extract("year", col(Holiday.date)) == year)
    if not include_inactive:
        conditions.append(col(Holiday.is_active).is_(True))

    total = (await session.execute(select(func.count()).select_from(Holiday).where(*conditions))).scalar_one()
    rows = await session.scalars(
        select(Holiday).where(*conditions).order_by(col(Holiday.date)).offset(offset).limit(limit)
    )
    return HolidayListResponse(items=[HolidayResponse.model_validate(h) for h in rows], total=total)


async def read_holiday(session: AsyncSession, holiday_id: uuid.UUID) -> HolidayResponse:
    return HolidayResponse.model_validate(await get_holiday(session, holiday_id))


async def create_holiday(
    session: AsyncSession,
    auth: AuthContext,
    payload: CreateHolidayRequest,
) -> HolidayResponse:
    holiday = Holiday(date=payload.date, name=payload.name, is_active=payload.is_active)
    session.add(holiday)
    return await _save(session, auth, holiday, AuditAction.CREATE)


async def update_holiday(
    session: AsyncSession,
    auth: AuthContext,
    holiday_id: uuid.UUID,
    payload: UpdateHolidayRequest,
) -> HolidayResponse:
    """Apply the fields present in ``payload``; at least one is required."""
    changes = payload.changes()
    if not changes:
        raise InvalidInputError("No valid fields to update")

    holiday = await get_holiday(session, holiday_id)
    before = model_to_audit_dict(holiday)
    for field, value in changes.items():
        setattr(holiday, field, value)
    return await _save(session, auth, holiday, AuditAction.UPDATE, before)


async def toggle_holiday(
    session: AsyncSession,
    auth: AuthContext,
    holiday_id: uuid.UUID,
) -> HolidayResponse:
    """Switch a holiday on or off without touching its date or name."""
    holiday = await get_holiday(session, holiday_id)
    before = model_to_audit_dict(holiday)
    holiday.is_active = not holiday.is_active
    return await _save(session, auth, holiday, AuditAction.UPDATE, before)


async def delete_holiday(
    session: AsyncSession,
    auth: AuthContext,
    holiday_id: uuid.UUID,
) -> None:
    holiday = await get_holiday(session, holiday_id)
    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.HOLIDAY,
        entity_id=holiday.id,
        action=AuditAction.DELETE,
        before_json=model_to_audit_dict(holiday),
    )
    await session.delete(holiday)
    await session.commit()
    logger.info("Holiday %s deleted by %s", holiday_id, auth.user_id)
