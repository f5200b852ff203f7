# ruff: noqa: TC003
"""Leave catalog: read access for everyone, admin-maintained reference data."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from hris.exceptions import NotFoundError, ValidationError
from hris.models.enums import AuditAction, AuditEntityType
from hris.models.leave_request import LeaveRequest
from hris.models.leave_type import LeaveType
from hris.schemas.leave_type import LeaveTypeListResponse, LeaveTypeResponse
from hris.services.audit import model_to_audit_dict, write_audit_log

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from hris.schemas.auth import AuthContext
    from hris.schemas.leave_type import LeaveTypePayload

# The one leave type whose requests are checked against and deducted from the stored balance.
ANNUAL_LEAVE = "Annual Leave"


def is_annual_leave(leave_type: LeaveType) -> bool:
    return leave_type.name == ANNUAL_LEAVE


def _build_leave_type_response(leave_type: LeaveType) -> LeaveTypeResponse:
    return LeaveTypeResponse(
        id=leave_type.id,
        name=leave_type.name,
        description=leave_type.description,
        max_days_per_year=leave_type.max_days_per_year,
        requires_approval=leave_type.requires_approval,
        requires_document=leave_type.requires_document,
        is_active=leave_type.is_active,
        created_at=leave_type.created_at,
    )


async def get_leave_type(session: AsyncSession, leave_type_id: uuid.UUID) -> LeaveType | None:
    """Fetch a leave type. Returns None if not found."""
    result = await session.execute(select(LeaveType).where(col(LeaveType.id) == leave_type_id))
    return result.scalar_one_or_none()


async def _get_leave_type_or_404(session: AsyncSession, leave_type_id: uuid.UUID) -> LeaveType:
    leave_type = await get_leave_type(session, leave_type_id)
    if leave_type is None:
        raise NotFoundError("Leave type not found")
    return leave_type


async def _ensure_name_available(
    session: AsyncSession,
    name: str,
    exclude_id: uuid.UUID | None = None,
) -> None:
    query = select(LeaveType.id).where(col(LeaveType.name) == name)
    if exclude_id is not None:
        query = query.where(col(LeaveType.id) != exclude_id)
    result = await session.execute(query)
    if result.first() is not None:
        raise ValidationError("Leave type with this name already exists", kind="DuplicateName")


async def list_leave_types(
    session: AsyncSession,
    include_inactive: bool = False,
) -> LeaveTypeListResponse:
    """List leave types ordered by name; only active ones unless asked otherwise."""
    query = select(LeaveType)
    if not include_inactive:
        query = query.where(col(LeaveType.is_active).is_(True))
    result = await session.execute(query.order_by(col(LeaveType.name)))
    leave_types = list(result.scalars().all())
    return LeaveTypeListResponse(
        items=[_build_leave_type_response(t) for t in leave_types],
        total=len(leave_types),
    )


async def read_leave_type(session: AsyncSession, leave_type_id: uuid.UUID) -> LeaveTypeResponse:
    return _build_leave_type_response(await _get_leave_type_or_404(session, leave_type_id))


async def create_leave_type(
    session: AsyncSession,
    auth: AuthContext,
    payload: LeaveTypePayload,
) -> LeaveTypeResponse:
    """Create a leave type. Names are unique."""
    await _ensure_name_available(session, payload.name)

    leave_type = LeaveType(**payload.model_dump())
    session.add(leave_type)
    await session.flush()

    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.LEAVE_TYPE,
        entity_id=leave_type.id,
        action=AuditAction.CREATE,
        after_json=model_to_audit_dict(leave_type),
    )

    await session.commit()
    await session.refresh(leave_type)
    return _build_leave_type_response(leave_type)


async def update_leave_type(
    session: AsyncSession,
    auth: AuthContext,
    leave_type_id: uuid.UUID,
    payload: LeaveTypePayload,
) -> LeaveTypeResponse:
    """Replace every editable field of a leave type."""
    leave_type = await _get_leave_type_or_404(session, leave_type_id)
    await _ensure_name_available(session, payload.name, exclude_id=leave_type_id)

    before_dict = model_to_audit_dict(leave_type)
    for field, value in payload.model_dump().items():
        setattr(leave_type, field, value)
    await session.flush()

    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.LEAVE_TYPE,
        entity_id=leave_type.id,
        action=AuditAction.UPDATE,
        before_json=before_dict,
        after_json=model_to_audit_dict(leave_type),
    )

    await session.commit()
    await session.refresh(leave_type)
    return _build_leave_type_response(leave_type)


async def delete_leave_type(
    session: AsyncSession,
    auth: AuthContext,
    leave_type_id: uuid.UUID,
) -> None:
    """Delete a leave type that no request references."""
    leave_type = await _get_leave_type_or_404(session, leave_type_id)

    in_use = await session.execute(
        select(LeaveRequest.id).where(col(LeaveRequest.leave_type_id) == leave_type_id).limit(1)
    )
    if in_use.first() is not None:
        raise ValidationError("Cannot delete leave type that is being used in leave requests", kind="LeaveTypeInUse")

    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.LEAVE_TYPE,
        entity_id=leave_type.id,
        action=AuditAction.DELETE,
        before_json=model_to_audit_dict(leave_type),
    )

    await session.delete(leave_type)
    await session.commit()
