# ruff: noqa: TC003
"""Approval gate: who may action a leave request, and what approval does."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import select, update
from sqlmodel import col

from hris.exceptions import AuthorizationError, InvalidInputError, InvalidStateError
from hris.models.employee import Employee
from hris.models.enums import REQUEST_TRANSITIONS, AuditAction, AuditEntityType, RequestStatus, Role
from hris.models.leave_request import LeaveRequest
from hris.schemas.leave_request import LeaveRequestListResponse, LeaveRequestResponse
from hris.services.audit import model_to_audit_dict, write_audit_log
from hris.services.leave_request import build_request_response, load_request_view, paginate_request_views
from hris.services.leave_type import ANNUAL_LEAVE

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from hris.schemas.auth import AuthContext
    from hris.schemas.leave_request import RejectPayload

logger = logging.getLogger(__name__)

MIN_REJECTION_REASON_LENGTH = 10


# ---------------------------------------------------------------------------
# Authorization and state machine
# ---------------------------------------------------------------------------


def authorize_action(auth: AuthContext, employee: Employee) -> None:
    """Raise unless the caller may approve or reject requests of ``employee``.

    Admins act on everything, managers only on their direct reports and
    employees never reach the gate.
    """
    if auth.role == Role.ADMIN:
        return
    if auth.role == Role.MANAGER:
        if employee.manager_id != auth.user_id:
            raise AuthorizationError("You can only action requests from your direct reports")
        return
    if auth.role == Role.EMPLOYEE:
        raise AuthorizationError("Employees cannot approve or reject leave requests")
    msg = f"Unhandled role: {auth.role}"
    raise AssertionError(msg)


def check_transition(current: RequestStatus, target: RequestStatus) -> None:
    """Raise InvalidStateError unless ``current -> target`` is an allowed transition."""
    if target not in REQUEST_TRANSITIONS[current]:
        raise InvalidStateError(f"Leave request is {current.value}; cannot move to {target.value}")


async def _apply_transition(
    session: AsyncSession,
    leave_request: LeaveRequest,
    target: RequestStatus,
    values: dict[str, Any],
) -> None:
    """Conditionally move a request out of its current status.

    The UPDATE only matches while the row still has the status we read, so
    two concurrent deciders cannot both succeed.
    """
    current = RequestStatus(leave_request.status)

    result = await session.execute(
        update(LeaveRequest)
        .where(
            col(LeaveRequest.id) == leave_request.id,
            col(LeaveRequest.status) == current.value,
        )
        .values(status=target.value, **values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:  # type: ignore[attr-defined]
        await session.rollback()
        raise InvalidStateError("Leave request is no longer pending")


async def _deduct_balance(session: AsyncSession, employee_id: uuid.UUID, days: int) -> None:
    """Atomically subtract approved days from the stored balance.

    No floor is applied: the balance may go negative.
    """
    await session.execute(
        update(Employee)
        .where(col(Employee.id) == employee_id)
        .values(leave_balance=col(Employee.leave_balance) - days)
        .execution_options(synchronize_session=False)
    )
    result = await session.execute(select(Employee.leave_balance).where(col(Employee.id) == employee_id))
    new_balance = result.scalar_one()
    if new_balance < 0:
        logger.warning("Employee %s leave balance is negative after approval: %s", employee_id, new_balance)


async def _decide(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
    target: RequestStatus,
    rejection_reason: str | None = None,
) -> LeaveRequestResponse:
    leave_request, leave_type_name, employee = await load_request_view(session, request_id)

    check_transition(RequestStatus(leave_request.status), target)
    authorize_action(auth, employee)

    before_dict = model_to_audit_dict(leave_request)
    values: dict[str, Any] = {
        "approved_by": auth.user_id,
        "approved_at": datetime.now(UTC),
        "rejection_reason": rejection_reason,
    }
    await _apply_transition(session, leave_request, target, values)

    if target == RequestStatus.APPROVED and leave_type_name == ANNUAL_LEAVE:
        await _deduct_balance(session, employee.id, leave_request.days_requested)

    leave_request, leave_type_name, employee = await load_request_view(session, request_id)
    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.LEAVE_REQUEST,
        entity_id=leave_request.id,
        action=AuditAction.APPROVE if target == RequestStatus.APPROVED else AuditAction.REJECT,
        before_json=before_dict,
        after_json=model_to_audit_dict(leave_request),
    )

    await session.commit()
    logger.info("Leave request %s %s by %s", request_id, target.value.lower(), auth.user_id)
    return build_request_response(leave_request, leave_type_name, employee)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def approve_request(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
) -> LeaveRequestResponse:
    """Approve a Pending request; Annual Leave approvals deduct the stored balance."""
    return await _decide(session, auth, request_id, RequestStatus.APPROVED)


async def reject_request(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
    payload: RejectPayload,
) -> LeaveRequestResponse:
    """Reject a Pending request with a reason of at least ten characters."""
    reason = (payload.rejection_reason or "").strip()
    if len(reason) < MIN_REJECTION_REASON_LENGTH:
        raise InvalidInputError(
            f"Rejection reason must be at least {MIN_REJECTION_REASON_LENGTH} characters",
        )
    return await _decide(session, auth, request_id, RequestStatus.REJECTED, rejection_reason=reason)


async def list_requests_for_approval(
    session: AsyncSession,
    auth: AuthContext,
    status_filter: RequestStatus | None = RequestStatus.PENDING,
    offset: int = 0,
    limit: int = 10,
) -> LeaveRequestListResponse:
    """Requests awaiting the caller: direct reports for managers, everyone for admins."""
    filters: list[Any] = []
    if auth.role == Role.MANAGER:
        filters.append(col(Employee.manager_id) == auth.user_id)
    elif auth.role != Role.ADMIN:
        raise AuthorizationError("Manager or Admin role required")
    if status_filter is not None:
        filters.append(col(LeaveRequest.status) == status_filter.value)
    return await paginate_request_views(session, filters, offset, limit)


async def list_all_requests(
    session: AsyncSession,
    offset: int = 0,
    limit: int = 100,
) -> LeaveRequestListResponse:
    """Admin dashboard: every request from every employee."""
    return await paginate_request_views(session, [], offset, limit)
