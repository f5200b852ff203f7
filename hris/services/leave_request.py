# ruff: noqa: TC003
"""Leave request lifecycle: validation, creation and read access."""

from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, select
from sqlmodel import col

from hris.exceptions import (
    AuthorizationError,
    EmptyRequestError,
    InsufficientBalanceError,
    InvalidDateRangeError,
    InvalidReferenceError,
    NotFoundError,
    OverlappingRequestError,
)
from hris.models.employee import Employee
from hris.models.enums import EFFECTIVE_STATUSES, AuditAction, AuditEntityType, RequestStatus, Role
from hris.models.leave_request import LeaveRequest
from hris.models.leave_type import LeaveType
from hris.schemas.leave_request import LeaveRequestListResponse, LeaveRequestResponse
from hris.services.audit import model_to_audit_dict, write_audit_log
from hris.services.duration import count_business_days
from hris.services.employee import build_employee_summary, get_employee_or_404
from hris.services.leave_type import get_leave_type, is_annual_leave

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from hris.schemas.auth import AuthContext
    from hris.schemas.leave_request import CreateLeaveRequestPayload

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def build_request_response(
    request: LeaveRequest,
    leave_type_name: str,
    employee: Employee,
) -> LeaveRequestResponse:
    """Map a request row plus its joined display fields to the response schema."""
    return LeaveRequestResponse(
        id=request.id,
        employee_id=request.employee_id,
        leave_type_id=request.leave_type_id,
        leave_type_name=leave_type_name,
        employee=build_employee_summary(employee),
        start_date=request.start_date,
        end_date=request.end_date,
        days_requested=request.days_requested,
        reason=request.reason,
        document_links=request.document_links,
        status=RequestStatus(request.status),
        approved_by=request.approved_by,
        approved_at=request.approved_at,
        rejection_reason=request.rejection_reason,
        created_at=request.created_at,
    )


def request_view_query() -> Any:
    """SELECT a request together with its leave type name and owning employee."""
    return (
        select(LeaveRequest, col(LeaveType.name), Employee)
        .join(LeaveType, col(LeaveRequest.leave_type_id) == col(LeaveType.id))
        .join(Employee, col(LeaveRequest.employee_id) == col(Employee.id))
    )


async def load_request_view(
    session: AsyncSession,
    request_id: uuid.UUID,
) -> tuple[LeaveRequest, str, Employee]:
    """Fetch a request with its display joins. Raises 404 if not found."""
    result = await session.execute(
        request_view_query()
        .where(col(LeaveRequest.id) == request_id)
        .execution_options(populate_existing=True)
    )
    row = result.first()
    if row is None:
        raise NotFoundError("Leave request not found")
    return row[0], row[1], row[2]


async def paginate_request_views(
    session: AsyncSession,
    filters: list[Any],
    offset: int,
    limit: int,
) -> LeaveRequestListResponse:
    """Run a filtered, newest-first, paginated request listing."""
    count_query = (
        select(func.count())
        .select_from(LeaveRequest)
        .join(Employee, col(LeaveRequest.employee_id) == col(Employee.id))
        .where(*filters)
    )
    total = (await session.execute(count_query)).scalar_one()

    result = await session.execute(
        request_view_query()
        .where(*filters)
        .order_by(col(LeaveRequest.created_at).desc())
        .offset(offset)
        .limit(limit)
    )
    return LeaveRequestListResponse(
        items=[build_request_response(r, name, emp) for r, name, emp in result.all()],
        total=total,
    )


async def _check_request_overlap(
    session: AsyncSession,
    employee_id: uuid.UUID,
    start_date: date,
    end_date: date,
) -> None:
    """Raise if an effective request of the employee covers any day of the range.

    Effective means Pending or Approved. Inclusive ranges overlap when
    existing.start_date <= new.end_date AND existing.end_date >= new.start_date.
    """
    result = await session.execute(
        select(LeaveRequest.id)
        .where(
            col(LeaveRequest.employee_id) == employee_id,
            col(LeaveRequest.status).in_([s.value for s in EFFECTIVE_STATUSES]),
            col(LeaveRequest.start_date) <= end_date,
            col(LeaveRequest.end_date) >= start_date,
        )
        .limit(1)
    )
    if result.first() is not None:
        raise OverlappingRequestError("You have overlapping leave requests for these dates")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def create_leave_request(
    session: AsyncSession,
    auth: AuthContext,
    payload: CreateLeaveRequestPayload,
    *,
    today: date | None = None,
) -> LeaveRequestResponse:
    """Validate and create a Pending leave request for the caller.

    Checks run in a fixed order and the first failure wins:
    1. Leave type exists
    2. Start date is not in the past
    3. End date is not before start date
    4. At least one business day is requested
    5. Annual Leave only: stored balance covers the business days
    6. No overlap with the caller's Pending/Approved requests
    7. Insert as Pending

    The balance is not touched here; it is deducted on approval.
    """
    if today is None:
        today = date.today()

    # 1. Leave type.
    leave_type = await get_leave_type(session, payload.leave_type_id)
    if leave_type is None:
        raise InvalidReferenceError("Invalid leave type")

    # 2-3. Date range.
    if payload.start_date < today:
        raise InvalidDateRangeError("Start date cannot be in the past")
    if payload.end_date < payload.start_date:
        raise InvalidDateRangeError("End date cannot be before start date")

    # 4. Business days.
    days_requested = count_business_days(payload.start_date, payload.end_date)
    if days_requested == 0:
        raise EmptyRequestError("Leave request must include at least one business day")

    # 5. Balance (Annual Leave only).
    employee = await get_employee_or_404(session, auth.user_id)
    if is_annual_leave(leave_type) and employee.leave_balance < days_requested:
        raise InsufficientBalanceError(available=float(employee.leave_balance), requested=days_requested)

    # 6. Overlap.
    await _check_request_overlap(session, employee.id, payload.start_date, payload.end_date)

    # 7. Insert.
    leave_request = LeaveRequest(
        employee_id=employee.id,
        leave_type_id=leave_type.id,
        start_date=payload.start_date,
        end_date=payload.end_date,
        days_requested=days_requested,
        reason=payload.reason,
        document_links=payload.document_links,
        status=RequestStatus.PENDING.value,
    )
    session.add(leave_request)
    await session.flush()

    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.LEAVE_REQUEST,
        entity_id=leave_request.id,
        action=AuditAction.CREATE,
        after_json=model_to_audit_dict(leave_request),
    )

    await session.commit()
    await session.refresh(leave_request)
    logger.info(
        "Leave request %s created by employee=%s type=%s days=%d",
        leave_request.id,
        employee.id,
        leave_type.name,
        days_requested,
    )
    return build_request_response(leave_request, leave_type.name, employee)


async def list_my_requests(
    session: AsyncSession,
    auth: AuthContext,
    status_filter: RequestStatus | None = None,
    offset: int = 0,
    limit: int = 10,
) -> LeaveRequestListResponse:
    """List the caller's own requests, newest first."""
    filters: list[Any] = [col(LeaveRequest.employee_id) == auth.user_id]
    if status_filter is not None:
        filters.append(col(LeaveRequest.status) == status_filter.value)
    return await paginate_request_views(session, filters, offset, limit)


async def get_leave_request(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
) -> LeaveRequestResponse:
    """Read one request. Visible to its owner, the owner's manager and admins."""
    leave_request, leave_type_name, employee = await load_request_view(session, request_id)

    visible = (
        auth.role == Role.ADMIN
        or leave_request.employee_id == auth.user_id
        or (auth.role == Role.MANAGER and employee.manager_id == auth.user_id)
    )
    if not visible:
        raise AuthorizationError("Not authorized to view this leave request")

    return build_request_response(leave_request, leave_type_name, employee)
