# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Query, status

from hris.api.deps import AdminDep, ApproverDep, AuthDep
from hris.db import SessionDep
from hris.models.enums import RequestStatus
from hris.schemas.leave_request import (
    CreateLeaveRequestPayload,
    LeaveRequestListResponse,
    LeaveRequestResponse,
    RejectPayload,
)
from hris.services import approval as approval_service
from hris.services import leave_request as leave_request_service

leave_requests_router = APIRouter(prefix="/leave-requests", tags=["leave-requests"])


@leave_requests_router.post("", response_model=LeaveRequestResponse, status_code=status.HTTP_201_CREATED)
async def create_leave_request(
    payload: CreateLeaveRequestPayload,
    session: SessionDep,
    auth: AuthDep,
) -> LeaveRequestResponse:
    """Submit a leave request for the caller."""
    return await leave_request_service.create_leave_request(session, auth, payload)


@leave_requests_router.get("/mine", response_model=LeaveRequestListResponse)
async def list_my_requests(
    session: SessionDep,
    auth: AuthDep,
    status_filter: RequestStatus | None = Query(default=None, alias="status"),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=10, ge=1, le=100),
) -> LeaveRequestListResponse:
    """List the caller's own leave requests."""
    return await leave_request_service.list_my_requests(session, auth, status_filter, offset, limit)


@leave_requests_router.get("/approvals", response_model=LeaveRequestListResponse)
async def list_approvals(
    session: SessionDep,
    auth: ApproverDep,
    status_filter: RequestStatus | None = Query(default=RequestStatus.PENDING, alias="status"),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=10, ge=1, le=100),
) -> LeaveRequestListResponse:
    """Requests the caller may action: direct reports for managers, everyone for admins."""
    return await approval_service.list_requests_for_approval(session, auth, status_filter, offset, limit)


@leave_requests_router.get("/all", response_model=LeaveRequestListResponse)
async def list_all_requests(
    session: SessionDep,
    auth: AdminDep,
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=500),
) -> LeaveRequestListResponse:
    """Every leave request (admin only)."""
    return await approval_service.list_all_requests(session, offset, limit)


@leave_requests_router.get("/{request_id}", response_model=LeaveRequestResponse)
async def get_leave_request(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> LeaveRequestResponse:
    return await leave_request_service.get_leave_request(session, auth, request_id)


@leave_requests_router.post("/{request_id}/approve", response_model=LeaveRequestResponse)
async def approve_request(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: ApproverDep,
) -> LeaveRequestResponse:
    """Approve a pending request."""
    return await approval_service.approve_request(session, auth, request_id)


@leave_requests_router.post("/{request_id}/reject", response_model=LeaveRequestResponse)
async def reject_request(
    request_id: uuid.UUID,
    payload: RejectPayload,
    session: SessionDep,
    auth: ApproverDep,
) -> LeaveRequestResponse:
    """Reject a pending request with a reason."""
    return await approval_service.reject_request(session, auth, request_id, payload)
