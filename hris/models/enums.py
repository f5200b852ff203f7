from __future__ import annotations

import enum


class Role(enum.StrEnum):
    """Closed set of caller roles."""

    EMPLOYEE = "Employee"
    MANAGER = "Manager"
    ADMIN = "Admin"


class EmploymentType(enum.StrEnum):
    """Employment contract kind, drives the accrual rate."""

    PERMANENT = "Permanent"
    CONTRACT = "Contract"


class EmployeeStatus(enum.StrEnum):
    """Whether an employee is currently employed."""

    ACTIVE = "Active"
    INACTIVE = "Inactive"


class RequestStatus(enum.StrEnum):
    """State machine for leave requests."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


# Pending is the only non-terminal state.
REQUEST_TRANSITIONS: dict[RequestStatus, frozenset[RequestStatus]] = {
    RequestStatus.PENDING: frozenset({RequestStatus.APPROVED, RequestStatus.REJECTED}),
    RequestStatus.APPROVED: frozenset(),
    RequestStatus.REJECTED: frozenset(),
}

# Statuses that still occupy calendar days.
EFFECTIVE_STATUSES: tuple[RequestStatus, ...] = (RequestStatus.PENDING, RequestStatus.APPROVED)


class AuditEntityType(enum.StrEnum):
    """Entity type recorded in the audit log."""

    EMPLOYEE = "EMPLOYEE"
    LEAVE_TYPE = "LEAVE_TYPE"
    LEAVE_REQUEST = "LEAVE_REQUEST"
    HOLIDAY = "HOLIDAY"
    BALANCE = "BALANCE"


class AuditAction(enum.StrEnum):
    """Action recorded in the audit log."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    APPROVE = "APPROVE"
    REJECT = "REJECT"
    RECALCULATE = "RECALCULATE"
