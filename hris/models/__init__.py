from sqlmodel import SQLModel

from hris.models.audit import AuditLog
from hris.models.base import TimestampMixin, UpdatedAtMixin, UUIDBase
from hris.models.employee import Employee
from hris.models.enums import (
    AuditAction,
    AuditEntityType,
    EmployeeStatus,
    EmploymentType,
    RequestStatus,
    Role,
)
from hris.models.holiday import Holiday
from hris.models.leave_request import LeaveRequest
from hris.models.leave_type import LeaveType

__all__ = [
    "AuditAction",
    "AuditEntityType",
    "AuditLog",
    "Employee",
    "EmployeeStatus",
    "EmploymentType",
    "Holiday",
    "LeaveRequest",
    "LeaveType",
    "RequestStatus",
    "Role",
    "SQLModel",
    "TimestampMixin",
    "UUIDBase",
    "UpdatedAtMixin",
]
