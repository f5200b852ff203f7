from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from hris.db import SessionDep
from hris.exceptions import AuthenticationError, AuthorizationError
from hris.models.enums import EmployeeStatus, Role
from hris.schemas.auth import AuthContext
from hris.services.employee import get_employee
from hris.services.token import decode_access_token


def _extract_bearer(request: Request) -> str:
    """Extract the bearer token from the Authorization header."""
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise AuthenticationError("Missing or invalid Authorization header")
    return auth_header[7:]


async def get_auth_context(request: Request, session: SessionDep) -> AuthContext:
    """Resolve the caller from the bearer token. The role comes from the employee row."""
    employee_id = decode_access_token(_extract_bearer(request))

    employee = await get_employee(session, employee_id)
    if employee is None or employee.status != EmployeeStatus.ACTIVE.value:
        raise AuthenticationError("User account is inactive or not found")

    return AuthContext(user_id=employee.id, role=Role(employee.role))


AuthDep = Annotated[AuthContext, Depends(get_auth_context)]


async def require_approver(auth: AuthDep) -> AuthContext:
    """Require Manager or Admin role."""
    if auth.role not in (Role.MANAGER, Role.ADMIN):
        raise AuthorizationError("Manager or Admin role required")
    return auth


ApproverDep = Annotated[AuthContext, Depends(require_approver)]


async def require_admin(auth: AuthDep) -> AuthContext:
    """Require Admin role."""
    if auth.role != Role.ADMIN:
        raise AuthorizationError("Admin access required")
    return auth


AdminDep = Annotated[AuthContext, Depends(require_admin)]
