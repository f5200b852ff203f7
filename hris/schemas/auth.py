# ruff: noqa: TC003
from __future__ import annotations

import uuid

from pydantic import BaseModel

from hris.models.enums import Role


class AuthContext(BaseModel):
    """Authenticated caller resolved from a bearer token."""

    user_id: uuid.UUID
    role: Role = Role.EMPLOYEE
