"""Bearer token issue and verification."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime, timedelta

from jose import ExpiredSignatureError, JWTError, jwt

from hris.config import get_settings
from hris.exceptions import AuthenticationError


def create_access_token(employee_id: uuid.UUID, expires_in: timedelta | None = None) -> str:
    """Sign an access token whose subject is the employee id."""
    settings = get_settings()
    if expires_in is None:
        expires_in = timedelta(hours=settings.jwt_expiry_hours)
    payload = {
        "sub": str(employee_id),
        "type": "access",
        "exp": datetime.now(UTC) + expires_in,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> uuid.UUID:
    """Verify a token and return the employee id it was issued for."""
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError:
        raise AuthenticationError("Token has expired") from None
    except JWTError:
        raise AuthenticationError("Invalid token") from None

    if payload.get("type") != "access":
        raise AuthenticationError("Invalid token type")

    try:
        return uuid.UUID(payload["sub"])
    except (KeyError, ValueError, TypeError):
        raise AuthenticationError("Invalid token subject") from None
