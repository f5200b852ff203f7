import logging
from typing import Literal

from fastapi import APIRouter
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from hris.config import get_settings
from hris.db import SessionDep

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

HealthStatus = Literal["ok", "degraded"]


class HealthResponse(BaseModel):
    """Liveness plus database reachability."""

    status: HealthStatus
    service: str
    version: str
    environment: str
    database: Literal["reachable", "unreachable"]


@router.get("/health", response_model=HealthResponse)
async def health(session: SessionDep) -> HealthResponse:
    """Report service status. Unauthenticated; degraded when the database ping fails."""
    settings = get_settings()

    try:
        await session.execute(text("SELECT 1"))
        database: Literal["reachable", "unreachable"] = "reachable"
    except SQLAlchemyError:
        logger.exception("Health check: database ping failed")
        database = "unreachable"

    return HealthResponse(
        status="ok" if database == "reachable" else "degraded",
        service=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
        database=database,
    )
