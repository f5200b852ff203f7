# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date

from pydantic import BaseModel

from hris.models.enums import EmploymentType

# ---------------------------------------------------------------------------
# Balance report
# ---------------------------------------------------------------------------


class EmployeeBalanceResponse(BaseModel):
    """Entitled, consumed and usable leave for one employee."""

    employee_id: uuid.UUID
    full_name: str
    email: str
    start_date: date
    months_joined: int
    employment_type: EmploymentType
    entitled_balance: float
    used_days: int
    usable_balance: float


class BalanceReportResponse(BaseModel):
    """Balances for every active employee."""

    items: list[EmployeeBalanceResponse]
    total: int


class BalanceRulesResponse(BaseModel):
    """Published accrual rules."""

    permanent_rate: float
    contract_rate: float
    calculation_unit: str
    average_month_days: float
    cutoff_day: int
    cutoff_rule: str
    balance_calculation: str


# ---------------------------------------------------------------------------
# Recalculation
# ---------------------------------------------------------------------------


class BalanceDeltaResponse(BaseModel):
    """Before/after balance for one employee touched by a recalculation."""

    employee_id: uuid.UUID
    employee_name: str
    old_balance: float
    new_balance: float
    months_joined: int
    employment_type: EmploymentType


class RecalculationResponse(BaseModel):
    """Summary of a balance recalculation run."""

    as_of_date: date
    processed: int
    updated_count: int
    skipped: int
    errors: int
    deltas: list[BalanceDeltaResponse]
