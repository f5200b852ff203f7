from fastapi import APIRouter

from hris.api.balances import balances_router
from hris.api.employees import employees_router
from hris.api.holidays import holidays_router
from hris.api.leave_requests import leave_requests_router
from hris.api.leave_types import leave_types_router

api_router = APIRouter()
api_router.include_router(leave_types_router)
api_router.include_router(leave_requests_router)
api_router.include_router(balances_router)
api_router.include_router(employees_router)
api_router.include_router(holidays_router)
