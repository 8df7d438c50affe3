from __future__ import annotations

from fastapi import APIRouter

from ..services import performance_svc
from .utils import to_http_error

router = APIRouter()


@router.get("/api/monthly-performance")
def api_monthly_performance(year: str | None = None, month: str | None = None,
                            contract_status: str | None = None, client: str | None = None):
    try:
        return {"success": True, **performance_svc.monthly_performance(year, month, contract_status, client)}
    except Exception as e:
        raise to_http_error(e)


@router.get("/api/salesperson-performance")
def api_salesperson_performance(year: str | None = None, month: str | None = None, mode: str | None = None):
    try:
        return {"success": True, **performance_svc.salesperson_performance(year, month, mode)}
    except Exception as e:
        raise to_http_error(e)


@router.get("/api/recruiter-performance")
def api_recruiter_performance(year: str | None = None, month: str | None = None):
    try:
        return {"success": True, **performance_svc.recruiter_performance(year, month)}
    except Exception as e:
        raise to_http_error(e)
