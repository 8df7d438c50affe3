from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel

from ..logs import LogContext
from ..services import commission_svc
from .utils import to_http_error

router = APIRouter()


class StatementBody(BaseModel):
    salesperson_id: int
    period_start: str
    period_end: str
    total_sales: int = 0
    total_commission: int = 0
    payment_date: str | None = None
    payment_status: str = "pending"


class GenerateBody(BaseModel):
    salesperson_id: int
    period_start: str
    period_end: str


@router.get("/api/commission-statements")
def api_statements(salesperson_id: int | None = None):
    return {"success": True, "data": commission_svc.list_statements(salesperson_id)}


@router.get("/api/commission-statements/{statement_id}")
def api_statement_detail(statement_id: int):
    try:
        return {"success": True, "data": commission_svc.get_statement_detail(statement_id)}
    except Exception as e:
        raise to_http_error(e)


@router.post("/api/commission-statements")
def api_statement_create(body: StatementBody):
    log = LogContext("COMMISSION_STATEMENT_CREATE")
    log.set_payload(body.model_dump())
    try:
        new_id = commission_svc.create_statement(body.model_dump(), log)
        log.write("OK")
        return {"success": True, "id": new_id}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)


@router.post("/api/commission-statements/generate")
def api_statement_generate(body: GenerateBody):
    log = LogContext("COMMISSION_STATEMENT_GENERATE")
    log.set_payload(body.model_dump())
    try:
        res = commission_svc.generate_statement(body.salesperson_id, body.period_start, body.period_end, log)
        log.write("OK")
        return {"success": True, "id": res["id"], "data": res}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)


@router.put("/api/commission-statements/{statement_id}")
def api_statement_update(statement_id: int, body: StatementBody):
    log = LogContext("COMMISSION_STATEMENT_UPDATE")
    log.set_payload(body.model_dump())
    try:
        commission_svc.update_statement(statement_id, body.model_dump(), log)
        log.write("OK")
        return {"success": True}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)


@router.delete("/api/commission-statements/{statement_id}")
def api_statement_delete(statement_id: int):
    log = LogContext("COMMISSION_STATEMENT_DELETE")
    try:
        commission_svc.delete_statement(statement_id, log)
        log.write("OK")
        return {"success": True}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)


@router.get("/api/commission-summary")
def api_commission_summary(year: str | None = None, month: str | None = None):
    try:
        res = commission_svc.commission_summary(year, month)
        return {"success": True, **res}
    except Exception as e:
        raise to_http_error(e)
