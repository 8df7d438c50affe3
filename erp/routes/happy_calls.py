from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel

from ..logs import LogContext
from ..services import happy_call_svc
from .utils import to_http_error

router = APIRouter()


class HappyCallBody(BaseModel):
    client_name: str
    phone: str | None = None
    satisfaction_level: str
    content: str | None = None
    handler: str | None = None
    salesperson_name: str | None = None
    call_date: str | None = None
    sales_db_id: int | None = None


@router.get("/api/happy-calls")
def api_happy_calls(satisfaction_level: str | None = None, search: str | None = None):
    return {"success": True, "data": happy_call_svc.list_calls(satisfaction_level, search)}


@router.get("/api/happy-calls/stats")
def api_happy_call_stats():
    return {"success": True, "stats": happy_call_svc.call_stats()}


@router.post("/api/happy-calls")
def api_happy_call_create(body: HappyCallBody):
    log = LogContext("HAPPY_CALL_CREATE")
    log.set_payload(body.model_dump())
    try:
        new_id = happy_call_svc.create_call(body.model_dump(), log)
        log.write("OK")
        return {"success": True, "id": new_id}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)


@router.put("/api/happy-calls/{call_id}")
def api_happy_call_update(call_id: int, body: HappyCallBody):
    log = LogContext("HAPPY_CALL_UPDATE")
    log.set_payload(body.model_dump())
    try:
        happy_call_svc.update_call(call_id, body.model_dump(), log)
        log.write("OK")
        return {"success": True}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)


@router.delete("/api/happy-calls/{call_id}")
def api_happy_call_delete(call_id: int):
    log = LogContext("HAPPY_CALL_DELETE")
    try:
        happy_call_svc.delete_call(call_id, log)
        log.write("OK")
        return {"success": True}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)
