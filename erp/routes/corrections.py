from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel

from ..logs import LogContext
from ..services import correction_svc
from .utils import to_http_error

router = APIRouter()


class CorrectionBody(BaseModel):
    company_name: str
    representative: str | None = None
    handler: str | None = None
    is_first_startup: bool = False
    status: str | None = None
    progress_status: str | None = None
    refund_amount: int | str | None = 0
    document_delivery: str | None = None
    feedback: str | None = None
    sales_db_id: int | None = None


@router.get("/api/correction-requests")
def api_corrections(status: str | None = None, search: str | None = None):
    return {"success": True, "data": correction_svc.list_requests(status, search)}


@router.get("/api/correction-requests/stats")
def api_correction_stats():
    return {"success": True, "stats": correction_svc.request_stats()}


@router.post("/api/correction-requests")
def api_correction_create(body: CorrectionBody):
    log = LogContext("CORRECTION_CREATE")
    log.set_payload(body.model_dump())
    try:
        new_id = correction_svc.create_request(body.model_dump(), log)
        log.write("OK")
        return {"success": True, "id": new_id}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)


@router.put("/api/correction-requests/{request_id}")
def api_correction_update(request_id: int, body: CorrectionBody):
    log = LogContext("CORRECTION_UPDATE")
    log.set_payload(body.model_dump())
    try:
        correction_svc.update_request(request_id, body.model_dump(), log)
        log.write("OK")
        return {"success": True}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)


@router.delete("/api/correction-requests/{request_id}")
def api_correction_delete(request_id: int):
    log = LogContext("CORRECTION_DELETE")
    try:
        correction_svc.delete_request(request_id, log)
        log.write("OK")
        return {"success": True}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)
