from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel

from ..logs import LogContext
from ..services import sales_client_svc
from .utils import to_http_error

router = APIRouter()


class SalesClientBody(BaseModel):
    client_name: str
    client_code: str | None = None
    representative: str | None = None
    contact: str | None = None
    address: str | None = None
    business_type: str | None = None
    commission_rate: float | None = 0.0
    notes: str | None = None
    status: str | None = "active"


@router.get("/api/sales-clients")
def api_sales_clients(status: str | None = None, search: str | None = None):
    return {"success": True, "data": sales_client_svc.list_clients(status, search)}


@router.post("/api/sales-clients")
def api_sales_client_create(body: SalesClientBody):
    log = LogContext("SALES_CLIENT_CREATE")
    log.set_payload(body.model_dump())
    try:
        new_id = sales_client_svc.create_client(body.model_dump(), log)
        log.write("OK")
        return {"success": True, "id": new_id}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)


@router.put("/api/sales-clients/{client_id}")
def api_sales_client_update(client_id: int, body: SalesClientBody):
    log = LogContext("SALES_CLIENT_UPDATE")
    log.set_payload(body.model_dump())
    try:
        sales_client_svc.update_client(client_id, body.model_dump(), log)
        log.write("OK")
        return {"success": True}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)


@router.delete("/api/sales-clients/{client_id}")
def api_sales_client_delete(client_id: int):
    log = LogContext("SALES_CLIENT_DELETE")
    try:
        sales_client_svc.delete_client(client_id, log)
        log.write("OK")
        return {"success": True}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)
