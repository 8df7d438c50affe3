from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel

from ..logs import LogContext
from ..services import commission_svc, user_svc
from .utils import to_http_error

router = APIRouter()


class SalespersonCreate(BaseModel):
    username: str
    password: str
    name: str
    employee_code: str | None = None
    phone: str | None = None
    email: str | None = None
    hire_date: str | None = None


class SalespersonUpdate(BaseModel):
    username: str | None = None
    password: str | None = None
    name: str | None = None
    employee_code: str | None = None
    phone: str | None = None
    email: str | None = None


@router.get("/api/salespersons")
def api_salespersons():
    return {"success": True, "data": user_svc.list_salespersons()}


@router.post("/api/salespersons")
def api_salesperson_create(body: SalespersonCreate):
    log = LogContext("SALESPERSON_CREATE")
    log.set_payload(body.model_dump())
    try:
        res = user_svc.create_salesperson(body.model_dump(), log)
        log.write("OK")
        return {"success": True, **res}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)


@router.put("/api/salespersons/{user_id}")
def api_salesperson_update(user_id: int, body: SalespersonUpdate):
    log = LogContext("SALESPERSON_UPDATE")
    log.set_payload(body.model_dump(exclude_unset=True))
    try:
        user_svc.update_salesperson(user_id, body.model_dump(exclude_unset=True), log)
        log.write("OK")
        return {"success": True}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)


@router.delete("/api/salespersons/{user_id}")
def api_salesperson_delete(user_id: int):
    log = LogContext("SALESPERSON_DELETE")
    try:
        user_svc.delete_salesperson(user_id, log)
        log.write("OK")
        return {"success": True}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)


@router.get("/api/salesperson/{user_id}/commission-details")
def api_commission_details(user_id: int):
    try:
        return {"success": True, "data": commission_svc.commission_details(user_id)}
    except Exception as e:
        raise to_http_error(e)
