from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel

from ..logs import LogContext
from ..services import leave_svc
from .utils import to_http_error

router = APIRouter()


class LeaveCreate(BaseModel):
    employee_id: int
    leave_type: str
    start_date: str
    end_date: str
    reason: str | None = None


class LeaveDecision(BaseModel):
    status: str
    decided_by: int | None = None


@router.get("/api/leaves")
def api_leaves():
    return {"success": True, "data": leave_svc.list_approved()}


@router.get("/api/leaves/all")
def api_leaves_all(status: str | None = None, employee_id: int | None = None):
    try:
        return {"success": True, "data": leave_svc.list_all(status, employee_id)}
    except Exception as e:
        raise to_http_error(e)


@router.get("/api/leaves/stats")
def api_leave_stats(employee_id: int | None = None):
    try:
        return {"success": True, "stats": leave_svc.leave_stats(employee_id)}
    except Exception as e:
        raise to_http_error(e)


@router.post("/api/leaves")
def api_leave_create(body: LeaveCreate):
    log = LogContext("LEAVE_CREATE")
    log.set_payload(body.model_dump())
    try:
        res = leave_svc.create_leave(body.model_dump(), log)
        log.write("OK")
        return {"success": True, **res}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)


@router.put("/api/leaves/{leave_id}")
def api_leave_decide(leave_id: int, body: LeaveDecision):
    log = LogContext("LEAVE_DECIDE")
    log.set_payload(body.model_dump())
    try:
        leave_svc.decide_leave(leave_id, body.status, body.decided_by, log)
        log.write("OK")
        return {"success": True}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)


@router.delete("/api/leaves/{leave_id}")
def api_leave_delete(leave_id: int):
    log = LogContext("LEAVE_DELETE")
    try:
        leave_svc.delete_leave(leave_id, log)
        log.write("OK")
        return {"success": True}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)
