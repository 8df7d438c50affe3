from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel

from ..logs import LogContext
from ..services import memo_svc, schedule_svc
from .utils import to_http_error

router = APIRouter()


class ScheduleBody(BaseModel):
    user_id: int
    title: str
    schedule_date: str
    schedule_time: str | None = None
    client_name: str | None = None
    location: str | None = None
    notes: str | None = None
    status: str = "scheduled"


class MemoBody(BaseModel):
    user_id: int
    title: str
    content: str
    category: str | None = None


@router.get("/api/schedules")
def api_schedules(user_id: int | None = None):
    return {"success": True, "data": schedule_svc.list_schedules(user_id)}


@router.post("/api/schedules")
def api_schedule_create(body: ScheduleBody):
    log = LogContext("SCHEDULE_CREATE")
    log.set_payload(body.model_dump())
    try:
        new_id = schedule_svc.create_schedule(body.model_dump(), log)
        log.write("OK")
        return {"success": True, "id": new_id}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)


@router.put("/api/schedules/{schedule_id}")
def api_schedule_update(schedule_id: int, body: ScheduleBody):
    log = LogContext("SCHEDULE_UPDATE")
    log.set_payload(body.model_dump())
    try:
        schedule_svc.update_schedule(schedule_id, body.model_dump(), log)
        log.write("OK")
        return {"success": True}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)


@router.delete("/api/schedules/{schedule_id}")
def api_schedule_delete(schedule_id: int):
    log = LogContext("SCHEDULE_DELETE")
    try:
        schedule_svc.delete_schedule(schedule_id, log)
        log.write("OK")
        return {"success": True}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)


@router.get("/api/memos")
def api_memos(user_id: int | None = None):
    return {"success": True, "data": memo_svc.list_memos(user_id)}


@router.post("/api/memos")
def api_memo_create(body: MemoBody):
    log = LogContext("MEMO_CREATE")
    log.set_payload(body.model_dump())
    try:
        new_id = memo_svc.create_memo(body.user_id, body.title, body.content, body.category, log)
        log.write("OK")
        return {"success": True, "id": new_id}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)


@router.put("/api/memos/{memo_id}")
def api_memo_update(memo_id: int, body: MemoBody):
    log = LogContext("MEMO_UPDATE")
    log.set_payload(body.model_dump())
    try:
        memo_svc.update_memo(memo_id, body.title, body.content, body.category, log)
        log.write("OK")
        return {"success": True}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)


@router.delete("/api/memos/{memo_id}")
def api_memo_delete(memo_id: int):
    log = LogContext("MEMO_DELETE")
    try:
        memo_svc.delete_memo(memo_id, log)
        log.write("OK")
        return {"success": True}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)
