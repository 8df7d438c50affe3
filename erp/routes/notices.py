from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel

from ..logs import LogContext
from ..services import notice_svc
from .utils import to_http_error

router = APIRouter()


class NoticeBody(BaseModel):
    title: str
    content: str
    author_id: int | None = None
    is_important: bool = False
    is_pinned: bool = False


@router.get("/api/notices")
def api_notices(search: str | None = None):
    return {"success": True, "data": notice_svc.list_notices(search)}


@router.post("/api/notices")
def api_notice_create(body: NoticeBody):
    log = LogContext("NOTICE_CREATE")
    log.set_payload(body.model_dump())
    try:
        new_id = notice_svc.create_notice(body.model_dump(), log)
        log.write("OK")
        return {"success": True, "id": new_id}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)


@router.put("/api/notices/{notice_id}")
def api_notice_update(notice_id: int, body: NoticeBody):
    log = LogContext("NOTICE_UPDATE")
    log.set_payload(body.model_dump())
    try:
        notice_svc.update_notice(notice_id, body.model_dump(), log)
        log.write("OK")
        return {"success": True}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)


@router.post("/api/notices/{notice_id}/view")
def api_notice_view(notice_id: int):
    try:
        return {"success": True, "view_count": notice_svc.view_notice(notice_id)}
    except Exception as e:
        raise to_http_error(e)


@router.delete("/api/notices/{notice_id}")
def api_notice_delete(notice_id: int):
    log = LogContext("NOTICE_DELETE")
    try:
        notice_svc.delete_notice(notice_id, log)
        log.write("OK")
        return {"success": True}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)
