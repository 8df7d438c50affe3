from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel

from ..logs import LogContext
from ..services import account_request_svc
from .utils import to_http_error

router = APIRouter()


class AccountRequestBody(BaseModel):
    user_id: int
    request_type: str
    current_value: str | None = None
    new_value: str
    reason: str | None = None


class DecisionBody(BaseModel):
    status: str
    approved_by: int | None = None


@router.get("/api/account-change-requests")
def api_account_requests(status: str | None = None):
    return {"success": True, "data": account_request_svc.list_requests(status)}


@router.post("/api/account-change-requests")
def api_account_request_create(body: AccountRequestBody):
    log = LogContext("ACCOUNT_REQUEST_CREATE")
    # new_value may be a password
    log.set_payload(body.model_dump(exclude={"new_value"}))
    try:
        new_id = account_request_svc.create_request(body.model_dump(), log)
        log.write("OK")
        return {"success": True, "id": new_id}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)


@router.put("/api/account-change-requests/{request_id}")
def api_account_request_decide(request_id: int, body: DecisionBody):
    log = LogContext("ACCOUNT_REQUEST_DECIDE")
    log.set_payload(body.model_dump())
    try:
        account_request_svc.decide_request(request_id, body.status, body.approved_by, log)
        log.write("OK")
        return {"success": True}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)
