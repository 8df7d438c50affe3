from __future__ import annotations

from ..db import get_conn, transaction
from ..errors import NotFoundError
from ..logs import LogContext
from ..repository import account_request_repo, user_repo
from .user_svc import hash_password, validate_role
from .utils import blank, rows_to_dicts

REQUEST_TYPES = ("password", "info", "role")
DECISIONS = ("approved", "rejected")


def list_requests(status: str | None = None) -> list[dict]:
    with get_conn() as conn:
        return rows_to_dicts(account_request_repo.list_filtered(conn, status))


def create_request(data: dict, log: LogContext) -> int:
    """New pending request. Password values are hashed before they are stored."""
    rtype = data.get("request_type")
    if rtype not in REQUEST_TYPES:
        raise ValueError(f"request_type must be one of {', '.join(REQUEST_TYPES)}")
    new_value = data.get("new_value")
    if blank(new_value):
        raise ValueError("new_value is required")
    current = data.get("current_value")
    if rtype == "password":
        new_value = hash_password(new_value)
        current = None
    elif rtype == "role":
        validate_role(new_value)
    with get_conn() as conn:
        if not user_repo.get(conn, data["user_id"]):
            raise NotFoundError("user not found")
        with transaction(conn):
            new_id = account_request_repo.insert(conn, data["user_id"], rtype, current, new_value, data.get("reason"))
    log.set_entity("ACCOUNT_REQUEST", new_id)
    log.set_after({"user_id": data["user_id"], "request_type": rtype})
    return new_id


def _apply(conn, req) -> None:
    rtype, user_id, value = req["request_type"], req["user_id"], req["new_value"]
    if rtype == "password":
        # stored already hashed
        user_repo.update_password(conn, user_id, value)
    elif rtype == "role":
        user_repo.update_role(conn, user_id, validate_role(value))
    else:
        user_repo.update_name(conn, user_id, value)


def decide_request(request_id: int, status: str, approved_by: int | None, log: LogContext) -> None:
    """Approve or reject a pending request; approval applies the change atomically."""
    if status not in DECISIONS:
        raise ValueError(f"status must be one of {', '.join(DECISIONS)}")
    with get_conn() as conn:
        req = account_request_repo.get_raw(conn, request_id)
        if not req:
            raise NotFoundError("request not found")
        if req["status"] != "pending":
            raise ValueError(f"request already {req['status']}")
        with transaction(conn):
            if not account_request_repo.decide(conn, request_id, status, approved_by):
                raise ValueError("request already decided")
            if status == "approved":
                _apply(conn, req)
    log.set_entity("ACCOUNT_REQUEST", request_id)
    log.set_before({"status": "pending"}); log.set_after({"status": status, "approved_by": approved_by})
