from __future__ import annotations

from ..db import get_conn, transaction
from ..domain.commission import parse_amount
from ..domain.sales import CORRECTION_PENDING, CORRECTION_STATUSES, is_all
from ..errors import NotFoundError
from ..logs import LogContext
from ..repository import correction_repo
from .utils import blank, rows_to_dicts


def _clean(data: dict) -> dict:
    c = dict(data)
    if blank(c.get("company_name")):
        raise ValueError("company_name is required")
    c["status"] = c.get("status") or CORRECTION_PENDING
    if c["status"] not in CORRECTION_STATUSES:
        raise ValueError(f"invalid status: {c['status']}")
    c["refund_amount"] = parse_amount(c.get("refund_amount"))
    c["is_first_startup"] = 1 if c.get("is_first_startup") else 0
    return c


def list_requests(status: str | None = None, search: str | None = None) -> list[dict]:
    with get_conn() as conn:
        return rows_to_dicts(correction_repo.list_filtered(conn, None if is_all(status) else status, search))


def create_request(data: dict, log: LogContext) -> int:
    c = _clean(data)
    with get_conn() as conn:
        with transaction(conn):
            new_id = correction_repo.insert(conn, c)
    log.set_entity("CORRECTION", new_id)
    log.set_after(c)
    return new_id


def update_request(request_id: int, data: dict, log: LogContext) -> None:
    c = _clean(data)
    with get_conn() as conn:
        before = correction_repo.get(conn, request_id)
        if not before:
            raise NotFoundError("correction request not found")
        with transaction(conn):
            correction_repo.update(conn, request_id, c)
    log.set_entity("CORRECTION", request_id)
    log.set_before(dict(before)); log.set_after(c)


def delete_request(request_id: int, log: LogContext) -> None:
    with get_conn() as conn:
        before = correction_repo.get(conn, request_id)
        if not before:
            raise NotFoundError("correction request not found")
        with transaction(conn):
            correction_repo.delete(conn, request_id)
    log.set_entity("CORRECTION", request_id)
    log.set_before(dict(before))


def request_stats() -> dict:
    with get_conn() as conn:
        r = correction_repo.stats(conn)
    return {
        "total": int(r["total"] or 0),
        "possible": int(r["possible"] or 0),
        "impossible": int(r["impossible"] or 0),
        "totalRefund": int(r["total_refund"] or 0),
    }
