from __future__ import annotations

from ..db import get_conn, transaction
from ..domain.hr_rules import parse_day
from ..domain.sales import SATISFACTION_LEVELS, is_all
from ..errors import NotFoundError
from ..logs import LogContext
from ..repository import happy_call_repo
from .utils import blank, rows_to_dicts


def _clean(data: dict) -> dict:
    h = dict(data)
    if blank(h.get("client_name")):
        raise ValueError("client_name is required")
    if h.get("satisfaction_level") not in SATISFACTION_LEVELS:
        raise ValueError(f"satisfaction_level must be one of {'/'.join(SATISFACTION_LEVELS)}")
    if not blank(h.get("call_date")):
        h["call_date"] = parse_day(h["call_date"]).isoformat()
    return h


def list_calls(level: str | None = None, search: str | None = None) -> list[dict]:
    with get_conn() as conn:
        return rows_to_dicts(happy_call_repo.list_filtered(conn, None if is_all(level) else level, search))


def create_call(data: dict, log: LogContext) -> int:
    h = _clean(data)
    with get_conn() as conn:
        with transaction(conn):
            new_id = happy_call_repo.insert(conn, h)
    log.set_entity("HAPPY_CALL", new_id)
    log.set_after(h)
    return new_id


def update_call(call_id: int, data: dict, log: LogContext) -> None:
    h = _clean(data)
    with get_conn() as conn:
        before = happy_call_repo.get(conn, call_id)
        if not before:
            raise NotFoundError("happy call not found")
        with transaction(conn):
            happy_call_repo.update(conn, call_id, h)
    log.set_entity("HAPPY_CALL", call_id)
    log.set_before(dict(before)); log.set_after(h)


def delete_call(call_id: int, log: LogContext) -> None:
    with get_conn() as conn:
        before = happy_call_repo.get(conn, call_id)
        if not before:
            raise NotFoundError("happy call not found")
        with transaction(conn):
            happy_call_repo.delete(conn, call_id)
    log.set_entity("HAPPY_CALL", call_id)
    log.set_before(dict(before))


def call_stats() -> dict:
    with get_conn() as conn:
        return happy_call_repo.level_counts(conn)
