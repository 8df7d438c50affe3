from __future__ import annotations

from ..db import get_conn, transaction
from ..domain.hr_rules import parse_clock, parse_day
from ..errors import NotFoundError
from ..logs import LogContext
from ..repository import schedule_repo, user_repo
from .utils import blank, rows_to_dicts

SCHEDULE_STATUSES = ("scheduled", "completed", "cancelled")


def _clean(data: dict) -> dict:
    s = dict(data)
    if blank(s.get("title")):
        raise ValueError("title is required")
    s["schedule_date"] = parse_day(s["schedule_date"]).isoformat()
    if not blank(s.get("schedule_time")):
        parse_clock(s["schedule_time"])
    s["status"] = s.get("status") or "scheduled"
    if s["status"] not in SCHEDULE_STATUSES:
        raise ValueError(f"invalid status: {s['status']}")
    return s


def list_schedules(user_id: int | None = None) -> list[dict]:
    with get_conn() as conn:
        return rows_to_dicts(schedule_repo.list_for(conn, user_id))


def create_schedule(data: dict, log: LogContext) -> int:
    s = _clean(data)
    with get_conn() as conn:
        if not user_repo.get(conn, s["user_id"]):
            raise NotFoundError("user not found")
        with transaction(conn):
            new_id = schedule_repo.insert(conn, s)
    log.set_entity("SCHEDULE", new_id)
    log.set_after(s)
    return new_id


def update_schedule(schedule_id: int, data: dict, log: LogContext) -> None:
    s = _clean(data)
    with get_conn() as conn:
        before = schedule_repo.get(conn, schedule_id)
        if not before:
            raise NotFoundError("schedule not found")
        with transaction(conn):
            schedule_repo.update(conn, schedule_id, s)
    log.set_entity("SCHEDULE", schedule_id)
    log.set_before(dict(before)); log.set_after(s)


def delete_schedule(schedule_id: int, log: LogContext) -> None:
    with get_conn() as conn:
        before = schedule_repo.get(conn, schedule_id)
        if not before:
            raise NotFoundError("schedule not found")
        with transaction(conn):
            schedule_repo.delete(conn, schedule_id)
    log.set_entity("SCHEDULE", schedule_id)
    log.set_before(dict(before))
