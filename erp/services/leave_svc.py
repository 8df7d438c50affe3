from __future__ import annotations

from ..db import get_conn, transaction
from ..domain.hr_rules import leave_days, parse_day
from ..errors import NotFoundError
from ..logs import LogContext
from ..repository import employee_repo, leave_repo
from .utils import rows_to_dicts

LEAVE_STATUSES = ("pending", "approved", "rejected")


def list_approved() -> list[dict]:
    with get_conn() as conn:
        return rows_to_dicts(leave_repo.list_filtered(conn, status="approved"))


def list_all(status: str | None = None, employee_id: int | None = None) -> list[dict]:
    if status and status not in LEAVE_STATUSES:
        raise ValueError(f"invalid status: {status}")
    with get_conn() as conn:
        return rows_to_dicts(leave_repo.list_filtered(conn, status=status, employee_id=employee_id))


def _resolve_employee(conn, employee_or_user_id: int) -> int:
    # The leave form posts the logged-in user's id; fall back to an employee id.
    emp = employee_repo.get_by_user_id(conn, employee_or_user_id) or employee_repo.get(conn, employee_or_user_id)
    if not emp:
        raise NotFoundError("employee not found")
    return int(emp["id"])


def create_leave(data: dict, log: LogContext) -> dict:
    days = leave_days(data["start_date"], data["end_date"], data.get("leave_type"))
    if not (data.get("leave_type") or "").strip():
        raise ValueError("leave_type is required")
    start = parse_day(data["start_date"]).isoformat()
    end = parse_day(data["end_date"]).isoformat()
    with get_conn() as conn:
        employee_id = _resolve_employee(conn, data["employee_id"])
        with transaction(conn):
            new_id = leave_repo.insert(conn, employee_id, data["leave_type"].strip(), start, end, days, data.get("reason"))
    log.set_entity("LEAVE", new_id)
    log.set_after({"employee_id": employee_id, "start_date": start, "end_date": end, "days": days})
    return {"id": new_id, "days": days}


def decide_leave(leave_id: int, status: str, decided_by: int | None, log: LogContext) -> None:
    if status not in LEAVE_STATUSES:
        raise ValueError(f"invalid status: {status}")
    with get_conn() as conn:
        before = leave_repo.get(conn, leave_id)
        if not before:
            raise NotFoundError("leave not found")
        with transaction(conn):
            leave_repo.set_status(conn, leave_id, status, decided_by)
    log.set_entity("LEAVE", leave_id)
    log.set_before({"status": before["status"]}); log.set_after({"status": status, "decided_by": decided_by})


def delete_leave(leave_id: int, log: LogContext) -> None:
    with get_conn() as conn:
        before = leave_repo.get(conn, leave_id)
        if not before:
            raise NotFoundError("leave not found")
        with transaction(conn):
            leave_repo.delete(conn, leave_id)
    log.set_entity("LEAVE", leave_id)
    log.set_before(dict(before))


def leave_stats(employee_id: int | None = None) -> dict:
    with get_conn() as conn:
        entitled = None
        if employee_id is not None:
            employee_id = _resolve_employee(conn, employee_id)
            entitled = float(employee_repo.get(conn, employee_id)["annual_leave_days"] or 0)
        r = leave_repo.stats(conn, employee_id)
    used = float(r["used_days"] or 0)
    out = {
        "total": int(r["total"] or 0),
        "pending": int(r["pending"] or 0),
        "approved": int(r["approved"] or 0),
        "rejected": int(r["rejected"] or 0),
        "used_days": used,
    }
    if entitled is not None:
        out["entitled_days"] = entitled
        out["remaining_days"] = entitled - used
    return out
