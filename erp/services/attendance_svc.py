from __future__ import annotations

import calendar
import logging
from datetime import datetime

from ..db import get_conn, transaction
from ..domain.commission import success_rate
from ..domain.geo import check_geofence, format_coordinates
from ..domain.hr_rules import (
    ATTENDANCE_STATUSES,
    STATUS_PRESENT,
    classify_check_in,
    classify_check_out,
    parse_clock,
    parse_day,
    worked_minutes,
)
from ..domain.sales import month_key
from ..errors import NotFoundError
from ..logs import LogContext
from ..repository import attendance_repo
from .config_svc import get_config
from .utils import rows_to_dicts, today_str

logger = logging.getLogger(__name__)


def list_attendance(employee_id: int | None = None, date_from: str | None = None, date_to: str | None = None) -> list[dict]:
    with get_conn() as conn:
        return rows_to_dicts(attendance_repo.list_filtered(conn, employee_id, date_from, date_to))


def geofence_check(latitude: float, longitude: float) -> dict:
    cfg = get_config()
    out = check_geofence(latitude, longitude, cfg["company_lat"], cfg["company_lng"], cfg["geofence_radius_m"])
    out["enabled"] = cfg["geofence_enabled"]
    return out


def _gate(cfg: dict, latitude: float | None, longitude: float | None) -> tuple[str | None, float | None]:
    """
    Geofence gate for clock-in/out. Returns (coordinates, distance_m).
    When the geofence is enabled coordinates are mandatory and must fall
    inside the configured radius (boundary inclusive).
    """
    if latitude is None or longitude is None:
        if cfg["geofence_enabled"]:
            raise ValueError("location_required: latitude and longitude are required")
        return None, None
    res = check_geofence(latitude, longitude, cfg["company_lat"], cfg["company_lng"], cfg["geofence_radius_m"])
    if cfg["geofence_enabled"] and not res["within"]:
        raise ValueError(
            f"out_of_range: {res['distance_text']} from the office (allowed {cfg['geofence_radius_m']:.0f}m)"
        )
    return format_coordinates(float(latitude), float(longitude)), res["distance_m"]


def _normalize(data: dict, time_key: str) -> tuple[str, str]:
    day = parse_day(data.get("date") or today_str()).isoformat()
    clock = data.get(time_key) or datetime.now().strftime("%H:%M:%S")
    parse_clock(clock)
    return day, clock


def _resolve(conn, employee_or_user_id: int) -> int:
    employee_id = attendance_repo.resolve_employee_id(conn, employee_or_user_id)
    if employee_id is None:
        raise NotFoundError("employee not found")
    return employee_id


def clock_in(data: dict, log: LogContext) -> dict:
    cfg = get_config()
    coordinates, distance_m = _gate(cfg, data.get("latitude"), data.get("longitude"))
    day, check_in = _normalize(data, "check_in")
    status = classify_check_in(check_in, cfg["work_start_time"], cfg["late_grace_minutes"])
    location = data.get("check_in_location")
    with get_conn() as conn:
        employee_id = _resolve(conn, data["employee_id"])
        existing = attendance_repo.get_for_day(conn, employee_id, day)
        with transaction(conn):
            if existing:
                attendance_repo.update_check_in(conn, existing["id"], check_in, location, coordinates, distance_m, status)
                row_id = int(existing["id"])
            else:
                row_id = attendance_repo.insert_check_in(conn, employee_id, day, check_in, location, coordinates, distance_m, status)
    log.set_entity("ATTENDANCE", row_id)
    if existing:
        log.set_before(dict(existing))
    out = {"id": row_id, "updated": existing is not None, "distance_m": distance_m, "status": status}
    log.set_after(out)
    return out


def clock_out(data: dict, log: LogContext) -> dict:
    cfg = get_config()
    coordinates, distance_m = _gate(cfg, data.get("latitude"), data.get("longitude"))
    day, check_out = _normalize(data, "check_out")
    location = data.get("check_out_location")
    with get_conn() as conn:
        employee_id = _resolve(conn, data["employee_id"])
        existing = attendance_repo.get_for_day(conn, employee_id, day)
        status = classify_check_out(check_out, cfg["work_end_time"], existing["status"] if existing else None)
        with transaction(conn):
            if existing:
                attendance_repo.update_check_out(conn, existing["id"], check_out, location, coordinates, distance_m, status)
                row_id = int(existing["id"])
            else:
                logger.info("clock-out without clock-in: employee=%s date=%s", employee_id, day)
                row_id = attendance_repo.insert_check_out(conn, employee_id, day, check_out, location, coordinates, distance_m, status)
    log.set_entity("ATTENDANCE", row_id)
    if existing:
        log.set_before(dict(existing))
    out = {"id": row_id, "updated": existing is not None, "distance_m": distance_m, "status": status}
    log.set_after(out)
    return out


def monthly_summary(employee_id: int, year, month) -> dict:
    y, m = month_key(year, month)
    last = calendar.monthrange(int(y), int(m))[1]
    with get_conn() as conn:
        emp_id = _resolve(conn, employee_id)
        rows = attendance_repo.list_filtered(conn, emp_id, f"{y}-{m}-01", f"{y}-{m}-{last:02d}")
    counts = {s: 0 for s in ATTENDANCE_STATUSES}
    total_minutes = 0
    for r in rows:
        if r["status"] in counts:
            counts[r["status"]] += 1
        total_minutes += worked_minutes(r["check_in"], r["check_out"]) or 0
    recorded = len(rows)
    return {
        "employee_id": emp_id,
        "year": y,
        "month": m,
        "counts": counts,
        "work_days": sum(1 for r in rows if r["check_in"]),
        "total_worked_minutes": total_minutes,
        "on_time_rate": success_rate(counts[STATUS_PRESENT], recorded),
    }
