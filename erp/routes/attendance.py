from __future__ import annotations

from fastapi import APIRouter, Query
from pydantic import BaseModel

from ..logs import LogContext
from ..services import attendance_svc
from .utils import to_http_error

router = APIRouter()


class ClockInBody(BaseModel):
    employee_id: int
    date: str | None = None
    check_in: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    check_in_location: str | None = None


class ClockOutBody(BaseModel):
    employee_id: int
    date: str | None = None
    check_out: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    check_out_location: str | None = None


@router.get("/api/attendance")
def api_attendance(employee_id: int | None = None, date_from: str | None = None, date_to: str | None = None):
    return {"success": True, "data": attendance_svc.list_attendance(employee_id, date_from, date_to)}


@router.get("/api/attendance/geofence-check")
def api_geofence_check(latitude: float = Query(...), longitude: float = Query(...)):
    try:
        return {"success": True, "data": attendance_svc.geofence_check(latitude, longitude)}
    except Exception as e:
        raise to_http_error(e)


@router.get("/api/attendance/summary")
def api_attendance_summary(employee_id: int, year: str, month: str):
    try:
        return {"success": True, "data": attendance_svc.monthly_summary(employee_id, year, month)}
    except Exception as e:
        raise to_http_error(e)


@router.post("/api/attendance/clock-in")
def api_clock_in(body: ClockInBody):
    log = LogContext("ATTENDANCE_CLOCK_IN")
    log.set_payload(body.model_dump())
    try:
        res = attendance_svc.clock_in(body.model_dump(), log)
        log.write("OK")
        return {"success": True, **res}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)


@router.post("/api/attendance/clock-out")
def api_clock_out(body: ClockOutBody):
    log = LogContext("ATTENDANCE_CLOCK_OUT")
    log.set_payload(body.model_dump())
    try:
        res = attendance_svc.clock_out(body.model_dump(), log)
        log.write("OK")
        return {"success": True, **res}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)
