from __future__ import annotations

import logging
import sqlite3

import pandas as pd

from ..db import get_conn, transaction
from ..domain.hr_rules import parse_day
from ..errors import NotFoundError
from ..logs import LogContext
from ..repository import employee_repo, user_repo
from .user_svc import _create_user_with_employee, hash_password, validate_role
from .utils import blank, read_csv_upload, rows_to_dicts, to_csv_bytes, to_float_safe

logger = logging.getLogger(__name__)

# Korean CSV template header -> field
CSV_COLUMNS = {
    "이름": "name",
    "사번": "employee_code",
    "부서": "department",
    "직급": "position",
    "전화번호": "phone",
    "이메일": "email",
    "입사일": "hire_date",
    "상태": "status",
    "아이디": "username",
    "비밀번호": "password",
    "총연차": "annual_leave_days",
}
_STATUS_ALIASES = {"재직": "active", "퇴사": "inactive", "active": "active", "inactive": "inactive"}


def list_employees(search: str | None = None, department: str | None = None, status: str | None = None) -> list[dict]:
    with get_conn() as conn:
        return rows_to_dicts(employee_repo.list_filtered(conn, search, department, status))


def get_employee(employee_id: int) -> dict:
    with get_conn() as conn:
        row = employee_repo.get(conn, employee_id)
    if not row:
        raise NotFoundError("employee not found")
    return dict(row)


def _normalize_status(value) -> str:
    s = (value or "active").strip()
    if s not in _STATUS_ALIASES:
        raise ValueError(f"invalid status: {value}")
    return _STATUS_ALIASES[s]


def create_employee(data: dict, log: LogContext) -> dict:
    data = {**data, "status": _normalize_status(data.get("status"))}
    if data.get("hire_date"):
        data["hire_date"] = parse_day(data["hire_date"]).isoformat()
    with get_conn() as conn:
        with transaction(conn):
            user_id, employee_id = _create_user_with_employee(conn, data)
        after = dict(employee_repo.get(conn, employee_id))
    log.set_entity("EMPLOYEE", employee_id)
    log.set_after(after)
    return {"id": employee_id, "user_id": user_id}


def update_employee(employee_id: int, data: dict, log: LogContext) -> None:
    with get_conn() as conn:
        before = employee_repo.get(conn, employee_id)
        if not before:
            raise NotFoundError("employee not found")
        merged = {**dict(before), **{k: v for k, v in data.items() if v is not None}}
        hire_date = parse_day(merged["hire_date"]).isoformat() if merged.get("hire_date") else None
        with transaction(conn):
            employee_repo.update(
                conn, employee_id,
                employee_code=merged["employee_code"],
                department=merged.get("department"),
                position=merged.get("position"),
                hire_date=hire_date,
                phone=merged.get("phone"),
                email=merged.get("email"),
                status=_normalize_status(merged.get("status")),
                annual_leave_days=float(merged.get("annual_leave_days") or 0),
            )
            if before["user_id"]:
                user_repo.update(conn, before["user_id"], merged["username"], merged["name"],
                                 validate_role(merged.get("role") or "employee"))
                if not blank(data.get("password")):
                    user_repo.update_password(conn, before["user_id"], hash_password(data["password"]))
        after = employee_repo.get(conn, employee_id)
    log.set_entity("EMPLOYEE", employee_id)
    log.set_before(dict(before)); log.set_after(dict(after))


def delete_employee(employee_id: int, log: LogContext) -> None:
    with get_conn() as conn:
        before = employee_repo.get(conn, employee_id)
        if not before:
            raise NotFoundError("employee not found")
        with transaction(conn):
            employee_repo.delete(conn, employee_id)
            if before["user_id"]:
                user_repo.delete(conn, before["user_id"])
    log.set_entity("EMPLOYEE", employee_id)
    log.set_before(dict(before))


def employee_stats() -> dict:
    with get_conn() as conn:
        r = employee_repo.stats(conn)
    return {"total": int(r["total"] or 0), "active": int(r["active"] or 0), "departments": int(r["departments"] or 0)}


def import_csv(content: bytes, log: LogContext) -> dict:
    """
    Bulk-create employees (and their login users) from the Korean CSV template.
    Each row is its own transaction; failures are collected per row and do not
    stop the import.
    """
    df = read_csv_upload(content)
    df = df.rename(columns=lambda c: CSV_COLUMNS.get(str(c).strip(), str(c).strip()))
    missing = [c for c in ("name", "username", "password") if c not in df.columns]
    if missing:
        raise ValueError(f"missing CSV columns: {', '.join(missing)}")

    success, errors = 0, []
    with get_conn() as conn:
        for idx, rec in enumerate(df.to_dict(orient="records"), start=2):
            row = {k: (v.strip() if isinstance(v, str) else v) for k, v in rec.items()}
            if blank(row.get("name")):
                continue
            try:
                if row.get("hire_date"):
                    row["hire_date"] = parse_day(row["hire_date"]).isoformat()
                row["status"] = _normalize_status(row.get("status") or None)
                row["annual_leave_days"] = to_float_safe(row.get("annual_leave_days"), 15.0)
                row["role"] = "employee"
                with transaction(conn):
                    _create_user_with_employee(conn, row)
                success += 1
            except (ValueError, sqlite3.IntegrityError) as e:
                errors.append({"row": idx, "error": str(e)})
    if errors:
        logger.info("employee import: %d ok, %d failed", success, len(errors))
    log.set_after({"successCount": success, "errorCount": len(errors)})
    return {"total": int(len(df)), "successCount": success, "errors": errors}


def export_csv() -> bytes:
    inverse = {v: k for k, v in CSV_COLUMNS.items() if v != "password"}
    with get_conn() as conn:
        df = pd.read_sql_query(
            "SELECT u.name, e.employee_code, e.department, e.position, e.phone, e.email, e.hire_date, "
            "e.status, u.username, e.annual_leave_days, COALESCE(l.used, 0) AS used_days "
            "FROM employees e LEFT JOIN users u ON e.user_id = u.id "
            "LEFT JOIN (SELECT employee_id, SUM(days) AS used FROM leaves WHERE status='approved' "
            "GROUP BY employee_id) l ON l.employee_id = e.id "
            "ORDER BY e.id",
            conn,
        )
    df["remaining_days"] = df["annual_leave_days"].fillna(0) - df["used_days"]
    inverse.update(used_days="사용연차", remaining_days="남은연차")
    return to_csv_bytes(df.rename(columns=inverse))
