from __future__ import annotations

import logging
from sqlite3 import Connection

from werkzeug.security import check_password_hash, generate_password_hash

from ..db import get_conn, transaction
from ..errors import AuthenticationError, NotFoundError
from ..logs import LogContext
from ..repository import employee_repo, user_repo
from .utils import blank, rows_to_dicts, today_str

logger = logging.getLogger(__name__)

ROLES = ("admin", "employee", "salesperson", "recruiter")
DEFAULT_DEPARTMENT = "부서 미정"
DEFAULT_POSITION = "직급 미정"
DEFAULT_ADMIN = {"username": "admin", "password": "admin123", "name": "관리자", "role": "admin"}


def validate_role(role: str) -> str:
    if role not in ROLES:
        raise ValueError(f"invalid role: {role}")
    return role


def hash_password(raw: str) -> str:
    if blank(raw):
        raise ValueError("password is required")
    return generate_password_hash(raw)


def default_employee_code(user_id: int) -> str:
    return f"EMP{user_id:03d}"


def seed_admin() -> bool:
    """Create the default admin account, with its employee record, on an empty users table."""
    with get_conn() as conn:
        if conn.execute("SELECT COUNT(*) FROM users").fetchone()[0]:
            return False
        with transaction(conn):
            _create_user_with_employee(conn, DEFAULT_ADMIN)
    logger.info("seeded default admin user")
    return True


def login(username: str, password: str) -> dict:
    with get_conn() as conn:
        row = user_repo.get_with_password(conn, username)
    if not row or not check_password_hash(row["password"], password or ""):
        raise AuthenticationError("invalid username or password")
    return {"id": row["id"], "username": row["username"], "name": row["name"], "role": row["role"]}


def list_users() -> list[dict]:
    with get_conn() as conn:
        return rows_to_dicts(user_repo.list_all(conn))


def _create_user_with_employee(conn: Connection, data: dict) -> tuple[int, int]:
    username = (data.get("username") or "").strip()
    name = (data.get("name") or "").strip()
    if not username or not name:
        raise ValueError("username and name are required")
    role = validate_role(data.get("role") or "employee")
    if user_repo.exists_username(conn, username):
        raise ValueError(f"username already exists: {username}")
    user_id = user_repo.insert(conn, username, hash_password(data.get("password")), name, role)
    employee_id = employee_repo.insert(
        conn,
        user_id=user_id,
        employee_code=(data.get("employee_code") or "").strip() or default_employee_code(user_id),
        department=data.get("department") or DEFAULT_DEPARTMENT,
        position=data.get("position") or DEFAULT_POSITION,
        hire_date=data.get("hire_date") or today_str(),
        phone=data.get("phone"),
        email=data.get("email"),
        status=data.get("status") or "active",
        annual_leave_days=data.get("annual_leave_days") if data.get("annual_leave_days") is not None else 15,
    )
    return user_id, employee_id


def create_user(data: dict, log: LogContext) -> dict:
    with get_conn() as conn:
        with transaction(conn):
            user_id, employee_id = _create_user_with_employee(conn, data)
        after = dict(user_repo.get(conn, user_id))
    log.set_entity("USER", user_id)
    log.set_after(after)
    return {"id": user_id, "employee_id": employee_id}


def update_user(user_id: int, data: dict, log: LogContext) -> None:
    with get_conn() as conn:
        before = user_repo.get(conn, user_id)
        if not before:
            raise NotFoundError("user not found")
        username = (data.get("username") or before["username"]).strip()
        if username != before["username"] and user_repo.exists_username(conn, username):
            raise ValueError(f"username already exists: {username}")
        role = validate_role(data.get("role") or before["role"])
        with transaction(conn):
            user_repo.update(conn, user_id, username, data.get("name") or before["name"], role)
            if not blank(data.get("password")):
                user_repo.update_password(conn, user_id, hash_password(data["password"]))
        after = user_repo.get(conn, user_id)
    log.set_entity("USER", user_id)
    log.set_before(dict(before)); log.set_after(dict(after))


def delete_user(user_id: int, log: LogContext) -> None:
    with get_conn() as conn:
        before = user_repo.get(conn, user_id)
        if not before:
            raise NotFoundError("user not found")
        with transaction(conn):
            user_repo.delete(conn, user_id)
    log.set_entity("USER", user_id)
    log.set_before(dict(before))


# --- salespersons: users with role fixed to 'salesperson' ---

def list_salespersons() -> list[dict]:
    out = []
    with get_conn() as conn:
        for u in user_repo.list_by_roles(conn, ["salesperson"]):
            emp = employee_repo.get_by_user_id(conn, u["id"])
            out.append({
                "id": u["id"],
                "name": u["name"],
                "username": u["username"],
                "employee_code": emp["employee_code"] if emp else None,
                "phone": emp["phone"] if emp else None,
                "email": emp["email"] if emp else None,
                "created_at": u["created_at"],
            })
    return out


def _get_salesperson(conn: Connection, user_id: int):
    u = user_repo.get(conn, user_id)
    if not u or u["role"] != "salesperson":
        raise NotFoundError("salesperson not found")
    return u


def create_salesperson(data: dict, log: LogContext) -> dict:
    return create_user({**data, "role": "salesperson"}, log)


def update_salesperson(user_id: int, data: dict, log: LogContext) -> None:
    with get_conn() as conn:
        before = dict(_get_salesperson(conn, user_id))
        emp = employee_repo.get_by_user_id(conn, user_id)
        with transaction(conn):
            user_repo.update(conn, user_id, data.get("username") or before["username"],
                             data.get("name") or before["name"], "salesperson")
            if not blank(data.get("password")):
                user_repo.update_password(conn, user_id, hash_password(data["password"]))
            if emp:
                employee_repo.update(
                    conn, emp["id"],
                    employee_code=data.get("employee_code") or emp["employee_code"],
                    department=emp["department"], position=emp["position"], hire_date=emp["hire_date"],
                    phone=data.get("phone", emp["phone"]), email=data.get("email", emp["email"]),
                    status=emp["status"], annual_leave_days=emp["annual_leave_days"],
                )
    log.set_entity("SALESPERSON", user_id)
    log.set_before(before)


def delete_salesperson(user_id: int, log: LogContext) -> None:
    with get_conn() as conn:
        before = dict(_get_salesperson(conn, user_id))
        with transaction(conn):
            user_repo.delete(conn, user_id)
    log.set_entity("SALESPERSON", user_id)
    log.set_before(before)
