from __future__ import annotations

from sqlite3 import Connection

from . import like

_SELECT = (
    "SELECT e.id, e.user_id, e.employee_code, e.department, e.position, e.hire_date, "
    "e.phone, e.email, e.status, e.annual_leave_days, e.created_at, "
    "u.name, u.username, u.role "
    "FROM employees e LEFT JOIN users u ON e.user_id = u.id"
)


def insert(
    conn: Connection,
    user_id: int | None,
    employee_code: str,
    department: str | None,
    position: str | None,
    hire_date: str | None,
    phone: str | None = None,
    email: str | None = None,
    status: str = "active",
    annual_leave_days: float = 15,
) -> int:
    cur = conn.execute(
        "INSERT INTO employees(user_id, employee_code, department, position, hire_date, phone, email, status, annual_leave_days) "
        "VALUES(?,?,?,?,?,?,?,?,?)",
        (user_id, employee_code, department, position, hire_date, phone, email, status, annual_leave_days),
    )
    return int(cur.lastrowid)


def list_filtered(conn: Connection, search: str | None = None, department: str | None = None, status: str | None = None):
    where, params = [], []
    if search:
        where.append("(u.name LIKE ? OR e.employee_code LIKE ? OR e.department LIKE ?)")
        params += [like(search)] * 3
    if department:
        where.append("e.department = ?")
        params.append(department)
    if status:
        where.append("e.status = ?")
        params.append(status)
    wh = " WHERE " + " AND ".join(where) if where else ""
    return conn.execute(f"{_SELECT}{wh} ORDER BY e.created_at DESC, e.id DESC", params).fetchall()


def get(conn: Connection, employee_id: int):
    return conn.execute(f"{_SELECT} WHERE e.id=?", (employee_id,)).fetchone()


def get_by_user_id(conn: Connection, user_id: int):
    return conn.execute(f"{_SELECT} WHERE e.user_id=?", (user_id,)).fetchone()


def update(
    conn: Connection,
    employee_id: int,
    employee_code: str,
    department: str | None,
    position: str | None,
    hire_date: str | None,
    phone: str | None,
    email: str | None,
    status: str,
    annual_leave_days: float,
) -> int:
    cur = conn.execute(
        "UPDATE employees SET employee_code=?, department=?, position=?, hire_date=?, phone=?, email=?, "
        "status=?, annual_leave_days=? WHERE id=?",
        (employee_code, department, position, hire_date, phone, email, status, annual_leave_days, employee_id),
    )
    return cur.rowcount


def delete(conn: Connection, employee_id: int) -> int:
    return conn.execute("DELETE FROM employees WHERE id=?", (employee_id,)).rowcount


def stats(conn: Connection):
    return conn.execute(
        "SELECT COUNT(*) AS total, "
        "SUM(CASE WHEN status='active' THEN 1 ELSE 0 END) AS active, "
        "COUNT(DISTINCT department) AS departments "
        "FROM employees"
    ).fetchone()
