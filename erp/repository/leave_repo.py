from __future__ import annotations

from sqlite3 import Connection

_SELECT = (
    "SELECT l.*, e.employee_code, e.user_id, u.name AS employee_name "
    "FROM leaves l "
    "JOIN employees e ON l.employee_id = e.id "
    "LEFT JOIN users u ON e.user_id = u.id"
)


def insert(conn: Connection, employee_id: int, leave_type: str, start_date: str, end_date: str,
           days: float, reason: str | None) -> int:
    cur = conn.execute(
        "INSERT INTO leaves(employee_id, leave_type, start_date, end_date, days, reason) VALUES(?,?,?,?,?,?)",
        (employee_id, leave_type, start_date, end_date, days, reason),
    )
    return int(cur.lastrowid)


def get(conn: Connection, leave_id: int):
    return conn.execute(f"{_SELECT} WHERE l.id=?", (leave_id,)).fetchone()


def list_filtered(conn: Connection, status: str | None = None, employee_id: int | None = None):
    where, params = [], []
    if status:
        where.append("l.status = ?")
        params.append(status)
    if employee_id is not None:
        where.append("l.employee_id = ?")
        params.append(employee_id)
    wh = " WHERE " + " AND ".join(where) if where else ""
    return conn.execute(f"{_SELECT}{wh} ORDER BY l.created_at DESC, l.id DESC", params).fetchall()


def set_status(conn: Connection, leave_id: int, status: str, decided_by: int | None) -> int:
    cur = conn.execute(
        "UPDATE leaves SET status=?, decided_by=?, decided_at=CURRENT_TIMESTAMP WHERE id=?",
        (status, decided_by, leave_id),
    )
    return cur.rowcount


def delete(conn: Connection, leave_id: int) -> int:
    return conn.execute("DELETE FROM leaves WHERE id=?", (leave_id,)).rowcount


def stats(conn: Connection, employee_id: int | None = None):
    sql = (
        "SELECT COUNT(*) AS total, "
        "SUM(CASE WHEN status='pending' THEN 1 ELSE 0 END) AS pending, "
        "SUM(CASE WHEN status='approved' THEN 1 ELSE 0 END) AS approved, "
        "SUM(CASE WHEN status='rejected' THEN 1 ELSE 0 END) AS rejected, "
        "COALESCE(SUM(CASE WHEN status='approved' THEN days ELSE 0 END),0) AS used_days "
        "FROM leaves"
    )
    if employee_id is None:
        return conn.execute(sql).fetchone()
    return conn.execute(sql + " WHERE employee_id=?", (employee_id,)).fetchone()
