from __future__ import annotations

from sqlite3 import Connection

_SELECT = (
    "SELECT a.*, e.employee_code, u.name AS employee_name "
    "FROM attendance a "
    "JOIN employees e ON a.employee_id = e.id "
    "LEFT JOIN users u ON e.user_id = u.id"
)


def resolve_employee_id(conn: Connection, employee_or_user_id: int) -> int | None:
    """The clock-in screen sends the logged-in user's id; map it to the employee row when one exists."""
    row = conn.execute("SELECT id FROM employees WHERE user_id=?", (employee_or_user_id,)).fetchone()
    if row:
        return int(row["id"])
    row = conn.execute("SELECT id FROM employees WHERE id=?", (employee_or_user_id,)).fetchone()
    return int(row["id"]) if row else None


def get_for_day(conn: Connection, employee_id: int, day: str):
    return conn.execute(
        "SELECT * FROM attendance WHERE employee_id=? AND date=?", (employee_id, day)
    ).fetchone()


def insert_check_in(conn: Connection, employee_id: int, day: str, check_in: str, location: str | None,
                    coordinates: str | None, distance_m: float | None, status: str) -> int:
    cur = conn.execute(
        "INSERT INTO attendance(employee_id, date, check_in, check_in_location, check_in_coordinates, "
        "check_in_distance_m, status) VALUES(?,?,?,?,?,?,?)",
        (employee_id, day, check_in, location, coordinates, distance_m, status),
    )
    return int(cur.lastrowid)


def update_check_in(conn: Connection, attendance_id: int, check_in: str, location: str | None,
                    coordinates: str | None, distance_m: float | None, status: str) -> None:
    conn.execute(
        "UPDATE attendance SET check_in=?, check_in_location=?, check_in_coordinates=?, "
        "check_in_distance_m=?, status=? WHERE id=?",
        (check_in, location, coordinates, distance_m, status, attendance_id),
    )


def insert_check_out(conn: Connection, employee_id: int, day: str, check_out: str, location: str | None,
                     coordinates: str | None, distance_m: float | None, status: str) -> int:
    cur = conn.execute(
        "INSERT INTO attendance(employee_id, date, check_out, check_out_location, check_out_coordinates, "
        "check_out_distance_m, status) VALUES(?,?,?,?,?,?,?)",
        (employee_id, day, check_out, location, coordinates, distance_m, status),
    )
    return int(cur.lastrowid)


def update_check_out(conn: Connection, attendance_id: int, check_out: str, location: str | None,
                     coordinates: str | None, distance_m: float | None, status: str) -> None:
    conn.execute(
        "UPDATE attendance SET check_out=?, check_out_location=?, check_out_coordinates=?, "
        "check_out_distance_m=?, status=? WHERE id=?",
        (check_out, location, coordinates, distance_m, status, attendance_id),
    )


def list_filtered(conn: Connection, employee_id: int | None = None, date_from: str | None = None, date_to: str | None = None):
    where, params = [], []
    if employee_id is not None:
        where.append("a.employee_id = ?")
        params.append(employee_id)
    if date_from:
        where.append("a.date >= ?")
        params.append(date_from)
    if date_to:
        where.append("a.date <= ?")
        params.append(date_to)
    wh = " WHERE " + " AND ".join(where) if where else ""
    return conn.execute(f"{_SELECT}{wh} ORDER BY a.date DESC, a.created_at DESC, a.id DESC", params).fetchall()
