from __future__ import annotations

from sqlite3 import Connection


def insert(conn: Connection, s: dict) -> int:
    cur = conn.execute(
        "INSERT INTO schedules(user_id, title, schedule_date, schedule_time, client_name, location, notes, status) "
        "VALUES(?,?,?,?,?,?,?,?)",
        (s["user_id"], s["title"], s["schedule_date"], s.get("schedule_time"), s.get("client_name"),
         s.get("location"), s.get("notes"), s.get("status") or "scheduled"),
    )
    return int(cur.lastrowid)


def get(conn: Connection, schedule_id: int):
    return conn.execute("SELECT * FROM schedules WHERE id=?", (schedule_id,)).fetchone()


def list_for(conn: Connection, user_id: int | None = None):
    sql = "SELECT s.*, u.name AS user_name FROM schedules s LEFT JOIN users u ON s.user_id = u.id"
    params: list[object] = []
    if user_id is not None:
        sql += " WHERE s.user_id = ?"
        params.append(user_id)
    sql += " ORDER BY s.schedule_date DESC, s.schedule_time DESC, s.id DESC"
    return conn.execute(sql, params).fetchall()


def update(conn: Connection, schedule_id: int, s: dict) -> int:
    cur = conn.execute(
        "UPDATE schedules SET title=?, schedule_date=?, schedule_time=?, client_name=?, location=?, notes=?, "
        "status=?, updated_at=CURRENT_TIMESTAMP WHERE id=?",
        (s["title"], s["schedule_date"], s.get("schedule_time"), s.get("client_name"), s.get("location"),
         s.get("notes"), s.get("status") or "scheduled", schedule_id),
    )
    return cur.rowcount


def delete(conn: Connection, schedule_id: int) -> int:
    return conn.execute("DELETE FROM schedules WHERE id=?", (schedule_id,)).rowcount
