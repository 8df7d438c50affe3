from __future__ import annotations

from sqlite3 import Connection

_SELECT = (
    "SELECT acr.id, acr.user_id, acr.request_type, acr.current_value, "
    "CASE WHEN acr.request_type = 'password' THEN NULL ELSE acr.new_value END AS new_value, "
    "acr.reason, acr.status, acr.approved_by, acr.approved_at, acr.created_at, "
    "u.name AS user_name, u.username, a.name AS approver_name "
    "FROM account_change_requests acr "
    "LEFT JOIN users u ON acr.user_id = u.id "
    "LEFT JOIN users a ON acr.approved_by = a.id"
)


def insert(conn: Connection, user_id: int, request_type: str, current_value: str | None,
           new_value: str | None, reason: str | None) -> int:
    cur = conn.execute(
        "INSERT INTO account_change_requests(user_id, request_type, current_value, new_value, reason) VALUES(?,?,?,?,?)",
        (user_id, request_type, current_value, new_value, reason),
    )
    return int(cur.lastrowid)


def get_raw(conn: Connection, request_id: int):
    return conn.execute("SELECT * FROM account_change_requests WHERE id=?", (request_id,)).fetchone()


def get(conn: Connection, request_id: int):
    return conn.execute(f"{_SELECT} WHERE acr.id=?", (request_id,)).fetchone()


def list_filtered(conn: Connection, status: str | None = None):
    if status:
        return conn.execute(
            f"{_SELECT} WHERE acr.status = ? ORDER BY acr.created_at DESC, acr.id DESC", (status,)
        ).fetchall()
    return conn.execute(f"{_SELECT} ORDER BY acr.created_at DESC, acr.id DESC").fetchall()


def decide(conn: Connection, request_id: int, status: str, approved_by: int | None) -> int:
    cur = conn.execute(
        "UPDATE account_change_requests SET status=?, approved_by=?, approved_at=CURRENT_TIMESTAMP "
        "WHERE id=? AND status='pending'",
        (status, approved_by, request_id),
    )
    return cur.rowcount
