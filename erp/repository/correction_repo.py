from __future__ import annotations

from sqlite3 import Connection

from . import like
from ..domain.sales import REFUND_IMPOSSIBLE, REFUND_POSSIBLE

_COLS = (
    "company_name", "representative", "handler", "is_first_startup", "status", "progress_status",
    "refund_amount", "document_delivery", "feedback", "sales_db_id",
)


def insert(conn: Connection, c: dict) -> int:
    cur = conn.execute(
        f"INSERT INTO correction_requests({', '.join(_COLS)}) VALUES({','.join(['?'] * len(_COLS))})",
        [c.get(k) for k in _COLS],
    )
    return int(cur.lastrowid)


def get(conn: Connection, request_id: int):
    return conn.execute("SELECT * FROM correction_requests WHERE id=?", (request_id,)).fetchone()


def list_filtered(conn: Connection, status: str | None = None, search: str | None = None):
    sql = "SELECT * FROM correction_requests WHERE 1=1"
    params: list[object] = []
    if status:
        sql += " AND status = ?"
        params.append(status)
    if search:
        sql += " AND (company_name LIKE ? OR representative LIKE ? OR handler LIKE ?)"
        params += [like(search)] * 3
    sql += " ORDER BY created_at DESC, id DESC"
    return conn.execute(sql, params).fetchall()


def update(conn: Connection, request_id: int, c: dict) -> int:
    assignments = ", ".join(f"{k}=?" for k in _COLS)
    cur = conn.execute(
        f"UPDATE correction_requests SET {assignments}, updated_at=CURRENT_TIMESTAMP WHERE id=?",
        [c.get(k) for k in _COLS] + [request_id],
    )
    return cur.rowcount


def delete(conn: Connection, request_id: int) -> int:
    return conn.execute("DELETE FROM correction_requests WHERE id=?", (request_id,)).rowcount


def stats(conn: Connection):
    return conn.execute(
        "SELECT COUNT(*) AS total, "
        "SUM(CASE WHEN status=? THEN 1 ELSE 0 END) AS possible, "
        "SUM(CASE WHEN status=? THEN 1 ELSE 0 END) AS impossible, "
        "COALESCE(SUM(CASE WHEN status=? THEN refund_amount ELSE 0 END),0) AS total_refund "
        "FROM correction_requests",
        (REFUND_POSSIBLE, REFUND_IMPOSSIBLE, REFUND_POSSIBLE),
    ).fetchone()
