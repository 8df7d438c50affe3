from __future__ import annotations

from sqlite3 import Connection

from . import like

_COLS = (
    "client_name", "client_code", "representative", "contact", "address", "business_type",
    "commission_rate", "notes", "status",
)


def insert(conn: Connection, c: dict) -> int:
    cur = conn.execute(
        f"INSERT INTO sales_clients({', '.join(_COLS)}) VALUES({','.join(['?'] * len(_COLS))})",
        [c.get(k) for k in _COLS],
    )
    return int(cur.lastrowid)


def get(conn: Connection, client_id: int):
    return conn.execute("SELECT * FROM sales_clients WHERE id=?", (client_id,)).fetchone()


def list_filtered(conn: Connection, status: str | None = None, search: str | None = None):
    sql = "SELECT * FROM sales_clients WHERE 1=1"
    params: list[object] = []
    if status:
        sql += " AND status = ?"
        params.append(status)
    if search:
        sql += " AND (client_name LIKE ? OR representative LIKE ? OR client_code LIKE ?)"
        params += [like(search)] * 3
    sql += " ORDER BY created_at DESC, id DESC"
    return conn.execute(sql, params).fetchall()


def update(conn: Connection, client_id: int, c: dict) -> int:
    assignments = ", ".join(f"{k}=?" for k in _COLS)
    cur = conn.execute(
        f"UPDATE sales_clients SET {assignments}, updated_at=CURRENT_TIMESTAMP WHERE id=?",
        [c.get(k) for k in _COLS] + [client_id],
    )
    return cur.rowcount


def delete(conn: Connection, client_id: int) -> int:
    return conn.execute("DELETE FROM sales_clients WHERE id=?", (client_id,)).rowcount
