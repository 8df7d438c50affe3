from __future__ import annotations

from sqlite3 import Connection

from . import like
from ..domain.sales import SATISFACTION_LEVELS

_COLS = ("client_name", "phone", "satisfaction_level", "content", "handler", "salesperson_name", "call_date", "sales_db_id")


def insert(conn: Connection, h: dict) -> int:
    cur = conn.execute(
        f"INSERT INTO happy_calls({', '.join(_COLS)}) VALUES({','.join(['?'] * len(_COLS))})",
        [h.get(k) for k in _COLS],
    )
    return int(cur.lastrowid)


def get(conn: Connection, call_id: int):
    return conn.execute("SELECT * FROM happy_calls WHERE id=?", (call_id,)).fetchone()


def list_filtered(conn: Connection, level: str | None = None, search: str | None = None):
    sql = "SELECT * FROM happy_calls WHERE 1=1"
    params: list[object] = []
    if level:
        sql += " AND satisfaction_level = ?"
        params.append(level)
    if search:
        sql += " AND (client_name LIKE ? OR salesperson_name LIKE ? OR handler LIKE ?)"
        params += [like(search)] * 3
    sql += " ORDER BY created_at DESC, id DESC"
    return conn.execute(sql, params).fetchall()


def update(conn: Connection, call_id: int, h: dict) -> int:
    assignments = ", ".join(f"{k}=?" for k in _COLS)
    cur = conn.execute(
        f"UPDATE happy_calls SET {assignments}, updated_at=CURRENT_TIMESTAMP WHERE id=?",
        [h.get(k) for k in _COLS] + [call_id],
    )
    return cur.rowcount


def delete(conn: Connection, call_id: int) -> int:
    return conn.execute("DELETE FROM happy_calls WHERE id=?", (call_id,)).rowcount


def level_counts(conn: Connection) -> dict:
    rows = conn.execute(
        "SELECT satisfaction_level AS level, COUNT(*) AS cnt FROM happy_calls GROUP BY satisfaction_level"
    ).fetchall()
    by_level = {r["level"]: int(r["cnt"]) for r in rows}
    out = {"total": sum(by_level.values())}
    for level in SATISFACTION_LEVELS:
        out[level] = by_level.get(level, 0)
    return out
