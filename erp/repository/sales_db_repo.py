from __future__ import annotations

from sqlite3 import Connection

from . import like
from ..domain.sales import SALES_DB_FIELDS

_SELECT = (
    "SELECT sd.*, u.name AS salesperson_name "
    "FROM sales_db sd LEFT JOIN users u ON sd.salesperson_id = u.id"
)


def insert(conn: Connection, row: dict) -> int:
    cols = list(SALES_DB_FIELDS)
    if row.get("commission_rate") is not None:
        cols.append("commission_rate")
    if row.get("sales_client_id") is not None:
        cols.append("sales_client_id")
    placeholders = ",".join(["?"] * len(cols))
    cur = conn.execute(
        f"INSERT INTO sales_db({', '.join(cols)}) VALUES({placeholders})",
        [row.get(c) for c in cols],
    )
    return int(cur.lastrowid)


def get(conn: Connection, row_id: int):
    return conn.execute(f"{_SELECT} WHERE sd.id=?", (row_id,)).fetchone()


def search(conn: Connection, term: str | None = None):
    if term:
        return conn.execute(
            f"{_SELECT} WHERE sd.company_name LIKE ? OR sd.representative LIKE ? OR sd.contact LIKE ? OR sd.client_name LIKE ? "
            "ORDER BY sd.proposal_date DESC, sd.created_at DESC, sd.id DESC",
            [like(term)] * 4,
        ).fetchall()
    return conn.execute(f"{_SELECT} ORDER BY sd.proposal_date DESC, sd.created_at DESC, sd.id DESC").fetchall()


def list_all(conn: Connection):
    return conn.execute("SELECT * FROM sales_db ORDER BY created_at DESC, id DESC").fetchall()


def list_for_salesperson(conn: Connection, salesperson_id: int):
    return conn.execute(
        "SELECT * FROM sales_db WHERE salesperson_id=? ORDER BY created_at DESC, id DESC", (salesperson_id,)
    ).fetchall()


def update_full(conn: Connection, row_id: int, row: dict) -> int:
    cols = list(SALES_DB_FIELDS) + ["commission_rate", "sales_client_id"]
    assignments = ", ".join(f"{c}=?" for c in cols)
    cur = conn.execute(
        f"UPDATE sales_db SET {assignments}, updated_at=CURRENT_TIMESTAMP WHERE id=?",
        [row.get(c) for c in cols] + [row_id],
    )
    return cur.rowcount


def update_commission_rate(conn: Connection, row_id: int, rate: float) -> int:
    return conn.execute(
        "UPDATE sales_db SET commission_rate=?, updated_at=CURRENT_TIMESTAMP WHERE id=?", (rate, row_id)
    ).rowcount


def update_by_salesperson(conn: Connection, row_id: int, contract_date, meeting_status, contract_client,
                          client_name, feedback) -> int:
    cur = conn.execute(
        "UPDATE sales_db SET contract_date=?, meeting_status=?, contract_client=?, client_name=?, feedback=?, "
        "updated_at=CURRENT_TIMESTAMP WHERE id=?",
        (contract_date, meeting_status, contract_client, client_name, feedback, row_id),
    )
    return cur.rowcount


def delete(conn: Connection, row_id: int) -> int:
    return conn.execute("DELETE FROM sales_db WHERE id=?", (row_id,)).rowcount


def salesperson_id_by_name(conn: Connection, name: str) -> int | None:
    row = conn.execute("SELECT id FROM users WHERE name=? ORDER BY id LIMIT 1", (name,)).fetchone()
    return int(row["id"]) if row else None
