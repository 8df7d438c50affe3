from __future__ import annotations

from sqlite3 import Connection

_COLS = (
    "contract_type", "client_name", "client_company", "salesperson_id", "contract_amount",
    "commission_rate", "commission_amount", "contract_date", "payment_status", "notes",
)


def insert(conn: Connection, c: dict) -> int:
    cur = conn.execute(
        f"INSERT INTO contracts({', '.join(_COLS)}) VALUES({','.join(['?'] * len(_COLS))})",
        [c.get(k) for k in _COLS],
    )
    return int(cur.lastrowid)


def get(conn: Connection, contract_id: int):
    return conn.execute("SELECT * FROM contracts WHERE id=?", (contract_id,)).fetchone()


def list_filtered(conn: Connection, contract_type: str | None = None, salesperson_id: int | None = None):
    where, params = [], []
    if contract_type:
        where.append("c.contract_type = ?")
        params.append(contract_type)
    if salesperson_id is not None:
        where.append("c.salesperson_id = ?")
        params.append(salesperson_id)
    wh = " WHERE " + " AND ".join(where) if where else ""
    return conn.execute(
        "SELECT c.*, u.name AS salesperson_name FROM contracts c LEFT JOIN users u ON c.salesperson_id = u.id"
        f"{wh} ORDER BY c.created_at DESC, c.id DESC",
        params,
    ).fetchall()


def update(conn: Connection, contract_id: int, c: dict) -> int:
    assignments = ", ".join(f"{k}=?" for k in _COLS)
    cur = conn.execute(
        f"UPDATE contracts SET {assignments}, updated_at=CURRENT_TIMESTAMP WHERE id=?",
        [c.get(k) for k in _COLS] + [contract_id],
    )
    return cur.rowcount


def delete(conn: Connection, contract_id: int) -> int:
    return conn.execute("DELETE FROM contracts WHERE id=?", (contract_id,)).rowcount
