from __future__ import annotations

from sqlite3 import Connection

from . import like

_COLS = "barcode, product_name, quantity, consumer_price, purchase_price, month"


def insert(conn: Connection, p: dict) -> int:
    cur = conn.execute(
        f"INSERT INTO products({_COLS}) VALUES(?,?,?,?,?,?)",
        (p["barcode"], p["product_name"], p["quantity"], p["consumer_price"], p["purchase_price"], p.get("month")),
    )
    return int(cur.lastrowid)


def upsert_by_barcode(conn: Connection, p: dict) -> None:
    conn.execute(
        f"INSERT INTO products({_COLS}) VALUES(?,?,?,?,?,?) "
        "ON CONFLICT(barcode) DO UPDATE SET product_name=excluded.product_name, quantity=excluded.quantity, "
        "consumer_price=excluded.consumer_price, purchase_price=excluded.purchase_price, month=excluded.month, "
        "updated_at=CURRENT_TIMESTAMP",
        (p["barcode"], p["product_name"], p["quantity"], p["consumer_price"], p["purchase_price"], p.get("month")),
    )


def get(conn: Connection, product_id: int):
    return conn.execute("SELECT * FROM products WHERE id=?", (product_id,)).fetchone()


def list_filtered(conn: Connection, search: str | None = None, month: str | None = None):
    where, params = [], []
    if search:
        where.append("(product_name LIKE ? OR barcode LIKE ?)")
        params += [like(search)] * 2
    if month:
        where.append("month = ?")
        params.append(month)
    wh = " WHERE " + " AND ".join(where) if where else ""
    return conn.execute(f"SELECT * FROM products{wh} ORDER BY created_at DESC, id DESC", params).fetchall()


def update(conn: Connection, product_id: int, p: dict) -> int:
    cur = conn.execute(
        "UPDATE products SET barcode=?, product_name=?, quantity=?, consumer_price=?, purchase_price=?, month=?, "
        "updated_at=CURRENT_TIMESTAMP WHERE id=?",
        (p["barcode"], p["product_name"], p["quantity"], p["consumer_price"], p["purchase_price"], p.get("month"), product_id),
    )
    return cur.rowcount


def delete(conn: Connection, product_id: int) -> int:
    return conn.execute("DELETE FROM products WHERE id=?", (product_id,)).rowcount


def summary(conn: Connection):
    return conn.execute(
        "SELECT COUNT(*) AS items, "
        "COALESCE(SUM(quantity),0) AS total_quantity, "
        "COALESCE(SUM(quantity * consumer_price),0) AS consumer_value, "
        "COALESCE(SUM(quantity * purchase_price),0) AS purchase_value "
        "FROM products"
    ).fetchone()
