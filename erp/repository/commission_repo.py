from __future__ import annotations

from sqlite3 import Connection

from ..domain.sales import COMMISSION_DETAIL_STATUSES, CONTRACT_DONE

_SELECT = (
    "SELECT cs.*, u.name AS salesperson_name "
    "FROM commission_statements cs LEFT JOIN users u ON cs.salesperson_id = u.id"
)


def insert_statement(conn: Connection, s: dict) -> int:
    cur = conn.execute(
        "INSERT INTO commission_statements(salesperson_id, period_start, period_end, total_sales, total_commission, "
        "withholding_tax, net_commission, payment_date, payment_status) VALUES(?,?,?,?,?,?,?,?,?)",
        (
            s["salesperson_id"], s["period_start"], s["period_end"], s["total_sales"], s["total_commission"],
            s["withholding_tax"], s["net_commission"], s.get("payment_date"), s.get("payment_status") or "pending",
        ),
    )
    return int(cur.lastrowid)


def get_statement(conn: Connection, statement_id: int):
    return conn.execute(f"{_SELECT} WHERE cs.id=?", (statement_id,)).fetchone()


def list_statements(conn: Connection, salesperson_id: int | None = None):
    if salesperson_id is not None:
        return conn.execute(
            f"{_SELECT} WHERE cs.salesperson_id=? ORDER BY cs.period_start DESC, cs.id DESC", (salesperson_id,)
        ).fetchall()
    return conn.execute(f"{_SELECT} ORDER BY cs.period_start DESC, cs.id DESC").fetchall()


def update_statement(conn: Connection, statement_id: int, s: dict) -> int:
    cur = conn.execute(
        "UPDATE commission_statements SET salesperson_id=?, period_start=?, period_end=?, total_sales=?, "
        "total_commission=?, withholding_tax=?, net_commission=?, payment_date=?, payment_status=? WHERE id=?",
        (
            s["salesperson_id"], s["period_start"], s["period_end"], s["total_sales"], s["total_commission"],
            s["withholding_tax"], s["net_commission"], s.get("payment_date"), s.get("payment_status") or "pending",
            statement_id,
        ),
    )
    return cur.rowcount


def delete_statement(conn: Connection, statement_id: int) -> int:
    return conn.execute("DELETE FROM commission_statements WHERE id=?", (statement_id,)).rowcount


def detail_rows(conn: Connection, salesperson_id: int):
    """Contract rows feeding a salesperson's commission details (contract flag Y or terminated)."""
    placeholders = ",".join(["?"] * len(COMMISSION_DETAIL_STATUSES))
    return conn.execute(
        "SELECT id, company_name, contract_client, contract_date, "
        "COALESCE(commission_rate, 500) AS commission_rate, contract_status "
        f"FROM sales_db WHERE salesperson_id=? AND contract_status IN ({placeholders}) "
        "ORDER BY contract_date DESC, created_at DESC, id DESC",
        (salesperson_id, *COMMISSION_DETAIL_STATUSES),
    ).fetchall()


def completed_in_period(conn: Connection, salesperson_id: int, period_start: str, period_end: str):
    return conn.execute(
        "SELECT id, company_name, actual_sales, COALESCE(commission_rate, 500) AS commission_rate, contract_date "
        "FROM sales_db WHERE salesperson_id=? AND contract_status=? AND contract_date BETWEEN ? AND ? "
        "ORDER BY contract_date ASC, id ASC",
        (salesperson_id, CONTRACT_DONE, period_start, period_end),
    ).fetchall()


def completed_contracts(conn: Connection, year: str | None = None, month: str | None = None):
    sql = (
        "SELECT sd.id, sd.company_name, sd.contract_status, sd.actual_sales, sd.commission_rate, sd.proposer, "
        "u.name AS salesperson_name, sc.client_name AS sales_client_name, sd.contract_date "
        "FROM sales_db sd "
        "LEFT JOIN users u ON sd.salesperson_id = u.id "
        "LEFT JOIN sales_clients sc ON sd.sales_client_id = sc.id "
        "WHERE sd.contract_status = ?"
    )
    params: list[object] = [CONTRACT_DONE]
    if year and month:
        sql += " AND strftime('%Y', sd.contract_date) = ? AND strftime('%m', sd.contract_date) = ?"
        params += [year, month]
    sql += " ORDER BY sd.contract_date DESC, sd.id DESC"
    return conn.execute(sql, params).fetchall()
