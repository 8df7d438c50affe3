from __future__ import annotations

from sqlite3 import Connection

from ..domain.sales import CONTRACT_DONE, MEETING_DONE


def _counts(p: str = "") -> str:
    return (
        f"SUM(CASE WHEN {p}meeting_status = :meeting THEN 1 ELSE 0 END) AS meeting_completed, "
        f"SUM(CASE WHEN {p}contract_status = :done THEN 1 ELSE 0 END) AS contract_completed, "
        f"SUM(CASE WHEN {p}contract_status = :done THEN COALESCE({p}actual_sales, 0) ELSE 0 END) AS total_amount"
    )


def monthly_rows(conn: Connection, year: str | None, month: str | None,
                 contract_status: str | None, client: str | None):
    sql = (
        "SELECT sd.id, sd.proposal_date, sd.proposer, u.name AS salesperson_name, sd.company_name, "
        "sd.representative, sd.contact, sd.meeting_status, sd.contract_status, sd.contract_client, "
        "sd.actual_sales, sd.commission_rate "
        "FROM sales_db sd LEFT JOIN users u ON sd.salesperson_id = u.id WHERE 1=1"
    )
    params: list[object] = []
    if year and month:
        sql += " AND strftime('%Y', sd.proposal_date) = ? AND strftime('%m', sd.proposal_date) = ?"
        params += [year, month]
    if contract_status:
        sql += " AND sd.contract_status = ?"
        params.append(contract_status)
    if client:
        sql += " AND sd.contract_client = ?"
        params.append(client)
    sql += " ORDER BY sd.proposal_date DESC, sd.id DESC"
    return conn.execute(sql, params).fetchall()


def correction_month_stats(conn: Connection, year: str, month: str):
    return conn.execute(
        "SELECT COUNT(*) AS count, COALESCE(SUM(refund_amount),0) AS total_refund FROM correction_requests "
        "WHERE strftime('%Y', created_at) = ? AND strftime('%m', created_at) = ?",
        (year, month),
    ).fetchone()


def salesperson_stats(conn: Connection, year: str | None = None, month: str | None = None):
    """One row per salesperson/admin user, including users without any sales_db rows."""
    period = ""
    params: dict[str, object] = {"meeting": MEETING_DONE, "done": CONTRACT_DONE}
    if year and month:
        period = " AND strftime('%Y', sd.proposal_date) = :year AND strftime('%m', sd.proposal_date) = :month"
        params.update(year=year, month=month)
    return conn.execute(
        "SELECT u.id AS salesperson_id, u.name AS salesperson, e.employee_code, "
        f"COUNT(sd.id) AS total_db, {_counts('sd.')} "
        "FROM users u "
        "LEFT JOIN employees e ON e.user_id = u.id "
        f"LEFT JOIN sales_db sd ON sd.salesperson_id = u.id{period} "
        "WHERE u.role IN ('salesperson', 'admin') "
        "GROUP BY u.id, u.name, e.employee_code "
        "ORDER BY u.created_at DESC, u.id DESC",
        params,
    ).fetchall()


def recruiter_stats(conn: Connection, year: str | None = None, month: str | None = None):
    params: dict[str, object] = {"meeting": MEETING_DONE, "done": CONTRACT_DONE}
    sql = (
        f"SELECT proposer, COUNT(*) AS total_proposed, {_counts()} "
        "FROM sales_db WHERE proposer IS NOT NULL AND proposer != ''"
    )
    if year and month:
        sql += " AND strftime('%Y', proposal_date) = :year AND strftime('%m', proposal_date) = :month"
        params.update(year=year, month=month)
    sql += " GROUP BY proposer ORDER BY total_proposed DESC, proposer ASC"
    return conn.execute(sql, params).fetchall()
