from __future__ import annotations

from ..db import get_conn, transaction
from ..domain.commission import (
    commission_amount,
    commission_amount_exact,
    format_krw,
    parse_amount,
    withholding_tax,
)
from ..domain.hr_rules import parse_day
from ..domain.sales import commission_summary_stats, is_all, month_key
from ..errors import NotFoundError
from ..logs import LogContext
from ..repository import commission_repo, user_repo
from .config_svc import get_config

STATEMENT_PAYMENT_STATUSES = ("pending", "paid")


def _tax(total_commission: int) -> dict:
    cfg = get_config()
    return withholding_tax(
        total_commission,
        income_tax_rate=cfg["withholding_income_tax_rate"],
        local_tax_ratio=cfg["local_income_tax_ratio"],
    )


def _statement_values(data: dict) -> dict:
    start = parse_day(data["period_start"])
    end = parse_day(data["period_end"])
    if end < start:
        raise ValueError("period_end must not be before period_start")
    status = data.get("payment_status") or "pending"
    if status not in STATEMENT_PAYMENT_STATUSES:
        raise ValueError(f"invalid payment_status: {status}")
    total_commission = int(data.get("total_commission") or 0)
    tax = _tax(total_commission)
    return {
        "salesperson_id": int(data["salesperson_id"]),
        "period_start": start.isoformat(),
        "period_end": end.isoformat(),
        "total_sales": int(data.get("total_sales") or 0),
        "total_commission": total_commission,
        "withholding_tax": tax["withholding_tax"],
        "net_commission": tax["net_commission"],
        "payment_date": data.get("payment_date"),
        "payment_status": status,
    }


def _require_user(conn, user_id: int):
    if not user_repo.get(conn, user_id):
        raise NotFoundError("salesperson not found")


def list_statements(salesperson_id: int | None = None) -> list[dict]:
    with get_conn() as conn:
        rows = commission_repo.list_statements(conn, salesperson_id)
    out = []
    for r in rows:
        d = dict(r)
        tax = _tax(int(d["total_commission"] or 0))
        d["income_tax"] = tax["income_tax"]
        d["local_tax"] = tax["local_tax"]
        d["withholding_tax"] = tax["withholding_tax"]
        d["net_commission"] = tax["net_commission"]
        out.append(d)
    return out


def get_statement_detail(statement_id: int) -> dict:
    with get_conn() as conn:
        row = commission_repo.get_statement(conn, statement_id)
    if not row:
        raise NotFoundError("statement not found")
    d = dict(row)
    tax = _tax(int(d["total_commission"] or 0))
    d.update(tax)
    d["formatted"] = {
        "total_sales": format_krw(d["total_sales"]),
        "total_commission": format_krw(d["total_commission"]),
        "income_tax": format_krw(tax["income_tax"]),
        "local_tax": format_krw(tax["local_tax"]),
        "withholding_tax": format_krw(tax["withholding_tax"]),
        "net_commission": format_krw(tax["net_commission"]),
    }
    return d


def create_statement(data: dict, log: LogContext) -> int:
    values = _statement_values(data)
    with get_conn() as conn:
        _require_user(conn, values["salesperson_id"])
        with transaction(conn):
            new_id = commission_repo.insert_statement(conn, values)
    log.set_entity("COMMISSION_STATEMENT", new_id)
    log.set_after(values)
    return new_id


def generate_statement(salesperson_id: int, period_start: str, period_end: str, log: LogContext) -> dict:
    """
    Build a statement from the salesperson's completed contracts whose
    contract_date falls within the period (inclusive).
    """
    start = parse_day(period_start).isoformat()
    end = parse_day(period_end).isoformat()
    with get_conn() as conn:
        _require_user(conn, salesperson_id)
        rows = commission_repo.completed_in_period(conn, salesperson_id, start, end)
        total_sales = sum(int(r["actual_sales"] or 0) for r in rows)
        total_commission = sum(commission_amount(r["actual_sales"], r["commission_rate"]) for r in rows)
        values = _statement_values({
            "salesperson_id": salesperson_id,
            "period_start": start,
            "period_end": end,
            "total_sales": total_sales,
            "total_commission": total_commission,
        })
        with transaction(conn):
            new_id = commission_repo.insert_statement(conn, values)
    log.set_entity("COMMISSION_STATEMENT", new_id)
    log.set_after({**values, "contracts": len(rows)})
    return {"id": new_id, "contracts": len(rows), **values}


def update_statement(statement_id: int, data: dict, log: LogContext) -> None:
    values = _statement_values(data)
    with get_conn() as conn:
        before = commission_repo.get_statement(conn, statement_id)
        if not before:
            raise NotFoundError("statement not found")
        with transaction(conn):
            commission_repo.update_statement(conn, statement_id, values)
    log.set_entity("COMMISSION_STATEMENT", statement_id)
    log.set_before(dict(before)); log.set_after(values)


def delete_statement(statement_id: int, log: LogContext) -> None:
    with get_conn() as conn:
        before = commission_repo.get_statement(conn, statement_id)
        if not before:
            raise NotFoundError("statement not found")
        with transaction(conn):
            commission_repo.delete_statement(conn, statement_id)
    log.set_entity("COMMISSION_STATEMENT", statement_id)
    log.set_before(dict(before))


def commission_details(salesperson_id: int) -> list[dict]:
    """Per-contract commission for a salesperson: contract_client amount x rate / 100."""
    with get_conn() as conn:
        rows = commission_repo.detail_rows(conn, salesperson_id)
    out = []
    for r in rows:
        base = parse_amount(r["contract_client"])
        out.append({
            "id": r["id"],
            "company_name": r["company_name"],
            "contract_date": r["contract_date"],
            "contract_status": r["contract_status"],
            "commission_base": base,
            "commission_rate": r["commission_rate"],
            "commission_amount": commission_amount(base, r["commission_rate"]),
        })
    return out


def commission_summary(year: str | None = None, month: str | None = None) -> dict:
    y = m = None
    if not is_all(year) and not is_all(month):
        y, m = month_key(year, month)
    with get_conn() as conn:
        rows = commission_repo.completed_contracts(conn, y, m)
    data = []
    for r in rows:
        d = dict(r)
        d["commission_amount"] = commission_amount_exact(d["actual_sales"], d["commission_rate"])
        data.append(d)
    return {"data": data, "stats": commission_summary_stats(data)}
