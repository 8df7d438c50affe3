from __future__ import annotations

from ..db import get_conn
from ..domain.sales import MONTH_MODES, is_all, month_key, pipeline_stats, totals, with_success_rate
from ..repository import reporting_repo
from .utils import rows_to_dicts


def _period(year, month) -> tuple[str | None, str | None]:
    if is_all(year) or is_all(month):
        return None, None
    return month_key(year, month)


def monthly_performance(year=None, month=None, contract_status: str | None = None, client: str | None = None) -> dict:
    y, m = _period(year, month)
    status = None if is_all(contract_status) else contract_status
    client_filter = None if is_all(client) else client
    with get_conn() as conn:
        rows = rows_to_dicts(reporting_repo.monthly_rows(conn, y, m, status, client_filter))
        stats = pipeline_stats(rows)
        if y and m:
            corr = reporting_repo.correction_month_stats(conn, y, m)
            stats["correctionCount"] = int(corr["count"] or 0)
            stats["correctionRefund"] = int(corr["total_refund"] or 0)
    return {"data": rows, "stats": stats}


def salesperson_performance(year=None, month=None, mode: str | None = None) -> dict:
    """Per-salesperson pipeline counts; the month filter only applies in month mode."""
    y = m = None
    if mode in MONTH_MODES:
        y, m = _period(year, month)
    with get_conn() as conn:
        rows = [with_success_rate(r, "total_db") for r in reporting_repo.salesperson_stats(conn, y, m)]
    return {"data": rows, "stats": with_success_rate(totals(rows, "total_db"), "total_db")}


def recruiter_performance(year=None, month=None) -> dict:
    y, m = _period(year, month)
    with get_conn() as conn:
        rows = [with_success_rate(r, "total_proposed") for r in reporting_repo.recruiter_stats(conn, y, m)]
    return {"data": rows, "stats": with_success_rate(totals(rows, "total_proposed"), "total_proposed")}
