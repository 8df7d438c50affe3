from __future__ import annotations

import logging
import sqlite3

import pandas as pd

from ..db import get_conn, transaction
from ..domain.commission import DEFAULT_COMMISSION_RATE, parse_amount
from ..domain.sales import SALES_DB_CSV_ALIASES, SALES_DB_FIELDS
from ..errors import NotFoundError, PermissionDeniedError
from ..logs import LogContext
from ..repository import sales_db_repo
from .utils import blank, read_csv_upload, rows_to_dicts, to_csv_bytes

logger = logging.getLogger(__name__)

CSV_BATCH_SIZE = 500
_INT_FIELDS = ("sales_amount", "actual_sales")
_SALESPERSON_FIELDS = ("contract_date", "meeting_status", "contract_client", "client_name", "feedback")


def _normalize(row: dict) -> dict:
    out = {}
    for k in SALES_DB_FIELDS:
        v = row.get(k)
        if isinstance(v, str):
            v = v.strip() or None
        out[k] = v
    for k in _INT_FIELDS:
        if out[k] is not None:
            out[k] = parse_amount(out[k])
    if blank(out.get("company_name")):
        raise ValueError("company_name is required")
    rate =row.get("commission_rate")
    out["commission_rate"] = None if blank(rate) else float(rate)
    client_id = row.get("sales_client_id")
    out["sales_client_id"] = None if blank(client_id) else int(client_id)
    return out


def _is_blank_row(row: dict) -> bool:
    return all(blank(row.get(k)) for k in SALES_DB_FIELDS)


def search(term: str | None = None) -> list[dict]:
    with get_conn() as conn:
        return rows_to_dicts(sales_db_repo.search(conn, term))


def list_all() -> list[dict]:
    with get_conn() as conn:
        return rows_to_dicts(sales_db_repo.list_all(conn))


def my_data(salesperson_id: int | None) -> list[dict]:
    if salesperson_id is None:
        raise ValueError("salesperson_id is required")
    with get_conn() as conn:
        return rows_to_dicts(sales_db_repo.list_for_salesperson(conn, salesperson_id))


def create(data: dict, log: LogContext) -> int:
    row = _normalize(data)
    with get_conn() as conn:
        with transaction(conn):
            new_id = sales_db_repo.insert(conn, row)
    log.set_entity("SALES_DB", new_id)
    log.set_after(row)
    return new_id


def update(row_id: int, data: dict, log: LogContext) -> None:
    """
    A body carrying only commission_rate (sent from the commission statement
    screen) updates just the rate; anything else is a full-row update where a
    missing rate falls back to the default.
    """
    with get_conn() as conn:
        before = sales_db_repo.get(conn, row_id)
        if not before:
            raise NotFoundError("sales record not found")
        if set(data) == {"commission_rate"}:
            rate = data["commission_rate"]
            if rate is None or float(rate) < 0:
                raise ValueError("commission_rate must be a non-negative number")
            with transaction(conn):
                sales_db_repo.update_commission_rate(conn, row_id, float(rate))
            after = {"commission_rate": float(rate)}
        else:
            after = _normalize(data)
            after["commission_rate"] = after["commission_rate"] or DEFAULT_COMMISSION_RATE
            with transaction(conn):
                sales_db_repo.update_full(conn, row_id, after)
    log.set_entity("SALES_DB", row_id)
    log.set_before(dict(before)); log.set_after(after)


def update_by_salesperson(row_id: int, salesperson_id: int, data: dict, log: LogContext) -> None:
    with get_conn() as conn:
        before = sales_db_repo.get(conn, row_id)
        if not before:
            raise NotFoundError("sales record not found")
        if before["salesperson_id"] is None or int(before["salesperson_id"]) != int(salesperson_id):
            raise PermissionDeniedError("not your record")
        fields = {k: data.get(k) for k in _SALESPERSON_FIELDS}
        with transaction(conn):
            sales_db_repo.update_by_salesperson(conn, row_id, **fields)
    log.set_entity("SALES_DB", row_id)
    log.set_before({k: before[k] for k in _SALESPERSON_FIELDS}); log.set_after(fields)


def delete(row_id: int, log: LogContext) -> None:
    with get_conn() as conn:
        before = sales_db_repo.get(conn, row_id)
        if not before:
            raise NotFoundError("sales record not found")
        with transaction(conn):
            sales_db_repo.delete(conn, row_id)
    log.set_entity("SALES_DB", row_id)
    log.set_before(dict(before))


def bulk_create(rows: list[dict], log: LogContext) -> int:
    """Insert many rows in one transaction; fully blank rows are skipped."""
    cleaned = [_normalize(r) for r in rows if not _is_blank_row(r)]
    with get_conn() as conn:
        with transaction(conn):
            for r in cleaned:
                sales_db_repo.insert(conn, r)
    log.set_after({"count": len(cleaned), "skipped": len(rows) - len(cleaned)})
    return len(cleaned)


def _resolve_salesperson(conn, value, cache: dict):
    """CSV '영업자' cells hold either a user id or a user name."""
    if blank(value):
        return None
    s = str(value).strip()
    if s.isdigit():
        return int(s)
    if s not in cache:
        cache[s] = sales_db_repo.salesperson_id_by_name(conn, s)
    return cache[s]


def upload_csv(content: bytes, log: LogContext) -> dict:
    """
    Import leads from CSV with English or Korean headers, CSV_BATCH_SIZE rows
    per transaction. Failing rows are reported and skipped; the batch they
    belong to still commits.
    """
    total, success, errors = 0, 0, []
    names: dict = {}
    with get_conn() as conn:
        for chunk in read_csv_upload(content, chunksize=CSV_BATCH_SIZE):
            chunk = chunk.rename(columns=lambda c: SALES_DB_CSV_ALIASES.get(str(c).strip(), str(c).strip()))
            chunk = chunk.loc[:, ~chunk.columns.duplicated()]
            with transaction(conn):
                for rec in chunk.to_dict(orient="records"):
                    total += 1
                    try:
                        rec["salesperson_id"] = _resolve_salesperson(conn, rec.get("salesperson_id"), names)
                        sales_db_repo.insert(conn, _normalize(rec))
                        success += 1
                    except (ValueError, sqlite3.Error) as e:
                        errors.append({"row": total, "error": str(e)})
            logger.info("sales_db csv: %d rows processed", total)
    log.set_after({"total": total, "successCount": success, "errorCount": len(errors)})
    return {"total": total, "successCount": success, "errors": errors}


def export_csv() -> bytes:
    with get_conn() as conn:
        df = pd.read_sql_query(
            "SELECT sd.*, u.name AS salesperson_name FROM sales_db sd "
            "LEFT JOIN users u ON sd.salesperson_id = u.id ORDER BY sd.proposal_date DESC, sd.id DESC",
            conn,
        )
    return to_csv_bytes(df)
