from __future__ import annotations

import pandas as pd

from ..db import get_conn, transaction
from ..errors import NotFoundError
from ..logs import LogContext
from ..repository import product_repo
from .utils import blank, read_csv_upload, rows_to_dicts, to_csv_bytes, to_int_safe

# Column order of the inventory CSV template
CSV_FIELDS = ("month", "barcode", "product_name", "quantity", "consumer_price", "purchase_price")


def _clean(p: dict) -> dict:
    barcode = str(p.get("barcode") or "").strip()
    name = str(p.get("product_name") or "").strip()
    if not barcode or not name:
        raise ValueError("barcode and product_name are required")
    return {
        "barcode": barcode,
        "product_name": name,
        "quantity": to_int_safe(p.get("quantity")),
        "consumer_price": to_int_safe(p.get("consumer_price")),
        "purchase_price": to_int_safe(p.get("purchase_price")),
        "month": (str(p["month"]).strip() or None) if p.get("month") is not None else None,
    }


def list_products(search: str | None = None, month: str | None = None) -> list[dict]:
    with get_conn() as conn:
        return rows_to_dicts(product_repo.list_filtered(conn, search, month))


def create_product(data: dict, log: LogContext) -> int:
    p = _clean(data)
    with get_conn() as conn:
        with transaction(conn):
            new_id = product_repo.insert(conn, p)
    log.set_entity("PRODUCT", new_id)
    log.set_after(p)
    return new_id


def update_product(product_id: int, data: dict, log: LogContext) -> None:
    p = _clean(data)
    with get_conn() as conn:
        before = product_repo.get(conn, product_id)
        if not before:
            raise NotFoundError("product not found")
        with transaction(conn):
            product_repo.update(conn, product_id, p)
    log.set_entity("PRODUCT", product_id)
    log.set_before(dict(before)); log.set_after(p)


def delete_product(product_id: int, log: LogContext) -> None:
    with get_conn() as conn:
        before = product_repo.get(conn, product_id)
        if not before:
            raise NotFoundError("product not found")
        with transaction(conn):
            product_repo.delete(conn, product_id)
    log.set_entity("PRODUCT", product_id)
    log.set_before(dict(before))


def import_products(items: list[dict], log: LogContext) -> int:
    """Upsert by barcode in a single transaction; any invalid item aborts the batch."""
    cleaned = [_clean(it) for it in items]
    with get_conn() as conn:
        with transaction(conn):
            for p in cleaned:
                product_repo.upsert_by_barcode(conn, p)
    log.set_after({"count": len(cleaned)})
    return len(cleaned)


def import_csv(content: bytes, log: LogContext) -> int:
    """
    Positional CSV: month, barcode, product_name, quantity, consumer_price, purchase_price.
    Short rows and rows without a barcode are skipped, non-numeric numbers become 0.
    """
    df = read_csv_upload(content)
    count = 0
    with get_conn() as conn:
        with transaction(conn):
            for values in df.itertuples(index=False, name=None):
                # short rows come back padded with NaN
                if len(values) < len(CSV_FIELDS) or any(pd.isna(v) for v in values[:len(CSV_FIELDS)]):
                    continue
                rec = dict(zip(CSV_FIELDS, (str(v).strip() for v in values)))
                if blank(rec["barcode"]) or blank(rec["product_name"]):
                    continue
                product_repo.upsert_by_barcode(conn, _clean(rec))
                count += 1
    log.set_after({"count": count})
    return count


def export_csv() -> bytes:
    with get_conn() as conn:
        df = pd.read_sql_query(
            f"SELECT {', '.join(CSV_FIELDS)} FROM products ORDER BY month DESC, id DESC", conn
        )
    return to_csv_bytes(df)


def summary() -> dict:
    with get_conn() as conn:
        r = product_repo.summary(conn)
    consumer_value = int(r["consumer_value"] or 0)
    purchase_value = int(r["purchase_value"] or 0)
    margin = consumer_value - purchase_value
    return {
        "items": int(r["items"] or 0),
        "total_quantity": int(r["total_quantity"] or 0),
        "consumer_value": consumer_value,
        "purchase_value": purchase_value,
        "margin": margin,
        "margin_rate": round(margin * 100 / consumer_value, 1) if consumer_value else 0.0,
    }
