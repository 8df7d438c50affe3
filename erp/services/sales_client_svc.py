from __future__ import annotations

from ..db import get_conn, transaction
from ..domain.sales import is_all
from ..errors import NotFoundError
from ..logs import LogContext
from ..repository import sales_client_repo
from .utils import blank, rows_to_dicts

CLIENT_STATUSES = ("active", "inactive")


def _clean(data: dict) -> dict:
    c = dict(data)
    if blank(c.get("client_name")):
        raise ValueError("client_name is required")
    c["client_code"] = None if blank(c.get("client_code")) else c["client_code"].strip()
    c["commission_rate"] = float(c.get("commission_rate") or 0)
    c["status"] = c.get("status") or "active"
    if c["status"] not in CLIENT_STATUSES:
        raise ValueError(f"invalid status: {c['status']}")
    return c


def list_clients(status: str | None = None, search: str | None = None) -> list[dict]:
    with get_conn() as conn:
        return rows_to_dicts(sales_client_repo.list_filtered(conn, None if is_all(status) else status, search))


def create_client(data: dict, log: LogContext) -> int:
    c = _clean(data)
    with get_conn() as conn:
        with transaction(conn):
            new_id = sales_client_repo.insert(conn, c)
    log.set_entity("SALES_CLIENT", new_id)
    log.set_after(c)
    return new_id


def update_client(client_id: int, data: dict, log: LogContext) -> None:
    c = _clean(data)
    with get_conn() as conn:
        before = sales_client_repo.get(conn, client_id)
        if not before:
            raise NotFoundError("sales client not found")
        with transaction(conn):
            sales_client_repo.update(conn, client_id, c)
    log.set_entity("SALES_CLIENT", client_id)
    log.set_before(dict(before)); log.set_after(c)


def delete_client(client_id: int, log: LogContext) -> None:
    with get_conn() as conn:
        before = sales_client_repo.get(conn, client_id)
        if not before:
            raise NotFoundError("sales client not found")
        with transaction(conn):
            sales_client_repo.delete(conn, client_id)
    log.set_entity("SALES_CLIENT", client_id)
    log.set_before(dict(before))
