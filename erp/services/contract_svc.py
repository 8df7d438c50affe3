from __future__ import annotations

from ..db import get_conn, transaction
from ..domain.commission import commission_amount
from ..errors import NotFoundError
from ..logs import LogContext
from ..repository import contract_repo
from .utils import rows_to_dicts

CONTRACT_TYPES = ("sales", "recruitment")
PAYMENT_STATUSES = ("pending", "paid", "partial")


def _prepare(data: dict) -> dict:
    c = dict(data)
    if c.get("contract_type") not in CONTRACT_TYPES:
        raise ValueError(f"contract_type must be one of {', '.join(CONTRACT_TYPES)}")
    if not (c.get("client_name") or "").strip():
        raise ValueError("client_name is required")
    c["payment_status"] = c.get("payment_status") or "pending"
    if c["payment_status"] not in PAYMENT_STATUSES:
        raise ValueError(f"invalid payment_status: {c['payment_status']}")
    c["contract_amount"] = int(c.get("contract_amount") or 0)
    c["commission_rate"] = float(c.get("commission_rate") or 0)
    if c.get("commission_amount") is None:
        c["commission_amount"] = commission_amount(c["contract_amount"], c["commission_rate"])
    return c


def list_contracts(contract_type: str | None = None, salesperson_id: int | None = None) -> list[dict]:
    with get_conn() as conn:
        return rows_to_dicts(contract_repo.list_filtered(conn, contract_type, salesperson_id))


def create_contract(data: dict, log: LogContext) -> dict:
    c = _prepare(data)
    with get_conn() as conn:
        with transaction(conn):
            new_id = contract_repo.insert(conn, c)
    log.set_entity("CONTRACT", new_id)
    log.set_after(c)
    return {"id": new_id, "commission_amount": c["commission_amount"]}


def update_contract(contract_id: int, data: dict, log: LogContext) -> None:
    c = _prepare(data)
    with get_conn() as conn:
        before = contract_repo.get(conn, contract_id)
        if not before:
            raise NotFoundError("contract not found")
        with transaction(conn):
            contract_repo.update(conn, contract_id, c)
    log.set_entity("CONTRACT", contract_id)
    log.set_before(dict(before)); log.set_after(c)


def delete_contract(contract_id: int, log: LogContext) -> None:
    with get_conn() as conn:
        before = contract_repo.get(conn, contract_id)
        if not before:
            raise NotFoundError("contract not found")
        with transaction(conn):
            contract_repo.delete(conn, contract_id)
    log.set_entity("CONTRACT", contract_id)
    log.set_before(dict(before))
