from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel

from ..logs import LogContext
from ..services import contract_svc
from .utils import to_http_error

router = APIRouter()


class ContractBody(BaseModel):
    contract_type: str
    client_name: str
    client_company: str | None = None
    salesperson_id: int | None = None
    contract_amount: int = 0
    commission_rate: float = 0.0
    commission_amount: int | None = None
    contract_date: str | None = None
    payment_status: str = "pending"
    notes: str | None = None


@router.get("/api/contracts")
def api_contracts(type: str | None = None, salesperson_id: int | None = None):
    return {"success": True, "data": contract_svc.list_contracts(type, salesperson_id)}


@router.post("/api/contracts")
def api_contract_create(body: ContractBody):
    log = LogContext("CONTRACT_CREATE")
    log.set_payload(body.model_dump())
    try:
        res = contract_svc.create_contract(body.model_dump(), log)
        log.write("OK")
        return {"success": True, **res}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)


@router.put("/api/contracts/{contract_id}")
def api_contract_update(contract_id: int, body: ContractBody):
    log = LogContext("CONTRACT_UPDATE")
    log.set_payload(body.model_dump())
    try:
        contract_svc.update_contract(contract_id, body.model_dump(), log)
        log.write("OK")
        return {"success": True}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)


@router.delete("/api/contracts/{contract_id}")
def api_contract_delete(contract_id: int):
    log = LogContext("CONTRACT_DELETE")
    try:
        contract_svc.delete_contract(contract_id, log)
        log.write("OK")
        return {"success": True}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)
