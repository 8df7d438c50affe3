from __future__ import annotations

from fastapi import APIRouter, File, UploadFile
from fastapi.responses import Response
from pydantic import BaseModel

from ..logs import LogContext
from ..services import sales_db_svc
from .utils import to_http_error

router = APIRouter()


class SalesDbBody(BaseModel):
    proposal_date: str | None = None
    proposer: str | None = None
    salesperson_id: int | None = None
    meeting_status: str | None = None
    company_name: str | None = None
    representative: str | None = None
    address: str | None = None
    contact: str | None = None
    industry: str | None = None
    sales_amount: int | str | None = None
    existing_client: str | None = None
    contract_status: str | None = None
    termination_month: str | None = None
    actual_sales: int | str | None = None
    contract_date: str | None = None
    contract_client: str | None = None
    contract_month: str | None = None
    client_name: str | None = None
    feedback: str | None = None
    april_type1_date: str | None = None
    commission_rate: float | None = None
    sales_client_id: int | None = None


class SalespersonUpdateBody(BaseModel):
    salesperson_id: int
    contract_date: str | None = None
    meeting_status: str | None = None
    contract_client: str | None = None
    client_name: str | None = None
    feedback: str | None = None


class BulkBody(BaseModel):
    rows: list[SalesDbBody]


@router.get("/api/sales-db")
def api_sales_db_search(search: str | None = None):
    return {"success": True, "data": sales_db_svc.search(search)}


@router.get("/api/sales-db/all")
def api_sales_db_all():
    return {"success": True, "data": sales_db_svc.list_all()}


@router.get("/api/sales-db/my-data")
def api_sales_db_my_data(salesperson_id: int | None = None):
    try:
        return {"success": True, "data": sales_db_svc.my_data(salesperson_id)}
    except Exception as e:
        raise to_http_error(e)


@router.get("/api/sales-db/export-csv")
def api_sales_db_export():
    return Response(
        content=sales_db_svc.export_csv(),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": "attachment; filename=sales_db.csv"},
    )


@router.post("/api/sales-db")
def api_sales_db_create(body: SalesDbBody):
    log = LogContext("SALES_DB_CREATE")
    log.set_payload(body.model_dump())
    try:
        new_id = sales_db_svc.create(body.model_dump(), log)
        log.write("OK")
        return {"success": True, "id": new_id}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)


@router.put("/api/sales-db/{row_id}")
def api_sales_db_update(row_id: int, body: SalesDbBody):
    log = LogContext("SALES_DB_UPDATE")
    payload = body.model_dump(exclude_unset=True)
    log.set_payload(payload)
    try:
        sales_db_svc.update(row_id, payload, log)
        log.write("OK")
        return {"success": True}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)


@router.put("/api/sales-db/{row_id}/salesperson-update")
def api_sales_db_salesperson_update(row_id: int, body: SalespersonUpdateBody):
    log = LogContext("SALES_DB_SALESPERSON_UPDATE")
    log.set_payload(body.model_dump())
    try:
        sales_db_svc.update_by_salesperson(row_id, body.salesperson_id, body.model_dump(), log)
        log.write("OK")
        return {"success": True}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)


@router.delete("/api/sales-db/{row_id}")
def api_sales_db_delete(row_id: int):
    log = LogContext("SALES_DB_DELETE")
    try:
        sales_db_svc.delete(row_id, log)
        log.write("OK")
        return {"success": True}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)


@router.post("/api/sales-db/bulk")
def api_sales_db_bulk(body: BulkBody):
    log = LogContext("SALES_DB_BULK")
    log.set_payload({"rows": len(body.rows)})
    try:
        count = sales_db_svc.bulk_create([r.model_dump() for r in body.rows], log)
        log.write("OK")
        return {"success": True, "count": count}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)


@router.post("/api/sales-db/upload-csv")
async def api_sales_db_upload_csv(file: UploadFile = File(...)):
    log = LogContext("SALES_DB_UPLOAD_CSV")
    log.set_payload({"filename": file.filename})
    try:
        res = sales_db_svc.upload_csv(await file.read(), log)
        log.write("OK")
        return {"success": True, **res}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)
