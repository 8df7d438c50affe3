from __future__ import annotations

from fastapi import APIRouter, File, UploadFile
from fastapi.responses import Response
from pydantic import BaseModel

from ..logs import LogContext
from ..services import product_svc
from .utils import to_http_error

router = APIRouter()


class ProductBody(BaseModel):
    barcode: str
    product_name: str
    quantity: int = 0
    consumer_price: int = 0
    purchase_price: int = 0
    month: str | None = None


class ProductImportItem(BaseModel):
    barcode: str
    product_name: str
    quantity: int | str | None = 0
    consumer_price: int | str | None = 0
    purchase_price: int | str | None = 0
    month: str | None = None


@router.get("/api/products")
def api_products(search: str | None = None, month: str | None = None):
    return {"success": True, "data": product_svc.list_products(search, month)}


@router.get("/api/products/summary")
def api_products_summary():
    return {"success": True, "data": product_svc.summary()}


@router.get("/api/products/export-csv")
def api_products_export():
    return Response(
        content=product_svc.export_csv(),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": "attachment; filename=products.csv"},
    )


@router.post("/api/products")
def api_product_create(body: ProductBody):
    log = LogContext("PRODUCT_CREATE")
    log.set_payload(body.model_dump())
    try:
        new_id = product_svc.create_product(body.model_dump(), log)
        log.write("OK")
        return {"success": True, "id": new_id}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)


@router.put("/api/products/{product_id}")
def api_product_update(product_id: int, body: ProductBody):
    log = LogContext("PRODUCT_UPDATE")
    log.set_payload(body.model_dump())
    try:
        product_svc.update_product(product_id, body.model_dump(), log)
        log.write("OK")
        return {"success": True}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)


@router.delete("/api/products/{product_id}")
def api_product_delete(product_id: int):
    log = LogContext("PRODUCT_DELETE")
    try:
        product_svc.delete_product(product_id, log)
        log.write("OK")
        return {"success": True}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)


@router.post("/api/products/import")
def api_products_import(items: list[ProductImportItem]):
    log = LogContext("PRODUCT_IMPORT")
    log.set_payload({"items": len(items)})
    try:
        count = product_svc.import_products([it.model_dump() for it in items], log)
        log.write("OK")
        return {"success": True, "count": count}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)


@router.post("/api/products/import-csv")
async def api_products_import_csv(file: UploadFile = File(...)):
    log = LogContext("PRODUCT_IMPORT_CSV")
    log.set_payload({"filename": file.filename})
    try:
        content = await file.read()
        count = product_svc.import_csv(content, log)
        log.write("OK")
        return {"success": True, "count": count}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)
