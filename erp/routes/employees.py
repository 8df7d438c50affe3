from __future__ import annotations

from fastapi import APIRouter, File, UploadFile
from fastapi.responses import Response
from pydantic import BaseModel

from ..logs import LogContext
from ..services import employee_svc
from .utils import to_http_error

router = APIRouter()


class EmployeeCreate(BaseModel):
    username: str
    password: str
    name: str
    role: str = "employee"
    employee_code: str | None = None
    department: str | None = None
    position: str | None = None
    hire_date: str | None = None
    phone: str | None = None
    email: str | None = None
    status: str = "active"
    annual_leave_days: float | None = None


class EmployeeUpdate(BaseModel):
    username: str | None = None
    password: str | None = None
    name: str | None = None
    role: str | None = None
    employee_code: str | None = None
    department: str | None = None
    position: str | None = None
    hire_date: str | None = None
    phone: str | None = None
    email: str | None = None
    status: str | None = None
    annual_leave_days: float | None = None


@router.get("/api/employees")
def api_employees(search: str | None = None, department: str | None = None, status: str | None = None):
    return {"success": True, "data": employee_svc.list_employees(search, department, status)}


@router.get("/api/employees/stats")
def api_employee_stats():
    return {"success": True, "stats": employee_svc.employee_stats()}


@router.get("/api/employees/export-csv")
def api_employees_export():
    return Response(
        content=employee_svc.export_csv(),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": "attachment; filename=employees.csv"},
    )


@router.post("/api/employees")
def api_employee_create(body: EmployeeCreate):
    log = LogContext("EMPLOYEE_CREATE")
    log.set_payload(body.model_dump())
    try:
        res = employee_svc.create_employee(body.model_dump(), log)
        log.write("OK")
        return {"success": True, **res}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)


@router.put("/api/employees/{employee_id}")
def api_employee_update(employee_id: int, body: EmployeeUpdate):
    log = LogContext("EMPLOYEE_UPDATE")
    log.set_payload(body.model_dump(exclude_unset=True))
    try:
        employee_svc.update_employee(employee_id, body.model_dump(exclude_unset=True), log)
        log.write("OK")
        return {"success": True}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)


@router.delete("/api/employees/{employee_id}")
def api_employee_delete(employee_id: int):
    log = LogContext("EMPLOYEE_DELETE")
    try:
        employee_svc.delete_employee(employee_id, log)
        log.write("OK")
        return {"success": True}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)


@router.post("/api/employees/import-csv")
async def api_employees_import_csv(file: UploadFile = File(...)):
    log = LogContext("EMPLOYEE_IMPORT_CSV")
    log.set_payload({"filename": file.filename})
    try:
        res = employee_svc.import_csv(await file.read(), log)
        log.write("OK")
        return {"success": True, **res}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)
