from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel

from ..logs import LogContext
from ..services import user_svc
from .utils import to_http_error

router = APIRouter()


class LoginBody(BaseModel):
    username: str
    password: str


class UserCreate(BaseModel):
    username: str
    password: str
    name: str
    role: str = "employee"
    employee_code: str | None = None
    department: str | None = None
    position: str | None = None
    phone: str | None = None
    email: str | None = None
    hire_date: str | None = None


class UserUpdate(BaseModel):
    username: str | None = None
    name: str | None = None
    role: str | None = None
    password: str | None = None


@router.post("/api/auth/login")
def api_login(body: LoginBody):
    log = LogContext("LOGIN", user=body.username)
    try:
        user = user_svc.login(body.username, body.password)
        log.set_entity("USER", user["id"])
        log.write("OK")
        return {"success": True, "user": user}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)


@router.get("/api/users")
def api_users():
    return {"success": True, "data": user_svc.list_users()}


@router.post("/api/users")
def api_user_create(body: UserCreate):
    log = LogContext("USER_CREATE")
    log.set_payload(body.model_dump())
    try:
        res = user_svc.create_user(body.model_dump(), log)
        log.write("OK")
        return {"success": True, **res}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)


@router.put("/api/users/{user_id}")
def api_user_update(user_id: int, body: UserUpdate):
    log = LogContext("USER_UPDATE")
    log.set_payload(body.model_dump())
    try:
        user_svc.update_user(user_id, body.model_dump(), log)
        log.write("OK")
        return {"success": True}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)


@router.delete("/api/users/{user_id}")
def api_user_delete(user_id: int):
    log = LogContext("USER_DELETE")
    try:
        user_svc.delete_user(user_id, log)
        log.write("OK")
        return {"success": True}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)
