"""
FastAPI app entry point aggregating per-domain routers under erp/routes.
Keep as `uvicorn erp.api:app`.
"""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .db import ensure_schema, read_config_yaml
from .services.config_svc import ensure_default_config
from .services.user_svc import seed_admin

_cfg = read_config_yaml()

logging.basicConfig(
    level=str(_cfg.get("log_level", "INFO")).upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="erp-api", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cfg.get("cors_origins") or [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def on_startup():
    added = ensure_schema()
    if added:
        logger.info("schema migrated, added columns: %s", ", ".join(added))
    ensure_default_config()
    seed_admin()


# Every failure is rendered as {"success": false, "message": ...}
@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"success": False, "message": str(exc.detail)})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    where = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = f"{where}: {first.get('msg')}" if where else str(first.get("msg", "invalid request"))
    return JSONResponse(status_code=422, content={"success": False, "message": message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"success": False, "message": str(exc)})


# Include routers (split by business domain)
from .routes import base as base_routes
from .routes import users as users_routes
from .routes import salespersons as salespersons_routes
from .routes import products as products_routes
from .routes import employees as employees_routes
from .routes import attendance as attendance_routes
from .routes import leaves as leaves_routes
from .routes import sales_db as sales_db_routes
from .routes import contracts as contracts_routes
from .routes import commissions as commissions_routes
from .routes import performance as performance_routes
from .routes import happy_calls as happy_calls_routes
from .routes import corrections as corrections_routes
from .routes import sales_clients as sales_clients_routes
from .routes import notices as notices_routes
from .routes import account_requests as account_requests_routes
from .routes import schedules as schedules_routes
from .routes import settings as settings_routes
from .routes import logs as logs_routes
from .routes import maintenance as maintenance_routes

app.include_router(base_routes.router)
app.include_router(users_routes.router)
app.include_router(salespersons_routes.router)
app.include_router(products_routes.router)
app.include_router(employees_routes.router)
app.include_router(attendance_routes.router)
app.include_router(leaves_routes.router)
app.include_router(sales_db_routes.router)
app.include_router(contracts_routes.router)
app.include_router(commissions_routes.router)
app.include_router(performance_routes.router)
app.include_router(happy_calls_routes.router)
app.include_router(corrections_routes.router)
app.include_router(sales_clients_routes.router)
app.include_router(notices_routes.router)
app.include_router(account_requests_routes.router)
app.include_router(schedules_routes.router)
app.include_router(settings_routes.router)
app.include_router(logs_routes.router)
app.include_router(maintenance_routes.router)
