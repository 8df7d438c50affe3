from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel

from ..logs import LogContext
from ..services.config_svc import get_config, update_config
from .utils import to_http_error

router = APIRouter()


@router.get("/api/settings/get")
def api_settings_get():
    return {"success": True, "data": get_config()}


class SettingsUpdateBody(BaseModel):
    updates: dict


@router.post("/api/settings/update")
def api_settings_update(body: SettingsUpdateBody):
    log = LogContext("SETTINGS_UPDATE")
    log.set_payload(body.model_dump())
    try:
        updated_keys = update_config(body.updates, log)
        log.write("OK")
        return {"success": True, "updated": updated_keys}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)
