from __future__ import annotations

import json

from fastapi import APIRouter, File, HTTPException, UploadFile
from fastapi.responses import Response

from ..logs import LogContext
from ..services.backup_svc import backup_filename, create_backup, restore_backup
from .utils import to_http_error

router = APIRouter()


@router.post("/api/backup")
def api_backup():
    log = LogContext("BACKUP")
    try:
        data = create_backup()
        log.set_after(data["summary"])
        log.write("OK")
        return Response(
            content=json.dumps(data, ensure_ascii=False, indent=2, default=str),
            media_type="application/json",
            headers={"Content-Disposition": f"attachment; filename={backup_filename()}"},
        )
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)


@router.post("/api/restore")
async def api_restore(file: UploadFile = File(...)):
    log = LogContext("RESTORE")
    log.set_payload({"filename": file.filename})
    try:
        if not (file.filename or "").endswith(".json"):
            raise HTTPException(status_code=400, detail="only .json backup files are supported")
        try:
            backup = json.loads((await file.read()).decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ValueError(f"invalid backup file: {e}")
        res = restore_backup(backup, log)
        log.write("OK")
        return {"success": True, **res}
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http_error(e)
