import json, time, uuid, datetime as dt
import logging
from typing import Optional
from .db import get_conn

KST = dt.timezone(dt.timedelta(hours=9))

logger = logging.getLogger(__name__)

_SECRET_KEYS = {"password", "password_hash"}

_INSERT = (
    "INSERT INTO operation_log "
    "(ts,user,action,entity_type,entity_id,request_id,before_json,after_json,payload_json,result,err_msg,latency_ms) "
    "VALUES(:ts,:user,:action,:entity_type,:entity_id,:request_id,:before_json,:after_json,:payload_json,:result,:err_msg,:latency_ms)"
)


def _mask_secrets(obj):
    # Passwords never reach the audit trail.
    if isinstance(obj, dict):
        return {k: ("***" if k in _SECRET_KEYS and v else _mask_secrets(v)) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_mask_secrets(v) for v in obj]
    return obj


def _dump(obj) -> Optional[str]:
    if obj is None:
        return None
    return json.dumps(_mask_secrets(obj), ensure_ascii=False, default=str)


class LogContext:
    """
    Audit record for one business operation (create/update/delete, imports,
    approvals, settings, backup/restore), written to operation_log.

    Routes create one per request, services fill in the entity and the
    before/after snapshots, and the route calls write("OK") or
    write("ERROR", msg) exactly once.
    """

    def __init__(self, action: str, user: str = "system"):
        self.action = action
        self.user = user
        self.request_id = str(uuid.uuid4())
        self.start = time.perf_counter()
        self.before = self.after = self.payload = None
        self.entity_type = self.entity_id = None

    def set_entity(self, etype: str, eid):
        self.entity_type = etype
        self.entity_id = str(eid)

    def set_before(self, obj): self.before = obj
    def set_after(self, obj): self.after = obj
    def set_payload(self, obj): self.payload = _mask_secrets(obj)

    def record(self, result: str, err: Optional[str]) -> dict:
        return {
            "ts": dt.datetime.now(KST).isoformat(),
            "user": self.user,
            "action": self.action,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "request_id": self.request_id,
            "before_json": _dump(self.before),
            "after_json": _dump(self.after),
            "payload_json": _dump(self.payload),
            "result": result,
            "err_msg": err,
            "latency_ms": int((time.perf_counter() - self.start) * 1000),
        }

    def write(self, result: str = "OK", err: Optional[str] = None):
        if result != "OK":
            logger.warning("%s failed: %s", self.action, err)
        with get_conn() as conn:
            conn.execute(_INSERT, self.record(result, err))


def search_logs(
    q: str | None = None,
    action: str | None = None,
    ts_from: str | None = None,
    ts_to: str | None = None,
    page: int = 1,
    size: int = 20,
    entity_type: str | None = None,
    entity_id: str | None = None,
    result: str | None = None,
) -> tuple[int, list[dict]]:
    """Page through operation_log, newest first. Returns (total, items)."""
    where, params = [], {}
    if q:
        where.append("(payload_json LIKE :q OR before_json LIKE :q OR after_json LIKE :q OR err_msg LIKE :q)")
        params["q"] = f"%{q}%"
    for col, value in (("action", action), ("entity_type", entity_type), ("entity_id", entity_id), ("result", result)):
        if value:
            where.append(f"{col} = :{col}")
            params[col] = value
    if ts_from:
        where.append("ts >= :ts_from")
        params["ts_from"] = ts_from
    if ts_to:
        where.append("ts <= :ts_to")
        params["ts_to"] = ts_to
    wh = " WHERE " + " AND ".join(where) if where else ""
    with get_conn() as conn:
        total = conn.execute(f"SELECT COUNT(1) AS cnt FROM operation_log{wh}", params).fetchone()["cnt"]
        rows = conn.execute(
            f"SELECT * FROM operation_log{wh} ORDER BY ts DESC, id DESC LIMIT :limit OFFSET :offset",
            {**params, "limit": size, "offset": (page - 1) * size},
        ).fetchall()
    return total, [dict(r) for r in rows]
