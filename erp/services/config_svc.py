# erp/services/config_svc.py
from ..db import get_conn
from ..domain.geo import DEFAULT_COMPANY_LAT, DEFAULT_COMPANY_LNG, DEFAULT_RADIUS_M, validate_point
from ..domain.hr_rules import parse_clock
from ..logs import LogContext

DEFAULTS = {
    # 출퇴근 지오펜스 기준점 (기본값: 서울시청)
    "company_lat": str(DEFAULT_COMPANY_LAT),
    "company_lng": str(DEFAULT_COMPANY_LNG),
    "geofence_radius_m": str(int(DEFAULT_RADIUS_M)),
    "geofence_enabled": "1",
    "work_start_time": "09:00",
    "work_end_time": "18:00",
    "late_grace_minutes": "0",
    # 사업소득 원천징수 3% + 지방소득세 10%
    "withholding_income_tax_rate": "0.03",
    "local_income_tax_ratio": "0.1",
    "default_commission_rate": "500",
}

_TRUE = {"1", "true", "yes", "on", "y"}


def _as_bool(v) -> bool:
    return str(v).strip().lower() in _TRUE


def ensure_default_config():
    """Seed missing keys without overwriting existing values."""
    with get_conn() as conn:
        for k, v in DEFAULTS.items():
            conn.execute(
                "INSERT INTO config(key, value) VALUES (?, ?) "
                "ON CONFLICT(key) DO NOTHING",
                (k, v),
            )
        conn.commit()


def get_config() -> dict:
    with get_conn() as conn:
        rows = conn.execute("SELECT key, value FROM config").fetchall()
    cfg = {r["key"]: r["value"] for r in rows}

    def raw(k):
        return cfg.get(k, DEFAULTS[k])

    return {
        "company_lat": float(raw("company_lat")),
        "company_lng": float(raw("company_lng")),
        "geofence_radius_m": float(raw("geofence_radius_m")),
        "geofence_enabled": _as_bool(raw("geofence_enabled")),
        "work_start_time": raw("work_start_time"),
        "work_end_time": raw("work_end_time"),
        "late_grace_minutes": int(float(raw("late_grace_minutes"))),
        "withholding_income_tax_rate": float(raw("withholding_income_tax_rate")),
        "local_income_tax_ratio": float(raw("local_income_tax_ratio")),
        "default_commission_rate": float(raw("default_commission_rate")),
    }


def _validate(upd: dict) -> dict:
    unknown = sorted(set(upd) - set(DEFAULTS))
    if unknown:
        raise ValueError(f"unknown setting(s): {', '.join(unknown)}")
    out = {}
    for k, v in upd.items():
        if k in ("work_start_time", "work_end_time"):
            parse_clock(str(v))
            out[k] = str(v).strip()
        elif k == "geofence_enabled":
            out[k] = "1" if (v is True or _as_bool(v)) else "0"
        else:
            try:
                num = float(v)
            except (TypeError, ValueError):
                raise ValueError(f"{k} must be a number")
            if num < 0:
                raise ValueError(f"{k} must not be negative")
            out[k] = str(v)
    lat = float(out.get("company_lat", DEFAULTS["company_lat"]))
    lng = float(out.get("company_lng", DEFAULTS["company_lng"]))
    validate_point(lat, lng)
    return out


def update_config(upd: dict, log: LogContext) -> list[str]:
    values = _validate(upd)
    updated = []
    with get_conn() as conn:
        before = {r["key"]: r["value"] for r in conn.execute("SELECT key,value FROM config")}
        for k, v in values.items():
            conn.execute(
                "INSERT INTO config(key,value) VALUES(?,?) "
                "ON CONFLICT(key) DO UPDATE SET value=excluded.value",
                (k, v)
            )
            updated.append(k)
        conn.commit()
        after = {r["key"]: r["value"] for r in conn.execute("SELECT key,value FROM config")}
    log.set_before(before); log.set_after(after)
    return updated
