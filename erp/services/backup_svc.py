from __future__ import annotations

import logging
from datetime import datetime

from ..db import get_conn, transaction
from ..logs import LogContext

logger = logging.getLogger(__name__)

BACKUP_VERSION = "1.0"

# Parent tables first; restore inserts in this order and clears in reverse.
BUSINESS_TABLES = [
    "users",
    "config",
    "products",
    "sales_clients",
    "employees",
    "attendance",
    "leaves",
    "sales_db",
    "contracts",
    "commission_statements",
    "schedules",
    "memos",
    "happy_calls",
    "correction_requests",
    "notices",
    "account_change_requests",
    "operation_log",
]


def create_backup() -> dict:
    now = datetime.now()
    data = {
        "timestamp": now.isoformat(),
        "backup_date": now.strftime("%Y-%m-%d %H:%M:%S"),
        "version": BACKUP_VERSION,
        "tables": {},
        "summary": {},
    }
    with get_conn() as conn:
        for table in BUSINESS_TABLES:
            rows = [dict(r) for r in conn.execute(f"SELECT * FROM {table}").fetchall()]
            data["tables"][table] = rows
            data["summary"][table] = len(rows)
    return data


def backup_filename(now: datetime | None = None) -> str:
    now = now or datetime.now()
    return f"erp_backup_{now.strftime('%Y%m%d_%H%M%S')}.json"


def restore_backup(backup: dict, log: LogContext) -> dict:
    """
    Replace the business tables present in the backup, in one transaction.
    Tables and columns unknown to the current schema are skipped.

    Cascades are suspended while tables are cleared, so tables missing from
    the file keep their rows; references left dangling abort the restore.
    """
    if not isinstance(backup, dict):
        raise ValueError("invalid backup file: expected a JSON object")
    tables = backup.get("tables")
    if not isinstance(tables, dict):
        raise ValueError("invalid backup file: 'tables' missing")
    present = [t for t in BUSINESS_TABLES if t in tables]
    skipped = sorted(set(tables) - set(BUSINESS_TABLES))
    restored: dict[str, int] = {}
    with get_conn() as conn:
        # foreign_keys can only be switched outside a transaction
        conn.execute("PRAGMA foreign_keys = OFF")
        try:
            with transaction(conn):
                for table in reversed(present):
                    conn.execute(f"DELETE FROM {table}")
                for table in present:
                    restored[table] = _insert_rows(conn, table, tables[table] or [])
                broken = conn.execute("PRAGMA foreign_key_check").fetchall()
                if broken:
                    refs = sorted({f"{r[0]} -> {r[2]}" for r in broken})
                    raise ValueError(f"backup leaves dangling references: {', '.join(refs)}")
        finally:
            conn.execute("PRAGMA foreign_keys = ON")
    if skipped:
        logger.warning("restore skipped unknown tables: %s", ", ".join(skipped))
    log.set_after({"restored": restored, "skipped": skipped, "version": backup.get("version")})
    return {"restored_tables": restored, "skipped_tables": skipped, "backup_version": backup.get("version", "unknown")}


def _insert_rows(conn, table: str, rows: list) -> int:
    known = {c[1] for c in conn.execute(f"PRAGMA table_info({table})").fetchall()}
    for row in rows:
        if not isinstance(row, dict):
            raise ValueError(f"invalid backup file: rows of {table} must be objects")
        cols = [c for c in row if c in known]
        if not cols:
            continue
        conn.execute(
            f"INSERT INTO {table} ({','.join(cols)}) VALUES ({','.join(['?'] * len(cols))})",
            [row[c] for c in cols],
        )
    return len(rows)
