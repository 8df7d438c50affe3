from __future__ import annotations

# erp/db.py
import sqlite3
from contextlib import contextmanager
from typing import Iterator
import os
import yaml

# DB path resolution order:
# 1) env ERP_DB_PATH (highest priority)
# 2) config.yaml test_db_path (when running under tests)
# 3) config.yaml db_path
# 4) fallback: <project root>/erp.db
_PROJECT_ROOT = os.path.dirname(os.path.dirname(__file__))
_ROOT_DB = os.path.join(_PROJECT_ROOT, "erp.db")
_SCHEMA_PATH = os.path.join(_PROJECT_ROOT, "schema.sql")

# Columns added after the first release; checked via PRAGMA table_info.
_ADDED_COLUMNS = {
    "sales_db": [
        ("commission_rate", "REAL DEFAULT 500"),
        ("contract_date", "DATE"),
        ("sales_client_id", "INTEGER"),
    ],
    "attendance": [
        ("check_in_location", "TEXT"),
        ("check_out_location", "TEXT"),
        ("check_in_coordinates", "TEXT"),
        ("check_out_coordinates", "TEXT"),
        ("check_in_distance_m", "REAL"),
        ("check_out_distance_m", "REAL"),
    ],
    "happy_calls": [
        ("sales_db_id", "INTEGER"),
    ],
}


def read_config_yaml() -> dict:
    cfg_path = os.path.join(_PROJECT_ROOT, "config.yaml")
    if not os.path.exists(cfg_path):
        return {}
    try:
        with open(cfg_path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError):
        return {}


def get_db_path(_: str | None = None) -> str:
    env_path = os.environ.get("ERP_DB_PATH")
    cfg = read_config_yaml()
    cfg_db = cfg.get("db_path")
    cfg_test = cfg.get("test_db_path")
    is_test = (os.environ.get("APP_ENV") == "test") or (os.environ.get("PYTEST_CURRENT_TEST") is not None)

    if env_path:
        path = env_path
    elif is_test and isinstance(cfg_test, str) and cfg_test.strip():
        path = cfg_test.strip()
    elif isinstance(cfg_db, str) and cfg_db.strip():
        path = cfg_db.strip()
    else:
        path = _ROOT_DB

    dirn = os.path.dirname(path) or "."
    os.makedirs(dirn, exist_ok=True)
    return path


@contextmanager
def get_conn(db_path: str | None = None) -> Iterator[sqlite3.Connection]:
    """
    Open a SQLite connection. An explicit db_path wins over get_db_path().
    Foreign keys are on and rows come back as sqlite3.Row.
    """
    path = db_path or get_db_path()
    conn = sqlite3.connect(
        path,
        detect_types=sqlite3.PARSE_COLNAMES,
        check_same_thread=False,
        isolation_level=None,
    )
    try:
        conn.execute("PRAGMA foreign_keys = ON;")
        conn.row_factory = sqlite3.Row
        yield conn
    finally:
        conn.close()


@contextmanager
def transaction(conn: sqlite3.Connection) -> Iterator[sqlite3.Connection]:
    """BEGIN/COMMIT around a block; ROLLBACK and re-raise on error."""
    conn.execute("BEGIN")
    try:
        yield conn
        conn.execute("COMMIT")
    except BaseException:
        conn.execute("ROLLBACK")
        raise


def _migrate_columns(conn: sqlite3.Connection) -> list[str]:
    added = []
    for table, cols in _ADDED_COLUMNS.items():
        names = {c[1] for c in conn.execute(f"PRAGMA table_info({table})").fetchall()}
        for name, decl in cols:
            if name not in names:
                conn.execute(f"ALTER TABLE {table} ADD COLUMN {name} {decl}")
                added.append(f"{table}.{name}")
    return added


def ensure_schema(db_path: str | None = None) -> list[str]:
    """Apply schema.sql (idempotent) and add any missing columns. Returns added columns."""
    with open(_SCHEMA_PATH, "r", encoding="utf-8") as f:
        ddl = f.read()
    with get_conn(db_path) as conn:
        conn.executescript(ddl)
        added = _migrate_columns(conn)
        conn.commit()
    return added
