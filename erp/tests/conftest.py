import os
import sys
import sqlite3
import pytest
from pathlib import Path

# Ensure project root on sys.path
_THIS_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _THIS_DIR.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

# Children before parents so foreign keys never block the wipe
_TABLES = [
    "operation_log",
    "account_change_requests",
    "notices",
    "correction_requests",
    "happy_calls",
    "memos",
    "schedules",
    "commission_statements",
    "contracts",
    "sales_db",
    "sales_clients",
    "leaves",
    "attendance",
    "employees",
    "products",
    "users",
    "config",
]


@pytest.fixture(scope="session")
def tmp_db_path(tmp_path_factory):
    path = tmp_path_factory.mktemp("db") / "erp_test.db"
    # Point the app to this temp DB
    os.environ["ERP_DB_PATH"] = str(path)
    from erp.db import ensure_schema
    ensure_schema(str(path))
    return str(path)


@pytest.fixture()
def client(tmp_db_path):
    # Same bootstrap as the startup hook
    from erp.services.config_svc import ensure_default_config
    from erp.services.user_svc import seed_admin
    ensure_default_config()
    seed_admin()
    from erp.api import app
    from fastapi.testclient import TestClient
    return TestClient(app)


@pytest.fixture(autouse=True)
def _clean_db(tmp_db_path):
    # Safety: ensure we only ever wipe the temp DB, never a real one
    assert os.environ.get("ERP_DB_PATH") == tmp_db_path, "Refusing to clean non-temp DB"
    conn = sqlite3.connect(tmp_db_path)
    try:
        for t in _TABLES:
            conn.execute(f"DELETE FROM {t}")
        conn.commit()
    finally:
        conn.close()
    yield


@pytest.fixture()
def make_user(client):
    """Create a user (with companion employee) through the API and return the response body."""
    def _make(username, name=None, role="employee", password="pass1234", **extra):
        body = {"username": username, "password": password, "name": name or username, "role": role, **extra}
        r = client.post("/api/users", json=body)
        assert r.status_code == 200, r.text
        return r.json()
    return _make


@pytest.fixture()
def geofence_off(client):
    r = client.post("/api/settings/update", json={"updates": {"geofence_enabled": False}})
    assert r.status_code == 200, r.text
