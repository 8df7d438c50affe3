import json

from erp.domain.geo import DEFAULT_COMPANY_LAT, DEFAULT_COMPANY_LNG


def test_settings_defaults(client):
    r = client.get("/api/settings/get")
    assert r.status_code == 200
    cfg = r.json()["data"]
    assert cfg["company_lat"] == DEFAULT_COMPANY_LAT
    assert cfg["company_lng"] == DEFAULT_COMPANY_LNG
    assert cfg["geofence_radius_m"] == 100.0
    assert cfg["geofence_enabled"] is True
    assert cfg["work_start_time"] == "09:00"
    assert cfg["withholding_income_tax_rate"] == 0.03


def test_settings_update_drives_attendance(client, make_user, geofence_off):
    r = client.post("/api/settings/update", json={"updates": {"work_start_time": "08:30", "late_grace_minutes": 5}})
    assert r.status_code == 200
    assert sorted(r.json()["updated"]) == ["late_grace_minutes", "work_start_time"]

    uid = make_user("kim")["id"]
    r = client.post("/api/attendance/clock-in", json={"employee_id": uid, "date": "2025-03-03", "check_in": "08:40"})
    assert r.json()["status"] == "late"
    r = client.post("/api/attendance/clock-in", json={"employee_id": uid, "date": "2025-03-04", "check_in": "08:35"})
    assert r.json()["status"] == "present"


def test_settings_validation(client):
    for updates in (
        {"favorite_color": "blue"},
        {"work_start_time": "nine"},
        {"geofence_radius_m": -5},
        {"geofence_radius_m": "wide"},
        {"company_lat": 95},
    ):
        r = client.post("/api/settings/update", json={"updates": updates})
        assert r.status_code == 400, updates
    assert client.get("/api/settings/get").json()["data"]["geofence_radius_m"] == 100.0


def test_backup_then_restore_round_trip(client):
    client.post("/api/products", json={"barcode": "KEEP", "product_name": "Kept"})
    client.post("/api/notices", json={"title": "Hello", "content": "world"})

    r = client.post("/api/backup")
    assert r.status_code == 200
    assert "attachment; filename=erp_backup_" in r.headers["content-disposition"]
    backup = r.json()
    assert backup["version"] == "1.0"
    assert backup["summary"]["products"] == 1
    assert [u["username"] for u in backup["tables"]["users"]] == ["admin"]

    # diverge from the snapshot
    pid = client.get("/api/products").json()["data"][0]["id"]
    client.delete(f"/api/products/{pid}")
    client.post("/api/products", json={"barcode": "NEW", "product_name": "After backup"})

    payload = json.dumps(backup).encode("utf-8")
    r = client.post("/api/restore", files={"file": ("snapshot.json", payload, "application/json")})
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["restored_tables"]["products"] == 1
    assert body["skipped_tables"] == []
    assert body["backup_version"] == "1.0"

    assert [p["barcode"] for p in client.get("/api/products").json()["data"]] == ["KEEP"]
    assert client.get("/api/notices").json()["data"][0]["title"] == "Hello"
    assert client.post("/api/auth/login", json={"username": "admin", "password": "admin123"}).status_code == 200


def test_restore_skips_unknown_tables_and_columns(client):
    backup = {
        "version": "0.9",
        "tables": {
            "products": [{"barcode": "OLD", "product_name": "Legacy", "legacy_column": "x"}],
            "legacy_stuff": [{"a": 1}],
        },
    }
    r = client.post("/api/restore", files={"file": ("old.json", json.dumps(backup).encode("utf-8"), "application/json")})
    assert r.status_code == 200, r.text
    assert r.json()["skipped_tables"] == ["legacy_stuff"]
    assert [p["barcode"] for p in client.get("/api/products").json()["data"]] == ["OLD"]
    # tables missing from the file are left alone
    assert client.post("/api/auth/login", json={"username": "admin", "password": "admin123"}).status_code == 200


def test_restore_rejects_bad_files(client):
    r = client.post("/api/restore", files={"file": ("dump.sql", b"DROP TABLE users;", "text/plain")})
    assert r.status_code == 400
    assert r.json()["success"] is False

    r = client.post("/api/restore", files={"file": ("broken.json", b"{not json", "application/json")})
    assert r.status_code == 400

    r = client.post("/api/restore", files={"file": ("empty.json", b"{}", "application/json")})
    assert r.status_code == 400

    r = client.post("/api/restore", files={"file": ("list.json", b"[]", "application/json")})
    assert r.status_code == 400
    assert "JSON object" in r.json()["message"]

    r = client.post("/api/restore", files={"file": ("rows.json", b'{"tables": {"products": [1, 2]}}', "application/json")})
    assert r.status_code == 400


def _restore(client, backup, name="partial.json"):
    return client.post("/api/restore", files={"file": (name, json.dumps(backup).encode("utf-8"), "application/json")})


def test_partial_restore_keeps_dependent_tables(client, make_user, geofence_off):
    kim = make_user("kim", name="Kim")
    client.post("/api/attendance/clock-in", json={"employee_id": kim["id"], "date": "2025-03-03", "check_in": "09:00"})
    users = client.post("/api/backup").json()["tables"]["users"]

    r = _restore(client, {"version": "1.0", "tables": {"users": users}})
    assert r.status_code == 200, r.text
    assert r.json()["restored_tables"] == {"users": 2}

    emps = client.get("/api/employees").json()["data"]
    assert kim["employee_id"] in [e["id"] for e in emps]
    assert len(client.get("/api/attendance").json()["data"]) == 1
    assert client.post("/api/auth/login", json={"username": "kim", "password": "pass1234"}).status_code == 200


def test_restore_rejects_dangling_references(client, make_user):
    make_user("kim")
    users = client.post("/api/backup").json()["tables"]["users"]
    admin_only = [u for u in users if u["username"] == "admin"]

    r = _restore(client, {"tables": {"users": admin_only}})
    assert r.status_code == 400
    assert "dangling references" in r.json()["message"]
    # rolled back
    assert client.post("/api/auth/login", json={"username": "kim", "password": "pass1234"}).status_code == 200
    assert len(client.get("/api/employees").json()["data"]) == 2
