from erp.db import get_conn


def test_health_and_version(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json().get("status") == "ok"

    v = client.get("/version")
    assert v.status_code == 200
    assert v.json().get("app") == "erp-api"


def test_default_admin_can_log_in(client):
    r = client.post("/api/auth/login", json={"username": "admin", "password": "admin123"})
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["user"]["role"] == "admin"
    assert "password" not in body["user"]

    # stored hashed, never in clear text
    with get_conn() as conn:
        stored = conn.execute("SELECT password FROM users WHERE username='admin'").fetchone()["password"]
    assert stored != "admin123"


def test_login_failure_is_401_envelope(client):
    r = client.post("/api/auth/login", json={"username": "admin", "password": "wrong"})
    assert r.status_code == 401
    assert r.json() == {"success": False, "message": "invalid username or password"}

    r = client.post("/api/auth/login", json={"username": "nobody", "password": "x"})
    assert r.status_code == 401


def test_malformed_body_is_422_envelope(client):
    r = client.post("/api/auth/login", json={"username": "admin"})
    assert r.status_code == 422
    body = r.json()
    assert body["success"] is False
    assert "password" in body["message"]


def test_unknown_route_uses_envelope(client):
    r = client.get("/api/does-not-exist")
    assert r.status_code == 404
    assert r.json()["success"] is False


def test_mutations_are_audited(client):
    r = client.post("/api/products", json={"barcode": "A-1", "product_name": "Widget"})
    assert r.status_code == 200

    logs = client.get("/api/logs/search", params={"action": "PRODUCT_CREATE"}).json()
    assert logs["total"] == 1
    item = logs["items"][0]
    assert item["result"] == "OK"
    assert item["entity_type"] == "PRODUCT"

    client.delete("/api/products/999999")
    failed = client.get("/api/logs/search", params={"action": "PRODUCT_DELETE"}).json()
    assert failed["items"][0]["result"] == "ERROR"
    assert "not found" in failed["items"][0]["err_msg"]

    errors = client.get("/api/logs/search", params={"result": "ERROR", "entity_type": "PRODUCT"}).json()
    assert errors["total"] == 0
    by_entity = client.get("/api/logs/search", params={"entity_type": "PRODUCT"}).json()
    assert [i["action"] for i in by_entity["items"]] == ["PRODUCT_CREATE"]


def test_passwords_are_masked_in_audit_log(client):
    client.post("/api/users", json={"username": "kim", "password": "s3cret!", "name": "Kim"})
    logs = client.get("/api/logs/search", params={"action": "USER_CREATE"}).json()
    assert "s3cret!" not in logs["items"][0]["payload_json"]
