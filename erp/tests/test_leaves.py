def _admin_id(client):
    return client.post("/api/auth/login", json={"username": "admin", "password": "admin123"}).json()["user"]["id"]


def test_create_leave_computes_days(client, make_user):
    uid = make_user("kim")["id"]
    r = client.post("/api/leaves", json={
        "employee_id": uid, "leave_type": "연차", "start_date": "2025-03-03", "end_date": "2025-03-05", "reason": "trip",
    })
    assert r.status_code == 200, r.text
    assert r.json()["days"] == 3.0

    r = client.post("/api/leaves", json={
        "employee_id": uid, "leave_type": "반차", "start_date": "2025-03-10", "end_date": "2025-03-10",
    })
    assert r.json()["days"] == 0.5

    pending = client.get("/api/leaves/all", params={"status": "pending"}).json()["data"]
    assert len(pending) == 2
    assert pending[0]["employee_name"] == "kim"
    # approved-only listing is still empty
    assert client.get("/api/leaves").json()["data"] == []


def test_leave_validation(client, make_user):
    uid = make_user("kim")["id"]
    r = client.post("/api/leaves", json={
        "employee_id": uid, "leave_type": "연차", "start_date": "2025-03-05", "end_date": "2025-03-03",
    })
    assert r.status_code == 400

    r = client.post("/api/leaves", json={
        "employee_id": 999999, "leave_type": "연차", "start_date": "2025-03-03", "end_date": "2025-03-03",
    })
    assert r.status_code == 404

    assert client.get("/api/leaves/all", params={"status": "maybe"}).status_code == 400


def test_decide_and_stats(client, make_user):
    res = make_user("kim")
    uid, eid = res["id"], res["employee_id"]
    a = client.post("/api/leaves", json={"employee_id": uid, "leave_type": "연차", "start_date": "2025-03-03", "end_date": "2025-03-04"}).json()["id"]
    b = client.post("/api/leaves", json={"employee_id": uid, "leave_type": "연차", "start_date": "2025-04-01", "end_date": "2025-04-01"}).json()["id"]
    client.post("/api/leaves", json={"employee_id": uid, "leave_type": "병가", "start_date": "2025-05-01", "end_date": "2025-05-01"})

    admin = _admin_id(client)
    assert client.put(f"/api/leaves/{a}", json={"status": "approved", "decided_by": admin}).status_code == 200
    assert client.put(f"/api/leaves/{b}", json={"status": "rejected", "decided_by": admin}).status_code == 200
    assert client.put(f"/api/leaves/{b}", json={"status": "cancelled"}).status_code == 400
    assert client.put("/api/leaves/999999", json={"status": "approved"}).status_code == 404

    approved = client.get("/api/leaves").json()["data"]
    assert [l["id"] for l in approved] == [a]
    assert approved[0]["decided_by"] == admin

    stats = client.get("/api/leaves/stats", params={"employee_id": eid}).json()["stats"]
    assert stats["total"] == 3
    assert stats["pending"] == 1
    assert stats["approved"] == 1
    assert stats["rejected"] == 1
    assert stats["used_days"] == 2.0
    assert stats["entitled_days"] == 15.0
    assert stats["remaining_days"] == 13.0

    overall = client.get("/api/leaves/stats").json()["stats"]
    assert "remaining_days" not in overall


def test_delete_leave(client, make_user):
    uid = make_user("kim")["id"]
    lid = client.post("/api/leaves", json={"employee_id": uid, "leave_type": "연차", "start_date": "2025-03-03", "end_date": "2025-03-03"}).json()["id"]
    assert client.delete(f"/api/leaves/{lid}").status_code == 200
    assert client.delete(f"/api/leaves/{lid}").status_code == 404
