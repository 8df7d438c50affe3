from erp.domain.geo import DEFAULT_COMPANY_LAT, DEFAULT_COMPANY_LNG

NEAR = {"latitude": DEFAULT_COMPANY_LAT + 0.0005, "longitude": DEFAULT_COMPANY_LNG}
FAR = {"latitude": DEFAULT_COMPANY_LAT + 0.002, "longitude": DEFAULT_COMPANY_LNG}


def test_geofence_check_reports_distance(client):
    r = client.get("/api/attendance/geofence-check", params=NEAR)
    assert r.status_code == 200
    d = r.json()["data"]
    assert d["within"] is True
    assert d["enabled"] is True
    assert d["radius_m"] == 100

    d = client.get("/api/attendance/geofence-check", params=FAR).json()["data"]
    assert d["within"] is False
    assert d["distance_m"] > 200

    assert client.get("/api/attendance/geofence-check", params={"latitude": 95, "longitude": 0}).status_code == 400


def test_clock_in_maps_user_id_to_employee(client, make_user):
    res = make_user("kim")
    r = client.post("/api/attendance/clock-in", json={
        "employee_id": res["id"], "date": "2025-03-03", "check_in": "08:55", **NEAR,
    })
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["status"] == "present"
    assert body["updated"] is False
    assert 50 < body["distance_m"] < 60

    rows = client.get("/api/attendance", params={"employee_id": res["employee_id"]}).json()["data"]
    assert len(rows) == 1
    assert rows[0]["check_in"] == "08:55"
    assert rows[0]["employee_name"] == "kim"
    assert rows[0]["check_in_coordinates"].startswith("37.567")


def test_seeded_admin_can_clock_in(client):
    admin = client.post("/api/auth/login", json={"username": "admin", "password": "admin123"}).json()["user"]
    r = client.post("/api/attendance/clock-in", json={
        "employee_id": admin["id"], "date": "2025-03-03", "check_in": "08:50", **NEAR,
    })
    assert r.status_code == 200, r.text

    rows = client.get("/api/attendance").json()["data"]
    assert len(rows) == 1
    assert rows[0]["employee_name"] == "관리자"
    assert rows[0]["employee_code"] == f"EMP{admin['id']:03d}"


def test_clock_in_outside_radius_is_rejected(client, make_user):
    res = make_user("kim")
    r = client.post("/api/attendance/clock-in", json={"employee_id": res["id"], **FAR})
    assert r.status_code == 400
    assert r.json()["message"].startswith("out_of_range")
    assert client.get("/api/attendance").json()["data"] == []


def test_clock_in_requires_location_when_enabled(client, make_user):
    res = make_user("kim")
    r = client.post("/api/attendance/clock-in", json={"employee_id": res["id"]})
    assert r.status_code == 400
    assert r.json()["message"].startswith("location_required")


def test_clock_in_without_location_when_disabled(client, make_user, geofence_off):
    res = make_user("kim")
    r = client.post("/api/attendance/clock-in", json={"employee_id": res["id"], "date": "2025-03-03", "check_in": "09:00"})
    assert r.status_code == 200
    assert r.json()["distance_m"] is None

    # far away is fine too, the distance is still recorded
    r = client.post("/api/attendance/clock-in", json={"employee_id": res["id"], "date": "2025-03-03", "check_in": "09:20", **FAR})
    assert r.status_code == 200
    body = r.json()
    assert body["updated"] is True
    assert body["status"] == "late"
    assert body["distance_m"] > 200


def test_unknown_employee_is_404(client, geofence_off):
    r = client.post("/api/attendance/clock-in", json={"employee_id": 999999})
    assert r.status_code == 404


def test_clock_out_classification(client, make_user, geofence_off):
    uid = make_user("kim")["id"]
    client.post("/api/attendance/clock-in", json={"employee_id": uid, "date": "2025-03-03", "check_in": "08:50"})
    r = client.post("/api/attendance/clock-out", json={"employee_id": uid, "date": "2025-03-03", "check_out": "17:00"})
    assert r.status_code == 200
    assert r.json()["status"] == "early_leave"
    assert r.json()["updated"] is True

    # no clock-in that day: a row is still created
    r = client.post("/api/attendance/clock-out", json={"employee_id": uid, "date": "2025-03-04", "check_out": "18:10"})
    assert r.status_code == 200
    assert r.json()["updated"] is False


def test_monthly_summary(client, make_user, geofence_off):
    uid = make_user("kim")["id"]
    for day, cin, cout in [("2025-03-03", "09:00", "18:00"), ("2025-03-04", "09:30", "18:30")]:
        client.post("/api/attendance/clock-in", json={"employee_id": uid, "date": day, "check_in": cin})
        client.post("/api/attendance/clock-out", json={"employee_id": uid, "date": day, "check_out": cout})
    # outside the month
    client.post("/api/attendance/clock-in", json={"employee_id": uid, "date": "2025-04-01", "check_in": "09:00"})

    r = client.get("/api/attendance/summary", params={"employee_id": uid, "year": "2025", "month": "3"})
    assert r.status_code == 200
    s = r.json()["data"]
    assert s["month"] == "03"
    assert s["counts"]["present"] == 1
    assert s["counts"]["late"] == 1
    assert s["work_days"] == 2
    assert s["total_worked_minutes"] == 1080
    assert s["on_time_rate"] == 50.0

    assert client.get("/api/attendance/summary", params={"employee_id": uid, "year": "2025", "month": "13"}).status_code == 400
