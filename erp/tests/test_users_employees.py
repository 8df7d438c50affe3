from erp.db import get_conn


def test_create_user_creates_companion_employee(client, make_user):
    res = make_user("kim", name="Kim")
    uid = res["id"]

    emps = client.get("/api/employees").json()["data"]
    emp = next(e for e in emps if e["user_id"] == uid)
    assert emp["id"] == res["employee_id"]
    assert emp["employee_code"] == f"EMP{uid:03d}"
    assert emp["department"] == "부서 미정"
    assert emp["position"] == "직급 미정"
    assert emp["annual_leave_days"] == 15

    r = client.post("/api/auth/login", json={"username": "kim", "password": "pass1234"})
    assert r.status_code == 200
    assert r.json()["user"]["name"] == "Kim"


def test_duplicate_username_and_bad_role_rejected(client, make_user):
    make_user("kim")
    r = client.post("/api/users", json={"username": "kim", "password": "x", "name": "Other"})
    assert r.status_code == 400
    assert "already exists" in r.json()["message"]

    r = client.post("/api/users", json={"username": "lee", "password": "x", "name": "Lee", "role": "boss"})
    assert r.status_code == 400


def test_update_and_delete_user(client, make_user):
    uid = make_user("kim")["id"]
    r = client.put(f"/api/users/{uid}", json={"name": "Kim Updated", "password": "newpass"})
    assert r.status_code == 200

    users = {u["username"]: u for u in client.get("/api/users").json()["data"]}
    assert users["kim"]["name"] == "Kim Updated"
    assert client.post("/api/auth/login", json={"username": "kim", "password": "newpass"}).status_code == 200

    assert client.delete(f"/api/users/{uid}").status_code == 200
    assert client.delete(f"/api/users/{uid}").status_code == 404
    # employee row goes with the user
    with get_conn() as conn:
        assert conn.execute("SELECT COUNT(*) FROM employees WHERE user_id=?", (uid,)).fetchone()[0] == 0


def test_salesperson_crud(client):
    r = client.post("/api/salespersons", json={"username": "sp1", "password": "pw", "name": "Park", "phone": "010-1111-2222"})
    assert r.status_code == 200
    sid = r.json()["id"]

    data = client.get("/api/salespersons").json()["data"]
    assert [s["name"] for s in data] == ["Park"]
    assert data[0]["phone"] == "010-1111-2222"

    r = client.put(f"/api/salespersons/{sid}", json={"email": "park@example.com"})
    assert r.status_code == 200
    sp = client.get("/api/salespersons").json()["data"][0]
    assert sp["email"] == "park@example.com"
    assert sp["phone"] == "010-1111-2222"

    assert client.delete(f"/api/salespersons/{sid}").status_code == 200
    assert client.get("/api/salespersons").json()["data"] == []


def test_salesperson_endpoints_ignore_other_roles(client, make_user):
    uid = make_user("emp1")["id"]
    assert client.put(f"/api/salespersons/{uid}", json={"name": "x"}).status_code == 404
    assert client.delete(f"/api/salespersons/{uid}").status_code == 404


def test_employee_create_update_and_stats(client):
    r = client.post("/api/employees", json={
        "username": "choi", "password": "pw", "name": "Choi",
        "employee_code": "E-100", "department": "Sales", "hire_date": "2024.03.02", "status": "재직",
    })
    assert r.status_code == 200, r.text
    eid = r.json()["id"]

    emp = client.get("/api/employees", params={"search": "E-100"}).json()["data"][0]
    assert emp["hire_date"] == "2024-03-02"
    assert emp["status"] == "active"

    r = client.put(f"/api/employees/{eid}", json={"department": "HR", "status": "inactive"})
    assert r.status_code == 200
    emp = client.get("/api/employees", params={"department": "HR"}).json()["data"][0]
    assert emp["name"] == "Choi"
    assert emp["status"] == "inactive"

    stats = client.get("/api/employees/stats").json()["stats"]
    # the seeded admin counts as an active employee
    assert stats == {"total": 2, "active": 1, "departments": 2}

    assert client.put("/api/employees/999999", json={"department": "x"}).status_code == 404


def test_employee_invalid_status_rejected(client):
    r = client.post("/api/employees", json={"username": "u", "password": "p", "name": "N", "status": "retired"})
    assert r.status_code == 400


def test_employee_delete_removes_login(client):
    eid = client.post("/api/employees", json={"username": "gone", "password": "p", "name": "Gone"}).json()["id"]
    assert client.delete(f"/api/employees/{eid}").status_code == 200
    assert client.post("/api/auth/login", json={"username": "gone", "password": "p"}).status_code == 401


def test_employee_csv_import_collects_row_errors(client, make_user):
    make_user("taken")
    csv_text = (
        "이름,사번,부서,직급,입사일,상태,아이디,비밀번호,총연차\n"
        "Han,E-1,Sales,Staff,2024-01-02,재직,han,pw1,12\n"
        "Dup,E-2,Sales,Staff,2024-01-02,재직,taken,pw2,15\n"
        "Bad,E-3,Sales,Staff,not-a-date,재직,bad,pw3,15\n"
        "Yoon,E-4,Ops,Lead,,퇴사,yoon,pw4,\n"
    )
    r = client.post(
        "/api/employees/import-csv",
        files={"file": ("employees.csv", csv_text.encode("utf-8-sig"), "text/csv")},
    )
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["total"] == 4
    assert body["successCount"] == 2
    assert [e["row"] for e in body["errors"]] == [3, 4]

    codes = {e["employee_code"]: e for e in client.get("/api/employees").json()["data"]}
    assert codes["E-1"]["annual_leave_days"] == 12
    assert codes["E-4"]["status"] == "inactive"
    assert codes["E-4"]["annual_leave_days"] == 15
    assert "E-2" not in codes


def test_employee_csv_missing_columns(client):
    r = client.post(
        "/api/employees/import-csv",
        files={"file": ("e.csv", "이름,부서\nKim,Sales\n".encode("utf-8"), "text/csv")},
    )
    assert r.status_code == 400
    assert "missing CSV columns" in r.json()["message"]


def test_employee_export_csv(client, make_user):
    make_user("kim", name="Kim")
    r = client.get("/api/employees/export-csv")
    assert r.status_code == 200
    assert r.content.startswith(b"\xef\xbb\xbf")
    text = r.content.decode("utf-8-sig")
    header = text.splitlines()[0].split(",")
    assert header[0] == "이름"
    assert "남은연차" in header
    assert "비밀번호" not in header
    assert "Kim" in text
