from datetime import datetime, timezone


def _seed(client):
    kim = client.post("/api/salespersons", json={"username": "sp1", "password": "pw", "name": "Kim"}).json()["id"]
    rows = [
        dict(proposer="Lee", meeting_status="미팅완료", contract_status="계약완료", actual_sales=1000,
             proposal_date="2025-03-03", contract_client="ClientX"),
        dict(proposer="Lee", meeting_status="미팅완료", contract_status="미계약", proposal_date="2025-03-04"),
        dict(proposer="Park", proposal_date="2025-03-05"),
        dict(proposer="Park", contract_status="계약완료", actual_sales=5000, proposal_date="2025-04-01"),
    ]
    for i, r in enumerate(rows):
        resp = client.post("/api/sales-db", json={"company_name": f"Co{i}", "salesperson_id": kim, **r})
        assert resp.status_code == 200, resp.text
    return kim


def test_monthly_performance_filters(client):
    _seed(client)
    body = client.get("/api/monthly-performance", params={"year": "2025", "month": "03"}).json()
    assert len(body["data"]) == 3
    s = body["stats"]
    assert s["total"] == 3
    assert s["contracted"] == 1
    assert s["notContracted"] == 1
    assert s["meetingCompleted"] == 2
    assert s["totalAmount"] == 1000

    done = client.get("/api/monthly-performance", params={"contract_status": "계약완료"}).json()
    assert sorted(d["company_name"] for d in done["data"]) == ["Co0", "Co3"]

    by_client = client.get("/api/monthly-performance", params={"year": "전체", "client": "ClientX"}).json()
    assert [d["company_name"] for d in by_client["data"]] == ["Co0"]
    assert by_client["data"][0]["salesperson_name"] == "Kim"


def test_monthly_performance_counts_corrections_for_the_month(client):
    client.post("/api/correction-requests", json={"company_name": "Fix Co", "refund_amount": "120,000"})
    now = datetime.now(timezone.utc)
    stats = client.get("/api/monthly-performance", params={"year": str(now.year), "month": str(now.month)}).json()["stats"]
    assert stats["correctionCount"] == 1
    assert stats["correctionRefund"] == 120000

    # no month selected: correction figures stay zero
    stats = client.get("/api/monthly-performance").json()["stats"]
    assert stats["correctionCount"] == 0


def test_monthly_performance_rejects_bad_month(client):
    r = client.get("/api/monthly-performance", params={"year": "2025", "month": "13"})
    assert r.status_code == 400


def test_salesperson_performance_month_mode(client):
    kim = _seed(client)
    body = client.get("/api/salesperson-performance", params={"year": "2025", "month": "3", "mode": "month"}).json()
    rows = {r["salesperson"]: r for r in body["data"]}
    # admin is listed even without any rows
    assert set(rows) == {"Kim", "관리자"}
    assert rows["관리자"]["total_db"] == 0
    assert rows["관리자"]["success_rate"] == 0.0
    assert rows["관리자"]["employee_code"].startswith("EMP")

    k = rows["Kim"]
    assert k["salesperson_id"] == kim
    assert k["total_db"] == 3
    assert k["meeting_completed"] == 2
    assert k["contract_completed"] == 1
    assert k["total_amount"] == 1000
    assert k["success_rate"] == 33.3
    assert body["stats"]["total_db"] == 3
    assert body["stats"]["success_rate"] == 33.3


def test_salesperson_performance_ignores_month_outside_month_mode(client):
    _seed(client)
    body = client.get("/api/salesperson-performance", params={"year": "2025", "month": "3", "mode": "all"}).json()
    k = next(r for r in body["data"] if r["salesperson"] == "Kim")
    assert k["total_db"] == 4
    assert k["contract_completed"] == 2
    assert k["total_amount"] == 6000
    assert k["success_rate"] == 50.0


def test_recruiter_performance(client):
    _seed(client)
    body = client.get("/api/recruiter-performance", params={"year": "2025", "month": "3"}).json()
    assert [r["proposer"] for r in body["data"]] == ["Lee", "Park"]
    lee, park = body["data"]
    assert lee["total_proposed"] == 2
    assert lee["success_rate"] == 50.0
    assert park["total_proposed"] == 1
    assert park["success_rate"] == 0.0
    assert body["stats"]["total_proposed"] == 3

    overall = client.get("/api/recruiter-performance").json()
    assert overall["stats"]["total_proposed"] == 4
    assert overall["stats"]["total_amount"] == 6000
