from erp.db import get_conn
from erp.services.sales_db_svc import CSV_BATCH_SIZE


def _salesperson(client, username, name):
    r = client.post("/api/salespersons", json={"username": username, "password": "pw", "name": name})
    assert r.status_code == 200, r.text
    return r.json()["id"]


def _row(row_id):
    with get_conn() as conn:
        return dict(conn.execute("SELECT * FROM sales_db WHERE id=?", (row_id,)).fetchone())


def test_create_search_and_amount_parsing(client):
    sp = _salesperson(client, "sp1", "Kim")
    r = client.post("/api/sales-db", json={
        "company_name": "Acme Corp", "representative": "Jo", "salesperson_id": sp,
        "sales_amount": "1,200,000", "actual_sales": "300,000원", "proposal_date": "2025-03-01",
    })
    assert r.status_code == 200, r.text
    row = _row(r.json()["id"])
    assert row["sales_amount"] == 1200000
    assert row["actual_sales"] == 300000
    assert row["commission_rate"] == 500

    client.post("/api/sales-db", json={"company_name": "Beta Ltd"})
    hits = client.get("/api/sales-db", params={"search": "Acme"}).json()["data"]
    assert [h["company_name"] for h in hits] == ["Acme Corp"]
    assert hits[0]["salesperson_name"] == "Kim"
    assert len(client.get("/api/sales-db").json()["data"]) == 2
    assert len(client.get("/api/sales-db/all").json()["data"]) == 2


def test_company_name_is_required(client):
    r = client.post("/api/sales-db", json={"company_name": "  ", "proposer": "Lee"})
    assert r.status_code == 400


def test_rate_only_update_keeps_other_fields(client):
    rid = client.post("/api/sales-db", json={"company_name": "Acme", "proposer": "Lee"}).json()["id"]
    r = client.put(f"/api/sales-db/{rid}", json={"commission_rate": 7.5})
    assert r.status_code == 200
    row = _row(rid)
    assert row["commission_rate"] == 7.5
    assert row["proposer"] == "Lee"

    assert client.put(f"/api/sales-db/{rid}", json={"commission_rate": -1}).status_code == 400


def test_full_update_resets_rate_to_default(client):
    rid = client.post("/api/sales-db", json={"company_name": "Acme", "proposer": "Lee", "commission_rate": 10}).json()["id"]
    assert _row(rid)["commission_rate"] == 10

    r = client.put(f"/api/sales-db/{rid}", json={"company_name": "Acme Renamed", "contract_status": "계약완료"})
    assert r.status_code == 200
    row = _row(rid)
    assert row["company_name"] == "Acme Renamed"
    assert row["contract_status"] == "계약완료"
    assert row["proposer"] is None
    assert row["commission_rate"] == 500

    assert client.put("/api/sales-db/999999", json={"company_name": "x"}).status_code == 404


def test_salesperson_can_only_edit_own_rows(client):
    kim = _salesperson(client, "sp1", "Kim")
    lee = _salesperson(client, "sp2", "Lee")
    rid = client.post("/api/sales-db", json={"company_name": "Acme", "salesperson_id": kim, "industry": "IT"}).json()["id"]

    r = client.put(f"/api/sales-db/{rid}/salesperson-update", json={
        "salesperson_id": kim, "meeting_status": "미팅완료", "feedback": "good call",
    })
    assert r.status_code == 200
    row = _row(rid)
    assert row["meeting_status"] == "미팅완료"
    assert row["feedback"] == "good call"
    assert row["industry"] == "IT"

    r = client.put(f"/api/sales-db/{rid}/salesperson-update", json={"salesperson_id": lee, "feedback": "mine now"})
    assert r.status_code == 403
    assert r.json() == {"success": False, "message": "not your record"}
    assert _row(rid)["feedback"] == "good call"


def test_my_data(client):
    kim = _salesperson(client, "sp1", "Kim")
    client.post("/api/sales-db", json={"company_name": "Mine", "salesperson_id": kim})
    client.post("/api/sales-db", json={"company_name": "Other"})

    data = client.get("/api/sales-db/my-data", params={"salesperson_id": kim}).json()["data"]
    assert [d["company_name"] for d in data] == ["Mine"]
    assert client.get("/api/sales-db/my-data").status_code == 400


def test_bulk_skips_blank_rows(client):
    r = client.post("/api/sales-db/bulk", json={"rows": [
        {"company_name": "A"},
        {},
        {"company_name": "B", "sales_amount": "1,000"},
    ]})
    assert r.status_code == 200, r.text
    assert r.json()["count"] == 2
    names = sorted(d["company_name"] for d in client.get("/api/sales-db/all").json()["data"])
    assert names == ["A", "B"]


def test_bulk_aborts_on_invalid_row(client):
    r = client.post("/api/sales-db/bulk", json={"rows": [{"company_name": "A"}, {"proposer": "no company"}]})
    assert r.status_code == 400
    assert client.get("/api/sales-db/all").json()["data"] == []


def test_upload_csv_with_korean_headers(client):
    kim = _salesperson(client, "sp1", "Kim")
    text = (
        "섭외날짜,섭외자,영업자,미팅여부,업체명,대표자,매출,계약여부,실제매출\n"
        "2025-03-01,Lee,Kim,미팅완료,Acme,Jo,\"1,000,000\",계약완료,\"500,000\"\n"
        f"2025-03-02,Lee,{kim},,Beta,Choi,,,\n"
        "2025-03-03,Lee,Kim,,,Nobody,,,\n"
    )
    r = client.post("/api/sales-db/upload-csv", files={"file": ("leads.csv", text.encode("utf-8-sig"), "text/csv")})
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["total"] == 3
    assert body["successCount"] == 2
    assert len(body["errors"]) == 1
    assert body["errors"][0]["row"] == 3

    rows = {d["company_name"]: d for d in client.get("/api/sales-db/all").json()["data"]}
    assert rows["Acme"]["salesperson_id"] == kim
    assert rows["Acme"]["sales_amount"] == 1000000
    assert rows["Acme"]["actual_sales"] == 500000
    assert rows["Beta"]["salesperson_id"] == kim
    assert rows["Beta"]["meeting_status"] is None


def test_upload_csv_spans_batches(client):
    assert CSV_BATCH_SIZE == 500
    lines = ["company_name,proposer,commission_rate"]
    for i in range(1, 601):
        lines.append(f"Co{i},Lee,{'abc' if i == 550 else '300'}")
    r = client.post(
        "/api/sales-db/upload-csv",
        files={"file": ("big.csv", "\n".join(lines).encode("utf-8"), "text/csv")},
    )
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["total"] == 600
    assert body["successCount"] == 599
    assert [e["row"] for e in body["errors"]] == [550]

    names = {d["company_name"] for d in client.get("/api/sales-db/all").json()["data"]}
    assert len(names) == 599
    assert "Co550" not in names
    assert {"Co500", "Co501", "Co600"} <= names


def test_delete_and_export(client):
    rid = client.post("/api/sales-db", json={"company_name": "Gone"}).json()["id"]
    client.post("/api/sales-db", json={"company_name": "Kept"})
    assert client.delete(f"/api/sales-db/{rid}").status_code == 200
    assert client.delete(f"/api/sales-db/{rid}").status_code == 404

    r = client.get("/api/sales-db/export-csv")
    assert r.status_code == 200
    assert r.content.startswith(b"\xef\xbb\xbf")
    text = r.content.decode("utf-8-sig")
    assert "salesperson_name" in text.splitlines()[0]
    assert "Kept" in text
    assert "Gone" not in text
