"""Sales pipeline vocabulary and the aggregations over sales_db rows."""
from __future__ import annotations

from typing import Iterable, Mapping

from .commission import success_rate

# Values stored verbatim in sales_db, as entered by the sales team.
CONTRACT_DONE = "계약완료"
NOT_CONTRACTED = "미계약"
MEETING_DONE = "미팅완료"
# Legacy contract flags used by the per-salesperson commission details.
COMMISSION_DETAIL_STATUSES = ("Y", "해임")

# Filter value meaning "no filter", sent by the UI select boxes.
ALL = "전체"

SATISFACTION_LEVELS = ("상", "중", "하")

CORRECTION_PENDING = "대기"
REFUND_POSSIBLE = "환급가능"
REFUND_IMPOSSIBLE = "환급불가"
NO_DOCUMENTS = "자료수집X"
CORRECTION_STATUSES = (CORRECTION_PENDING, REFUND_POSSIBLE, REFUND_IMPOSSIBLE, NO_DOCUMENTS)

MONTH_MODES = ("month", "이번 달")

SALES_DB_FIELDS = (
    "proposal_date", "proposer", "salesperson_id", "meeting_status", "company_name",
    "representative", "address", "contact", "industry", "sales_amount", "existing_client",
    "contract_status", "termination_month", "actual_sales", "contract_date", "contract_client",
    "contract_month", "client_name", "feedback", "april_type1_date",
)

# CSV header aliases (Korean template headers) -> column
SALES_DB_CSV_ALIASES = {
    "설의날짜": "proposal_date",
    "섭외날짜": "proposal_date",
    "설의자": "proposer",
    "섭외자": "proposer",
    "영업자": "salesperson_id",
    "미팅여부": "meeting_status",
    "연차명": "company_name",
    "업체명": "company_name",
    "대표자": "representative",
    "주소": "address",
    "연락처": "contact",
    "업종": "industry",
    "매출": "sales_amount",
    "기존거래처": "existing_client",
    "계약여부": "contract_status",
    "해임월": "termination_month",
    "실제매출": "actual_sales",
    "계약날짜": "contract_date",
    "계약거래처": "contract_client",
    "계약월": "contract_month",
    "거래처": "client_name",
    "기타(피드백)": "feedback",
    "4월1종날짜": "april_type1_date",
}


def is_all(value: str | None) -> bool:
    return value is None or value == "" or value == ALL or value == "all"


def month_key(year: str | int, month: str | int) -> tuple[str, str]:
    """('2025', '3') -> ('2025', '03'), matching strftime('%Y'/'%m')."""
    y = str(year).strip()
    m = str(month).strip().zfill(2)
    if not (y.isdigit() and len(y) == 4 and m.isdigit() and 1 <= int(m) <= 12):
        raise ValueError("year/month must look like 2025 / 1..12")
    return y, m


def pipeline_stats(rows: Iterable[Mapping]) -> dict:
    """Counts and Σ actual_sales over monthly-performance rows."""
    rows = list(rows)
    return {
        "total": len(rows),
        "contracted": sum(1 for r in rows if r["contract_status"] == CONTRACT_DONE),
        "notContracted": sum(1 for r in rows if r["contract_status"] == NOT_CONTRACTED),
        "meetingCompleted": sum(1 for r in rows if r["meeting_status"] == MEETING_DONE),
        "totalAmount": sum(int(r["actual_sales"] or 0) for r in rows),
        "correctionCount": 0,
        "correctionRefund": 0,
    }


def with_success_rate(row: Mapping, total_key: str) -> dict:
    out = dict(row)
    for k in ("meeting_completed", "contract_completed", "total_amount"):
        out[k] = int(out.get(k) or 0)
    out[total_key] = int(out.get(total_key) or 0)
    out["success_rate"] = success_rate(out["contract_completed"], out[total_key])
    return out


def totals(rows: Iterable[Mapping], total_key: str) -> dict:
    acc = {total_key: 0, "meeting_completed": 0, "contract_completed": 0, "total_amount": 0}
    for r in rows:
        for k in acc:
            acc[k] += int(r.get(k) or 0)
    return acc


def commission_summary_stats(rows: list[Mapping]) -> dict:
    n = len(rows)
    return {
        "totalContracts": n,
        "totalSales": sum(int(r["actual_sales"] or 0) for r in rows),
        "totalCommission": sum(float(r["commission_amount"]) for r in rows),
        "avgCommissionRate": (sum(float(r["commission_rate"] or 0) for r in rows) / n) if n else 0,
    }
