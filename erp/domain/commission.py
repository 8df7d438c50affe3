from __future__ import annotations

import re
from decimal import Decimal, ROUND_DOWN, ROUND_HALF_UP

DEFAULT_COMMISSION_RATE = 500.0
INCOME_TAX_RATE = 0.03
LOCAL_TAX_RATIO = 0.1

_LEADING_INT = re.compile(r"^[+-]?\d+")


def parse_amount(value) -> int:
    """
    Parse a free-text money cell ("1,200,000", "1200000원", 1.2e6) into an int.
    Commas and whitespace are dropped; only the leading integer is kept, so
    non-numeric text yields 0.
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return int(value)
    s = str(value).replace(",", "").strip()
    m = _LEADING_INT.match(s)
    return int(m.group(0)) if m else 0


def _floor_to(value: Decimal, unit: int) -> int:
    """Truncate a non-negative amount down to a multiple of unit (won)."""
    q = (value / unit).quantize(Decimal("1"), rounding=ROUND_DOWN)
    return int(q) * unit


def commission_amount(base, rate: float | None) -> int:
    """base * rate / 100, truncated to whole won. A missing rate means the default 500."""
    r = DEFAULT_COMMISSION_RATE if rate is None else rate
    value = Decimal(str(parse_amount(base))) * Decimal(str(r)) / Decimal(100)
    return int(value.to_integral_value(rounding=ROUND_DOWN))


def commission_amount_exact(actual_sales, rate: float | None) -> float:
    """Untruncated actual_sales * rate / 100, as shown on the commission summary."""
    return float(Decimal(str(actual_sales or 0)) * Decimal(str(rate or 0)) / Decimal(100))


def withholding_tax(
    commission: int,
    income_tax_rate: float = INCOME_TAX_RATE,
    local_tax_ratio: float = LOCAL_TAX_RATIO,
) -> dict:
    """
    Business-income withholding on a commission payment.

    income_tax = commission * income_tax_rate, truncated to 10 won
    local_tax  = income_tax * local_tax_ratio, truncated to 10 won
    With the defaults this is the usual 3.3% (3% + 0.3%).
    Non-positive commissions carry no tax.
    """
    c = int(commission or 0)
    if c <= 0:
        return {"income_tax": 0, "local_tax": 0, "withholding_tax": 0, "net_commission": c}
    income_tax = _floor_to(Decimal(c) * Decimal(str(income_tax_rate)), 10)
    local_tax = _floor_to(Decimal(income_tax) * Decimal(str(local_tax_ratio)), 10)
    total = income_tax + local_tax
    return {
        "income_tax": income_tax,
        "local_tax": local_tax,
        "withholding_tax": total,
        "net_commission": c - total,
    }


def success_rate(done: int, total: int) -> float:
    """Percentage of done over total, 1 decimal; 0.0 when there is nothing to count."""
    if not total:
        return 0.0
    return float(Decimal(str(done * 100 / total)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def format_krw(amount) -> str:
    """1234567 -> '1,234,567원'."""
    n = int(round(float(amount or 0)))
    return f"{n:,}원"
