import pytest

from erp.domain.commission import (
    commission_amount,
    commission_amount_exact,
    format_krw,
    parse_amount,
    success_rate,
    withholding_tax,
)


@pytest.mark.parametrize("raw,expected", [
    ("1,200,000", 1200000),
    ("1200000원", 1200000),
    (" 35,000 ", 35000),
    ("abc", 0),
    ("", 0),
    (None, 0),
    (1500, 1500),
])
def test_parse_amount(raw, expected):
    assert parse_amount(raw) == expected


def test_commission_amount_truncates_and_defaults_rate():
    assert commission_amount("1,000,000", 10) == 100000
    assert commission_amount(555555, 5) == 27777
    # missing rate falls back to 500
    assert commission_amount(1000, None) == 5000
    assert commission_amount("n/a", 10) == 0


def test_commission_amount_exact_keeps_fraction():
    assert commission_amount_exact(555555, 5) == pytest.approx(27777.75)
    assert commission_amount_exact(None, 5) == 0


def test_withholding_tax_is_3_3_percent():
    t = withholding_tax(1_000_000)
    assert t == {"income_tax": 30000, "local_tax": 3000, "withholding_tax": 33000, "net_commission": 967000}


def test_withholding_tax_truncates_to_ten_won():
    t = withholding_tax(123_456)
    assert t["income_tax"] == 3700
    assert t["local_tax"] == 370
    assert t["withholding_tax"] == 4070
    assert t["net_commission"] == 119386


def test_withholding_tax_custom_rates_and_zero():
    assert withholding_tax(100_000, income_tax_rate=0.05, local_tax_ratio=0.1)["withholding_tax"] == 5500
    assert withholding_tax(0)["withholding_tax"] == 0
    assert withholding_tax(-100)["net_commission"] == -100


def test_success_rate():
    assert success_rate(1, 3) == 33.3
    assert success_rate(2, 3) == 66.7
    assert success_rate(0, 0) == 0.0
    assert success_rate(5, 5) == 100.0


def test_format_krw():
    assert format_krw(1234567) == "1,234,567원"
    assert format_krw(0) == "0원"
    assert format_krw(None) == "0원"
