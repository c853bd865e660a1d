"""Unit tests for monetary utilities and date helpers"""

import pytest
from datetime import date, timedelta
from finrec.domain.models import DEFAULT_CURRENCIES, Expense, Income
from finrec.domain.money import classify_urgency, format_currency, monthly_amount, to_cents
from finrec.utils.date_utils import add_months, months_until


@pytest.mark.parametrize(
    "frequency, expected",
    [
        ("weekly", 433.0),
        ("biweekly", 216.67),
        ("monthly", 100.0),
        ("yearly", 8.333),
        ("fortnightly-ish", 100.0),  # unknown frequency passes through
    ],
)
def test_monthly_amount_by_frequency(frequency, expected):
    """Test monthly-equivalent conversion factors"""
    assert monthly_amount(100, frequency) == pytest.approx(expected, abs=0.01)


def test_records_expose_monthly_amount():
    """Test flows derive monthlyAmount from their frequency"""
    assert Income("i1", "Salary", 1000, frequency="biweekly").monthly_amount == pytest.approx(2166.7)
    assert Expense("e1", "Insurance", 1200, frequency="yearly").monthly_amount == pytest.approx(100)


def test_to_cents_rounds_half_up():
    assert to_cents(1000.33) == 100033
    assert to_cents(0.005) == 1
    assert to_cents(999999) == 99999900
    assert to_cents(0) == 0


def test_format_currency():
    """Test display formatting per currency minor units"""
    assert format_currency(12000, DEFAULT_CURRENCIES["USD"]) == "$12,000.00"
    assert format_currency(-1500, DEFAULT_CURRENCIES["KES"]) == "-KSh 1,500"
    assert format_currency(1234.5, DEFAULT_CURRENCIES["EUR"]) == "€1,234.50"
    assert format_currency(12000) == "KSh 12,000"


def test_classify_urgency(today: date):
    assert classify_urgency(today - timedelta(days=1), today) == "critical"
    assert classify_urgency(today, today) == "high"
    assert classify_urgency(today + timedelta(days=3), today) == "high"
    assert classify_urgency(today + timedelta(days=5), today) == "medium"
    assert classify_urgency(today + timedelta(days=8), today) == "low"


def test_add_months_clamps_day():
    assert add_months(date(2025, 1, 31), 1) == date(2025, 2, 28)
    assert add_months(date(2025, 11, 15), 3) == date(2026, 2, 15)
    assert add_months(date(2025, 6, 1), 0) == date(2025, 6, 1)


def test_months_until_never_below_one(today: date):
    assert months_until(today + timedelta(days=360), today) == 12
    assert months_until(today + timedelta(days=361), today) == 13
    assert months_until(today - timedelta(days=90), today) == 1
