"""Monetary utilities: frequency conversion, cents arithmetic, display formatting, urgency"""

from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from finrec.domain.models import Currency, DEFAULT_CURRENCIES, FREQUENCY_FACTORS
from finrec.utils.date_utils import days_until

# Guards ratio denominators against zero income / zero expenses
EPSILON = 0.01


def monthly_amount(amount: float, frequency: str) -> float:
    """Convert an amount paid at the given frequency to its monthly equivalent"""
    return amount * FREQUENCY_FACTORS.get(frequency, 1.0)


def to_cents(amount: float) -> int:
    """Round a major-unit amount to integer cents (half up)"""
    return int(Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP) * 100)


def from_cents(cents: int) -> float:
    return cents / 100


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def format_currency(amount: float, currency: Currency = DEFAULT_CURRENCIES["KES"]) -> str:
    """
    Render an amount for display.

    Examples:
        12000 USD  → "$12,000.00"
        -1500 KES  → "-KSh 1,500"
    """
    separator = "" if len(currency.symbol) == 1 else " "
    formatted = f"{currency.symbol}{separator}{abs(amount):,.{currency.decimals}f}"
    return f"-{formatted}" if amount < 0 else formatted


def classify_urgency(due_date: date, today: date) -> str:
    """Map a due date to critical (overdue), high (≤3 days), medium (≤7 days) or low"""
    days = days_until(due_date, today)
    if days < 0:
        return "critical"
    elif days <= 3:
        return "high"
    elif days <= 7:
        return "medium"
    else:
        return "low"
