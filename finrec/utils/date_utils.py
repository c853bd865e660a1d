"""Date manipulation utilities"""

import calendar
import math
from datetime import date, timedelta


def days_until(target: date, today: date) -> int:
    """Signed number of days from today to target (negative when past)"""
    return (target - today).days


def months_until(target: date, today: date, days_per_month: int = 30) -> int:
    """Whole 30-day months remaining until target, never less than 1"""
    return max(1, math.ceil(days_until(target, today) / days_per_month))


def add_months(from_date: date, months: int) -> date:
    """Add calendar months, clamping the day to the end of the target month"""
    month_index = from_date.month - 1 + months
    year = from_date.year + month_index // 12
    month = month_index % 12 + 1
    day = min(from_date.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def within_last_days(day: date, today: date, days: int = 30) -> bool:
    """True if day falls inside [today - days, today]"""
    return today - timedelta(days=days) <= day <= today
