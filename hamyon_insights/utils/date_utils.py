"""Date manipulation utilities"""

from datetime import date, timedelta
from typing import List


def generate_date_range(start: date, end: date) -> List[date]:
    """Generate list of dates from start to end (inclusive)"""
    days = (end - start).days + 1
    return [start + timedelta(days=i) for i in range(days)]


def week_start(day: date) -> date:
    """Sunday on or before `day`"""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def month_key(day: date) -> str:
    """'YYYY-MM' label of the month containing `day`"""
    return f"{day.year:04d}-{day.month:02d}"


def shift_month(day: date, months: int) -> date:
    """First day of the month `months` away from the month containing `day`"""
    index = day.year * 12 + (day.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)
