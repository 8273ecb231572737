"""Month/year arithmetic for the monthly billing cycle.

A period is a ``(month, year)`` pair. Everything here is pure so the
fee status engine and the scheduler can be tested with a fixed "today".
"""
from __future__ import annotations

import calendar
from datetime import date
from typing import Any, Optional, Tuple

from utils.errors import InvalidPeriod, ValidationError

Period = Tuple[int, int]

MIN_YEAR = 2020
DEFAULT_DUE_DAY = 10


def _as_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError("boolean is not a period component")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return int(str(value).strip())


def validate_period(month: Any, year: Any) -> Period:
    try:
        m = _as_int(month)
        y = _as_int(year)
    except (TypeError, ValueError):
        raise InvalidPeriod("Month and year must be whole numbers")
    if not 1 <= m <= 12:
        raise InvalidPeriod("Month must be between 1 and 12")
    if y < MIN_YEAR:
        raise InvalidPeriod("Year must be valid")
    return m, y


def current_period(today: date) -> Period:
    return today.month, today.year


def previous_month(month: int, year: int) -> Period:
    month -= 1
    if month == 0:
        return 12, year - 1
    return month, year


def shift_months_back(month: int, year: int, n: int) -> Period:
    if n < 0:
        raise ValidationError("Cannot shift by a negative number of months")
    index = year * 12 + (month - 1) - n
    return index % 12 + 1, index // 12


def is_overdue(due_day: Optional[int], month: int, year: int, today: date) -> bool:
    """Past periods are always overdue; the current one once its due day has passed.

    The due day is compared numerically, so a due day of 31 never
    passes in a 30-day month.
    """
    if (year, month) < (today.year, today.month):
        return True
    if (year, month) == (today.year, today.month):
        return today.day > (due_day or DEFAULT_DUE_DAY)
    return False


def month_name(month: int) -> str:
    return calendar.month_name[month]
