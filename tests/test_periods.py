from datetime import date

import pytest

from utils.errors import InvalidPeriod, ValidationError
from utils.periods import is_overdue, month_name, previous_month, shift_months_back, validate_period


def test_previous_month_wraps_january():
    assert previous_month(1, 2024) == (12, 2023)
    assert previous_month(7, 2024) == (6, 2024)


@pytest.mark.parametrize("month", range(2, 13))
def test_previous_month_same_year(month):
    assert previous_month(month, 2025) == (month - 1, 2025)


def test_shift_months_back():
    assert shift_months_back(5, 2024, 0) == (5, 2024)
    assert shift_months_back(1, 2024, 1) == (12, 2023)
    assert shift_months_back(3, 2024, 5) == (10, 2023)
    assert shift_months_back(3, 2024, 27) == (12, 2021)


def test_shift_months_back_rejects_negative():
    with pytest.raises(ValidationError):
        shift_months_back(3, 2024, -1)


def test_is_overdue_cases():
    today = date(2024, 3, 15)
    assert is_overdue(10, 3, 2024, today) is True
    assert is_overdue(20, 3, 2024, today) is False
    assert is_overdue(15, 3, 2024, today) is False
    assert is_overdue(31, 2, 2024, today) is True
    assert is_overdue(1, 4, 2024, today) is False
    assert is_overdue(1, 12, 2023, today) is True
    assert is_overdue(1, 1, 2025, today) is False


def test_is_overdue_compares_day_without_clamping():
    # 30-day month: a due day of 31 never passes within the month
    assert is_overdue(31, 4, 2024, date(2024, 4, 30)) is False


def test_is_overdue_defaults_missing_due_day():
    assert is_overdue(None, 3, 2024, date(2024, 3, 11)) is True
    assert is_overdue(None, 3, 2024, date(2024, 3, 10)) is False


def test_validate_period():
    assert validate_period("3", "2024") == (3, 2024)
    for month, year in [(0, 2024), (13, 2024), (5, 2019), ("x", 2024), (None, 2024)]:
        with pytest.raises(InvalidPeriod):
            validate_period(month, year)


def test_month_name():
    assert month_name(1) == "January"
    assert month_name(12) == "December"
