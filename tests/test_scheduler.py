import logging
from datetime import date
from unittest.mock import patch

from scheduler import log_pending_fee_reminders, should_send_reminder
from utils.errors import Result


def test_reminder_days_within_window():
    assert should_send_reminder(date(2024, 3, 1)) == (3, 2024, 1)
    assert should_send_reminder(date(2024, 3, 9)) == (3, 2024, 9)
    assert should_send_reminder(date(2024, 3, 2)) is None
    assert should_send_reminder(date(2024, 3, 10)) is None
    assert should_send_reminder(date(2024, 3, 11)) is None
    assert should_send_reminder(date(2024, 3, 21), days=(21,), window_end=10) is None


def test_job_logs_overdue_listing(app, make_student, caplog):
    make_student(fullName="Ahmed Khan", phone="+923001234567", monthlyFee=1500, feeDueDate=5)
    make_student(fullName="Later", feeDueDate=9)

    with caplog.at_level(logging.INFO, logger="scheduler"):
        lines = log_pending_fee_reminders(app, today=date(2024, 3, 7))

    assert lines[0] == "=== Fee Reminder Day: 7/3/2024 ==="
    assert "Found 1 overdue students:" in lines
    assert "1. Ahmed Khan (+923001234567)" in lines
    assert "   Amount: PKR1500" in lines
    assert "   Due Date: 5th of each month" in lines
    assert any(line.startswith("   WhatsApp Link: https://wa.me/923001234567?text=") for line in lines)
    assert "Ahmed Khan" in caplog.text


def test_job_is_silent_outside_reminder_days(app, make_student):
    make_student(feeDueDate=1)
    assert log_pending_fee_reminders(app, today=date(2024, 3, 4)) == []
    assert log_pending_fee_reminders(app, today=date(2024, 3, 15)) == []


def test_job_reports_nothing_overdue(app):
    lines = log_pending_fee_reminders(app, today=date(2024, 3, 1))
    assert lines[-1] == "No overdue fees found for this month."


def test_job_swallows_errors(app, caplog):
    with patch("scheduler.FeeStatusEngine", side_effect=RuntimeError("db down")):
        lines = log_pending_fee_reminders(app, today=date(2024, 3, 3))
    assert lines == ["=== Fee Reminder Day: 3/3/2024 ==="]
    assert "Error in fee reminder job" in caplog.text


def test_job_logs_skipped_students_without_reminders(app):
    with patch("scheduler.FeeStatusEngine") as engine:
        engine.return_value.pending_reminders.return_value = Result.ok({
            "count": 0,
            "reminders": [],
            "skipped": [{"studentId": 7, "studentName": "No Phone", "error": "Invalid phone number"}],
        })
        lines = log_pending_fee_reminders(app, today=date(2024, 3, 5))

    assert "No overdue fees found for this month." in lines
    assert lines[-1] == "Skipped No Phone: Invalid phone number"
