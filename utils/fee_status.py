"""Fee status engine: pending, overdue and reminder derivation.

The engine is handed its roster and ledger explicitly, so it can run
against the SQLAlchemy repositories in the app or against in-memory
fakes in tests. Every public method returns a :class:`Result`; typed
errors raised inside are folded into ``Result.fail``.
"""
from __future__ import annotations

from datetime import date
from functools import wraps
from typing import Any, Callable, Dict, List, Optional, Set

from models import ANNOUNCEMENT_TYPES
from utils.errors import ExternalFormatFailure, MadarsaError, Result, ValidationError
from utils.ledger import total_paid
from utils.periods import (
    DEFAULT_DUE_DAY,
    current_period,
    is_overdue,
    month_name,
    previous_month,
    shift_months_back,
    validate_period,
)
from utils.whatsapp import (
    announcement_message,
    fee_reminder_message,
    generate_group_link,
    generate_whatsapp_link,
    group_reminder_message,
    payment_confirmation_message,
)

DEFAULT_BREAKDOWN_MONTHS = 6


def _as_result(func: Callable[..., Any]) -> Callable[..., Result]:
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Result:
        try:
            return Result.ok(func(*args, **kwargs))
        except MadarsaError as exc:
            return Result.fail(exc)

    return wrapper


class FeeStatusEngine:
    def __init__(self, roster, ledger, today: Optional[Callable[[], date]] = None):
        self.roster = roster
        self.ledger = ledger
        self._today = today or date.today

    def _resolve_today(self, today: Optional[date]) -> date:
        return today or self._today()

    # --------------------------
    # Pending / overdue sets
    # --------------------------

    def _pending(self, month: int, year: int, active=None) -> List[Any]:
        if active is None:
            active = self.roster.active_students()
        paid_ids: Set[Any] = {fee.student_id for fee in self.ledger.find_paid_for(month, year)}
        return [student for student in active if student.id not in paid_ids]

    def _overdue(self, month: int, year: int, today: date) -> List[Any]:
        return [
            student
            for student in self._pending(month, year)
            if is_overdue(student.fee_due_date, month, year, today)
        ]

    @_as_result
    def pending_students(self, month: Any, year: Any) -> List[Any]:
        month, year = validate_period(month, year)
        return self._pending(month, year)

    @_as_result
    def overdue_students(self, month: Any, year: Any, today: Optional[date] = None) -> List[Any]:
        month, year = validate_period(month, year)
        return self._overdue(month, year, self._resolve_today(today))

    # --------------------------
    # Dashboard aggregates
    # --------------------------

    def _period_totals(self, month: int, year: int) -> Dict[str, Any]:
        paid = self.ledger.find_paid_for(month, year)
        return {"month": month, "year": year, "totalFees": total_paid(paid), "paidCount": len(paid)}

    @_as_result
    def dashboard_summary(self, today: Optional[date] = None) -> Dict[str, Any]:
        month, year = current_period(self._resolve_today(today))
        prev_month, prev_year = previous_month(month, year)
        active = self.roster.active_students()

        current = self._period_totals(month, year)
        # Only the current month carries a pending count.
        current["pendingCount"] = len(self._pending(month, year, active))
        return {
            "totalStudents": len(active),
            "currentMonth": current,
            "previousMonth": self._period_totals(prev_month, prev_year),
        }

    @_as_result
    def monthly_breakdown(self, months: Any = DEFAULT_BREAKDOWN_MONTHS, today: Optional[date] = None) -> List[Dict[str, Any]]:
        try:
            count = int(months)
        except (TypeError, ValueError):
            raise ValidationError("months must be a whole number")
        if count < 1:
            raise ValidationError("months must be at least 1")

        month, year = current_period(self._resolve_today(today))
        rows = []
        for i in range(count):
            m, y = shift_months_back(month, year, i)
            paid = self.ledger.find_paid_for(m, y)
            rows.append({
                "month": m,
                "year": y,
                "monthName": month_name(m),
                "totalAmount": total_paid(paid),
                "paidCount": len(paid),
            })
        rows.reverse()
        return rows

    # --------------------------
    # Reminder links
    # --------------------------

    @_as_result
    def pending_reminders(self, month: Any, year: Any, today: Optional[date] = None) -> Dict[str, Any]:
        month, year = validate_period(month, year)
        reminders: List[Dict[str, Any]] = []
        skipped: List[Dict[str, Any]] = []
        for student in self._overdue(month, year, self._resolve_today(today)):
            message = fee_reminder_message(student.full_name, month, year, student.monthly_fee)
            link = generate_whatsapp_link(student.phone, message)
            if not link:
                skipped.append({
                    "studentId": student.id,
                    "studentName": student.full_name,
                    "error": ExternalFormatFailure.default_message,
                })
                continue
            reminders.append({
                "studentId": student.id,
                "studentName": student.full_name,
                "phone": student.phone,
                "amount": student.monthly_fee,
                "feeDueDate": student.fee_due_date or DEFAULT_DUE_DAY,
                "overdue": True,
                "link": link,
            })
        return {"count": len(reminders), "reminders": reminders, "skipped": skipped}

    @_as_result
    def group_reminder(self, month: Any, year: Any, group_link: Optional[str], today: Optional[date] = None) -> Dict[str, Any]:
        month, year = validate_period(month, year)
        reminders = self.pending_reminders(month, year, today).unwrap()["reminders"]
        if not reminders:
            raise MadarsaError("No overdue students found")
        link = generate_group_link(group_link, group_reminder_message(reminders, month, year))
        if not link:
            raise ExternalFormatFailure("WhatsApp group link is not configured")
        return {"link": link, "isGroup": True, "overdueCount": len(reminders)}

    def _student_link(self, student, message: str) -> Dict[str, Any]:
        link = generate_whatsapp_link(student.phone, message)
        if not link:
            raise ExternalFormatFailure()
        return {"link": link, "phone": student.phone, "studentName": student.full_name}

    @_as_result
    def reminder_link(self, student_id: Any, month: Any, year: Any) -> Dict[str, Any]:
        month, year = validate_period(month, year)
        student = self.roster.by_id(student_id)
        message = fee_reminder_message(student.full_name, month, year, student.monthly_fee)
        return self._student_link(student, message)

    @_as_result
    def confirmation_link(self, student_id: Any, amount: Any, month: Any, year: Any) -> Dict[str, Any]:
        month, year = validate_period(month, year)
        student = self.roster.by_id(student_id)
        message = payment_confirmation_message(student.full_name, amount, month, year)
        return self._student_link(student, message)

    # --------------------------
    # Announcements
    # --------------------------

    @_as_result
    def announcement_links(self, kind: str, message: str, use_group: bool = False, group_link: Optional[str] = None) -> Dict[str, Any]:
        if kind not in ANNOUNCEMENT_TYPES:
            raise ValidationError("Invalid announcement type")
        if not (message or "").strip():
            raise ValidationError("Message is required")
        text = announcement_message(kind, message)

        if use_group:
            link = generate_group_link(group_link, text)
            if not link:
                raise ExternalFormatFailure("WhatsApp group link is not configured")
            return {
                "totalStudents": 0,
                "isGroup": True,
                "groupLink": link,
                "links": [{"type": "group", "link": link, "label": "WhatsApp Group"}],
                "skipped": [],
            }

        students = self.roster.active_students()
        if not students:
            raise ValidationError("No active students found")
        links: List[Dict[str, Any]] = []
        skipped: List[Dict[str, Any]] = []
        for student in students:
            link = generate_whatsapp_link(student.phone, text)
            if not link:
                skipped.append({
                    "studentId": student.id,
                    "studentName": student.full_name,
                    "error": ExternalFormatFailure.default_message,
                })
                continue
            links.append({
                "studentId": student.id,
                "studentName": student.full_name,
                "phone": student.phone,
                "link": link,
            })
        return {
            "totalStudents": len(students),
            "isGroup": False,
            "groupLink": None,
            "links": links,
            "skipped": skipped,
        }
