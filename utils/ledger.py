from __future__ import annotations

import math
from typing import Any, Iterable, List, Optional

from sqlalchemy.exc import IntegrityError

from extensions import db
from models import FeePayment, Student
from utils.errors import DuplicatePayment, NotFound, ValidationError, is_unique_violation
from utils.periods import validate_period

PERIOD_KEY_COLUMNS = ("fees.student_id", "fees.month", "fees.year")


def total_paid(records: Iterable[FeePayment]) -> float:
    return sum((record.amount or 0) for record in records)


def parse_amount(value: Any) -> float:
    if isinstance(value, bool):
        raise ValidationError("Amount must be a number")
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise ValidationError("Amount must be a number")
    if not math.isfinite(amount):
        raise ValidationError("Amount must be a number")
    if amount < 0:
        raise ValidationError("Amount cannot be negative")
    return amount


def parse_student_id(value: Any) -> int:
    if value is None or isinstance(value, bool) or str(value).strip() == "":
        raise ValidationError("Student ID is required")
    try:
        return int(str(value).strip())
    except ValueError:
        raise NotFound("Student not found")


class FeeLedger:
    """Append-only store of fee payments, one paid record per student per period."""

    def record_payment(
        self,
        student_id: Any,
        amount: Any,
        month: Any,
        year: Any,
        method: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> FeePayment:
        sid = parse_student_id(student_id)
        amount = parse_amount(amount)
        month, year = validate_period(month, year)
        if db.session.get(Student, sid) is None:
            raise NotFound("Student not found")

        # The unique (student, month, year) constraint decides; no read-then-write.
        fee = FeePayment(
            student_id=sid,
            amount=amount,
            month=month,
            year=year,
            status="paid",
            payment_method=(method or "").strip() or None,
            notes=(notes or "").strip() or None,
        )
        db.session.add(fee)
        try:
            db.session.commit()
        except IntegrityError as exc:
            db.session.rollback()
            if is_unique_violation(exc, "uq_fees_student_period", PERIOD_KEY_COLUMNS):
                raise DuplicatePayment()
            raise
        return fee

    def get(self, fee_id: int) -> FeePayment:
        fee = db.session.get(FeePayment, fee_id)
        if fee is None:
            raise NotFound("Fee record not found")
        return fee

    def find_paid_for(self, month: int, year: int) -> List[FeePayment]:
        return FeePayment.query.filter_by(month=month, year=year, status="paid").all()

    def find_for_period(self, month: int, year: int) -> List[FeePayment]:
        return (
            FeePayment.query.filter_by(month=month, year=year)
            .order_by(FeePayment.paid_date.desc())
            .all()
        )

    def find_by_student(self, student_id: int) -> List[FeePayment]:
        return (
            FeePayment.query.filter_by(student_id=student_id)
            .order_by(FeePayment.year.desc(), FeePayment.month.desc())
            .all()
        )

    def find_all(
        self,
        student_id: Optional[int] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
        status: Optional[str] = None,
    ) -> List[FeePayment]:
        query = FeePayment.query
        if student_id is not None:
            query = query.filter_by(student_id=student_id)
        if month is not None:
            query = query.filter_by(month=month)
        if year is not None:
            query = query.filter_by(year=year)
        if status:
            query = query.filter_by(status=status)
        return query.order_by(
            FeePayment.year.desc(), FeePayment.month.desc(), FeePayment.created_at.desc()
        ).all()
