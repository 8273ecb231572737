from __future__ import annotations

import math
import re
from typing import Any, Dict, List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError

from extensions import db
from models import Student
from utils.errors import NotFound, ValidationError, is_unique_violation

PHONE_RE = re.compile(r"^\+?[1-9]\d{1,14}$")


def parse_active_flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value in ("true", "false"):
        return value == "true"
    raise ValidationError("isActive must be true or false")


def _required_text(data: Dict[str, Any], key: str, label: str) -> str:
    value = data.get(key)
    text = str(value).strip() if value is not None else ""
    if not text:
        raise ValidationError(f"{label} is required")
    return text


def validate_student_payload(data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Validate an enrollment/update body and return model attribute values."""
    data = data or {}
    values: Dict[str, Any] = {
        "full_name": _required_text(data, "fullName", "Full name"),
        "phone": _required_text(data, "phone", "Phone number"),
        "flat_name": _required_text(data, "flatName", "Flat name"),
        "flat_no": _required_text(data, "flatNo", "Flat number"),
    }
    if not PHONE_RE.match(values["phone"]):
        raise ValidationError("Please enter a valid phone number")

    try:
        fee = float(data.get("monthlyFee"))
    except (TypeError, ValueError):
        raise ValidationError("Monthly fee must be a number")
    if not math.isfinite(fee):
        raise ValidationError("Monthly fee must be a number")
    if fee < 0:
        raise ValidationError("Monthly fee cannot be negative")
    values["monthly_fee"] = fee

    raw_due = data.get("feeDueDate")
    try:
        if isinstance(raw_due, bool) or (isinstance(raw_due, float) and not raw_due.is_integer()):
            raise ValueError
        due = int(raw_due)
    except (TypeError, ValueError):
        raise ValidationError("Fee due date must be between 1 and 31")
    if not 1 <= due <= 31:
        raise ValidationError("Fee due date must be between 1 and 31")
    values["fee_due_date"] = due

    if "isActive" in data:
        values["is_active"] = parse_active_flag(data["isActive"])
    return values


class Roster:
    """Student records backed by the ``students`` table."""

    def active_students(self) -> List[Student]:
        return Student.query.filter_by(is_active=True).order_by(Student.id).all()

    def by_id(self, student_id: int) -> Student:
        student = db.session.get(Student, student_id)
        if student is None:
            raise NotFound("Student not found")
        return student

    def search(self, term: Optional[str] = None, is_active: Optional[bool] = None) -> List[Student]:
        query = Student.query
        if is_active is not None:
            query = query.filter(Student.is_active == is_active)
        if term:
            pattern = f"%{term}%"
            query = query.filter(
                or_(
                    Student.full_name.ilike(pattern),
                    Student.phone.ilike(pattern),
                    Student.flat_name.ilike(pattern),
                    Student.flat_no.ilike(pattern),
                )
            )
        return query.order_by(Student.created_at.desc(), Student.id.desc()).all()

    def create(self, data: Dict[str, Any]) -> Student:
        student = Student(**validate_student_payload(data))
        db.session.add(student)
        self._commit()
        return student

    def update(self, student_id: int, data: Dict[str, Any]) -> Student:
        values = validate_student_payload(data)
        student = self.by_id(student_id)
        for attr, value in values.items():
            setattr(student, attr, value)
        self._commit()
        return student

    def deactivate(self, student_id: int) -> Student:
        return self._set_active(student_id, False)

    def activate(self, student_id: int) -> Student:
        return self._set_active(student_id, True)

    def _set_active(self, student_id: int, active: bool) -> Student:
        student = self.by_id(student_id)
        student.is_active = active
        db.session.commit()
        return student

    @staticmethod
    def _commit() -> None:
        try:
            db.session.commit()
        except IntegrityError as exc:
            db.session.rollback()
            if is_unique_violation(exc, "uq_students_phone", ("students.phone",)):
                raise ValidationError("Phone number already exists")
            raise
