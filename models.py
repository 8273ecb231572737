from datetime import datetime

from extensions import db
from utils.periods import DEFAULT_DUE_DAY

FEE_STATUSES = ("pending", "paid", "overdue")
ANNOUNCEMENT_TYPES = ("holiday", "timing_change", "general")


def _iso(value):
    return value.isoformat() if value else None


announcement_recipients = db.Table(
    'announcement_recipients',
    db.Column('announcement_id', db.Integer, db.ForeignKey('announcements.id'), primary_key=True),
    db.Column('student_id', db.Integer, db.ForeignKey('students.id'), primary_key=True),
)


class Student(db.Model):
    __tablename__ = 'students'
    __table_args__ = (
        db.UniqueConstraint('phone', name='uq_students_phone'),
    )

    id = db.Column(db.Integer, primary_key=True)
    full_name = db.Column(db.String(120), nullable=False)
    phone = db.Column(db.String(20), nullable=False)
    flat_name = db.Column(db.String(120), nullable=False)
    flat_no = db.Column(db.String(20), nullable=False)
    monthly_fee = db.Column(db.Float, nullable=False, default=0.0)
    fee_due_date = db.Column(db.Integer, nullable=False, default=DEFAULT_DUE_DAY)
    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # History stays attributable: students are deactivated, never deleted
    fees = db.relationship('FeePayment', backref='student', lazy='dynamic')

    def to_dict(self):
        return {
            'id': self.id,
            'fullName': self.full_name,
            'phone': self.phone,
            'flatName': self.flat_name,
            'flatNo': self.flat_no,
            'monthlyFee': self.monthly_fee,
            'feeDueDate': self.fee_due_date,
            'isActive': self.is_active,
            'createdAt': _iso(self.created_at),
            'updatedAt': _iso(self.updated_at),
        }

    def summary(self):
        return {
            'id': self.id,
            'fullName': self.full_name,
            'phone': self.phone,
            'flatName': self.flat_name,
            'flatNo': self.flat_no,
        }

    def __repr__(self):
        return f'<Student {self.full_name} ({self.phone})>'


class FeePayment(db.Model):
    __tablename__ = 'fees'
    __table_args__ = (
        db.UniqueConstraint('student_id', 'month', 'year', name='uq_fees_student_period'),
        db.Index('ix_fees_period', 'month', 'year'),
    )

    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey('students.id'), nullable=False)
    amount = db.Column(db.Float, nullable=False)
    month = db.Column(db.Integer, nullable=False)
    year = db.Column(db.Integer, nullable=False)
    paid_date = db.Column(db.DateTime, default=datetime.utcnow)
    status = db.Column(db.String(10), nullable=False, default='paid', index=True)
    payment_method = db.Column(db.String(50))
    notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self, include_student=True):
        data = {
            'id': self.id,
            'studentId': self.student_id,
            'amount': self.amount,
            'month': self.month,
            'year': self.year,
            'paidDate': _iso(self.paid_date),
            'status': self.status,
            'paymentMethod': self.payment_method,
            'notes': self.notes,
            'createdAt': _iso(self.created_at),
        }
        if include_student and self.student is not None:
            data['student'] = self.student.summary()
        return data

    def __repr__(self):
        return f'<FeePayment StudentID={self.student_id} {self.month}/{self.year} Paid={self.amount}>'


class Announcement(db.Model):
    __tablename__ = 'announcements'

    id = db.Column(db.Integer, primary_key=True)
    type = db.Column(db.String(20), nullable=False)
    message = db.Column(db.Text, nullable=False)
    sent_at = db.Column(db.DateTime, default=datetime.utcnow)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Empty when the announcement went out through the group link
    sent_to = db.relationship('Student', secondary=announcement_recipients, lazy='selectin')

    def to_dict(self):
        return {
            'id': self.id,
            'type': self.type,
            'message': self.message,
            'sentTo': [
                {'id': s.id, 'fullName': s.full_name, 'phone': s.phone} for s in self.sent_to
            ],
            'sentAt': _iso(self.sent_at),
            'createdAt': _iso(self.created_at),
        }

    def __repr__(self):
        return f'<Announcement {self.type} recipients={len(self.sent_to)}>'


class AdminUser(db.Model):
    __tablename__ = 'admin_users'

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
            'email': self.email,
            'createdAt': _iso(self.created_at),
        }

    def __repr__(self):
        return f'<AdminUser {self.username}>'
