from flask import Blueprint, current_app, request

from extensions import db
from models import Announcement, Student
from utils.api import get_engine, ok, period_args

whatsapp_bp = Blueprint('whatsapp', __name__, url_prefix='/api/whatsapp')

ANNOUNCEMENT_HISTORY_LIMIT = 50


@whatsapp_bp.route('/get-announcement-links', methods=['POST'])
def announcement_links():
    body = request.get_json(silent=True) or {}
    kind = body.get('type')
    message = (body.get('message') or '').strip()

    data = get_engine().announcement_links(
        kind,
        message,
        use_group=bool(body.get('useGroup')),
        group_link=current_app.config.get('WHATSAPP_GROUP_LINK'),
    ).unwrap()

    recipients = []
    if not data['isGroup']:
        ids = [entry['studentId'] for entry in data['links']]
        recipients = Student.query.filter(Student.id.in_(ids)).all() if ids else []
    db.session.add(Announcement(type=kind, message=message, sent_to=recipients))
    db.session.commit()
    current_app.logger.info(
        "Announcement %s prepared (%s)", kind, 'group' if data['isGroup'] else f"{len(recipients)} students"
    )
    return ok(data)


@whatsapp_bp.route('/get-reminder-link/<int:student_id>', methods=['GET'])
def reminder_link(student_id):
    month, year = period_args()
    return ok(get_engine().reminder_link(student_id, month, year).unwrap())


@whatsapp_bp.route('/pending-reminders', methods=['GET'])
def pending_reminders():
    month, year = period_args()
    return ok(get_engine().pending_reminders(month, year).unwrap())


@whatsapp_bp.route('/group-reminder-link', methods=['GET'])
def group_reminder_link():
    month, year = period_args()
    result = get_engine().group_reminder(month, year, current_app.config.get('WHATSAPP_GROUP_LINK'))
    return ok(result.unwrap())


@whatsapp_bp.route('/announcements', methods=['GET'])
def announcements():
    rows = (
        Announcement.query.order_by(Announcement.created_at.desc(), Announcement.id.desc())
        .limit(ANNOUNCEMENT_HISTORY_LIMIT)
        .all()
    )
    return ok([a.to_dict() for a in rows], count=len(rows))
