from flask import Blueprint, current_app, request

from models import FEE_STATUSES
from utils.api import fail, get_engine, ok, int_arg
from utils.errors import ValidationError
from utils.ledger import FeeLedger, total_paid

fee_bp = Blueprint('fees', __name__, url_prefix='/api/fees')


@fee_bp.route('', methods=['GET'])
def list_fees():
    status = request.args.get('status') or None
    if status and status not in FEE_STATUSES:
        raise ValidationError('Invalid status')
    fees = FeeLedger().find_all(
        student_id=int_arg('studentId'),
        month=int_arg('month'),
        year=int_arg('year'),
        status=status,
    )
    return ok([f.to_dict() for f in fees], count=len(fees))


@fee_bp.route('/monthly', methods=['GET'])
def monthly_fees():
    month = int_arg('month')
    year = int_arg('year')
    if month is None or year is None:
        return fail('Month and year are required')

    fees = FeeLedger().find_for_period(month, year)
    return ok({
        'month': month,
        'year': year,
        'totalAmount': total_paid(fees),
        'paidCount': sum(1 for f in fees if f.status == 'paid'),
        'totalCount': len(fees),
        'fees': [f.to_dict() for f in fees],
    })


@fee_bp.route('/student/<int:student_id>', methods=['GET'])
def student_fees(student_id):
    fees = FeeLedger().find_by_student(student_id)
    return ok([f.to_dict() for f in fees], count=len(fees))


@fee_bp.route('/<int:fee_id>', methods=['GET'])
def get_fee(fee_id):
    return ok(FeeLedger().get(fee_id).to_dict())


@fee_bp.route('', methods=['POST'])
def create_fee():
    body = request.get_json(silent=True) or {}
    fee = FeeLedger().record_payment(
        body.get('studentId'),
        body.get('amount'),
        body.get('month'),
        body.get('year'),
        method=body.get('paymentMethod'),
        notes=body.get('notes'),
    )

    # The payment stands even when no confirmation link can be built
    whatsapp_link = None
    try:
        result = get_engine().confirmation_link(fee.student_id, fee.amount, fee.month, fee.year)
        if result.success:
            whatsapp_link = result.data['link']
        else:
            current_app.logger.warning(
                "No confirmation link for fee %s: %s", fee.id, result.error.message
            )
    except Exception:
        current_app.logger.exception("WhatsApp link generation failed for fee %s", fee.id)

    data = fee.to_dict()
    data['whatsappLink'] = whatsapp_link
    return ok(data, status=201)
