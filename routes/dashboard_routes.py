from flask import Blueprint, request

from utils.api import get_engine, ok
from utils.fee_status import DEFAULT_BREAKDOWN_MONTHS

dashboard_bp = Blueprint('dashboard', __name__, url_prefix='/api/dashboard')


@dashboard_bp.route('/stats', methods=['GET'])
def stats():
    return ok(get_engine().dashboard_summary().unwrap())


@dashboard_bp.route('/monthly-fees', methods=['GET'])
def monthly_fees():
    months = request.args.get('months') or DEFAULT_BREAKDOWN_MONTHS
    return ok(get_engine().monthly_breakdown(months).unwrap())
