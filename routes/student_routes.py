from flask import Blueprint, request

from utils.api import ok
from utils.roster import Roster

student_bp = Blueprint('students', __name__, url_prefix='/api/students')


def _active_filter():
    raw = request.args.get('isActive')
    if raw is None:
        return None
    return raw == 'true'


@student_bp.route('', methods=['GET'])
def list_students():
    students = Roster().search(request.args.get('search'), _active_filter())
    return ok([s.to_dict() for s in students], count=len(students))


@student_bp.route('/<int:student_id>', methods=['GET'])
def get_student(student_id):
    return ok(Roster().by_id(student_id).to_dict())


@student_bp.route('', methods=['POST'])
def create_student():
    student = Roster().create(request.get_json(silent=True))
    return ok(student.to_dict(), status=201)


@student_bp.route('/<int:student_id>', methods=['PUT'])
def update_student(student_id):
    student = Roster().update(student_id, request.get_json(silent=True))
    return ok(student.to_dict())


@student_bp.route('/<int:student_id>', methods=['DELETE'])
def delete_student(student_id):
    # Logical delete; fee history keeps pointing at the record
    Roster().deactivate(student_id)
    return ok({})


@student_bp.route('/<int:student_id>/activate', methods=['PATCH'])
def activate_student(student_id):
    return ok(Roster().activate(student_id).to_dict())


@student_bp.route('/<int:student_id>/deactivate', methods=['PATCH'])
def deactivate_student(student_id):
    return ok(Roster().deactivate(student_id).to_dict())
