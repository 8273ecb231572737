import re

from flask import Blueprint, current_app, request, session
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError

from extensions import db, limiter
from models import AdminUser
from utils import admin_required
from utils.api import fail, ok
from utils.errors import ValidationError
from utils.security import MIN_PASSWORD_LENGTH, hash_password, verify_password

auth_bp = Blueprint('auth', __name__, url_prefix='/api/auth')

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _login_limit():
    return current_app.config.get('LOGIN_RATE_LIMIT', '10 per minute')


def _start_session(user):
    session.clear()
    session.permanent = True
    session['admin_user_id'] = user.id
    session['username'] = user.username


@auth_bp.route('/register', methods=['POST'])
def register():
    body = request.get_json(silent=True) or {}
    username = (body.get('username') or '').strip()
    email = (body.get('email') or '').strip().lower()
    password = body.get('password') or ''

    if len(username) < 3:
        raise ValidationError('Username must be at least 3 characters')
    if not EMAIL_RE.match(email):
        raise ValidationError('Please enter a valid email')
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters')

    user = AdminUser(username=username, email=email, password_hash=hash_password(password))
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ValidationError('User already exists')

    _start_session(user)
    current_app.logger.info("Registered admin user %s", username)
    return ok(user.to_dict(), status=201)


@auth_bp.route('/login', methods=['POST'])
@limiter.limit(_login_limit, methods=['POST'])
def login():
    body = request.get_json(silent=True) or {}
    identifier = (body.get('email') or body.get('username') or '').strip()
    password = body.get('password') or ''
    if not identifier or not password:
        raise ValidationError('Email and password are required')

    user = AdminUser.query.filter(
        or_(AdminUser.email == identifier.lower(), AdminUser.username == identifier)
    ).first()
    if user is None or not verify_password(user.password_hash, password):
        current_app.logger.warning("Failed admin login for %s", identifier)
        return fail('Invalid credentials', 401)

    _start_session(user)
    return ok(user.to_dict())


@auth_bp.route('/me', methods=['GET'])
@admin_required
def me():
    user = db.session.get(AdminUser, session['admin_user_id'])
    if user is None:
        session.clear()
        return fail('Not authorized', 401)
    return ok(user.to_dict())


@auth_bp.route('/logout', methods=['POST'])
def logout():
    session.clear()
    return ok({})
