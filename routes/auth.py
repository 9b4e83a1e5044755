"""
Authentication routes: register, login, profile
"""
from datetime import datetime

from flask import Blueprint, current_app, jsonify
from flask_login import current_user, login_required

from models import db
from models.user import User
from schemas import load
from schemas.auth import RegisterRequest, LoginRequest, ProfileUpdate
from utils.auth_utils import create_access_token, hash_password, verify_password
from utils.errors import AccountLocked, Conflict, Unauthorized, ValidationFailed
from utils.rate_limit import auth_rate_limit

auth_bp = Blueprint('auth', __name__, url_prefix='/api/auth')

INVALID_CREDENTIALS_MSG = 'Invalid email or password'
LOCKED_MSG = 'Account is temporarily locked due to multiple failed login attempts. Please try again later.'


def _token_response(user, message, status=200):
    return jsonify({
        'success': True,
        'message': message,
        'data': {'token': create_access_token(user), 'user': user.to_dict()},
    }), status


@auth_bp.route('/register', methods=['POST'])
def register():
    """Create an account and return a token"""
    data = load(RegisterRequest)

    if User.query.filter_by(email=data.email).first():
        raise Conflict('Email already registered', code='DUPLICATE_FIELD', field='email')
    if User.query.filter_by(meter_number=data.meter_number).first():
        raise Conflict('Meter number already registered', code='DUPLICATE_FIELD', field='meter_number')

    user = User(
        name=data.name,
        email=data.email,
        password_hash=hash_password(data.password),
        meter_number=data.meter_number,
        address=data.address,
        phone=data.phone,
        last_login=datetime.now(),
    )
    db.session.add(user)
    db.session.commit()
    current_app.logger.info("New user registered: %s", user.email)
    return _token_response(user, 'User registered successfully', 201)


@auth_bp.route('/login', methods=['POST'])
@auth_rate_limit
def login():
    """Email + password login; repeated failures lock the account"""
    data = load(LoginRequest)
    now = datetime.now()

    user = User.query.filter_by(email=data.email).first()
    if not user:
        raise ValidationFailed(INVALID_CREDENTIALS_MSG, code='INVALID_CREDENTIALS')

    if user.is_locked(now):
        remaining = int((user.lock_until - now).total_seconds() // 60) + 1
        raise AccountLocked(LOCKED_MSG, lock_until=user.lock_until.isoformat(), remaining_time=remaining)

    if not user.is_active:
        raise Unauthorized('Account is deactivated. Please contact support.', code='ACCOUNT_DEACTIVATED')

    if not verify_password(user.password_hash, data.password):
        user.register_failed_login(
            current_app.config['LOGIN_MAX_ATTEMPTS'],
            current_app.config['LOGIN_LOCK_DURATION'],
            now=now,
        )
        db.session.commit()
        current_app.logger.warning("Failed login for %s (%s attempts)", user.email, user.login_attempts)
        raise ValidationFailed(INVALID_CREDENTIALS_MSG, code='INVALID_CREDENTIALS')

    user.reset_login_attempts()
    user.last_login = now
    db.session.commit()
    return _token_response(user, 'Login successful')


@auth_bp.route('/me', methods=['GET'])
@auth_bp.route('/profile', methods=['GET'])
@login_required
def profile():
    return jsonify({'success': True, 'data': {'user': current_user.to_dict()}})


@auth_bp.route('/profile', methods=['PUT'])
@login_required
def update_profile():
    """Update name, address, phone and UPI id; email and meter number are fixed"""
    data = load(ProfileUpdate)
    for field in ('name', 'address', 'phone', 'upi_id'):
        value = getattr(data, field)
        if value is not None:
            setattr(current_user, field, value)
    db.session.commit()
    return jsonify({
        'success': True,
        'message': 'Profile updated successfully',
        'data': {'user': current_user.to_dict()},
    })


@auth_bp.route('/logout', methods=['POST'])
@login_required
def logout():
    """Tokens are stateless; the client discards its copy"""
    return jsonify({'success': True, 'message': 'Logged out successfully'})
