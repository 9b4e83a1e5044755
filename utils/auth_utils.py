"""
Authentication utility functions: password hashing and bearer tokens.
"""
from datetime import datetime, timezone
from functools import wraps

from flask import current_app
from flask_login import current_user, login_required
from jose import jwt, JWTError, ExpiredSignatureError
from werkzeug.security import generate_password_hash, check_password_hash

from utils.errors import Forbidden

BEARER_PREFIX = 'Bearer '


class TokenExpired(Exception):
    """Bearer token signature is valid but past its expiry"""


class TokenInvalid(Exception):
    """Bearer token is malformed or its signature does not verify"""


def hash_password(password):
    """Generate password hash"""
    return generate_password_hash(password)


def verify_password(password_hash, password):
    """Verify password against hash"""
    return check_password_hash(password_hash, password)


def create_access_token(user, now=None):
    """Signed token carrying the user id; valid for JWT_EXPIRES."""
    now = now or datetime.now(timezone.utc)
    payload = {
        'user_id': user.id,
        'iat': int(now.timestamp()),
        'exp': int((now + current_app.config['JWT_EXPIRES']).timestamp()),
    }
    return jwt.encode(
        payload,
        current_app.config['JWT_SECRET_KEY'],
        algorithm=current_app.config['JWT_ALGORITHM'],
    )


def decode_access_token(token):
    """
    Return the user id from a bearer token.
    Raises TokenExpired or TokenInvalid.
    """
    try:
        payload = jwt.decode(
            token,
            current_app.config['JWT_SECRET_KEY'],
            algorithms=[current_app.config['JWT_ALGORITHM']],
        )
    except ExpiredSignatureError as e:
        raise TokenExpired() from e
    except JWTError as e:
        raise TokenInvalid() from e

    user_id = payload.get('user_id')
    if not isinstance(user_id, int):
        raise TokenInvalid()
    return user_id


def extract_bearer_token(header_value):
    """Token from an Authorization header value; bare tokens are accepted too."""
    value = (header_value or '').strip()
    if value.startswith(BEARER_PREFIX):
        value = value[len(BEARER_PREFIX):].strip()
    return value


def admin_required(f):
    """Decorator to require an authenticated admin"""
    @wraps(f)
    @login_required
    def decorated_function(*args, **kwargs):
        if not current_user.is_admin:
            raise Forbidden('Access denied. Admin privileges required.', code='ADMIN_ACCESS_DENIED')
        return f(*args, **kwargs)
    return decorated_function
