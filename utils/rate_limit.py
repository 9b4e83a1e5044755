"""
Rate limiting for authentication endpoints.
Attempts are counted per (client IP, endpoint) in the auth_attempts table,
so the limit holds across every server process sharing the database.
"""
from datetime import datetime
from functools import wraps

from flask import current_app, request

from models import db
from models.auth_attempt import AuthAttempt
from utils.errors import RateLimited

RATE_LIMIT_MSG = 'Too many authentication attempts. Please try again later.'


def _cleanup_expired_attempts(now, window):
    AuthAttempt.query.filter(AuthAttempt.attempted_at < now - window).delete()


def check_and_record_attempt(client_ip, endpoint, now=None):
    """
    Record one attempt, or raise RateLimited when the window is already full.
    Commits the attempt row.
    """
    now = now or datetime.now()
    window = current_app.config['AUTH_RATE_LIMIT_WINDOW']
    limit = current_app.config['AUTH_RATE_LIMIT_MAX']

    _cleanup_expired_attempts(now, window)
    since = now - window
    attempts = AuthAttempt.query.filter(
        AuthAttempt.client_ip == client_ip,
        AuthAttempt.endpoint == endpoint,
        AuthAttempt.attempted_at >= since,
    ).order_by(AuthAttempt.attempted_at.asc()).all()

    if len(attempts) >= limit:
        db.session.commit()
        reset_at = attempts[0].attempted_at + window
        raise RateLimited(RATE_LIMIT_MSG, retry_after=max(1, int((reset_at - now).total_seconds())))

    db.session.add(AuthAttempt(client_ip=client_ip, endpoint=endpoint, attempted_at=now))
    db.session.commit()


def auth_rate_limit(f):
    """Decorator: bound attempts per client per window on an auth endpoint"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        check_and_record_attempt(request.remote_addr or 'unknown', request.path)
        return f(*args, **kwargs)
    return decorated_function
