"""
Main Flask application entry point for the Electricity Record API
"""
import logging
import os
import time

from flask import Flask, jsonify, request, g
from flask_login import LoginManager
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

from config import Config
from models import db
from models.user import User
from utils.auth_utils import extract_bearer_token, decode_access_token, TokenExpired, TokenInvalid
from utils.billing import ReadingError
from utils.errors import APIError, Unauthorized, AccountLocked, pydantic_errors
from utils.mail import mail
from utils.payment_status_helper import InvalidStatusError, InvalidTransitionError

logger = logging.getLogger(__name__)

# Bearer-token authentication (no DB access at import time)
login_manager = LoginManager()


@login_manager.request_loader
def load_user_from_request(req):
    """Resolve the Authorization header to an active, unlocked user."""
    header = req.headers.get('Authorization')
    if not header:
        g.auth_error = Unauthorized('Access denied. No authorization token provided.', code='NO_TOKEN')
        return None

    token = extract_bearer_token(header)
    if not token:
        g.auth_error = Unauthorized('Access denied. Invalid token format.', code='INVALID_TOKEN_FORMAT')
        return None

    try:
        user_id = decode_access_token(token)
    except TokenExpired:
        g.auth_error = Unauthorized('Access denied. Token has expired.', code='TOKEN_EXPIRED')
        return None
    except TokenInvalid:
        g.auth_error = Unauthorized('Access denied. Invalid token.', code='INVALID_TOKEN')
        return None

    user = db.session.get(User, user_id)
    if not user:
        g.auth_error = Unauthorized('Access denied. User not found.', code='USER_NOT_FOUND')
        return None
    if not user.is_active:
        g.auth_error = Unauthorized('Access denied. Account is deactivated.', code='ACCOUNT_DEACTIVATED')
        return None
    if user.is_locked():
        g.auth_error = AccountLocked(
            'Access denied. Account is temporarily locked due to multiple failed login attempts.',
            lock_until=user.lock_until.isoformat(),
        )
        return None
    return user


@login_manager.unauthorized_handler
def unauthorized():
    raise g.get('auth_error') or Unauthorized('Access denied. No authorization token provided.', code='NO_TOKEN')


def _error_response(error):
    response = jsonify(error.to_dict())
    response.status_code = error.status_code
    retry_after = error.extra.get('retry_after')
    if retry_after:
        response.headers['Retry-After'] = str(retry_after)
    return response


def register_error_handlers(app):
    """JSON bodies for every failure; internals only leak when DEBUG is on."""

    @app.errorhandler(APIError)
    def handle_api_error(e):
        return _error_response(e)

    @app.errorhandler(ValidationError)
    def handle_validation_error(e):
        return _error_response(APIError('Validation failed', code='VALIDATION_ERROR', errors=pydantic_errors(e)))

    @app.errorhandler(ReadingError)
    def handle_reading_error(e):
        return _error_response(APIError(str(e), code='VALIDATION_ERROR',
                                        errors=[{'field': e.field, 'message': str(e)}]))

    @app.errorhandler(InvalidStatusError)
    def handle_invalid_status(e):
        return _error_response(APIError(str(e), code='INVALID_STATUS'))

    @app.errorhandler(InvalidTransitionError)
    def handle_invalid_transition(e):
        return _error_response(APIError(str(e), code='INVALID_TRANSITION', status_code=409))

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(e):
        db.session.rollback()
        app.logger.warning("Integrity error on %s %s: %s", request.method, request.path, e.orig)
        return _error_response(APIError('A record with these details already exists.',
                                        code='DUPLICATE_FIELD', status_code=409))

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(e):
        return _error_response(APIError('Uploaded file is too large.', code='FILE_TOO_LARGE', status_code=413))

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        if isinstance(e, HTTPException):
            code = 'NOT_FOUND' if e.code == 404 else (e.name or 'HTTP_ERROR').upper().replace(' ', '_')
            message = 'API endpoint not found' if e.code == 404 else e.description
            return _error_response(APIError(message, code=code, status_code=e.code))

        db.session.rollback()
        app.logger.error(f"Unhandled error on {request.method} {request.path}: {str(e)}", exc_info=True)
        message = str(e) if app.config.get('DEBUG') else 'Internal server error'
        return _error_response(APIError(message, code='SERVER_ERROR', status_code=500))


def register_request_logging(app):
    @app.before_request
    def start_timer():
        g.request_started = time.perf_counter()

    @app.after_request
    def log_request(response):
        started = g.get('request_started')
        if started is not None and request.path.startswith('/api'):
            duration_ms = (time.perf_counter() - started) * 1000
            app.logger.info("%s %s - %s - %.0fms", request.method, request.full_path.rstrip('?'),
                            response.status_code, duration_ms)
        return response


def create_app(config_class=Config):
    """Application factory pattern. DB init runs inside app_context; non-fatal on failure."""
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    db.init_app(app)
    login_manager.init_app(app)
    mail.init_app(app)

    try:
        os.makedirs(app.config['UPLOAD_FOLDER'], exist_ok=True)
    except OSError as e:
        logger.warning("Upload folder %s unavailable: %s", app.config['UPLOAD_FOLDER'], e)

    register_error_handlers(app)
    register_request_logging(app)

    # Create tables and seed only inside app context; do not crash if DB temporarily unavailable
    with app.app_context():
        try:
            db.create_all()
            seed_admin(app)
        except Exception as e:
            logger.warning("Database init/seed skipped (non-fatal): %s", e)

    from routes import public_bp, auth_bp, records_bp, customers_bp, share_bp
    from routes.admin.users import admin_users_bp
    from routes.admin.records import admin_records_bp
    from routes.admin.customers import admin_customers_bp

    app.register_blueprint(public_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(records_bp)
    app.register_blueprint(customers_bp)
    app.register_blueprint(share_bp)

    app.register_blueprint(admin_users_bp)
    app.register_blueprint(admin_records_bp)
    app.register_blueprint(admin_customers_bp)

    return app


def seed_admin(app):
    """Ensure the seed admin exists when SEED_ADMIN_PASSWORD is configured."""
    password = app.config.get('SEED_ADMIN_PASSWORD')
    if not password:
        return None
    email = app.config['SEED_ADMIN_EMAIL']
    admin, _ = User.ensure_admin(email, password)

    try:
        db.session.commit()
        logger.info("Seed admin ready: %s", email)
    except Exception as e:
        db.session.rollback()
        logger.error("Error seeding admin: %s", e)
    return admin


# WSGI entry point (Railway/Render/cPanel): gunicorn app:app
app = create_app()
application = app

if __name__ == "__main__":
    port = int(os.environ.get("PORT", 5000))
    app.run(host="0.0.0.0", port=port, debug=app.config.get("DEBUG", False))
