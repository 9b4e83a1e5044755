"""
Configuration for the Electricity Record API, read from the environment.

Database selection:
  hosted (Render/Railway/FLASK_ENV=production)  DATABASE_URL, required
  local                                          DATABASE_URL, else DB_HOST (Postgres), else SQLite in instance/
"""
import os
from datetime import timedelta
from decimal import Decimal
from pathlib import Path
from urllib.parse import quote_plus

POSTGRES_DRIVER = "postgresql+psycopg2://"


def _env_bool(name, default="false"):
    return os.environ.get(name, default).lower() in ("true", "on", "1")


def _hosted():
    return (
        _env_bool("RENDER")
        or "RAILWAY_ENVIRONMENT" in os.environ
        or os.environ.get("FLASK_ENV") == "production"
    )


def normalize_database_url(url):
    """Point bare postgres URLs at the psycopg2 driver; other URLs pass through."""
    url = (url or "").strip()
    for scheme in ("postgres://", "postgresql://"):
        if url.startswith(scheme):
            return POSTGRES_DRIVER + url[len(scheme):]
    return url


def _postgres_from_parts():
    password = os.environ.get("DB_PASSWORD", "")
    return "{driver}{user}:{password}@{host}:{port}/{name}".format(
        driver=POSTGRES_DRIVER,
        user=os.environ.get("DB_USER", "electricity"),
        password=quote_plus(password) if password else "",
        host=os.environ["DB_HOST"],
        port=os.environ.get("DB_PORT", "5432"),
        name=os.environ.get("DB_NAME", "electricity_records"),
    )


def database_uri(instance_dir):
    url = normalize_database_url(os.environ.get("DATABASE_URL"))
    if url:
        return url
    if _hosted():
        raise RuntimeError("DATABASE_URL must be set for hosted deployments.")
    if os.environ.get("DB_HOST"):
        return _postgres_from_parts()
    return "sqlite:///" + str(instance_dir / "electricity_records.db")


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY") or "dev-only-secret-key"
    DEBUG = _env_bool("FLASK_DEBUG")
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

    # Bearer tokens
    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY") or SECRET_KEY
    JWT_ALGORITHM = "HS256"
    JWT_EXPIRES = timedelta(days=7)

    BASE_DIR = Path(__file__).resolve().parent
    INSTANCE_DIR = BASE_DIR / "instance"
    try:
        INSTANCE_DIR.mkdir(exist_ok=True)
    except OSError:
        pass
    SQLALCHEMY_DATABASE_URI = database_uri(INSTANCE_DIR)
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Bill images and payment screenshots
    UPLOAD_FOLDER = os.environ.get("UPLOAD_FOLDER") or str(BASE_DIR / "uploads")
    MAX_CONTENT_LENGTH = 10 * 1024 * 1024
    ALLOWED_IMAGE_EXTENSIONS = {"jpg", "jpeg", "png", "gif", "webp"}

    # Brute-force protection
    LOGIN_MAX_ATTEMPTS = 5
    LOGIN_LOCK_DURATION = timedelta(hours=2)
    AUTH_RATE_LIMIT_MAX = int(os.environ.get("AUTH_RATE_LIMIT_MAX") or 5)
    AUTH_RATE_LIMIT_WINDOW = timedelta(minutes=15)

    DEFAULT_RATE_PER_UNIT = Decimal(os.environ.get("DEFAULT_RATE_PER_UNIT") or "8.00")

    # Owner notifications (Flask-Mail); unset MAIL_SERVER disables them
    MAIL_SERVER = os.environ.get("MAIL_SERVER")
    MAIL_PORT = int(os.environ.get("MAIL_PORT") or 587)
    MAIL_USE_TLS = _env_bool("MAIL_USE_TLS", "true")
    MAIL_USERNAME = os.environ.get("MAIL_USERNAME")
    MAIL_PASSWORD = os.environ.get("MAIL_PASSWORD")
    MAIL_DEFAULT_SENDER = os.environ.get("MAIL_DEFAULT_SENDER") or MAIL_USERNAME or "noreply@electricity.local"

    SEED_ADMIN_EMAIL = os.environ.get("SEED_ADMIN_EMAIL", "admin@power.local").strip().lower()
    SEED_ADMIN_PASSWORD = os.environ.get("SEED_ADMIN_PASSWORD")
