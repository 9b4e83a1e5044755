"""
Input format validators shared by the request schemas.
"""
import re

EMAIL_RE = re.compile(r'^\w+([.+-]?\w+)*@\w+([.-]?\w+)*(\.\w{2,})+$')
NAME_RE = re.compile(r'^[a-zA-Z\s]+$')
PHONE_RE = re.compile(r'^\+?[1-9]\d{7,15}$')
METER_RE = re.compile(r'^[A-Z0-9]{6,12}$')
UPI_RE = re.compile(r'^[a-zA-Z0-9.\-_]{2,256}@[a-zA-Z]{2,64}$')
PASSWORD_RE = re.compile(r'^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]+$')

PASSWORD_MIN_LENGTH = 8


def validate_email(email):
    """Return True if email looks valid"""
    return bool(email) and EMAIL_RE.match(email) is not None


def validate_password(password):
    """
    Validate password strength.
    Returns (is_valid, error_message).
    """
    if not password or len(password) < PASSWORD_MIN_LENGTH:
        return False, f'Password must be at least {PASSWORD_MIN_LENGTH} characters long'
    if not PASSWORD_RE.match(password):
        return False, ('Password must contain at least one uppercase letter, one lowercase letter, '
                       'one number, and one special character')
    return True, None


def normalize_meter_number(value):
    return (value or '').strip().upper()


def validate_meter_number(value):
    return METER_RE.match(value or '') is not None


def validate_phone(value):
    return PHONE_RE.match(value or '') is not None


def validate_upi_id(value):
    """Empty is allowed: the UPI id is optional."""
    return not value or UPI_RE.match(value) is not None
