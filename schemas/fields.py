"""
Reusable annotated field types for the request schemas.
"""
from typing import Annotated

from pydantic import AfterValidator, BeforeValidator, StringConstraints

from utils.validators import (
    NAME_RE, validate_email, validate_phone,
    validate_meter_number, normalize_meter_number,
)


def _email(value):
    value = value.strip().lower()
    if not validate_email(value):
        raise ValueError('Please provide a valid email address')
    return value


def _email_or_blank(value):
    return _email(value) if value else ''


def _name(value):
    if not NAME_RE.match(value):
        raise ValueError('Name can only contain letters and spaces')
    return value


def _phone(value):
    if not validate_phone(value):
        raise ValueError('Please provide a valid phone number (8-15 digits, may start with +)')
    return value


def _meter(value):
    if not validate_meter_number(value):
        raise ValueError('Meter number must be 6-12 alphanumeric characters')
    return value


def _upper(value):
    return normalize_meter_number(value) if isinstance(value, str) else value


Email = Annotated[str, AfterValidator(_email)]
# '' clears an optional email on update
ClearableEmail = Annotated[str, AfterValidator(_email_or_blank)]
PersonName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=50), AfterValidator(_name)]
DisplayName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=50)]
Address = Annotated[str, StringConstraints(strip_whitespace=True, min_length=10, max_length=200)]
Phone = Annotated[str, StringConstraints(strip_whitespace=True), AfterValidator(_phone)]
MeterNumber = Annotated[str, BeforeValidator(_upper), AfterValidator(_meter)]
