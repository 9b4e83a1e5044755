"""
Share links: an opaque token per customer plus phone-number verification.
Possession of the token and knowledge of the registered phone grants read
access to that customer's billing summary.
"""
import re
import secrets

from models.customer import Customer
from models.electricity_record import ElectricityRecord
from utils.summary_helper import summarize, serialize_summary

SHARE_TOKEN_BYTES = 32  # 256 bits, 64 hex chars

_PHONE_SEPARATORS = re.compile(r'[\s\-().]')


def generate_share_token():
    return secrets.token_hex(SHARE_TOKEN_BYTES)


def issue_share_token(customer):
    """
    Return the customer's share token, generating it on first use.
    A token is never replaced once set. Caller commits.
    """
    if not customer.share_token:
        token = generate_share_token()
        while Customer.query.filter_by(share_token=token).first() is not None:
            token = generate_share_token()
        customer.share_token = token
    return customer.share_token


def normalize_phone(phone):
    """Strip spaces, dashes, parentheses and dots; a number without a leading '+' loses every '+'."""
    normalized = _PHONE_SEPARATORS.sub('', (phone or '').strip())
    if normalized.startswith('+'):
        return normalized
    return normalized.replace('+', '')


def phones_match(entered, registered):
    """Equal after normalization, with or without a leading '+' on either side."""
    a = normalize_phone(entered)
    b = normalize_phone(registered)
    a_bare = a.lstrip('+')
    b_bare = b.lstrip('+')
    if not a_bare or not b_bare:
        return False
    return a == b or a_bare == b_bare or a == b_bare or a_bare == b


def find_shared_customer(token):
    """Active customer holding token, or None."""
    if not token:
        return None
    return Customer.query.filter_by(share_token=token, is_active=True).first()


def share_record(record):
    return {
        'id': record.id,
        'date': record.created_at.isoformat() if record.created_at else None,
        'previous_reading': record.previous_reading,
        'current_reading': record.current_reading,
        'units_consumed': record.units_consumed,
        'rate_per_unit': float(record.rate_per_unit) if record.rate_per_unit is not None else None,
        'total_amount': float(record.total_amount or 0),
        'payment_status': record.payment_status,
        'payment_screenshot': record.payment_screenshot,
        'payment_submitted_at': record.payment_submitted_at.isoformat() if record.payment_submitted_at else None,
        'payment_date': record.payment_date.isoformat() if record.payment_date else None,
        'due_date': record.due_date.isoformat() if record.due_date else None,
        'remarks': record.remarks or '',
    }


def customer_records(customer):
    return ElectricityRecord.query.filter_by(
        user_id=customer.added_by,
        customer_id=customer.id,
    ).order_by(ElectricityRecord.created_at.desc(), ElectricityRecord.id.desc()).all()


def build_share_view(customer, now=None):
    """Everything the share page shows once the phone has been verified."""
    owner = customer.owner
    records = customer_records(customer)
    view = {
        'customer': customer.profile(),
        'user': {
            'name': owner.name,
            'email': owner.email,
            'meter_number': owner.meter_number,
            'upi_id': owner.upi_id or None,
        },
        'records': [share_record(r) for r in records],
    }
    view.update(serialize_summary(summarize(records, now=now)))
    return view
