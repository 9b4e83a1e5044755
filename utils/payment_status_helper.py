"""
Centralized payment status logic for electricity records.
Single source for initial status, due-date driven overdue transitions,
explicit owner/admin actions and payment-screenshot review.

Works on any object exposing payment_status, payment_date, due_date,
payment_screenshot and payment_submitted_at. Caller commits.
"""
from datetime import date, datetime

PENDING = 'pending'
PAID = 'paid'
OVERDUE = 'overdue'
CANCELLED = 'cancelled'

PAYMENT_STATUSES = (PENDING, PAID, OVERDUE, CANCELLED)

# Statuses the due-date check never overrides
SETTLED_STATUSES = (PAID, CANCELLED)

# Explicit transitions; cancelled is terminal
ALLOWED_TRANSITIONS = {
    PENDING: {PAID, OVERDUE, CANCELLED},
    OVERDUE: {PAID, PENDING, CANCELLED},
    PAID: {PENDING, CANCELLED},
    CANCELLED: set(),
}

# Owner-facing alias used by the "mark unpaid" action
STATUS_ALIASES = {'unpaid': PENDING}


class InvalidStatusError(ValueError):
    """Status value outside the enum"""


class InvalidTransitionError(ValueError):
    """Status change not allowed from the record's current state"""


def normalize_status(value, allow_aliases=False):
    """Return the canonical status for value or raise InvalidStatusError."""
    status = (value or '').strip().lower() if isinstance(value, str) else value
    if allow_aliases and status in STATUS_ALIASES:
        status = STATUS_ALIASES[status]
    if status not in PAYMENT_STATUSES:
        raise InvalidStatusError(
            'Payment status must be one of: ' + ', '.join(PAYMENT_STATUSES)
        )
    return status


def _today(now):
    if now is None:
        return date.today()
    return now.date() if isinstance(now, datetime) else now


def _due(due_date):
    return due_date.date() if isinstance(due_date, datetime) else due_date


def is_past_due(due_date, now=None):
    """A bill is past due from the day after its due date."""
    return due_date is not None and _due(due_date) < _today(now)


def initial_status(due_date, now=None):
    """Status for a new record created without an explicit status."""
    return OVERDUE if is_past_due(due_date, now) else PENDING


def is_overdue(record, now=None):
    """Display flag: unpaid and past due, whatever the stored status says."""
    return record.payment_status not in SETTLED_STATUSES and is_past_due(record.due_date, now)


def apply_initial_status(record, requested=None, now=None):
    """
    Set the status of a record being created. An explicit status wins;
    paid stamps the payment date.
    """
    if requested is None:
        record.payment_status = initial_status(record.due_date, now)
        return record.payment_status
    status = normalize_status(requested)
    record.payment_status = status
    if status == PAID:
        record.payment_date = now or datetime.now()
    return status


def change_due_date(record, new_due_date, now=None):
    """
    Move the due date. A record that is not paid or cancelled becomes
    overdue when the new date is already past; nothing else changes.
    """
    record.due_date = new_due_date
    if record.payment_status not in SETTLED_STATUSES and is_past_due(new_due_date, now):
        record.payment_status = OVERDUE
    return record.payment_status


def transition(record, target, now=None, allow_aliases=False):
    """
    Explicit status change requested by the owner or an admin.
    Validates the value and the transition before touching the record.
    """
    target = normalize_status(target, allow_aliases=allow_aliases)
    current = record.payment_status
    if target == current:
        return current
    if target not in ALLOWED_TRANSITIONS.get(current, set()):
        raise InvalidTransitionError(f'Cannot change payment status from {current} to {target}')

    record.payment_status = target
    if target == PAID:
        record.payment_date = now or datetime.now()
    elif current == PAID:
        record.payment_date = None
    return target


def mark_paid(record, now=None):
    return transition(record, PAID, now=now)


def mark_unpaid(record):
    """Reverse a mistaken paid mark."""
    return transition(record, PENDING)


def cancel(record):
    return transition(record, CANCELLED)


def can_submit_payment(record):
    return record.payment_status not in SETTLED_STATUSES


def submit_payment_evidence(record, screenshot_path, now=None):
    """
    Attach a payment screenshot. The status is left as it is: the owner
    approves or rejects the evidence explicitly.
    """
    if not can_submit_payment(record):
        raise InvalidTransitionError(f'Payment cannot be submitted for a {record.payment_status} record')
    record.payment_screenshot = screenshot_path
    record.payment_submitted_at = now or datetime.now()
    return record


def approve_payment(record, now=None):
    """Owner verified the screenshot: record becomes paid."""
    if not record.payment_screenshot:
        raise InvalidTransitionError('No payment screenshot to approve')
    return mark_paid(record, now=now)


def reject_payment(record):
    """Owner rejected the screenshot: clear it so the customer can resubmit."""
    if not record.payment_screenshot:
        raise InvalidTransitionError('No payment screenshot to reject')
    if record.payment_status in SETTLED_STATUSES:
        raise InvalidTransitionError(f'Cannot reject payment for a {record.payment_status} record')
    record.payment_screenshot = None
    record.payment_submitted_at = None
    return record.payment_status
