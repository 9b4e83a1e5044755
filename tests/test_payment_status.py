from datetime import date, datetime
from types import SimpleNamespace

import pytest

from utils.payment_status_helper import (
    CANCELLED, OVERDUE, PAID, PENDING,
    InvalidStatusError, InvalidTransitionError,
    apply_initial_status, approve_payment, can_submit_payment, cancel, change_due_date,
    initial_status, is_overdue, mark_paid, mark_unpaid, normalize_status,
    reject_payment, submit_payment_evidence, transition,
)

NOW = datetime(2024, 1, 2, 10, 30)


def make_record(status=PENDING, due=date(2024, 1, 10), **extra):
    fields = dict(
        payment_status=status,
        payment_date=None,
        due_date=due,
        payment_screenshot=None,
        payment_submitted_at=None,
    )
    fields.update(extra)
    return SimpleNamespace(**fields)


def test_initial_status_follows_due_date():
    assert initial_status(date(2024, 1, 1), now=NOW) == OVERDUE
    assert initial_status(date(2024, 1, 2), now=NOW) == PENDING
    assert initial_status(date(2024, 2, 1), now=NOW) == PENDING


def test_record_due_before_creation_starts_overdue():
    record = make_record(status=None, due=date(2024, 1, 1))
    assert apply_initial_status(record, now=datetime(2024, 1, 2)) == OVERDUE


def test_explicit_initial_status_wins():
    record = make_record(status=None, due=date(2024, 1, 1))
    assert apply_initial_status(record, PAID, now=NOW) == PAID
    assert record.payment_date == NOW


def test_due_date_change_to_past_marks_overdue():
    record = make_record()
    change_due_date(record, date(2023, 12, 1), now=NOW)
    assert record.payment_status == OVERDUE


def test_paid_record_is_never_flipped_by_due_date():
    record = make_record()
    mark_paid(record, now=NOW)
    change_due_date(record, date(2023, 12, 1), now=NOW)
    assert record.payment_status == PAID
    assert record.payment_date == NOW


def test_cancelled_record_is_never_flipped_by_due_date():
    record = make_record(status=CANCELLED)
    change_due_date(record, date(2023, 12, 1), now=NOW)
    assert record.payment_status == CANCELLED


def test_future_due_date_change_keeps_status():
    record = make_record(status=OVERDUE, due=date(2023, 12, 1))
    change_due_date(record, date(2024, 3, 1), now=NOW)
    assert record.payment_status == OVERDUE


def test_mark_unpaid_clears_payment_date():
    record = make_record()
    mark_paid(record, now=NOW)
    mark_unpaid(record)
    assert record.payment_status == PENDING
    assert record.payment_date is None


def test_unpaid_alias_only_when_allowed():
    assert normalize_status('Unpaid', allow_aliases=True) == PENDING
    with pytest.raises(InvalidStatusError):
        normalize_status('unpaid')


@pytest.mark.parametrize('value', ['refunded', '', None, 3])
def test_unknown_status_is_rejected_without_change(value):
    record = make_record()
    with pytest.raises(InvalidStatusError):
        transition(record, value)
    assert record.payment_status == PENDING


def test_cancelled_is_terminal():
    record = make_record()
    cancel(record)
    for target in (PENDING, PAID, OVERDUE):
        with pytest.raises(InvalidTransitionError):
            transition(record, target)
    assert record.payment_status == CANCELLED


def test_same_status_is_noop():
    record = make_record(status=PAID, payment_date=NOW)
    assert transition(record, PAID, now=datetime(2024, 1, 5)) == PAID
    assert record.payment_date == NOW


def test_paid_cannot_jump_to_overdue():
    record = make_record(status=PAID, payment_date=NOW)
    with pytest.raises(InvalidTransitionError):
        transition(record, OVERDUE)


def test_is_overdue_flag():
    assert is_overdue(make_record(status=PENDING, due=date(2024, 1, 1)), now=NOW)
    assert not is_overdue(make_record(status=PAID, due=date(2024, 1, 1)), now=NOW)
    assert not is_overdue(make_record(status=PENDING, due=date(2024, 1, 2)), now=NOW)


@pytest.mark.parametrize('status', [PENDING, OVERDUE])
def test_submitting_evidence_keeps_status(status):
    record = make_record(status=status)
    submit_payment_evidence(record, '/uploads/proof.png', now=NOW)
    assert record.payment_status == status
    assert record.payment_screenshot == '/uploads/proof.png'
    assert record.payment_submitted_at == NOW


@pytest.mark.parametrize('status', [PAID, CANCELLED])
def test_settled_records_reject_evidence(status):
    record = make_record(status=status)
    assert not can_submit_payment(record)
    with pytest.raises(InvalidTransitionError):
        submit_payment_evidence(record, '/uploads/proof.png', now=NOW)
    assert record.payment_screenshot is None


def test_approve_requires_screenshot():
    record = make_record()
    with pytest.raises(InvalidTransitionError):
        approve_payment(record, now=NOW)
    submit_payment_evidence(record, '/uploads/proof.png', now=NOW)
    approve_payment(record, now=NOW)
    assert record.payment_status == PAID
    assert record.payment_date == NOW


def test_reject_clears_evidence_and_keeps_status():
    record = make_record(status=OVERDUE)
    submit_payment_evidence(record, '/uploads/proof.png', now=NOW)
    reject_payment(record)
    assert record.payment_status == OVERDUE
    assert record.payment_screenshot is None
    assert record.payment_submitted_at is None
    with pytest.raises(InvalidTransitionError):
        reject_payment(record)
