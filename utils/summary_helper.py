"""
Monthly and lifetime rollups over a set of electricity records.
Month boundaries use server local time and each record's creation time.
Sums use the stored, already-rounded per-record amounts.
"""
from datetime import datetime, timedelta
from decimal import Decimal

from utils.payment_status_helper import PAID


def month_bounds(now=None):
    """(first instant, last instant) of the calendar month containing now."""
    now = now or datetime.now()
    start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if start.month == 12:
        next_start = start.replace(year=start.year + 1, month=1)
    else:
        next_start = start.replace(month=start.month + 1)
    return start, next_start - timedelta(microseconds=1)


def previous_month_bounds(now=None):
    start, _ = month_bounds(now)
    return month_bounds(start - timedelta(days=1))


def _in_range(record, start, end):
    return record.created_at is not None and start <= record.created_at <= end


def _amount(record):
    return Decimal(record.total_amount or 0)


def totals(records):
    """Amount, paid, unpaid and count over records."""
    amount = sum((_amount(r) for r in records), Decimal('0'))
    paid = sum((_amount(r) for r in records if r.payment_status == PAID), Decimal('0'))
    return {
        'amount': amount,
        'paid': paid,
        'unpaid': amount - paid,
        'records': len(records),
    }


def units(records):
    return sum(r.units_consumed or 0 for r in records)


def summarize(records, now=None):
    """
    Current-month and lifetime aggregates for one (user, customer) record set.
    Monetary values are Decimal; use serialize_summary for JSON.
    """
    records = list(records)
    start, end = month_bounds(now)
    prev_start, prev_end = previous_month_bounds(now)

    current = [r for r in records if _in_range(r, start, end)]
    previous = [r for r in records if _in_range(r, prev_start, prev_end)]

    current_month = totals(current)
    current_month['units'] = units(current)
    current_month['previous_units'] = units(previous)

    return {
        'current_month': current_month,
        'total': totals(records),
    }


def customer_stats(records):
    """Per-customer lifetime stats for the admin customer list."""
    records = list(records)
    paid_count = sum(1 for r in records if r.payment_status == PAID)
    lifetime = totals(records)
    return {
        'total_units': units(records),
        'total_amount': float(lifetime['amount']),
        'paid_amount': float(lifetime['paid']),
        'unpaid_amount': float(lifetime['unpaid']),
        'paid_count': paid_count,
        'unpaid_count': len(records) - paid_count,
        'total_records': len(records),
    }


def _jsonable(section):
    return {k: float(v) if isinstance(v, Decimal) else v for k, v in section.items()}


def serialize_summary(summary):
    return {name: _jsonable(section) for name, section in summary.items()}
