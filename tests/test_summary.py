from datetime import datetime
from decimal import Decimal
from types import SimpleNamespace

from utils.summary_helper import (
    customer_stats, month_bounds, previous_month_bounds, serialize_summary, summarize,
)

NOW = datetime(2024, 3, 15, 12, 0)


def rec(created_at, amount, status='pending', units=10):
    return SimpleNamespace(
        created_at=created_at,
        total_amount=Decimal(amount),
        payment_status=status,
        units_consumed=units,
    )


def test_month_bounds():
    start, end = month_bounds(NOW)
    assert start == datetime(2024, 3, 1)
    assert end == datetime(2024, 3, 31, 23, 59, 59, 999999)


def test_month_bounds_across_year_end():
    start, end = month_bounds(datetime(2023, 12, 31, 23, 0))
    assert start == datetime(2023, 12, 1)
    assert end == datetime(2023, 12, 31, 23, 59, 59, 999999)
    prev_start, prev_end = previous_month_bounds(datetime(2024, 1, 5))
    assert prev_start == datetime(2023, 12, 1)
    assert prev_end == datetime(2023, 12, 31, 23, 59, 59, 999999)


def test_summarize_splits_current_month_and_lifetime():
    records = [
        rec(datetime(2024, 3, 1, 0, 0), '400.00', 'paid', units=50),
        rec(datetime(2024, 3, 31, 23, 59, 59), '80.50', 'pending', units=10),
        rec(datetime(2024, 2, 10), '120.00', 'overdue', units=15),
        rec(datetime(2024, 1, 10), '16.00', 'paid', units=2),
    ]
    summary = summarize(records, now=NOW)

    current = summary['current_month']
    assert current['amount'] == Decimal('480.50')
    assert current['paid'] == Decimal('400.00')
    assert current['unpaid'] == Decimal('80.50')
    assert current['records'] == 2
    assert current['units'] == 60
    assert current['previous_units'] == 15

    total = summary['total']
    assert total['amount'] == Decimal('616.50')
    assert total['paid'] == Decimal('416.00')
    assert total['unpaid'] == Decimal('200.50')
    assert total['records'] == 4


def test_empty_summary():
    summary = serialize_summary(summarize([], now=NOW))
    assert summary['current_month'] == {
        'amount': 0.0, 'paid': 0.0, 'unpaid': 0.0, 'records': 0, 'units': 0, 'previous_units': 0,
    }
    assert summary['total'] == {'amount': 0.0, 'paid': 0.0, 'unpaid': 0.0, 'records': 0}


def test_customer_stats():
    stats = customer_stats([
        rec(NOW, '400.00', 'paid', units=50),
        rec(NOW, '80.00', 'pending', units=10),
        rec(NOW, '20.00', 'cancelled', units=0),
    ])
    assert stats == {
        'total_units': 60,
        'total_amount': 500.0,
        'paid_amount': 400.0,
        'unpaid_amount': 100.0,
        'paid_count': 1,
        'unpaid_count': 2,
        'total_records': 3,
    }
