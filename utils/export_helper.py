"""
CSV export of electricity records
"""
import csv
import io
from datetime import datetime

from flask import make_response

OWNER_COLUMNS = ['User', 'Email']
RECORD_COLUMNS = [
    'Date', 'Customer', 'Meter Number', 'Previous Reading', 'Current Reading',
    'Units Consumed', 'Rate/Unit', 'Amount', 'Due Date', 'Status', 'Payment Date', 'Remarks',
]


def _record_row(record):
    return [
        record.created_at.strftime('%d-%m-%Y') if record.created_at else 'N/A',
        record.customer.name if record.customer else 'Self',
        record.meter_number,
        record.previous_reading,
        record.current_reading,
        record.units_consumed,
        f"{float(record.rate_per_unit):.2f}" if record.rate_per_unit is not None else '',
        f"{float(record.total_amount or 0):.2f}",
        record.due_date.strftime('%d-%m-%Y') if record.due_date else '',
        record.payment_status,
        record.payment_date.strftime('%d-%m-%Y') if record.payment_date else '',
        record.remarks or '',
    ]


def records_csv_response(records, include_owner=False):
    """Attachment response with one row per record."""
    output = io.StringIO()
    writer = csv.writer(output)

    writer.writerow((OWNER_COLUMNS if include_owner else []) + RECORD_COLUMNS)
    for record in records:
        row = _record_row(record)
        if include_owner:
            owner = record.user
            row = [owner.name if owner else 'N/A', owner.email if owner else ''] + row
        writer.writerow(row)

    response = make_response(output.getvalue())
    response.headers['Content-Type'] = 'text/csv'
    response.headers['Content-Disposition'] = (
        f'attachment; filename=electricity-records-{datetime.now().strftime("%Y%m%d_%H%M%S")}.csv'
    )
    return response
