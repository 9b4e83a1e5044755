"""
Owner-side electricity record routes
"""
from datetime import date

from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user, login_required

from models import db
from models.customer import Customer
from models.electricity_record import ElectricityRecord
from schemas import load
from schemas.records import RecordCreate, RecordUpdate, PaymentStatusUpdate
from utils.billing import compute_bill, validate_rate
from utils.errors import Forbidden, NotFound, ValidationFailed
from utils.export_helper import records_csv_response
from utils.payment_status_helper import (
    SETTLED_STATUSES, apply_initial_status, change_due_date, transition,
    approve_payment, reject_payment,
)
from utils.summary_helper import summarize, serialize_summary
from utils.uploads import optional_image

records_bp = Blueprint('records', __name__, url_prefix='/api/records')


def get_owned_record(record_id):
    """Record by id, only if it belongs to the current user."""
    record = db.session.get(ElectricityRecord, record_id)
    if not record:
        raise NotFound('Record not found')
    if record.user_id != current_user.id:
        raise Forbidden('You can only update your own records')
    return record


def _owner_records_query():
    query = ElectricityRecord.query.filter_by(user_id=current_user.id, is_active=True)
    customer_id = request.args.get('customer_id', type=int)
    if customer_id is not None:
        query = query.filter_by(customer_id=customer_id)
    return query.order_by(ElectricityRecord.created_at.desc(), ElectricityRecord.id.desc())


@records_bp.route('/mine', methods=['GET'])
@login_required
def my_records():
    """Owner's records, newest first; ?customer_id= narrows to one customer"""
    records = _owner_records_query().all()
    return jsonify({'success': True, 'records': [r.to_dict(include_customer=True) for r in records]})


@records_bp.route('/last', methods=['GET'])
@login_required
def last_record():
    """Latest record for the owner's meter, or for ?customer_id= (used to prefill the previous reading)"""
    last = ElectricityRecord.latest_for(current_user.id, request.args.get('customer_id', type=int))
    return jsonify({'success': True, 'record': last.to_dict() if last else None})


@records_bp.route('/summary', methods=['GET'])
@login_required
def my_summary():
    """Monthly and lifetime totals for the owner's own meter"""
    records = ElectricityRecord.query.filter_by(
        user_id=current_user.id, customer_id=None, is_active=True
    ).all()
    return jsonify({'success': True, 'meter_number': current_user.meter_number,
                    **serialize_summary(summarize(records))})


@records_bp.route('/pending-payments', methods=['GET'])
@login_required
def pending_payments():
    """Records with a submitted screenshot awaiting the owner's review"""
    records = ElectricityRecord.query.filter(
        ElectricityRecord.user_id == current_user.id,
        ElectricityRecord.payment_screenshot.isnot(None),
        ElectricityRecord.payment_status.notin_(SETTLED_STATUSES),
    ).order_by(ElectricityRecord.payment_submitted_at.desc()).all()
    return jsonify({'success': True, 'records': [r.to_dict(include_customer=True) for r in records]})


@records_bp.route('/export.csv', methods=['GET'])
@login_required
def export_csv():
    """Export the owner's records (same ?customer_id= filter as /mine)"""
    return records_csv_response(_owner_records_query().all())


@records_bp.route('', methods=['POST'])
@login_required
def create_record():
    """Create a record from JSON or multipart form (optional bill_image file)"""
    data = load(RecordCreate)

    customer = None
    meter_number = current_user.meter_number
    if data.customer_id is not None:
        customer = Customer.query.filter_by(
            id=data.customer_id, added_by=current_user.id, is_active=True
        ).first()
        if not customer:
            raise NotFound('Customer not found or you do not have access to this customer')
        meter_number = customer.meter_number

    if data.due_date < date.today():
        raise ValidationFailed.for_field('due_date', 'Due date must be today or in the future')

    previous_reading = data.previous_reading
    if previous_reading is None:
        last = ElectricityRecord.latest_for(current_user.id, customer.id if customer else None)
        previous_reading = last.current_reading if last else 0

    rate = data.rate_per_unit if data.rate_per_unit is not None else current_app.config['DEFAULT_RATE_PER_UNIT']
    rate = validate_rate(rate)
    units, amount = compute_bill(previous_reading, data.current_reading, rate)

    record = ElectricityRecord(
        user_id=current_user.id,
        customer_id=customer.id if customer else None,
        meter_number=meter_number,
        previous_reading=previous_reading,
        current_reading=data.current_reading,
        units_consumed=units,
        rate_per_unit=rate,
        total_amount=amount,
        due_date=data.due_date,
        remarks=data.remarks,
    )
    apply_initial_status(record, data.payment_status)
    record.bill_image = optional_image(request.files, 'bill_image')

    db.session.add(record)
    db.session.commit()
    current_app.logger.info("Record %s created for meter %s (%s units)", record.id, meter_number, units)
    return jsonify({'success': True, 'record': record.to_dict(include_customer=True)}), 201


@records_bp.route('/<int:record_id>', methods=['PUT'])
@login_required
def update_record(record_id):
    """Update readings, rate, due date, remarks or bill image; derived fields are recomputed"""
    record = get_owned_record(record_id)
    data = load(RecordUpdate)

    current_reading = data.current_reading if data.current_reading is not None else record.current_reading
    rate = data.rate_per_unit if data.rate_per_unit is not None else record.rate_per_unit
    # Validate the full reading pair before touching the record
    compute_bill(record.previous_reading, current_reading, rate)

    bill_image = optional_image(request.files, 'bill_image')

    record.current_reading = current_reading
    record.rate_per_unit = rate
    record.recalculate()
    if data.due_date is not None:
        change_due_date(record, data.due_date)
    if data.remarks is not None:
        record.remarks = data.remarks
    if bill_image:
        record.bill_image = bill_image

    db.session.commit()
    return jsonify({'success': True, 'record': record.to_dict(include_customer=True)})


@records_bp.route('/<int:record_id>/payment-status', methods=['PUT'])
@login_required
def update_payment_status(record_id):
    """Owner marks a record paid, unpaid (pending) or overdue"""
    record = get_owned_record(record_id)
    data = load(PaymentStatusUpdate)
    transition(record, data.status)
    db.session.commit()
    return jsonify({'success': True, 'record': record.to_dict()})


@records_bp.route('/<int:record_id>/approve-payment', methods=['PUT'])
@login_required
def approve_submitted_payment(record_id):
    """Owner verified the payment screenshot: mark paid"""
    record = get_owned_record(record_id)
    approve_payment(record)
    db.session.commit()
    return jsonify({'success': True, 'message': 'Payment approved successfully.', 'record': record.to_dict()})


@records_bp.route('/<int:record_id>/reject-payment', methods=['PUT'])
@login_required
def reject_submitted_payment(record_id):
    """Owner rejected the screenshot: clear it so the customer can resubmit"""
    record = get_owned_record(record_id)
    reject_payment(record)
    db.session.commit()
    return jsonify({
        'success': True,
        'message': 'Payment rejected. Customer can submit a new payment screenshot.',
        'record': record.to_dict(),
    })
