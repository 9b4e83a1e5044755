"""
Admin record routes: all records, status override, export
"""
from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user

from models import db
from models.electricity_record import ElectricityRecord
from schemas import load
from schemas.records import AdminPaymentUpdate
from utils.auth_utils import admin_required
from utils.errors import NotFound
from utils.export_helper import records_csv_response
from utils.payment_status_helper import normalize_status, transition

admin_records_bp = Blueprint('admin_records', __name__, url_prefix='/api/admin')


def _records_query():
    query = ElectricityRecord.query
    status = request.args.get('status', '').strip()
    if status:
        query = query.filter_by(payment_status=normalize_status(status))
    return query.order_by(ElectricityRecord.created_at.desc(), ElectricityRecord.id.desc())


@admin_records_bp.route('/records', methods=['GET'])
@admin_required
def records():
    """All records across owners; optional ?status= filter"""
    records_list = _records_query().all()
    result = []
    for record in records_list:
        data = record.to_dict(include_customer=True)
        data['user'] = {'id': record.user.id, 'name': record.user.name, 'email': record.user.email}
        result.append(data)
    return jsonify({'success': True, 'records': result})


@admin_records_bp.route('/records/<int:record_id>/payment', methods=['PUT'])
@admin_required
def update_payment(record_id):
    """Set any status, including cancelled"""
    record = db.session.get(ElectricityRecord, record_id)
    if not record:
        raise NotFound('Record not found')

    data = load(AdminPaymentUpdate)
    previous = record.payment_status
    transition(record, data.status)
    db.session.commit()
    current_app.logger.info("Admin %s changed record %s status %s -> %s",
                            current_user.id, record.id, previous, record.payment_status)
    return jsonify({'success': True, 'message': 'Payment status updated', 'record': record.to_dict()})


@admin_records_bp.route('/records/export.csv', methods=['GET'])
@admin_required
def export_csv():
    return records_csv_response(_records_query().all(), include_owner=True)
