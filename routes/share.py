"""
Share-link routes: used by customers without an account
"""
from flask import Blueprint, current_app, jsonify, request

from models import db
from models.electricity_record import ElectricityRecord
from schemas import load
from schemas.customers import ShareVerifyRequest
from utils.errors import Forbidden, NotFound
from utils.mail import send_payment_submitted_email
from utils.payment_status_helper import InvalidTransitionError, can_submit_payment, submit_payment_evidence
from utils.share_link import build_share_view, find_shared_customer, phones_match
from utils.uploads import save_image

share_bp = Blueprint('share', __name__, url_prefix='/api')

PHONE_MISMATCH_MSG = 'Phone number does not match our records'


@share_bp.route('/customers/share/<token>/verify', methods=['POST'])
def verify_share(token):
    """Phone-gated, read-only view of one customer's bills"""
    customer = find_shared_customer(token)
    if not customer:
        raise NotFound('Invalid share link')

    data = load(ShareVerifyRequest)
    if not phones_match(data.phone, customer.phone):
        current_app.logger.info("Share verification failed for customer %s", customer.id)
        raise Forbidden(PHONE_MISMATCH_MSG, code='PHONE_MISMATCH')

    return jsonify({'success': True, **build_share_view(customer)})


@share_bp.route('/records/<int:record_id>/submit-payment', methods=['POST'])
def submit_payment(record_id):
    """Customer uploads a payment screenshot; the owner reviews it"""
    record = db.session.get(ElectricityRecord, record_id)
    if not record or not record.is_active:
        raise NotFound('Record not found')
    if not can_submit_payment(record):
        raise InvalidTransitionError(f'Payment cannot be submitted for a {record.payment_status} record')

    path = save_image(request.files.get('payment_screenshot'), 'payment_screenshot')
    submit_payment_evidence(record, path)
    db.session.commit()

    try:
        send_payment_submitted_email(record, record.user, record.customer)
    except Exception as e:
        current_app.logger.error(f"Payment notification failed for record {record.id}: {str(e)}")

    return jsonify({
        'success': True,
        'message': 'Payment screenshot submitted successfully. The owner will verify it shortly.',
        'record': {
            'id': record.id,
            'payment_status': record.payment_status,
            'payment_screenshot': record.payment_screenshot,
            'payment_submitted_at': record.payment_submitted_at.isoformat(),
        },
    })
