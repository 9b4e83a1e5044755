"""
Customer management routes (owner side)
"""
from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user, login_required

from models import db
from models.customer import Customer
from schemas import load
from schemas.customers import CustomerCreate, CustomerUpdate
from utils.errors import Conflict, NotFound
from utils.share_link import issue_share_token, customer_records
from utils.summary_helper import summarize, serialize_summary

customers_bp = Blueprint('customers', __name__, url_prefix='/api/customers')

DUPLICATE_METER_MSG = 'You already have a customer with this meter number'


def get_owned_customer(customer_id, active_only=True):
    """Customer by id, only if the current user added it."""
    query = Customer.query.filter_by(id=customer_id, added_by=current_user.id)
    if active_only:
        query = query.filter_by(is_active=True)
    customer = query.first()
    if not customer:
        raise NotFound('Customer not found')
    return customer


def _meter_taken(meter_number, exclude_id=None):
    # Inactive customers keep their meter number
    query = Customer.query.filter_by(added_by=current_user.id, meter_number=meter_number)
    if exclude_id is not None:
        query = query.filter(Customer.id != exclude_id)
    return query.first() is not None


@customers_bp.route('', methods=['GET'])
@login_required
def list_customers():
    customers = Customer.query.filter_by(
        added_by=current_user.id, is_active=True
    ).order_by(Customer.created_at.desc(), Customer.id.desc()).all()
    return jsonify({'success': True, 'customers': [c.to_dict() for c in customers]})


@customers_bp.route('', methods=['POST'])
@login_required
def create_customer():
    data = load(CustomerCreate)
    if _meter_taken(data.meter_number):
        raise Conflict(DUPLICATE_METER_MSG, code='DUPLICATE_FIELD', field='meter_number')

    customer = Customer(added_by=current_user.id, **data.model_dump())
    db.session.add(customer)
    db.session.commit()
    current_app.logger.info("Customer %s added by user %s", customer.id, current_user.id)
    return jsonify({'success': True, 'message': 'Customer added successfully', 'customer': customer.to_dict()}), 201


@customers_bp.route('/<int:customer_id>', methods=['GET'])
@login_required
def get_customer(customer_id):
    customer = get_owned_customer(customer_id)
    return jsonify({'success': True, 'customer': customer.to_dict()})


@customers_bp.route('/<int:customer_id>', methods=['PUT'])
@login_required
def update_customer(customer_id):
    """Partial update; the meter number stays unique among this owner's customers"""
    customer = get_owned_customer(customer_id)
    data = load(CustomerUpdate)
    changes = data.model_dump(exclude_none=True)
    if changes.get('email') == '':
        changes['email'] = None

    meter_number = changes.get('meter_number')
    if meter_number and meter_number != customer.meter_number and _meter_taken(meter_number, customer.id):
        raise Conflict(DUPLICATE_METER_MSG, code='DUPLICATE_FIELD', field='meter_number')

    for field, value in changes.items():
        setattr(customer, field, value)
    db.session.commit()
    return jsonify({'success': True, 'message': 'Customer updated successfully', 'customer': customer.to_dict()})


@customers_bp.route('/<int:customer_id>', methods=['DELETE'])
@login_required
def delete_customer(customer_id):
    """Soft delete; the customer's records stay with the owner"""
    customer = get_owned_customer(customer_id)
    customer.is_active = False
    db.session.commit()
    current_app.logger.info("Customer %s deactivated by user %s", customer.id, current_user.id)
    return jsonify({'success': True, 'message': 'Customer deleted successfully'})


@customers_bp.route('/<int:customer_id>/summary', methods=['GET'])
@login_required
def customer_summary(customer_id):
    """Current-month and lifetime aggregates for one customer"""
    customer = get_owned_customer(customer_id, active_only=False)
    summary = serialize_summary(summarize(customer_records(customer)))
    return jsonify({'success': True, 'customer': customer.to_dict(), **summary})


@customers_bp.route('/<int:customer_id>/share-link', methods=['POST'])
@login_required
def share_link(customer_id):
    """Issue (or return the existing) share link for a customer"""
    customer = get_owned_customer(customer_id)
    token = issue_share_token(customer)
    db.session.commit()
    return jsonify({
        'success': True,
        'share_link': f"{request.host_url}share/{token}",
        'share_token': token,
    })
