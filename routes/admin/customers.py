"""
Admin customer overview routes
"""
from flask import Blueprint, jsonify

from models.customer import Customer
from utils.auth_utils import admin_required
from utils.share_link import customer_records
from utils.summary_helper import customer_stats

admin_customers_bp = Blueprint('admin_customers', __name__, url_prefix='/api/admin')


@admin_customers_bp.route('/customers', methods=['GET'])
@admin_required
def customers():
    """Every active customer with its owner and lifetime billing stats"""
    customers_list = Customer.query.filter_by(is_active=True).order_by(Customer.created_at.desc()).all()

    result = []
    for customer in customers_list:
        data = customer.to_dict()
        owner = customer.owner
        data['owner'] = {
            'id': owner.id,
            'name': owner.name,
            'email': owner.email,
            'meter_number': owner.meter_number,
        } if owner else None
        data['stats'] = customer_stats(customer_records(customer))
        result.append(data)

    return jsonify({'success': True, 'customers': result})
