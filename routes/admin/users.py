"""
Admin user management routes
"""
from flask import Blueprint, current_app, jsonify

from models import db
from models.user import User
from schemas import load
from schemas.auth import UpiUpdate
from utils.auth_utils import admin_required
from utils.errors import NotFound

admin_users_bp = Blueprint('admin_users', __name__, url_prefix='/api/admin')


@admin_users_bp.route('/users', methods=['GET'])
@admin_required
def users():
    users_list = User.query.order_by(User.created_at.desc()).all()
    return jsonify({'success': True, 'users': [u.to_dict() for u in users_list]})


@admin_users_bp.route('/users/<int:user_id>/upi', methods=['PUT'])
@admin_required
def update_upi(user_id):
    """Set or clear the UPI id a user's customers pay to"""
    user = db.session.get(User, user_id)
    if not user:
        raise NotFound('User not found')

    data = load(UpiUpdate)
    user.upi_id = data.upi_id
    db.session.commit()
    current_app.logger.info("UPI id for user %s updated by admin", user.id)
    return jsonify({'success': True, 'message': 'UPI ID updated successfully', 'user': user.to_dict()})
