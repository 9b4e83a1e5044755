"""
Public routes: health checks and uploaded images
"""
from datetime import datetime

from flask import Blueprint, current_app, jsonify, send_from_directory
from sqlalchemy import text

from models import db

public_bp = Blueprint('public', __name__)


@public_bp.route('/api/health')
def health():
    """Liveness probe"""
    return jsonify({'success': True, 'status': 'ok', 'timestamp': datetime.now().isoformat()})


@public_bp.route('/api/status')
def status():
    """Service and database status"""
    try:
        db.session.execute(text('SELECT 1'))
        database = 'connected'
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Database status check failed: {str(e)}")
        database = 'unavailable'
    body = {
        'success': database == 'connected',
        'status': 'running',
        'database': database,
        'timestamp': datetime.now().isoformat(),
    }
    return jsonify(body), 200 if database == 'connected' else 503


@public_bp.route('/uploads/<path:filename>')
def uploaded_file(filename):
    """Bill images and payment screenshots"""
    return send_from_directory(current_app.config['UPLOAD_FOLDER'], filename)
