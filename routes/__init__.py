"""
Routes package for the Electricity Record API
"""
# Export blueprints for registration in app.py
from routes.public import public_bp
from routes.auth import auth_bp
from routes.share import share_bp
from routes.user.records import records_bp
from routes.user.customers import customers_bp

__all__ = [
    'public_bp',
    'auth_bp',
    'records_bp',
    'customers_bp',
    'share_bp',
]
