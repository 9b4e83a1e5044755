"""
Models package for the Electricity Record application
"""
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

# Import all models here to ensure they're registered
from models.user import User
from models.customer import Customer
from models.electricity_record import ElectricityRecord
from models.auth_attempt import AuthAttempt

__all__ = [
    'db',
    'User',
    'Customer',
    'ElectricityRecord',
    'AuthAttempt',
]
