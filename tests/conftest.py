import io
from datetime import date, datetime, timedelta

import pytest
from flask import g

from app import create_app
from config import Config
from models import db
from models.customer import Customer
from models.electricity_record import ElectricityRecord
from models.user import User
from utils.auth_utils import create_access_token

PASSWORD = 'Secret@123'


@pytest.fixture
def app(tmp_path):
    class TestConfig(Config):
        TESTING = True
        SQLALCHEMY_DATABASE_URI = 'sqlite://'
        UPLOAD_FOLDER = str(tmp_path / 'uploads')
        JWT_SECRET_KEY = 'test-jwt-secret'
        AUTH_RATE_LIMIT_MAX = 1000
        MAIL_SERVER = None
        MAIL_USERNAME = None
        SEED_ADMIN_PASSWORD = None

    app = create_app(TestConfig)

    # Requests reuse the fixture's app context, so drop per-request auth state from g
    @app.before_request
    def _reset_request_user():
        g.pop('_login_user', None)
        g.pop('auth_error', None)

    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    counter = {'n': 0}

    def _make_user(role='user', **overrides):
        counter['n'] += 1
        n = counter['n']
        fields = {
            'name': f'Owner {chr(64 + n)}',
            'email': f'owner{n}@example.com',
            'meter_number': f'MTR{n:06d}',
            'address': '12 Grid Street, Sector 4',
            'phone': f'98765432{n:02d}',
            'role': role,
        }
        fields.update(overrides)
        user = User(**fields)
        user.set_password(PASSWORD)
        db.session.add(user)
        db.session.commit()
        return user

    return _make_user


@pytest.fixture
def auth_headers(app):
    def _auth_headers(user):
        return {'Authorization': f'Bearer {create_access_token(user)}'}

    return _auth_headers


@pytest.fixture
def make_customer(app):
    counter = {'n': 0}

    def _make_customer(owner, **overrides):
        counter['n'] += 1
        fields = {
            'added_by': owner.id,
            'name': 'Tenant One',
            'phone': '+1 (234) 567-8900',
            'meter_number': f'CUS{counter["n"]:06d}',
            'address': 'Flat 2, 12 Grid Street',
        }
        fields.update(overrides)
        customer = Customer(**fields)
        db.session.add(customer)
        db.session.commit()
        return customer

    return _make_customer


@pytest.fixture
def make_record(app):
    def _make_record(owner, customer=None, previous=100, current=150, **overrides):
        fields = {
            'user_id': owner.id,
            'customer_id': customer.id if customer else None,
            'meter_number': customer.meter_number if customer else owner.meter_number,
            'previous_reading': previous,
            'current_reading': current,
            'due_date': date.today() + timedelta(days=10),
        }
        fields.update(overrides)
        record = ElectricityRecord(**fields)
        db.session.add(record)
        db.session.commit()
        return record

    return _make_record


def image_upload(name='proof.png'):
    return io.BytesIO(b'\x89PNG\r\n\x1a\nfake-image-bytes'), name


def days_from_today(days):
    return (date.today() + timedelta(days=days)).isoformat()


def last_month(now=None):
    now = now or datetime.now()
    return now.replace(day=1) - timedelta(days=1)
