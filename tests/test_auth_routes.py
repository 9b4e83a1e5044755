from datetime import datetime, timedelta, timezone

from models import db
from models.user import User
from utils.auth_utils import create_access_token

from conftest import PASSWORD

REGISTRATION = {
    'name': 'Asha Rao',
    'email': 'Asha@Example.com',
    'password': 'Str0ng@Pass',
    'meter_number': 'mtr123456',
    'address': '221 Power Lane, Block C',
    'phone': '+919876543210',
}


def login(client, email, password=PASSWORD):
    return client.post('/api/auth/login', json={'email': email, 'password': password})


def test_register_returns_token_and_profile(client):
    res = client.post('/api/auth/register', json=REGISTRATION)
    assert res.status_code == 201
    body = res.get_json()
    assert body['success'] is True
    assert body['data']['token']
    user = body['data']['user']
    assert user['email'] == 'asha@example.com'
    assert user['meter_number'] == 'MTR123456'
    assert user['role'] == 'user'
    assert 'password_hash' not in user


def test_register_rejects_duplicates(client):
    assert client.post('/api/auth/register', json=REGISTRATION).status_code == 201

    res = client.post('/api/auth/register', json=dict(REGISTRATION, meter_number='OTHER12345'))
    assert res.status_code == 409
    assert res.get_json()['message'] == 'Email already registered'

    res = client.post('/api/auth/register', json=dict(REGISTRATION, email='other@example.com'))
    assert res.status_code == 409
    assert res.get_json()['message'] == 'Meter number already registered'


def test_register_validation_errors_name_fields(client):
    res = client.post('/api/auth/register', json=dict(REGISTRATION, password='weak', phone='12'))
    assert res.status_code == 400
    body = res.get_json()
    assert body['code'] == 'VALIDATION_ERROR'
    fields = {e['field'] for e in body['errors']}
    assert {'password', 'phone'} <= fields


def test_login_success_resets_attempts(client, make_user):
    user = make_user()
    user.login_attempts = 3
    db.session.commit()

    res = login(client, user.email)
    assert res.status_code == 200
    assert res.get_json()['data']['user']['id'] == user.id
    db.session.refresh(user)
    assert user.login_attempts == 0
    assert user.last_login is not None


def test_login_unknown_email(client):
    res = login(client, 'nobody@example.com')
    assert res.status_code == 400
    assert res.get_json()['code'] == 'INVALID_CREDENTIALS'


def test_account_locks_after_five_failures(client, make_user):
    user = make_user()
    for _ in range(5):
        res = login(client, user.email, 'Wrong@Pass1')
        assert res.status_code == 400

    res = login(client, user.email)
    assert res.status_code == 423
    body = res.get_json()
    assert body['code'] == 'ACCOUNT_LOCKED'
    assert body['lock_until']
    assert body['remaining_time'] > 0


def test_deactivated_account_cannot_log_in(client, make_user):
    user = make_user(is_active=False)
    res = login(client, user.email)
    assert res.status_code == 401
    assert res.get_json()['code'] == 'ACCOUNT_DEACTIVATED'


def test_login_is_rate_limited_per_client(app, client, make_user):
    app.config['AUTH_RATE_LIMIT_MAX'] = 5
    user = make_user()
    for _ in range(5):
        login(client, user.email, 'Wrong@Pass1')

    res = login(client, user.email)
    assert res.status_code == 429
    assert res.get_json()['code'] == 'RATE_LIMIT_EXCEEDED'
    assert int(res.headers['Retry-After']) > 0


def test_me_requires_token(client):
    res = client.get('/api/auth/me')
    assert res.status_code == 401
    assert res.get_json()['code'] == 'NO_TOKEN'


def test_me_with_token(client, make_user, auth_headers):
    user = make_user()
    res = client.get('/api/auth/me', headers=auth_headers(user))
    assert res.status_code == 200
    assert res.get_json()['data']['user']['email'] == user.email


def test_invalid_and_expired_tokens(client, make_user):
    user = make_user()
    res = client.get('/api/auth/me', headers={'Authorization': 'Bearer not-a-jwt'})
    assert res.get_json()['code'] == 'INVALID_TOKEN'

    expired = create_access_token(user, now=datetime.now(timezone.utc) - timedelta(days=8))
    res = client.get('/api/auth/me', headers={'Authorization': f'Bearer {expired}'})
    assert res.status_code == 401
    assert res.get_json()['code'] == 'TOKEN_EXPIRED'


def test_token_for_missing_or_deactivated_user(client, make_user, auth_headers):
    user = make_user()
    headers = auth_headers(user)
    user.is_active = False
    db.session.commit()
    res = client.get('/api/auth/me', headers=headers)
    assert res.get_json()['code'] == 'ACCOUNT_DEACTIVATED'

    db.session.delete(user)
    db.session.commit()
    res = client.get('/api/auth/me', headers=headers)
    assert res.status_code == 401
    assert res.get_json()['code'] == 'USER_NOT_FOUND'


def test_locked_user_token_is_refused(client, make_user, auth_headers):
    user = make_user(lock_until=datetime.now() + timedelta(hours=1))
    res = client.get('/api/auth/profile', headers=auth_headers(user))
    assert res.status_code == 423


def test_update_profile(client, make_user, auth_headers):
    user = make_user()
    res = client.put('/api/auth/profile', headers=auth_headers(user),
                     json={'name': 'New Name', 'upi_id': 'owner@okbank'})
    assert res.status_code == 200
    data = res.get_json()['data']['user']
    assert data['name'] == 'New Name'
    assert data['upi_id'] == 'owner@okbank'
    assert data['email'] == user.email

    res = client.put('/api/auth/profile', headers=auth_headers(user), json={'upi_id': 'not a upi'})
    assert res.status_code == 400

    res = client.put('/api/auth/profile', headers=auth_headers(user), json={'upi_id': ''})
    assert res.get_json()['data']['user']['upi_id'] == ''


def test_logout(client, make_user, auth_headers):
    res = client.post('/api/auth/logout', headers=auth_headers(make_user()))
    assert res.get_json()['success'] is True
    assert User.query.count() == 1
