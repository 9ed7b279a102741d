import pytest
from rest_framework.test import APIClient

from core.models import User

pytestmark = pytest.mark.django_db


def login(client, username, password):
    return client.post('/auth/login', {'username': username, 'password': password}, format='json')


@pytest.fixture
def doctor():
    return User.objects.create_user(username='doctor1', password='P@ssw0rd1', role='doctor', first_name='Mona')


def test_login_returns_jwt_and_token(doctor):
    r = login(APIClient(), 'doctor1', 'P@ssw0rd1')
    assert r.status_code == 200
    assert r.data['token']
    assert r.data['access']
    assert r.data['refresh']
    assert r.data['user'] == {'id': doctor.id, 'username': 'doctor1', 'name': 'Mona', 'role': 'doctor'}


def test_login_with_wrong_password_is_401(doctor):
    r = login(APIClient(), 'doctor1', 'wrong')
    assert r.status_code == 401
    assert r.data == {'error': 'Invalid username or password'}


def test_login_requires_both_fields():
    r = APIClient().post('/auth/login', {'username': 'doctor1'}, format='json')
    assert r.status_code == 400
    assert r.data['error'] == 'Password is required'


def test_login_ignores_role_in_body(doctor):
    r = APIClient().post(
        '/auth/login', {'username': 'doctor1', 'password': 'P@ssw0rd1', 'role': 'admin'}, format='json'
    )
    assert r.status_code == 200
    doctor.refresh_from_db()
    assert doctor.role == 'doctor'


def test_bearer_jwt_authenticates(doctor):
    client = APIClient()
    access = login(client, 'doctor1', 'P@ssw0rd1').data['access']
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {access}')
    assert client.get('/queues').status_code == 200


def test_legacy_token_authenticates(doctor):
    client = APIClient()
    token = login(client, 'doctor1', 'P@ssw0rd1').data['token']
    client.credentials(HTTP_AUTHORIZATION=f'Token {token}')
    assert client.get('/patients').status_code == 200


def test_garbage_credentials_are_401():
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION='Bearer not-a-jwt')
    r = client.get('/queues')
    assert r.status_code == 401
    assert 'error' in r.data


def test_refresh_issues_new_access_token(doctor):
    client = APIClient()
    refresh = login(client, 'doctor1', 'P@ssw0rd1').data['refresh']
    r = client.post('/auth/refresh', {'refresh': refresh}, format='json')
    assert r.status_code == 200
    assert r.data['access']


def test_refresh_with_invalid_token_is_401():
    r = APIClient().post('/auth/refresh', {'refresh': 'nope'}, format='json')
    assert r.status_code == 401
    assert 'error' in r.data


def test_logout_blacklists_refresh_token(doctor):
    client = APIClient()
    data = login(client, 'doctor1', 'P@ssw0rd1').data
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {data['access']}")

    r = client.post('/auth/logout', {'refresh': data['refresh']}, format='json')
    assert r.status_code == 200
    assert r.data['blacklisted'] == 1

    r = APIClient().post('/auth/refresh', {'refresh': data['refresh']}, format='json')
    assert r.status_code == 401


def test_logout_without_token_blacklists_everything(doctor):
    client = APIClient()
    first = login(client, 'doctor1', 'P@ssw0rd1').data
    login(client, 'doctor1', 'P@ssw0rd1')
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {first['access']}")

    r = client.post('/auth/logout', {}, format='json')
    assert r.status_code == 200
    assert r.data['blacklisted'] == 2
    # the DRF token is revoked too
    client.credentials(HTTP_AUTHORIZATION=f"Token {first['token']}")
    assert client.get('/queues').status_code == 401


def test_logout_requires_authentication():
    assert APIClient().post('/auth/logout', {}, format='json').status_code == 401


def test_healthz_is_public():
    r = APIClient().get('/healthz')
    assert r.status_code == 200
    assert r.json() == {'ok': True, 'db': True}
