"""
Tests for accounts app authentication.
"""
import pytest
from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.core.management.base import CommandError
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken, RefreshToken

User = get_user_model()


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def create_user():
    def _create_user(email="test@example.com", password="testpass123", name="Test User"):
        return User.objects.create_user(
            email=email,
            username=email,
            password=password,
            name=name,
        )
    return _create_user


@pytest.fixture
def authenticated_client(api_client, create_user):
    user = create_user()
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {str(refresh.access_token)}')
    return api_client, user


@pytest.mark.django_db
class TestAuthentication:

    def test_login_success(self, api_client, create_user):
        user = create_user()
        response = api_client.post('/api/v1/auth/login/', {
            'email': user.email,
            'password': 'testpass123'
        }, format='json')
        assert response.status_code == 200
        assert 'token' in response.data
        assert response.data['user']['email'] == user.email
        assert 'bearer_token' in response.data['user']

    def test_login_token_carries_user_and_email(self, api_client, create_user):
        user = create_user()
        response = api_client.post('/api/v1/auth/login/', {
            'email': user.email,
            'password': 'testpass123'
        }, format='json')
        token = AccessToken(response.data['token'])
        assert str(token['user_id']) == str(user.id)
        assert token['email'] == user.email

    def test_login_invalid_credentials(self, api_client, create_user):
        create_user()
        response = api_client.post('/api/v1/auth/login/', {
            'email': 'test@example.com',
            'password': 'wrongpassword'
        }, format='json')
        assert response.status_code == 400

    def test_login_missing_fields(self, api_client):
        response = api_client.post('/api/v1/auth/login/', {
            'email': 'test@example.com'
        }, format='json')
        assert response.status_code == 400

    def test_register_success(self, api_client):
        response = api_client.post('/api/v1/auth/register/', {
            'email': 'newuser@example.com',
            'password': 'securepass123',
            'name': 'New User'
        }, format='json')
        assert response.status_code == 201
        assert 'token' in response.data
        user = User.objects.get(email='newuser@example.com')
        assert user.name == 'New User'
        assert user.check_password('securepass123')
        assert user.password != 'securepass123'

    def test_register_duplicate_email(self, api_client, create_user):
        user = create_user(email='duplicate@example.com')
        response = api_client.post('/api/v1/auth/register/', {
            'email': user.email,
            'password': 'securepass123',
            'name': 'Someone'
        }, format='json')
        assert response.status_code == 400

    def test_register_short_password(self, api_client):
        response = api_client.post('/api/v1/auth/register/', {
            'email': 'test@example.com',
            'password': 'short',
            'name': 'Short'
        }, format='json')
        assert response.status_code == 400

    def test_register_requires_name(self, api_client):
        response = api_client.post('/api/v1/auth/register/', {
            'email': 'test@example.com',
            'password': 'securepass123',
        }, format='json')
        assert response.status_code == 400

    def test_me_endpoint_authenticated(self, authenticated_client):
        client, user = authenticated_client
        response = client.get('/api/v1/auth/me/')
        assert response.status_code == 200
        assert response.data['user']['email'] == user.email
        assert response.data['user']['name'] == 'Test User'

    def test_me_endpoint_unauthenticated(self, api_client):
        response = api_client.get('/api/v1/auth/me/')
        assert response.status_code == 401

    def test_logout_success(self, authenticated_client):
        client, user = authenticated_client
        refresh = RefreshToken.for_user(user)
        response = client.post('/api/v1/auth/logout/', {
            'refresh_token': str(refresh)
        }, format='json')
        assert response.status_code == 200

    def test_logout_with_garbage_token(self, authenticated_client):
        client, _ = authenticated_client
        response = client.post('/api/v1/auth/logout/', {
            'refresh_token': 'not-a-token'
        }, format='json')
        assert response.status_code == 400


@pytest.mark.django_db
class TestBearerToken:

    def test_update_bearer_token(self, authenticated_client):
        client, user = authenticated_client
        response = client.put('/api/v1/auth/bearer-token/', {
            'bearer_token': '  wf_live_0123456789abcdef  '
        }, format='json')
        assert response.status_code == 200
        user.refresh_from_db()
        assert user.bearer_token == 'wf_live_0123456789abcdef'
        assert user.has_bearer_token()

    def test_bearer_token_shown_on_me(self, authenticated_client):
        client, user = authenticated_client
        user.set_bearer_token('wf_live_0123456789abcdef')
        response = client.get('/api/v1/auth/me/')
        assert response.data['user']['bearer_token'] == 'wf_live_0123456789abcdef'

    def test_missing_bearer_token(self, authenticated_client):
        client, _ = authenticated_client
        response = client.put('/api/v1/auth/bearer-token/', {}, format='json')
        assert response.status_code == 400
        assert response.data['bearer_token'][0] == 'Bearer token is required'

    def test_short_bearer_token(self, authenticated_client):
        client, user = authenticated_client
        response = client.put('/api/v1/auth/bearer-token/', {'bearer_token': 'abc'}, format='json')
        assert response.status_code == 400
        user.refresh_from_db()
        assert not user.has_bearer_token()

    def test_bearer_token_requires_auth(self, api_client):
        response = api_client.put('/api/v1/auth/bearer-token/', {
            'bearer_token': 'wf_live_0123456789abcdef'
        }, format='json')
        assert response.status_code == 401


@pytest.mark.django_db
class TestCreateAdminCommand:

    def test_creates_user(self):
        call_command('create_admin', email='admin@example.com', password='adminpass123', name='Admin')
        user = User.objects.get(email='admin@example.com')
        assert user.check_password('adminpass123')
        assert user.name == 'Admin'
        assert not user.is_staff

    def test_updates_existing_user(self, create_user):
        user = create_user(email='admin@example.com', password='oldpassword1')
        call_command('create_admin', email='admin@example.com', password='newpassword1', name='Renamed', staff=True)
        user.refresh_from_db()
        assert User.objects.filter(email='admin@example.com').count() == 1
        assert user.check_password('newpassword1')
        assert user.name == 'Renamed'
        assert user.is_staff

    def test_requires_email_and_password(self):
        with pytest.raises(CommandError):
            call_command('create_admin', email='admin@example.com', password=None)
