"""Tests for the registration, login and profile endpoints."""

import pytest
from django.urls import reverse
from rest_framework.test import APIClient

from userauth.models import User


@pytest.fixture
def api_client():
    return APIClient()


@pytest.mark.django_db
class TestRegistration:

    def test_register_creates_user_with_lowercased_email(self, api_client):
        response = api_client.post(reverse('register'), {
            'name': 'Ana',
            'email': 'Ana@X.com',
            'password': 'Sunrise2026x',
        }, format='json')

        assert response.status_code == 201
        assert response.data == {'message': 'User registered successfully, please login'}
        user = User.objects.get(email='ana@x.com')
        assert user.name == 'Ana'
        assert user.check_password('Sunrise2026x')

    def test_duplicate_email_is_rejected(self, api_client, make_user):
        make_user(email='ana@x.com')

        response = api_client.post(reverse('register'), {
            'name': 'Ana again',
            'email': 'ANA@x.com',
            'password': 'Sunrise2026x',
        }, format='json')

        assert response.status_code == 400
        assert response.data['email'] == ['User already registered, please login']
        assert User.objects.count() == 1

    def test_weak_password_is_rejected(self, api_client):
        response = api_client.post(reverse('register'), {
            'name': 'Ana',
            'email': 'ana@x.com',
            'password': 'alllowercase',
        }, format='json')

        assert response.status_code == 400
        assert 'password' in response.data
        assert not User.objects.exists()


@pytest.mark.django_db
class TestLogin:

    def test_login_then_me_returns_profile(self, api_client, make_user):
        ana = make_user(name='Ana', email='ana@x.com')

        response = api_client.post(reverse('login'), {'email': 'ANA@x.com', 'password': 'Passw0rd!x'}, format='json')
        assert response.status_code == 200
        assert response.data['user']['email'] == 'ana@x.com'

        me = api_client.get(reverse('me'))
        assert me.status_code == 200
        assert me.data == {'id': ana.pk, 'name': 'Ana', 'email': 'ana@x.com', 'created_at': me.data['created_at']}

    def test_wrong_password_is_rejected(self, api_client, make_user):
        make_user(email='ana@x.com')

        response = api_client.post(reverse('login'), {'email': 'ana@x.com', 'password': 'nope'}, format='json')

        assert response.status_code == 400
        assert response.data == {'error': 'Invalid Credentials. Please try again.'}

    def test_logout_ends_session(self, api_client, make_user):
        make_user(email='ana@x.com')
        api_client.post(reverse('login'), {'email': 'ana@x.com', 'password': 'Passw0rd!x'}, format='json')

        assert api_client.post(reverse('logout')).status_code == 200
        assert api_client.get(reverse('me')).status_code in (401, 403)


@pytest.mark.django_db
class TestMe:

    def test_requires_authentication(self, api_client):
        assert api_client.get(reverse('me')).status_code in (401, 403)

    def test_returns_current_user(self, api_client, make_user):
        bruno = make_user(name='Bruno')
        api_client.force_authenticate(user=bruno)

        response = api_client.get(reverse('me'))

        assert response.status_code == 200
        assert response.data['id'] == bruno.pk
        assert response.data['name'] == 'Bruno'
