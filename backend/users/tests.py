from io import StringIO
from unittest import mock
from urllib.parse import parse_qs, urlparse

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.core.management import call_command
from django.core.management.base import CommandError
from django.db import DatabaseError
from django.test import TestCase, override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken

from users.identity import IdentityProvider
from users.models import Admin, User

ACCESS_COOKIE = settings.SIMPLE_JWT["AUTH_COOKIE"]
MIDDLEWARE_WITHOUT_EDGE_GATE = [m for m in settings.MIDDLEWARE if m != "users.middleware.AdminAccessMiddleware"]


def split_redirect(response):
    location = urlparse(response["Location"])
    return location.path, parse_qs(location.query)


class GateTestMixin:
    """Shared fixtures: one administrator, one identity without an administrator record."""

    def setUp(self):
        self.client = APIClient()
        self.identity = IdentityProvider()

        self.admin_user = User.objects.create_user(email='admin@example.com', password='adminpassword')
        self.admin = Admin.objects.create(user=self.admin_user, email=self.admin_user.email)

        self.outsider = User.objects.create_user(email='outsider@example.com', password='outsiderpassword')

    def use_session(self, user):
        session = self.identity.open_session(user)
        self.client.cookies[ACCESS_COOKIE] = session.access_token
        return session


class EdgeGateTests(GateTestMixin, TestCase):
    """Access gate as enforced by the middleware."""

    def test_no_session_redirects_with_requested_path(self):
        """Test that every protected path redirects to login and remembers where the user was going"""
        for path in ['/dashboard', '/dashboard/businesses', '/dashboard/categories/new']:
            response = self.client.get(path)

            self.assertEqual(response.status_code, status.HTTP_302_FOUND)
            login_path, query = split_redirect(response)
            self.assertEqual(login_path, '/login')
            self.assertEqual(query['redirectedFrom'], [path])

    def test_garbage_cookie_counts_as_no_session(self):
        self.client.cookies[ACCESS_COOKIE] = 'not-a-token'
        response = self.client.get('/dashboard')

        self.assertEqual(response.status_code, status.HTTP_302_FOUND)
        self.assertEqual(split_redirect(response)[1]['redirectedFrom'], ['/dashboard'])

    def test_non_admin_session_is_revoked_and_denied(self):
        """Test that a valid identity without an administrator record is signed out"""
        session = self.use_session(self.outsider)

        response = self.client.get('/dashboard/businesses')

        self.assertEqual(response.status_code, status.HTTP_302_FOUND)
        self.assertEqual(response['Location'], '/login?error=access_denied')
        self.assertTrue(BlacklistedToken.objects.filter(token__jti=session.session_id).exists())
        self.assertEqual(response.cookies[ACCESS_COOKIE].value, '')

    def test_forced_sign_out_is_irreversible(self):
        """Test that a revoked session stays dead even after the user is made an administrator"""
        session = self.use_session(self.outsider)
        self.client.get('/dashboard')

        Admin.objects.create(user=self.outsider, email=self.outsider.email)
        self.client.cookies[ACCESS_COOKIE] = session.access_token
        response = self.client.get('/dashboard')

        self.assertEqual(response.status_code, status.HTTP_302_FOUND)
        self.assertEqual(split_redirect(response)[1]['redirectedFrom'], ['/dashboard'])

    def test_admin_session_passes(self):
        self.use_session(self.admin_user)

        response = self.client.get('/dashboard')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['admin']['email'], 'admin@example.com')
        self.assertIn('no-cache', response['Cache-Control'])

    @override_settings(ANON_KEY="")
    def test_unprotected_paths_are_not_gated(self):
        response = self.client.get('/login')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_prefix_lookalike_is_not_gated(self):
        response = self.client.get('/dashboards')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


@override_settings(MIDDLEWARE=MIDDLEWARE_WITHOUT_EDGE_GATE)
class ViewLayerGateTests(GateTestMixin, TestCase):
    """Access gate as enforced by the views themselves, with the middleware out of the way."""

    def test_no_session_redirects_to_login(self):
        response = self.client.get('/dashboard/categories')

        self.assertEqual(response.status_code, status.HTTP_302_FOUND)
        login_path, query = split_redirect(response)
        self.assertEqual(login_path, '/login')
        self.assertEqual(query['redirectedFrom'], ['/dashboard/categories'])

    def test_non_admin_session_is_revoked_and_denied(self):
        session = self.use_session(self.outsider)

        response = self.client.post('/dashboard/categories/new', {'name_ar': 'مطاعم'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_302_FOUND)
        self.assertEqual(response['Location'], '/login?error=access_denied')
        self.assertTrue(self.identity.is_revoked(session.session_id))

    def test_revoked_admin_is_denied_on_next_request(self):
        """Test that removing the administrator record locks out a live session"""
        session = self.use_session(self.admin_user)
        self.assertEqual(self.client.get('/dashboard').status_code, status.HTTP_200_OK)

        self.admin.delete()
        response = self.client.get('/dashboard')

        self.assertEqual(response['Location'], '/login?error=access_denied')
        self.assertTrue(self.identity.is_revoked(session.session_id))

    def test_admin_session_passes(self):
        self.use_session(self.admin_user)
        response = self.client.get('/dashboard/categories')
        self.assertEqual(response.status_code, status.HTTP_200_OK)


@override_settings(ANON_KEY="")
class LoginTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(email='admin@example.com', password='adminpassword')
        Admin.objects.create(user=self.user, email=self.user.email)
        self.url = reverse('login')

    def test_login_sets_session_cookie(self):
        response = self.client.post(self.url, {'email': 'Admin@Example.com', 'password': 'adminpassword'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['redirect'], '/dashboard')
        self.assertTrue(response.cookies[ACCESS_COOKIE].value)

        # The cookie opens the dashboard
        self.assertEqual(self.client.get('/dashboard').status_code, status.HTTP_200_OK)

    def test_bad_credentials_are_reported(self):
        response = self.client.post(self.url, {'email': 'admin@example.com', 'password': 'wrong-password'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Invalid login credentials')
        self.assertNotIn(ACCESS_COOKIE, response.cookies)

    def test_non_admin_login_is_denied_and_signed_out(self):
        User.objects.create_user(email='outsider@example.com', password='outsiderpassword')

        response = self.client.post(self.url, {'email': 'outsider@example.com', 'password': 'outsiderpassword'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['error'], 'Access denied. Admin approval required.')
        self.assertEqual(BlacklistedToken.objects.count(), 1)
        self.assertNotIn(ACCESS_COOKIE, response.cookies)

    def test_login_page_surfaces_gate_parameters(self):
        response = self.client.get(self.url, {'error': 'access_denied', 'redirectedFrom': '/dashboard/businesses'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['error'], 'Access denied. Admin approval required.')
        self.assertEqual(response.data['redirectedFrom'], '/dashboard/businesses')

    @override_settings(ANON_KEY="public-anon-key")
    def test_anon_key_is_required_when_configured(self):
        payload = {'email': 'admin@example.com', 'password': 'adminpassword'}

        response = self.client.post(self.url, payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        response = self.client.post(self.url, payload, format='json', HTTP_APIKEY='public-anon-key')
        self.assertEqual(response.status_code, status.HTTP_200_OK)


@override_settings(ANON_KEY="")
class LogoutTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(email='admin@example.com', password='adminpassword')
        Admin.objects.create(user=self.user, email=self.user.email)

    def test_logout_revokes_session(self):
        self.client.post(reverse('login'), {'email': 'admin@example.com', 'password': 'adminpassword'}, format='json')
        token = self.client.cookies[ACCESS_COOKIE].value

        response = self.client.post(reverse('logout'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(BlacklistedToken.objects.count(), 1)

        # Replaying the old cookie does not get back in
        self.client.cookies[ACCESS_COOKIE] = token
        response = self.client.get('/dashboard')
        self.assertEqual(response.status_code, status.HTTP_302_FOUND)

    def test_logout_without_session(self):
        response = self.client.post(reverse('logout'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)


@override_settings(ANON_KEY="")
class RegisterTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.url = reverse('register')

    def test_password_mismatch_is_rejected_locally(self):
        """Test that a confirmation mismatch never reaches the database"""
        payload = {'email': 'new@example.com', 'password': 'longenough1', 'confirmPassword': 'longenough2'}

        with self.assertNumQueries(0):
            response = self.client.post(self.url, payload, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Passwords do not match')
        self.assertFalse(User.objects.exists())

    def test_short_password_is_rejected_locally(self):
        payload = {'email': 'new@example.com', 'password': 'short12', 'confirmPassword': 'short12'}

        with self.assertNumQueries(0):
            response = self.client.post(self.url, payload, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Password must be at least 8 characters long')
        self.assertFalse(User.objects.exists())

    def test_invalid_email_error_is_a_message(self):
        payload = {'email': 'not-an-email', 'password': 'longenough', 'confirmPassword': 'longenough'}

        response = self.client.post(self.url, payload, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Enter a valid email address.')

    def test_registration_creates_identity_and_admin_record(self):
        payload = {'email': 'New@Example.com', 'password': 'longenough', 'confirmPassword': 'longenough'}

        response = self.client.post(self.url, payload, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['redirect'], '/login')
        user = User.objects.get(email='new@example.com')
        self.assertTrue(user.check_password('longenough'))
        admin = Admin.objects.get(user=user)
        self.assertEqual(admin.role, 'admin')
        self.assertEqual(admin.email, 'new@example.com')

    def test_duplicate_email_is_rejected(self):
        User.objects.create_user(email='taken@example.com', password='whatever123')
        payload = {'email': 'taken@example.com', 'password': 'longenough', 'confirmPassword': 'longenough'}

        response = self.client.post(self.url, payload, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'User already registered')

    def test_admin_record_failure_rolls_back_identity(self):
        """Test that the identity is not kept when its administrator record cannot be stored"""
        payload = {'email': 'new@example.com', 'password': 'longenough', 'confirmPassword': 'longenough'}

        with mock.patch.object(Admin.objects, 'create', side_effect=DatabaseError('insert failed')):
            response = self.client.post(self.url, payload, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Failed to create admin record: insert failed')
        self.assertFalse(User.objects.filter(email='new@example.com').exists())


class ServiceRoleCommandTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(email='staff@example.com', password='staffpassword')

    @override_settings(SERVICE_ROLE_KEY="")
    def test_commands_fail_fast_without_service_key(self):
        with self.assertRaisesMessage(ImproperlyConfigured, 'SERVICE_ROLE_KEY is required'):
            call_command('grant_admin', 'staff@example.com')
        with self.assertRaisesMessage(ImproperlyConfigured, 'SERVICE_ROLE_KEY is required'):
            call_command('revoke_admin', 'staff@example.com')
        self.assertFalse(Admin.objects.exists())

    @override_settings(SERVICE_ROLE_KEY="service-key")
    def test_grant_and_revoke_admin(self):
        call_command('grant_admin', 'Staff@Example.com', role='editor', stdout=StringIO())
        admin = Admin.objects.get(user=self.user)
        self.assertEqual(admin.role, 'editor')

        call_command('revoke_admin', 'staff@example.com', stdout=StringIO())
        self.assertFalse(Admin.objects.filter(user=self.user).exists())

    @override_settings(SERVICE_ROLE_KEY="service-key")
    def test_grant_unknown_identity(self):
        with self.assertRaises(CommandError):
            call_command('grant_admin', 'nobody@example.com')
