"""
Test suite for the core module
Tests: authentication, business unit scoping, users, supervisor verification, audit logs, search
"""
from io import StringIO

from django.core.management import call_command
from django.test import TestCase
from rest_framework import status

from backoffice.core.models import AuditLog, Role, UserBusinessUnit
from backoffice.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backoffice.financials.models import AccountType, NumberingSeries


class AuthenticationTests(TestCase):
    def setUp(self):
        self.business_unit = TestDataFactory.create_business_unit(code='HQ')
        self.user = TestDataFactory.create_user(username='alice', password='secret123')
        TestDataFactory.assign(self.user, self.business_unit, Role.CASHIER)
        self.client = AuthenticatedAPIClient()

    def test_login_returns_tokens_and_assignments(self):
        response = self.client.post('/api/v1/auth/login/', {'username': 'alice', 'password': 'secret123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)
        assignments = response.data['user']['assignments']
        self.assertEqual(len(assignments), 1)
        self.assertEqual(assignments[0]['business_unit_code'], 'HQ')
        self.assertEqual(assignments[0]['role_name'], Role.CASHIER)

    def test_login_with_wrong_password(self):
        response = self.client.post('/api/v1/auth/login/', {'username': 'alice', 'password': 'nope'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_refresh_issues_new_access_token(self):
        login = self.client.post('/api/v1/auth/login/', {'username': 'alice', 'password': 'secret123'}, format='json')
        response = self.client.post('/api/v1/auth/refresh/', {'refresh': login.data['refresh']}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)

    def test_refresh_with_garbage_token(self):
        response = self.client.post('/api/v1/auth/refresh/', {'refresh': 'not-a-token'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me_requires_authentication(self):
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me_returns_current_user(self):
        self.client.authenticate_user(self.user)
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['username'], 'alice')


class BusinessUnitScopingTests(TestCase):
    def setUp(self):
        self.unit = TestDataFactory.create_business_unit()
        self.other_unit = TestDataFactory.create_business_unit()
        self.user = TestDataFactory.create_user()
        TestDataFactory.assign(self.user, self.unit, Role.STAFF)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_assigned_unit_is_accessible(self):
        response = self.client.get(f'/api/v1/{self.unit.id}/roles/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_unassigned_unit_is_forbidden(self):
        response = self.client.get(f'/api/v1/{self.other_unit.id}/roles/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_unknown_unit_is_not_found(self):
        response = self.client.get('/api/v1/999999/roles/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_mismatched_header_is_rejected(self):
        response = self.client.get(
            f'/api/v1/{self.unit.id}/roles/', HTTP_X_BUSINESS_UNIT_ID=str(self.other_unit.id)
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_matching_header_is_accepted(self):
        response = self.client.get(f'/api/v1/{self.unit.id}/roles/', HTTP_X_BUSINESS_UNIT_ID=str(self.unit.id))
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_superuser_reaches_any_unit(self):
        admin = TestDataFactory.create_user(is_superuser=True, is_staff=True)
        self.client.authenticate_user(admin)
        response = self.client.get(f'/api/v1/{self.other_unit.id}/roles/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_business_unit_list_only_shows_assigned_units(self):
        response = self.client.get('/api/v1/business-units/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([unit['id'] for unit in response.data], [self.unit.id])

    def test_only_superuser_creates_business_units(self):
        response = self.client.post('/api/v1/business-units/', {'name': 'Branch', 'code': 'BR1'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        admin = TestDataFactory.create_user(is_superuser=True, is_staff=True)
        self.client.authenticate_user(admin)
        response = self.client.post('/api/v1/business-units/', {'name': 'Branch', 'code': 'BR1'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['code'], 'BR1')

    def test_business_unit_with_assignments_cannot_be_deleted(self):
        admin = TestDataFactory.create_user(is_superuser=True, is_staff=True)
        self.client.authenticate_user(admin)
        response = self.client.delete(f'/api/v1/business-units/{self.unit.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class UserManagementTests(TestCase):
    def setUp(self):
        self.unit = TestDataFactory.create_business_unit()
        self.admin = TestDataFactory.create_user()
        TestDataFactory.assign(self.admin, self.unit, Role.ADMIN)
        self.cashier_role = TestDataFactory.create_role(Role.CASHIER)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)
        self.base = f'/api/v1/{self.unit.id}/users/'

    def test_admin_creates_user_with_role(self):
        data = {'username': 'bob', 'name': 'Bob', 'password': 'secret123', 'role': self.cashier_role.id}
        response = self.client.post(self.base, data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['role_name'], Role.CASHIER)
        self.assertTrue(UserBusinessUnit.objects.filter(user__username='bob', business_unit=self.unit).exists())
        self.assertTrue(AuditLog.objects.filter(action='create', model_name='User', business_unit=self.unit).exists())

    def test_duplicate_username_conflicts(self):
        TestDataFactory.create_user(username='bob')
        data = {'username': 'bob', 'name': 'Bob', 'password': 'secret123', 'role': self.cashier_role.id}
        response = self.client.post(self.base, data, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_non_admin_cannot_create_users(self):
        staff = TestDataFactory.create_user()
        TestDataFactory.assign(staff, self.unit, Role.STAFF)
        self.client.authenticate_user(staff)
        data = {'username': 'carol', 'name': 'Carol', 'password': 'secret123', 'role': self.cashier_role.id}
        response = self.client.post(self.base, data, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_password_change_requires_matching_confirmation(self):
        response = self.client.patch(
            f'{self.base}{self.admin.id}/password/',
            {'new_password': 'another123', 'confirm_password': 'different'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.patch(
            f'{self.base}{self.admin.id}/password/',
            {'new_password': 'another123', 'confirm_password': 'another123'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.admin.refresh_from_db()
        self.assertTrue(self.admin.check_password('another123'))
        self.assertTrue(AuditLog.objects.filter(action='password_change', object_id=str(self.admin.id)).exists())

    def test_admin_cannot_deactivate_self(self):
        response = self.client.patch(f'{self.base}{self.admin.id}/status/', {'is_active': False}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_toggle_status_deactivates_other_user(self):
        other = TestDataFactory.create_user()
        TestDataFactory.assign(other, self.unit, Role.STAFF)
        response = self.client.patch(f'{self.base}{other.id}/status/', {'is_active': False}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        other.refresh_from_db()
        self.assertFalse(other.is_active)

    def test_servers_lists_serving_roles_only(self):
        waiter = TestDataFactory.create_user()
        TestDataFactory.assign(waiter, self.unit, Role.STAFF)
        response = self.client.get(f'{self.base}servers/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        usernames = [user['username'] for user in response.data]
        self.assertIn(waiter.username, usernames)
        self.assertNotIn(self.admin.username, usernames)


class SupervisorVerificationTests(TestCase):
    def setUp(self):
        self.unit = TestDataFactory.create_business_unit()
        self.cashier = TestDataFactory.create_user()
        TestDataFactory.assign(self.cashier, self.unit, Role.CASHIER)
        self.supervisor = TestDataFactory.create_user(username='sup', password='super123')
        TestDataFactory.assign(self.supervisor, self.unit, Role.SUPERVISOR)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.cashier)
        self.url = f'/api/v1/{self.unit.id}/verify-supervisor/'

    def test_valid_supervisor(self):
        response = self.client.post(self.url, {'username': 'sup', 'password': 'super123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        self.assertEqual(response.data['supervisor']['role'], Role.SUPERVISOR)

    def test_wrong_password(self):
        response = self.client.post(self.url, {'username': 'sup', 'password': 'wrong'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_cashier_is_not_a_supervisor(self):
        other_cashier = TestDataFactory.create_user(username='cash2', password='cash1234')
        TestDataFactory.assign(other_cashier, self.unit, Role.CASHIER)
        response = self.client.post(self.url, {'username': 'cash2', 'password': 'cash1234'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_missing_credentials(self):
        response = self.client.post(self.url, {'username': 'sup'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class AuditLogAndSearchTests(TestCase):
    def setUp(self):
        self.unit = TestDataFactory.create_business_unit()
        self.admin = TestDataFactory.create_user()
        TestDataFactory.assign(self.admin, self.unit, Role.ADMIN)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_audit_logs_are_paginated_and_scoped(self):
        other_unit = TestDataFactory.create_business_unit()
        AuditLog.objects.create(user=self.admin, business_unit=self.unit, action='create', model_name='GLAccount', object_id='1')
        AuditLog.objects.create(user=self.admin, business_unit=other_unit, action='create', model_name='GLAccount', object_id='2')
        response = self.client.get(f'/api/v1/{self.unit.id}/audit-logs/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['object_id'], '1')

    def test_audit_logs_admin_only(self):
        staff = TestDataFactory.create_user()
        TestDataFactory.assign(staff, self.unit, Role.STAFF)
        self.client.authenticate_user(staff)
        response = self.client.get(f'/api/v1/{self.unit.id}/audit-logs/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_search_finds_partners_and_accounts(self):
        TestDataFactory.create_partner(self.unit, bp_code='C-ACME', name='Acme Foods')
        TestDataFactory.create_gl_account(self.unit, '1000', 'Acme Clearing')
        response = self.client.get(f'/api/v1/{self.unit.id}/search/?q=acme')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        types = {result['type'] for result in response.data['results']}
        self.assertEqual(types, {'business_partner', 'gl_account'})

    def test_search_needs_two_characters(self):
        response = self.client.get(f'/api/v1/{self.unit.id}/search/?q=a')
        self.assertEqual(response.data['results'], [])


class SeedReferenceDataCommandTests(TestCase):
    def test_seeds_roles_account_types_and_series(self):
        unit = TestDataFactory.create_business_unit(code='MAIN')
        out = StringIO()
        call_command('seed_reference_data', '--business-unit', 'MAIN', stdout=out)

        self.assertEqual(
            set(Role.objects.values_list('name', flat=True)),
            {Role.ADMIN, Role.MANAGER, Role.SUPERVISOR, Role.CASHIER, Role.STAFF}
        )
        self.assertEqual(AccountType.objects.count(), 5)
        self.assertEqual(
            NumberingSeries.objects.filter(business_unit=unit).count(), len(NumberingSeries.DOCUMENT_TYPE_CHOICES)
        )

    def test_running_twice_is_harmless(self):
        call_command('seed_reference_data', stdout=StringIO())
        call_command('seed_reference_data', stdout=StringIO())
        self.assertEqual(Role.objects.count(), 5)
