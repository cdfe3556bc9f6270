"""
Test suite for the financials module
Tests: journal entry workflow, posting, numbering, setup wizard
"""
import json
import os
import tempfile
from datetime import date
from decimal import Decimal
from io import StringIO

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase
from rest_framework import status

from backoffice.core.exceptions import BusinessRuleError
from backoffice.core.models import Role
from backoffice.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backoffice.financials import services
from backoffice.financials.models import (
    AccountType, AccountCategory, GLAccount, AccountingPeriod, NumberingSeries, JournalEntry, BankAccount
)


class JournalEntryWorkflowTests(TestCase):
    def setUp(self):
        self.unit = TestDataFactory.create_business_unit()
        self.admin = TestDataFactory.create_user()
        TestDataFactory.assign(self.admin, self.unit, Role.ADMIN)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)
        self.base = f'/api/v1/{self.unit.id}'

        self.period = TestDataFactory.create_period(self.unit)
        TestDataFactory.create_series(self.unit, NumberingSeries.JOURNAL_ENTRY, prefix='JE-')
        self.cash = TestDataFactory.create_gl_account(self.unit, '1000', 'Cash')
        self.revenue = TestDataFactory.create_gl_account(self.unit, '4000', 'Sales', AccountType.REVENUE)

    def entry_payload(self, debit='500.00', credit='500.00'):
        return {
            'posting_date': date.today().isoformat(),
            'memo': 'Cash sale',
            'lines': [
                {'gl_account': self.cash.id, 'debit': debit, 'credit': '0'},
                {'gl_account': self.revenue.id, 'debit': '0', 'credit': credit},
            ],
        }

    def create_entry(self):
        response = self.client.post(f'{self.base}/journal-entries/', self.entry_payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        return response.data

    def test_create_entry_draws_number_from_series(self):
        data = self.create_entry()
        self.assertEqual(data['doc_num'], 'JE-00001')
        self.assertEqual(data['approval_workflow_status'], JournalEntry.DRAFT)
        self.assertEqual(data['accounting_period'], self.period.id)
        self.assertEqual(data['total_debit'], '500.00')
        self.assertEqual(len(data['lines']), 2)
        self.assertEqual(self.create_entry()['doc_num'], 'JE-00002')

    def test_unbalanced_entry_is_rejected(self):
        response = self.client.post(
            f'{self.base}/journal-entries/', self.entry_payload(credit='450.00'), format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('not balanced', response.data['error'])
        self.assertFalse(JournalEntry.objects.exists())

    def test_line_needs_exactly_one_side(self):
        payload = self.entry_payload()
        payload['lines'][0]['credit'] = '500.00'
        response = self.client.post(f'{self.base}/journal-entries/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_single_line_entry_is_rejected(self):
        payload = self.entry_payload()
        payload['lines'] = payload['lines'][:1]
        response = self.client.post(f'{self.base}/journal-entries/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_entry_outside_open_period_is_rejected(self):
        self.period.status = AccountingPeriod.CLOSED
        self.period.save()
        response = self.client.post(f'{self.base}/journal-entries/', self.entry_payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('No open accounting period', response.data['error'])

    def test_account_of_another_unit_is_rejected(self):
        foreign = TestDataFactory.create_gl_account(TestDataFactory.create_business_unit(), '1000')
        payload = self.entry_payload()
        payload['lines'][0]['gl_account'] = foreign.id
        response = self.client.post(f'{self.base}/journal-entries/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_submit_approve_post(self):
        entry_id = self.create_entry()['id']

        response = self.client.post(f'{self.base}/journal-entries/{entry_id}/submit/')
        self.assertEqual(response.data['approval_workflow_status'], JournalEntry.SUBMITTED)

        response = self.client.post(f'{self.base}/journal-entries/{entry_id}/approve/')
        self.assertEqual(response.data['approval_workflow_status'], JournalEntry.APPROVED)

        response = self.client.post(f'{self.base}/journal-entries/{entry_id}/post/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['is_posted'])
        self.assertEqual(response.data['posted_by'], self.admin.id)

        self.cash.refresh_from_db()
        self.revenue.refresh_from_db()
        self.assertEqual(self.cash.balance, Decimal('500.00'))
        self.assertEqual(self.revenue.balance, Decimal('500.00'))

    def test_posting_twice_is_rejected(self):
        entry_id = self.create_entry()['id']
        self.client.post(f'{self.base}/journal-entries/{entry_id}/approve/')
        self.client.post(f'{self.base}/journal-entries/{entry_id}/post/')
        response = self.client.post(f'{self.base}/journal-entries/{entry_id}/post/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.cash.refresh_from_db()
        self.assertEqual(self.cash.balance, Decimal('500.00'))

    def test_draft_cannot_be_posted(self):
        entry_id = self.create_entry()['id']
        response = self.client.post(f'{self.base}/journal-entries/{entry_id}/post/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('approved', response.data['error'])

    def test_draft_cannot_be_rejected(self):
        entry_id = self.create_entry()['id']
        response = self.client.post(f'{self.base}/journal-entries/{entry_id}/reject/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_staff_can_submit_but_not_approve(self):
        entry_id = self.create_entry()['id']
        staff = TestDataFactory.create_user()
        TestDataFactory.assign(staff, self.unit, Role.STAFF)
        self.client.authenticate_user(staff)

        response = self.client.post(f'{self.base}/journal-entries/{entry_id}/submit/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        response = self.client.post(f'{self.base}/journal-entries/{entry_id}/approve/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_list_filters(self):
        first = self.create_entry()['id']
        self.create_entry()
        self.client.post(f'{self.base}/journal-entries/{first}/approve/')

        response = self.client.get(f'{self.base}/journal-entries/?status=approved')
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['id'], first)

        response = self.client.get(f'{self.base}/journal-entries/?is_posted=false&limit=1')
        self.assertEqual(response.data['count'], 2)
        self.assertEqual(len(response.data['results']), 1)
        self.assertEqual(response.data['total_pages'], 2)

    def test_entry_of_another_unit_is_not_found(self):
        other_unit = TestDataFactory.create_business_unit()
        foreign = TestDataFactory.create_posted_entry(other_unit, self.admin, [])
        response = self.client.get(f'{self.base}/journal-entries/{foreign.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class NumberingTests(TestCase):
    def setUp(self):
        self.unit = TestDataFactory.create_business_unit()

    def test_numbers_are_zero_padded_and_sequential(self):
        TestDataFactory.create_series(self.unit, NumberingSeries.AP_INVOICE, prefix='API-', next_number=41)
        self.assertEqual(services.next_document_number(self.unit, NumberingSeries.AP_INVOICE), 'API-00041')
        self.assertEqual(services.next_document_number(self.unit, NumberingSeries.AP_INVOICE), 'API-00042')
        series = NumberingSeries.objects.get(business_unit=self.unit, document_type=NumberingSeries.AP_INVOICE)
        self.assertEqual(series.next_number, 43)

    def test_missing_series_is_an_error(self):
        with self.assertRaises(BusinessRuleError):
            services.next_document_number(self.unit, NumberingSeries.PURCHASE_ORDER)

    def test_series_are_per_business_unit(self):
        other_unit = TestDataFactory.create_business_unit()
        TestDataFactory.create_series(self.unit, NumberingSeries.JOURNAL_ENTRY, next_number=7)
        TestDataFactory.create_series(other_unit, NumberingSeries.JOURNAL_ENTRY)
        self.assertEqual(services.next_document_number(other_unit, NumberingSeries.JOURNAL_ENTRY), 'JE-00001')

    def test_balance_tolerance(self):
        services.check_balanced([
            {'debit': Decimal('100.004'), 'credit': Decimal('0')},
            {'debit': Decimal('0'), 'credit': Decimal('100.00')},
        ])
        with self.assertRaises(BusinessRuleError):
            services.check_balanced([
                {'debit': Decimal('100.01'), 'credit': Decimal('0')},
                {'debit': Decimal('0'), 'credit': Decimal('100.00')},
            ])


class ChartOfAccountsTests(TestCase):
    def setUp(self):
        self.unit = TestDataFactory.create_business_unit()
        self.admin = TestDataFactory.create_user()
        TestDataFactory.assign(self.admin, self.unit, Role.ADMIN)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)
        self.base = f'/api/v1/{self.unit.id}'

    def test_create_account_defaults_normal_balance(self):
        liability = AccountType.objects.get(name=AccountType.LIABILITY)
        data = {'account_code': '2000', 'name': 'Accounts Payable', 'account_type': liability.id}
        response = self.client.post(f'{self.base}/gl-accounts/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['normal_balance'], 'CREDIT')

    def test_duplicate_account_code_conflicts(self):
        TestDataFactory.create_gl_account(self.unit, '1000')
        asset = AccountType.objects.get(name=AccountType.ASSET)
        data = {'account_code': '1000', 'name': 'Petty Cash', 'account_type': asset.id}
        response = self.client.post(f'{self.base}/gl-accounts/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_type_filter(self):
        TestDataFactory.create_gl_account(self.unit, '1000', 'Cash')
        TestDataFactory.create_gl_account(self.unit, '5000', 'Rent', AccountType.EXPENSE)
        response = self.client.get(f'{self.base}/gl-accounts/?type=expense')
        self.assertEqual([account['account_code'] for account in response.data], ['5000'])

    def test_account_with_lines_cannot_be_deleted(self):
        cash = TestDataFactory.create_gl_account(self.unit, '1000', 'Cash')
        sales = TestDataFactory.create_gl_account(self.unit, '4000', 'Sales', AccountType.REVENUE)
        TestDataFactory.create_posted_entry(self.unit, self.admin, [(cash, '10', '0'), (sales, '0', '10')])
        response = self.client.delete(f'{self.base}/gl-accounts/{cash.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(GLAccount.objects.filter(pk=cash.pk).exists())

    def test_manager_can_maintain_bank_accounts(self):
        manager = TestDataFactory.create_user()
        TestDataFactory.assign(manager, self.unit, Role.MANAGER)
        self.client.authenticate_user(manager)
        cash = TestDataFactory.create_gl_account(self.unit, '1010', 'Cash in Bank')
        data = {'name': 'Operating', 'bank_name': 'BDO', 'account_number': '001122', 'gl_account': cash.id}
        response = self.client.post(f'{self.base}/bank-accounts/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        response = self.client.patch(f"{self.base}/bank-accounts/{response.data['id']}/", {'branch': 'Makati'},
                                     format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(BankAccount.objects.get(business_unit=self.unit).branch, 'Makati')

    def test_period_end_must_follow_start(self):
        data = {'name': 'Bad', 'start_date': '2024-02-01', 'end_date': '2024-01-01',
                'fiscal_year': 2024, 'period_number': 1, 'type': AccountingPeriod.MONTHLY}
        response = self.client.post(f'{self.base}/accounting-periods/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


SETUP_PAYLOAD = {
    'account_categories': [
        {'name': 'Current Assets', 'code': 'CA', 'account_type': 'ASSET'},
    ],
    'gl_accounts': [
        {'account_code': '1010', 'name': 'Cash in Bank', 'account_type': 'ASSET', 'category_name': 'Current Assets'},
        {'account_code': '3000', 'name': 'Owner Capital', 'account_type': 'EQUITY'},
    ],
    'accounting_periods': [
        {'name': 'January 2024', 'start_date': '2024-01-01', 'end_date': '2024-01-31',
         'fiscal_year': 2024, 'period_number': 1, 'type': 'MONTHLY'},
    ],
    'numbering_series': [
        {'name': 'Journal Entry', 'prefix': 'JV-', 'next_number': 1, 'document_type': 'JOURNAL_ENTRY'},
    ],
    'bank_accounts': [
        {'name': 'Operating', 'bank_name': 'BDO', 'account_number': '001122', 'gl_account_name': 'Cash in Bank'},
    ],
}


class FinancialSetupTests(TestCase):
    def setUp(self):
        self.unit = TestDataFactory.create_business_unit()
        self.admin = TestDataFactory.create_user()
        TestDataFactory.assign(self.admin, self.unit, Role.ADMIN)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)
        self.url = f'/api/v1/{self.unit.id}/financial-setup/'

    def test_setup_creates_everything(self):
        response = self.client.post(self.url, SETUP_PAYLOAD, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['created'], {
            'account_categories': 1, 'gl_accounts': 2, 'accounting_periods': 1,
            'numbering_series': 1, 'bank_accounts': 1,
        })
        cash = GLAccount.objects.get(business_unit=self.unit, account_code='1010')
        self.assertEqual(cash.category.name, 'Current Assets')
        self.assertEqual(BankAccount.objects.get(business_unit=self.unit).gl_account, cash)

    def test_duplicate_account_code_rolls_back(self):
        TestDataFactory.create_gl_account(self.unit, '3000')
        response = self.client.post(self.url, SETUP_PAYLOAD, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertFalse(GLAccount.objects.filter(business_unit=self.unit, account_code='1010').exists())

    def test_running_setup_twice_conflicts(self):
        self.client.post(self.url, SETUP_PAYLOAD, format='json')
        response = self.client.post(self.url, SETUP_PAYLOAD, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertIn('already exists', response.data['error'])
        self.assertEqual(AccountCategory.objects.filter(business_unit=self.unit).count(), 1)

    def test_existing_category_name_conflicts(self):
        AccountCategory.objects.create(
            business_unit=self.unit, name='Current Assets', account_type=TestDataFactory.account_type(AccountType.ASSET)
        )
        payload = {'account_categories': SETUP_PAYLOAD['account_categories']}
        response = self.client.post(self.url, payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_existing_bank_account_conflicts(self):
        cash = TestDataFactory.create_gl_account(self.unit, '1000', 'Cash in Bank')
        BankAccount.objects.create(
            business_unit=self.unit, name='Old', bank_name='BDO', account_number='001122', gl_account=cash
        )
        payload = {'bank_accounts': SETUP_PAYLOAD['bank_accounts']}
        response = self.client.post(self.url, payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(BankAccount.objects.filter(business_unit=self.unit).count(), 1)

    def test_unknown_category_is_rejected(self):
        payload = {'gl_accounts': [
            {'account_code': '1010', 'name': 'Cash', 'account_type': 'ASSET', 'category_name': 'Missing'},
        ]}
        response = self.client.post(self.url, payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_requires_admin(self):
        manager = TestDataFactory.create_user()
        TestDataFactory.assign(manager, self.unit, Role.MANAGER)
        self.client.authenticate_user(manager)
        response = self.client.post(self.url, SETUP_PAYLOAD, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class SetupFinancialsCommandTests(TestCase):
    def setUp(self):
        self.unit = TestDataFactory.create_business_unit()
        handle, self.path = tempfile.mkstemp(suffix='.json')
        with os.fdopen(handle, 'w') as fh:
            json.dump(SETUP_PAYLOAD, fh)

    def tearDown(self):
        os.remove(self.path)

    def test_command_runs_setup(self):
        out = StringIO()
        call_command('setup_financials', self.unit.id, self.path, stdout=out)
        self.assertIn('Financial setup completed', out.getvalue())
        self.assertEqual(GLAccount.objects.filter(business_unit=self.unit).count(), 2)

    def test_command_reports_conflicts(self):
        call_command('setup_financials', self.unit.id, self.path, stdout=StringIO())
        with self.assertRaises(CommandError):
            call_command('setup_financials', self.unit.id, self.path, stdout=StringIO())

    def test_unknown_business_unit(self):
        with self.assertRaises(CommandError):
            call_command('setup_financials', self.unit.id + 1000, self.path)
