"""
Test suite for the reports module
Tests: financial statements, aging, inventory valuation, dashboard
"""
from datetime import date
from decimal import Decimal

from django.test import TestCase
from rest_framework import status

from backoffice.core.models import Role
from backoffice.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backoffice.financials.models import AccountType, SETTLEMENT_SETTLED
from backoffice.parties.models import BusinessPartner
from backoffice.purchasing.models import PurchaseRequest
from backoffice.sales.models import ARInvoice


class ReportTestCase(TestCase):
    def setUp(self):
        self.unit = TestDataFactory.create_business_unit()
        self.user = TestDataFactory.create_user()
        TestDataFactory.assign(self.user, self.unit, Role.ADMIN)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.base = f'/api/v1/{self.unit.id}'

        TestDataFactory.create_period(self.unit, date(2000, 1, 1), date(2099, 12, 31))
        factory = TestDataFactory
        self.cash = factory.create_gl_account(self.unit, '1000', 'Cash on Hand')
        self.receivable = factory.create_gl_account(self.unit, '1100', 'Accounts Receivable')
        self.equipment = factory.create_gl_account(self.unit, '1600', 'Kitchen Equipment')
        self.payable = factory.create_gl_account(self.unit, '2000', 'Accounts Payable', AccountType.LIABILITY)
        self.loan = factory.create_gl_account(self.unit, '2600', 'Bank Loan', AccountType.LIABILITY)
        self.capital = factory.create_gl_account(self.unit, '3000', 'Owner Capital', AccountType.EQUITY)
        self.revenue = factory.create_gl_account(self.unit, '4000', 'Food Sales', AccountType.REVENUE)
        self.cogs = factory.create_gl_account(self.unit, '5000', 'Cost of Goods Sold', AccountType.EXPENSE)
        self.rent = factory.create_gl_account(self.unit, '6000', 'Rent', AccountType.EXPENSE)

    def post_entry(self, lines, posting_date=date(2024, 3, 15)):
        return TestDataFactory.create_posted_entry(self.unit, self.user, lines, posting_date=posting_date)

    def post_trading_month(self, posting_date=date(2024, 3, 15)):
        self.post_entry([(self.cash, '10000', '0'), (self.capital, '0', '10000')], posting_date)
        self.post_entry([(self.cash, '5000', '0'), (self.revenue, '0', '5000')], posting_date)
        self.post_entry([(self.cogs, '2000', '0'), (self.cash, '0', '2000')], posting_date)
        self.post_entry([(self.rent, '1000', '0'), (self.cash, '0', '1000')], posting_date)


class TrialBalanceTests(ReportTestCase):
    def test_trial_balance_is_balanced(self):
        self.post_trading_month()
        response = self.client.get(f'{self.base}/reports/trial-balance/?end_date=2024-12-31')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['as_of_date'], date(2024, 12, 31))

        rows = {row['account_code']: row for row in response.data['accounts']}
        self.assertEqual(set(rows), {'1000', '3000', '4000', '5000', '6000'})
        self.assertEqual(rows['1000']['debit_balance'], Decimal('12000.00'))
        self.assertEqual(rows['3000']['credit_balance'], Decimal('10000.00'))

        totals = response.data['totals']
        self.assertEqual(totals['total_debits'], Decimal('15000.00'))
        self.assertEqual(totals['total_credits'], Decimal('15000.00'))
        self.assertTrue(totals['is_balanced'])

    def test_negative_balance_moves_to_opposite_column(self):
        self.post_entry([(self.cash, '300', '0'), (self.receivable, '0', '300')])
        response = self.client.get(f'{self.base}/reports/trial-balance/?end_date=2024-12-31')
        rows = {row['account_code']: row for row in response.data['accounts']}
        self.assertEqual(rows['1100']['debit_balance'], Decimal('0.00'))
        self.assertEqual(rows['1100']['credit_balance'], Decimal('300.00'))
        self.assertTrue(response.data['totals']['is_balanced'])

    def test_zero_balances_on_request(self):
        self.post_trading_month()
        response = self.client.get(f'{self.base}/reports/trial-balance/?end_date=2024-12-31&include_zero_balances=true')
        self.assertEqual(len(response.data['accounts']), 9)

    def test_inactive_accounts_are_left_out(self):
        self.post_trading_month()
        self.rent.is_active = False
        self.rent.save()
        response = self.client.get(f'{self.base}/reports/trial-balance/?end_date=2024-12-31&include_zero_balances=1')
        self.assertNotIn('6000', [row['account_code'] for row in response.data['accounts']])

    def test_later_entries_are_excluded(self):
        self.post_entry([(self.cash, '300', '0'), (self.capital, '0', '300')], date(2023, 6, 1))
        self.post_trading_month()
        response = self.client.get(f'{self.base}/reports/trial-balance/?end_date=2023-12-31')
        self.assertEqual(response.data['totals']['total_debits'], Decimal('300.00'))

    def test_unposted_entries_are_excluded(self):
        entry = self.post_entry([(self.cash, '700', '0'), (self.capital, '0', '700')])
        entry.is_posted = False
        entry.save()
        response = self.client.get(f'{self.base}/reports/trial-balance/?end_date=2024-12-31')
        self.assertEqual(response.data['accounts'], [])

    def test_invalid_date_is_rejected(self):
        response = self.client.get(f'{self.base}/reports/trial-balance/?end_date=2024-13-01')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('YYYY-MM-DD', response.data['error'])

    def test_non_member_is_forbidden(self):
        self.client.authenticate_user(TestDataFactory.create_user())
        response = self.client.get(f'{self.base}/reports/trial-balance/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class StatementTests(ReportTestCase):
    def setUp(self):
        super().setUp()
        self.post_trading_month()

    def test_balance_sheet(self):
        response = self.client.get(f'{self.base}/reports/balance-sheet/?as_of_date=2024-12-31')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data
        self.assertEqual(
            [row['account_code'] for row in data['assets']['current_assets']], ['1000', '1100']
        )
        self.assertEqual([row['account_code'] for row in data['assets']['non_current_assets']], ['1600'])
        self.assertEqual(data['assets']['total_assets'], Decimal('12000.00'))
        self.assertEqual(data['liabilities']['total_liabilities'], Decimal('0.00'))
        self.assertEqual(data['equity']['net_income'], Decimal('2000.00'))
        self.assertEqual(data['equity']['total_equity'], Decimal('12000.00'))
        self.assertTrue(data['is_balanced'])

    def test_profit_and_loss(self):
        response = self.client.get(f'{self.base}/reports/profit-loss/?start_date=2024-01-01&end_date=2024-12-31')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data
        self.assertEqual(data['revenue']['total_revenue'], Decimal('5000.00'))
        self.assertEqual(data['cost_of_sales']['total_cost_of_sales'], Decimal('2000.00'))
        self.assertEqual(data['operating_expenses']['total_operating_expenses'], Decimal('1000.00'))
        self.assertEqual(data['gross_profit'], Decimal('3000.00'))
        self.assertEqual(data['net_income'], Decimal('2000.00'))
        self.assertEqual(data['gross_margin'], Decimal('60.00'))
        self.assertEqual(data['net_margin'], Decimal('40.00'))

    def test_profit_and_loss_outside_period_is_empty(self):
        response = self.client.get(f'{self.base}/reports/profit-loss/?start_date=2025-01-01&end_date=2025-12-31')
        self.assertEqual(response.data['net_income'], Decimal('0.00'))
        self.assertEqual(response.data['gross_margin'], Decimal('0.00'))

    def test_start_after_end_is_rejected(self):
        response = self.client.get(f'{self.base}/reports/profit-loss/?start_date=2024-12-31&end_date=2024-01-01')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_cash_flow(self):
        self.post_entry([(self.equipment, '4000', '0'), (self.cash, '0', '4000')], date(2024, 4, 1))
        self.post_entry([(self.cash, '3000', '0'), (self.loan, '0', '3000')], date(2024, 4, 2))
        response = self.client.get(f'{self.base}/reports/cash-flow/?start_date=2024-01-01&end_date=2024-12-31')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data
        self.assertEqual(data['beginning_cash'], Decimal('0.00'))
        self.assertEqual(data['ending_cash'], Decimal('11000.00'))
        self.assertEqual(data['operating_activities']['net_cash_from_operating'], Decimal('2000.00'))
        self.assertEqual(data['investing_activities']['net_cash_from_investing'], Decimal('-4000.00'))
        self.assertEqual(data['financing_activities']['net_cash_from_financing'], Decimal('13000.00'))
        self.assertEqual(data['net_change_in_cash'], Decimal('11000.00'))

    def test_gl_balances(self):
        response = self.client.get(f'{self.base}/reports/gl-balances/?as_of_date=2024-12-31')
        self.assertEqual(response.data['summary']['account_count'], 9)
        self.assertEqual(response.data['summary']['total_debits'], Decimal('18000.00'))

        response = self.client.get(f'{self.base}/reports/gl-balances/?as_of_date=2024-12-31&account_type=revenue')
        self.assertEqual(len(response.data['accounts']), 1)
        self.assertEqual(response.data['accounts'][0]['balance'], Decimal('5000.00'))


class AgingTests(ReportTestCase):
    as_of = '2024-06-30'

    def ar_invoice(self, customer, total, due_date, posting_date=date(2024, 5, 1), **kwargs):
        return ARInvoice.objects.create(
            business_unit=self.unit, doc_num=f'ARINV-{TestDataFactory.random_string(5)}',
            business_partner=customer, posting_date=posting_date, document_date=posting_date,
            due_date=due_date, total_amount=Decimal(total), created_by=self.user, **kwargs
        )

    def test_ar_aging_buckets(self):
        customer = TestDataFactory.create_partner(self.unit, BusinessPartner.CUSTOMER, bp_code='C001')
        self.ar_invoice(customer, '1000.00', date(2024, 7, 15))
        self.ar_invoice(customer, '500.00', date(2024, 5, 15), amount_paid=Decimal('200.00'))
        self.ar_invoice(customer, '900.00', date(2024, 1, 1), settlement_status=SETTLEMENT_SETTLED)
        self.ar_invoice(customer, '800.00', date(2024, 8, 1), posting_date=date(2024, 7, 2))

        response = self.client.get(f'{self.base}/reports/ar-aging/?as_of_date={self.as_of}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        summary = response.data['summary']
        self.assertEqual(summary['current'], Decimal('1000.00'))
        self.assertEqual(summary['days_31_60'], Decimal('300.00'))
        self.assertEqual(summary['total_outstanding'], Decimal('1300.00'))

        partner = response.data['partners'][0]
        self.assertEqual(partner['bp_code'], 'C001')
        self.assertEqual([row['days_past_due'] for row in partner['invoices']], [46, 0])

    def test_ap_aging_buckets(self):
        vendor = TestDataFactory.create_partner(self.unit, BusinessPartner.VENDOR, bp_code='V001')
        invoice = vendor.ap_invoices.create(
            business_unit=self.unit, doc_num='APINV-00001', posting_date=date(2024, 1, 1),
            document_date=date(2024, 1, 1), due_date=date(2024, 2, 1), total_amount=Decimal('750.00'),
            created_by=self.user,
        )
        invoice.items.create(description='Rice', quantity=1, unit_price=750, line_total=750, gl_account=self.cogs)

        response = self.client.get(f'{self.base}/reports/ap-aging/?as_of_date={self.as_of}')
        self.assertEqual(response.data['summary']['over_90'], Decimal('750.00'))
        self.assertEqual(response.data['partners'][0]['invoices'][0]['bucket'], 'over_90')


class InventoryValuationTests(ReportTestCase):
    def setUp(self):
        super().setUp()
        category = TestDataFactory.create_inventory_category(self.unit, 'Dry Goods')
        self.store = TestDataFactory.create_location(self.unit, 'Main Store')
        self.kitchen = TestDataFactory.create_location(self.unit, 'Kitchen')
        rice = TestDataFactory.create_inventory_item(self.unit, 'Rice', standard_cost='2.50', category=category)
        oil = TestDataFactory.create_inventory_item(self.unit, 'Oil', standard_cost='10.00')
        TestDataFactory.create_stock(rice, self.store, quantity='10')
        TestDataFactory.create_stock(oil, self.kitchen, quantity='4', reorder_point='5')

    def test_valuation_by_category(self):
        response = self.client.get(f'{self.base}/reports/inventory-valuation/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_value'], Decimal('65.00'))
        self.assertEqual(response.data['categories'], [
            {'category': 'Dry Goods', 'total_value': Decimal('25.00')},
            {'category': 'Uncategorized', 'total_value': Decimal('40.00')},
        ])

    def test_location_filter(self):
        response = self.client.get(f'{self.base}/reports/inventory-valuation/?location={self.store.id}')
        self.assertEqual(response.data['item_count'], 1)
        self.assertEqual(response.data['items'][0]['item_name'], 'Rice')

    def test_non_numeric_location_is_rejected(self):
        response = self.client.get(f'{self.base}/reports/inventory-valuation/?location=kitchen')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_dashboard(self):
        today = date.today()
        self.post_entry([(self.cash, '5000', '0'), (self.revenue, '0', '5000')], today)
        self.post_entry([(self.rent, '1000', '0'), (self.cash, '0', '1000')], today)
        PurchaseRequest.objects.create(
            business_unit=self.unit, pr_number='PR-00001', requestor=self.user, request_date=today
        )

        response = self.client.get(f'{self.base}/dashboard/?time_range=7d')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        summary = response.data['summary']
        self.assertEqual(summary['total_revenue'], Decimal('5000.00'))
        self.assertEqual(summary['net_profit'], Decimal('4000.00'))
        self.assertEqual(summary['profit_margin'], Decimal('80.00'))
        self.assertEqual(summary['total_inventory_value'], Decimal('65.00'))
        self.assertEqual(summary['low_stock_items'], 1)
        self.assertEqual(summary['pending_purchase_requests'], 1)
        self.assertEqual(response.data['inventory_alerts'][0]['item_name'], 'Oil')
        self.assertEqual(response.data['quick_stats']['total_gl_accounts'], 9)
        self.assertEqual(response.data['pending_approvals'][0]['doc_num'], 'PR-00001')

    def test_dashboard_rejects_unknown_range(self):
        response = self.client.get(f'{self.base}/dashboard/?time_range=2w')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
