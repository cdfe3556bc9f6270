"""
Test suite for the sales module
Tests: quotations, A/R invoices with tax, incoming payments
"""
from datetime import date, timedelta
from decimal import Decimal

from django.test import TestCase
from rest_framework import status

from backoffice.core.models import Role
from backoffice.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backoffice.financials.models import AccountType, SETTLEMENT_PARTIAL, SETTLEMENT_SETTLED
from backoffice.parties.models import BusinessPartner
from backoffice.sales.models import OPEN, CLOSED, SalesQuotation, ARInvoice


class SalesTestCase(TestCase):
    def setUp(self):
        self.unit = TestDataFactory.create_business_unit()
        self.user = TestDataFactory.create_user()
        TestDataFactory.assign(self.user, self.unit, Role.CASHIER)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.base = f'/api/v1/{self.unit.id}'

        TestDataFactory.create_all_series(self.unit)
        self.customer = TestDataFactory.create_partner(self.unit, BusinessPartner.CUSTOMER, bp_code='C001')
        self.menu_item = TestDataFactory.create_menu_item(self.unit, name='Party Tray', price='1500.00')
        self.revenue = TestDataFactory.create_gl_account(self.unit, '4000', 'Catering Sales', AccountType.REVENUE)

    def create_quotation(self, quantity='2'):
        data = {
            'business_partner': self.customer.id,
            'valid_until': (date.today() + timedelta(days=14)).isoformat(),
            'items': [{'menu_item': self.menu_item.id, 'quantity': quantity, 'unit_price': '1500.00'}],
        }
        response = self.client.post(f'{self.base}/sales-quotations/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        return response.data

    def invoice_payload(self, **overrides):
        today = date.today()
        data = {
            'business_partner': self.customer.id,
            'posting_date': today.isoformat(),
            'due_date': (today + timedelta(days=30)).isoformat(),
            'items': [{
                'menu_item': self.menu_item.id, 'quantity': '2', 'unit_price': '1500.00',
                'discount': '100.00', 'gl_account': self.revenue.id,
            }],
        }
        data.update(overrides)
        return data

    def create_invoice(self, **overrides):
        response = self.client.post(f'{self.base}/ar-invoices/', self.invoice_payload(**overrides), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        return response.data


class QuotationTests(SalesTestCase):
    def test_create_quotation(self):
        data = self.create_quotation()
        self.assertEqual(data['doc_num'], 'SQ-00001')
        self.assertEqual(data['status'], OPEN)
        self.assertEqual(data['items'][0]['description'], 'Party Tray')
        self.assertEqual(Decimal(data['total_amount']), Decimal('3000'))

    def test_quotation_needs_customer(self):
        vendor = TestDataFactory.create_partner(self.unit, BusinessPartner.VENDOR)
        data = {
            'business_partner': vendor.id,
            'valid_until': date.today().isoformat(),
            'items': [{'menu_item': self.menu_item.id, 'quantity': '1', 'unit_price': '1'}],
        }
        response = self.client.post(f'{self.base}/sales-quotations/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_valid_until_before_document_date_is_rejected(self):
        data = {
            'business_partner': self.customer.id,
            'valid_until': (date.today() - timedelta(days=1)).isoformat(),
            'items': [{'menu_item': self.menu_item.id, 'quantity': '1', 'unit_price': '1'}],
        }
        response = self.client.post(f'{self.base}/sales-quotations/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_replaces_items(self):
        quotation = self.create_quotation()
        data = {'items': [{'menu_item': self.menu_item.id, 'quantity': '5', 'unit_price': '1400.00'}]}
        response = self.client.patch(f'{self.base}/sales-quotations/{quotation["id"]}/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['items']), 1)
        self.assertEqual(Decimal(response.data['total_amount']), Decimal('7000'))

    def test_closed_quotation_cannot_be_updated(self):
        quotation = self.create_quotation()
        SalesQuotation.objects.filter(pk=quotation['id']).update(status=CLOSED)
        response = self.client.patch(
            f'{self.base}/sales-quotations/{quotation["id"]}/', {'remarks': 'late change'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class ARInvoiceTests(SalesTestCase):
    def test_invoice_adds_tax_on_discounted_subtotal(self):
        data = self.create_invoice()
        self.assertEqual(data['doc_num'], 'ARINV-00001')
        self.assertEqual(data['subtotal'], '2900.00')
        self.assertEqual(data['tax_amount'], '348.00')
        self.assertEqual(data['total_amount'], '3248.00')
        self.assertEqual(data['items'][0]['line_total'], '2900.00')

    def test_invoice_closes_base_quotation(self):
        quotation = self.create_quotation()
        self.create_invoice(base_quotation=quotation['id'])
        self.assertEqual(SalesQuotation.objects.get(pk=quotation['id']).status, CLOSED)

        response = self.client.post(
            f'{self.base}/ar-invoices/', self.invoice_payload(base_quotation=quotation['id']), format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_discount_larger_than_line_is_rejected(self):
        payload = self.invoice_payload()
        payload['items'][0]['discount'] = '5000.00'
        response = self.client.post(f'{self.base}/ar-invoices/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(ARInvoice.objects.exists())

    def test_line_without_menu_item_needs_description(self):
        payload = self.invoice_payload()
        del payload['items'][0]['menu_item']
        response = self.client.post(f'{self.base}/ar-invoices/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_settlement_filter(self):
        self.create_invoice()
        response = self.client.get(f'{self.base}/ar-invoices/?settlement_status=SETTLED')
        self.assertEqual(response.data, [])
        response = self.client.get(f'{self.base}/ar-invoices/?customer={self.customer.id}')
        self.assertEqual(len(response.data), 1)


class IncomingPaymentTests(SalesTestCase):
    def receive(self, invoice, amount):
        data = {
            'business_partner': self.customer.id,
            'payment_date': date.today().isoformat(),
            'payment_method': TestDataFactory.create_payment_method(self.unit, f'Cash {amount}').id,
            'applications': [{'ar_invoice': invoice['id'], 'amount_applied': amount}],
        }
        return self.client.post(f'{self.base}/incoming-payments/', data, format='json')

    def test_partial_then_full_payment(self):
        invoice = self.create_invoice()

        response = self.receive(invoice, '1000.00')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['doc_num'], 'IP-00001')
        self.assertEqual(ARInvoice.objects.get(pk=invoice['id']).settlement_status, SETTLEMENT_PARTIAL)

        self.receive(invoice, '2248.00')
        stored = ARInvoice.objects.get(pk=invoice['id'])
        self.assertEqual(stored.settlement_status, SETTLEMENT_SETTLED)
        self.assertEqual(stored.amount_paid, Decimal('3248.00'))

    def test_overpayment_is_rejected(self):
        invoice = self.create_invoice()
        response = self.receive(invoice, '5000.00')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(ARInvoice.objects.get(pk=invoice['id']).amount_paid, Decimal('0.00'))

    def test_invoice_of_another_customer_is_rejected(self):
        invoice = self.create_invoice()
        other = TestDataFactory.create_partner(self.unit, BusinessPartner.CUSTOMER)
        data = {
            'business_partner': other.id,
            'payment_date': date.today().isoformat(),
            'applications': [{'ar_invoice': invoice['id'], 'amount_applied': '10.00'}],
        }
        response = self.client.post(f'{self.base}/incoming-payments/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
