"""
Test suite for the purchasing module
Tests: request approval, purchase orders, goods receipts, A/P invoices, outgoing payments
"""
from datetime import date, timedelta
from decimal import Decimal

from django.test import TestCase
from rest_framework import status

from backoffice.core.models import Role
from backoffice.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backoffice.financials.models import AccountType, SETTLEMENT_PARTIAL, SETTLEMENT_SETTLED
from backoffice.inventory.models import InventoryStock, InventoryMovement
from backoffice.parties.models import BusinessPartner
from backoffice.purchasing.models import PurchaseRequest, PurchaseOrder, PurchaseOrderItem, APInvoice


class PurchasingTestCase(TestCase):
    def setUp(self):
        self.unit = TestDataFactory.create_business_unit()
        self.admin = TestDataFactory.create_user()
        TestDataFactory.assign(self.admin, self.unit, Role.ADMIN)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)
        self.base = f'/api/v1/{self.unit.id}'

        TestDataFactory.create_all_series(self.unit)
        self.vendor = TestDataFactory.create_partner(self.unit, BusinessPartner.VENDOR, bp_code='V001')
        self.item = TestDataFactory.create_inventory_item(self.unit, name='Rice')
        self.location = TestDataFactory.create_location(self.unit, 'Main Store')
        self.expense = TestDataFactory.create_gl_account(self.unit, '5100', 'Purchases', AccountType.EXPENSE)

    def create_request(self):
        data = {'notes': 'Weekly stock', 'items': [{'description': 'Rice 25kg', 'requested_quantity': '4'}]}
        response = self.client.post(f'{self.base}/purchase-requests/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        return response.data

    def create_order(self, quantity='10', unit_price='45.50'):
        pr = self.create_request()
        self.client.post(f'{self.base}/purchase-requests/{pr["id"]}/approve/')
        today = date.today().isoformat()
        data = {
            'bp_code': 'V001',
            'purchase_request': pr['id'],
            'document_date': today,
            'posting_date': today,
            'delivery_date': today,
            'items': [{
                'inventory_item': self.item.id, 'description': 'Rice', 'quantity': quantity, 'unit_price': unit_price,
            }],
        }
        response = self.client.post(f'{self.base}/purchase-orders/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        return response.data

    def create_invoice(self, amount='1000.00'):
        today = date.today()
        data = {
            'business_partner': self.vendor.id,
            'posting_date': today.isoformat(),
            'due_date': (today + timedelta(days=30)).isoformat(),
            'items': [{'description': 'Supplies', 'quantity': '1', 'unit_price': amount, 'gl_account': self.expense.id}],
        }
        response = self.client.post(f'{self.base}/ap-invoices/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        return response.data


class PurchaseRequestTests(PurchasingTestCase):
    def test_create_request_is_numbered_and_pending(self):
        data = self.create_request()
        self.assertEqual(data['pr_number'], 'PR-00001')
        self.assertEqual(data['status'], PurchaseRequest.PENDING)
        self.assertEqual(data['requestor'], self.admin.id)
        self.assertEqual(data['request_date'], date.today().isoformat())

    def test_request_needs_items(self):
        response = self.client.post(f'{self.base}/purchase-requests/', {'items': []}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_approve_and_reject_only_pending(self):
        pr = self.create_request()
        response = self.client.post(f'{self.base}/purchase-requests/{pr["id"]}/approve/')
        self.assertEqual(response.data['status'], PurchaseRequest.APPROVED)
        self.assertEqual(response.data['approver'], self.admin.id)

        response = self.client.post(f'{self.base}/purchase-requests/{pr["id"]}/reject/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_only_admin_approves(self):
        pr = self.create_request()
        staff = TestDataFactory.create_user()
        TestDataFactory.assign(staff, self.unit, Role.STAFF)
        self.client.authenticate_user(staff)
        response = self.client.post(f'{self.base}/purchase-requests/{pr["id"]}/approve/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_status_filter(self):
        self.create_request()
        pr = self.create_request()
        self.client.post(f'{self.base}/purchase-requests/{pr["id"]}/reject/')
        response = self.client.get(f'{self.base}/purchase-requests/?status=rejected')
        self.assertEqual([row['id'] for row in response.data], [pr['id']])


class PurchaseOrderTests(PurchasingTestCase):
    def test_order_from_approved_request(self):
        order = self.create_order()
        self.assertEqual(order['po_number'], 'PO-00001')
        self.assertEqual(order['vendor_code'], 'V001')
        self.assertEqual(order['total_amount'], '455.00')
        self.assertTrue(order['has_open_items'])
        self.assertEqual(
            PurchaseRequest.objects.get(pk=order['purchase_request']).status, PurchaseRequest.CLOSED
        )

    def test_order_from_pending_request_is_rejected(self):
        pr = self.create_request()
        today = date.today().isoformat()
        data = {
            'bp_code': 'V001', 'purchase_request': pr['id'],
            'document_date': today, 'posting_date': today, 'delivery_date': today,
            'items': [{'description': 'Rice', 'quantity': '1', 'unit_price': '1'}],
        }
        response = self.client.post(f'{self.base}/purchase-orders/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_customer_code_is_not_a_vendor(self):
        TestDataFactory.create_partner(self.unit, BusinessPartner.CUSTOMER, bp_code='C001')
        pr = self.create_request()
        self.client.post(f'{self.base}/purchase-requests/{pr["id"]}/approve/')
        today = date.today().isoformat()
        data = {
            'bp_code': 'C001', 'purchase_request': pr['id'],
            'document_date': today, 'posting_date': today, 'delivery_date': today,
            'items': [{'description': 'Rice', 'quantity': '1', 'unit_price': '1'}],
        }
        response = self.client.post(f'{self.base}/purchase-orders/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('bp_code', response.data)

    def test_close_order(self):
        order = self.create_order()
        response = self.client.post(f'{self.base}/purchase-orders/{order["id"]}/close/')
        self.assertEqual(response.data['status'], PurchaseOrder.CLOSED)
        response = self.client.post(f'{self.base}/purchase-orders/{order["id"]}/close/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class GoodsReceiptTests(PurchasingTestCase):
    def receive(self, order, quantity):
        data = {
            'purchase_order': order['id'],
            'items': [{
                'purchase_order_item': order['items'][0]['id'], 'location': self.location.id, 'quantity': quantity,
            }],
        }
        return self.client.post(f'{self.base}/goods-receipts/', data, format='json')

    def test_partial_receipt_updates_stock_and_open_quantity(self):
        order = self.create_order(quantity='10')
        response = self.receive(order, '4')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['doc_num'], 'GRPO-00001')
        self.assertEqual(Decimal(response.data['total_value']), Decimal('182.00'))

        stock = InventoryStock.objects.get(inventory_item=self.item, location=self.location)
        self.assertEqual(stock.quantity_on_hand, Decimal('4'))
        self.assertEqual(stock.movements.get().type, InventoryMovement.RECEIVING)

        order = self.client.get(f'{self.base}/purchase-orders/{order["id"]}/').data
        self.assertEqual(Decimal(order['items'][0]['open_quantity']), Decimal('6'))

    def test_line_without_inventory_item_cannot_be_received(self):
        order = self.create_order(quantity='10')
        PurchaseOrderItem.objects.filter(pk=order['items'][0]['id']).update(inventory_item=None)
        response = self.receive(order, '2')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('no inventory item', response.data['error'])
        self.assertEqual(PurchaseOrderItem.objects.get(pk=order['items'][0]['id']).open_quantity, Decimal('10'))
        self.assertFalse(InventoryStock.objects.filter(location=self.location).exists())

    def test_receiving_more_than_open_quantity_fails(self):
        order = self.create_order(quantity='10')
        self.receive(order, '8')
        response = self.receive(order, '3')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        stock = InventoryStock.objects.get(inventory_item=self.item, location=self.location)
        self.assertEqual(stock.quantity_on_hand, Decimal('8'))

    def test_fully_received_order_has_no_open_items(self):
        order = self.create_order(quantity='10')
        self.receive(order, '10')
        response = self.client.get(f'{self.base}/purchase-orders/?has_open_items=true')
        self.assertEqual(response.data, [])

    def test_closed_order_cannot_receive(self):
        order = self.create_order()
        self.client.post(f'{self.base}/purchase-orders/{order["id"]}/close/')
        response = self.receive(order, '1')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class PayablesTests(PurchasingTestCase):
    def test_invoice_totals(self):
        invoice = self.create_invoice('1000.00')
        self.assertEqual(invoice['doc_num'], 'APINV-00001')
        self.assertEqual(invoice['total_amount'], '1000.00')
        self.assertEqual(invoice['outstanding_amount'], '1000.00')

    def test_invoice_needs_vendor(self):
        customer = TestDataFactory.create_partner(self.unit, BusinessPartner.CUSTOMER)
        today = date.today().isoformat()
        data = {
            'business_partner': customer.id, 'posting_date': today, 'due_date': today,
            'items': [{'description': 'Supplies', 'quantity': '1', 'unit_price': '5', 'gl_account': self.expense.id}],
        }
        response = self.client.post(f'{self.base}/ap-invoices/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_due_date_before_posting_date_is_rejected(self):
        today = date.today()
        data = {
            'business_partner': self.vendor.id, 'posting_date': today.isoformat(),
            'due_date': (today - timedelta(days=1)).isoformat(),
            'items': [{'description': 'Supplies', 'quantity': '1', 'unit_price': '5', 'gl_account': self.expense.id}],
        }
        response = self.client.post(f'{self.base}/ap-invoices/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def pay(self, invoice, amount):
        data = {
            'business_partner': self.vendor.id,
            'payment_date': date.today().isoformat(),
            'applications': [{'ap_invoice': invoice['id'], 'amount_applied': amount}],
        }
        return self.client.post(f'{self.base}/outgoing-payments/', data, format='json')

    def test_payments_settle_invoice(self):
        invoice = self.create_invoice('1000.00')

        response = self.pay(invoice, '400.00')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['amount'], '400.00')
        self.assertEqual(APInvoice.objects.get(pk=invoice['id']).settlement_status, SETTLEMENT_PARTIAL)

        self.pay(invoice, '600.00')
        stored = APInvoice.objects.get(pk=invoice['id'])
        self.assertEqual(stored.settlement_status, SETTLEMENT_SETTLED)
        self.assertEqual(stored.outstanding_amount, Decimal('0.00'))

    def test_overpayment_is_rejected(self):
        invoice = self.create_invoice('100.00')
        response = self.pay(invoice, '150.00')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('exceeds outstanding', response.data['error'])
        self.assertEqual(APInvoice.objects.get(pk=invoice['id']).amount_paid, Decimal('0.00'))

    def test_invoice_of_other_vendor_is_rejected(self):
        other_vendor = TestDataFactory.create_partner(self.unit, BusinessPartner.VENDOR)
        invoice = self.create_invoice('100.00')
        data = {
            'business_partner': other_vendor.id,
            'payment_date': date.today().isoformat(),
            'applications': [{'ap_invoice': invoice['id'], 'amount_applied': '10'}],
        }
        response = self.client.post(f'{self.base}/outgoing-payments/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
