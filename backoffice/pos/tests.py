"""
Test suite for the POS module
Tests: orders, tables, settlement, inventory depletion, GL posting, configuration checks
"""
from decimal import Decimal

from django.test import TestCase
from rest_framework import status

from backoffice.catalog.models import MenuItem
from backoffice.core.models import Role
from backoffice.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backoffice.financials.models import AccountingPeriod, JournalEntry
from backoffice.inventory.models import InventoryMovement
from backoffice.pos.models import POSConfiguration, Table, Discount, Order
from backoffice.sales.models import ARInvoice


class POSTestCase(TestCase):
    config = {}

    def setUp(self):
        self.unit = TestDataFactory.create_business_unit()
        self.cashier = TestDataFactory.create_user()
        TestDataFactory.assign(self.cashier, self.unit, Role.CASHIER)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.cashier)
        self.base = f'/api/v1/{self.unit.id}'

        self.setup = TestDataFactory.create_pos_setup(self.unit, **self.config)
        self.accounts = self.setup['accounts']
        self.cash_method = self.setup['payment_method']
        self.adobo = TestDataFactory.create_menu_item(self.unit, name='Adobo', price='100.00')
        self.rice = TestDataFactory.create_inventory_item(self.unit, name='Rice', standard_cost='10.00')
        TestDataFactory.create_recipe(self.adobo, [(self.rice, '0.2')])
        self.kitchen = TestDataFactory.create_location(self.unit, 'Kitchen')

    def create_order(self, quantity=2, **extra):
        data = {'order_type': Order.TAKEOUT, 'items': [{'menu_item': self.adobo.id, 'quantity': quantity}]}
        data.update(extra)
        response = self.client.post(f'{self.base}/pos/orders/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        return response.data

    def settle(self, order, amount, **extra):
        data = {'order': order['id'], 'payment_method': self.cash_method.id, 'amount_received': amount}
        data.update(extra)
        return self.client.post(f'{self.base}/pos/settlements/', data, format='json')


class OrderTests(POSTestCase):
    def test_create_order_totals_items(self):
        order = self.create_order(quantity=2)
        self.assertEqual(order['status'], Order.OPEN)
        self.assertEqual(order['subtotal'], '200.00')
        self.assertEqual(order['waiter'], self.cashier.id)
        self.assertEqual(order['items'][0]['price_at_sale'], '100.00')

    def test_modifiers_change_the_line_total(self):
        items = [{'menu_item': self.adobo.id, 'quantity': 2, 'modifiers': [{'name': 'Extra rice', 'price_change': '15.00'}]}]
        order = self.create_order(items=items)
        self.assertEqual(order['subtotal'], '230.00')

    def test_inactive_menu_item_is_rejected(self):
        MenuItem.objects.filter(pk=self.adobo.pk).update(is_active=False)
        data = {'items': [{'menu_item': self.adobo.id, 'quantity': 1}]}
        response = self.client.post(f'{self.base}/pos/orders/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_table_is_occupied_until_settlement(self):
        table = TestDataFactory.create_table(self.unit, 'T1')
        order = self.create_order(table=table.id, order_type=Order.DINE_IN)
        table.refresh_from_db()
        self.assertEqual(table.status, Table.OCCUPIED)

        data = {'table': table.id, 'items': [{'menu_item': self.adobo.id, 'quantity': 1}]}
        response = self.client.post(f'{self.base}/pos/orders/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        self.settle(order, '300.00')
        table.refresh_from_db()
        self.assertEqual(table.status, Table.AVAILABLE)

    def test_customer_required_when_configured(self):
        POSConfiguration.objects.filter(business_unit=self.unit).update(require_customer_selection=True)
        data = {'items': [{'menu_item': self.adobo.id, 'quantity': 1}]}
        response = self.client.post(f'{self.base}/pos/orders/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        order = self.create_order(customer=self.setup['customer'].id)
        self.assertEqual(order['customer_name'], 'Walk-in Customer')

    def test_add_items_and_send_to_kitchen(self):
        order = self.create_order(quantity=1)
        data = {'items': [{'menu_item': self.adobo.id, 'quantity': 2}]}
        response = self.client.post(f'{self.base}/pos/orders/{order["id"]}/add-items/', data, format='json')
        self.assertEqual(response.data['subtotal'], '300.00')

        response = self.client.post(f'{self.base}/pos/orders/{order["id"]}/send-to-kitchen/')
        self.assertEqual(response.data['status'], Order.PREPARING)
        response = self.client.post(f'{self.base}/pos/orders/{order["id"]}/send-to-kitchen/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_cancel_frees_table_and_blocks_changes(self):
        table = TestDataFactory.create_table(self.unit, 'T2')
        order = self.create_order(table=table.id)
        response = self.client.post(f'{self.base}/pos/orders/{order["id"]}/cancel/')
        self.assertEqual(response.data['status'], Order.CANCELLED)
        table.refresh_from_db()
        self.assertEqual(table.status, Table.AVAILABLE)

        data = {'items': [{'menu_item': self.adobo.id, 'quantity': 1}]}
        response = self.client.post(f'{self.base}/pos/orders/{order["id"]}/add-items/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_status_filter_accepts_several_statuses(self):
        first = self.create_order()
        second = self.create_order()
        third = self.create_order()
        self.client.post(f'{self.base}/pos/orders/{second["id"]}/send-to-kitchen/')
        self.client.post(f'{self.base}/pos/orders/{third["id"]}/cancel/')

        response = self.client.get(f'{self.base}/pos/orders/?status=open,preparing')
        self.assertEqual(response.data['count'], 2)
        self.assertEqual({row['id'] for row in response.data['results']}, {first['id'], second['id']})


class SettlementTests(POSTestCase):
    def test_settlement_computes_tax_and_change(self):
        order = self.create_order(quantity=2)
        response = self.settle(order, '250.00')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['order']['status'], Order.PAID)
        self.assertEqual(response.data['order']['tax_amount'], '24.00')
        self.assertEqual(response.data['order']['total_amount'], '224.00')
        self.assertEqual(response.data['change'], '26.00')
        self.assertIsNone(response.data['gl_posting_error'])
        self.assertFalse(response.data['order']['is_posted'])

    def test_percentage_discount_is_applied_before_tax(self):
        discount = Discount.objects.create(
            business_unit=self.unit, name='Senior', type=Discount.PERCENTAGE, value=Decimal('10')
        )
        order = self.create_order(quantity=2)
        response = self.settle(order, '201.60', discount=discount.id)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['order']['discount_value'], '20.00')
        self.assertEqual(response.data['order']['tax_amount'], '21.60')
        self.assertEqual(response.data['change'], '0.00')

    def test_discounts_can_be_disabled(self):
        POSConfiguration.objects.filter(business_unit=self.unit).update(enable_discounts=False)
        discount = Discount.objects.create(
            business_unit=self.unit, name='Promo', type=Discount.FIXED, value=Decimal('50')
        )
        response = self.settle(self.create_order(), '500.00', discount=discount.id)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_insufficient_payment_is_rejected(self):
        order = self.create_order(quantity=2)
        response = self.settle(order, '200.00')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('Insufficient payment', response.data['error'])
        self.assertEqual(Order.objects.get(pk=order['id']).status, Order.OPEN)

    def test_paid_order_cannot_be_settled_again(self):
        order = self.create_order()
        self.settle(order, '500.00')
        response = self.settle(order, '500.00')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_paid_order_cannot_be_cancelled(self):
        order = self.create_order()
        self.settle(order, '500.00')
        response = self.client.post(f'{self.base}/pos/orders/{order["id"]}/cancel/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_staff_cannot_settle(self):
        order = self.create_order()
        staff = TestDataFactory.create_user()
        TestDataFactory.assign(staff, self.unit, Role.STAFF)
        self.client.authenticate_user(staff)
        response = self.settle(order, '500.00')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_settlement_depletes_recipe_at_location(self):
        stock = TestDataFactory.create_stock(self.rice, self.kitchen, quantity='1')
        order = self.create_order(quantity=2)
        self.settle(order, '300.00', location=self.kitchen.id)
        stock.refresh_from_db()
        self.assertEqual(stock.quantity_on_hand, Decimal('0.6'))
        movement = stock.movements.get()
        self.assertEqual(movement.type, InventoryMovement.SALE_DEPLETION)
        self.assertEqual(movement.quantity, Decimal('-0.4'))

    def test_depletion_may_go_negative(self):
        stock = TestDataFactory.create_stock(self.rice, self.kitchen, quantity='0')
        self.settle(self.create_order(quantity=5), '1000.00')
        stock.refresh_from_db()
        self.assertEqual(stock.quantity_on_hand, Decimal('-1'))


class AutoPostTests(POSTestCase):
    config = {'auto_post_to_gl': True, 'auto_create_ar_invoice': True}

    def test_settlement_posts_balanced_entry(self):
        TestDataFactory.map_menu_item(
            self.adobo, sales_account=self.accounts['revenue'],
            cogs_account=self.accounts['cogs'], inventory_account=self.accounts['inventory'],
        )
        order = self.create_order(quantity=2)
        response = self.settle(order, '224.00')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIsNone(response.data['gl_posting_error'])
        self.assertTrue(response.data['order']['is_posted'])

        stored = Order.objects.get(pk=order['id'])
        entry = stored.journal_entry
        self.assertTrue(entry.is_posted)
        self.assertEqual(entry.approval_workflow_status, JournalEntry.APPROVED)
        self.assertTrue(entry.is_balanced())
        self.assertEqual(entry.get_total_debit(), Decimal('228.00'))
        self.assertEqual(entry.reference_number, stored.ar_invoice.doc_num)

        invoice = stored.ar_invoice
        self.assertEqual(invoice.total_amount, Decimal('224.00'))
        self.assertEqual(invoice.business_partner, self.setup['customer'])

        for key, expected in (('cash', '224.00'), ('revenue', '200.00'), ('tax', '24.00'),
                              ('cogs', '4.00'), ('inventory', '-4.00')):
            self.accounts[key].refresh_from_db()
            self.assertEqual(self.accounts[key].balance, Decimal(expected), key)

    def test_posting_failure_keeps_the_settlement(self):
        AccountingPeriod.objects.filter(business_unit=self.unit).update(status=AccountingPeriod.CLOSED)
        order = self.create_order(quantity=1)
        response = self.settle(order, '200.00')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIn('No open accounting period', response.data['gl_posting_error'])

        stored = Order.objects.get(pk=order['id'])
        self.assertEqual(stored.status, Order.PAID)
        self.assertFalse(stored.is_posted)
        self.assertFalse(ARInvoice.objects.filter(business_unit=self.unit).exists())

    def test_unexpected_posting_error_keeps_the_settlement(self):
        JournalEntry.objects.create(
            business_unit=self.unit, doc_num='JE-00001', posting_date=self.setup['period'].start_date,
            accounting_period=self.setup['period'], author=self.cashier,
        )
        order = self.create_order(quantity=1)
        with self.assertLogs('backoffice.pos', level='ERROR'):
            response = self.settle(order, '200.00')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIn('post the order manually', response.data['gl_posting_error'])

        stored = Order.objects.get(pk=order['id'])
        self.assertEqual(stored.status, Order.PAID)
        self.assertFalse(stored.is_posted)
        self.assertFalse(ARInvoice.objects.filter(business_unit=self.unit).exists())

    def test_posted_order_cannot_be_posted_again(self):
        order = self.create_order(quantity=1)
        self.settle(order, '200.00')
        response = self.client.post(f'{self.base}/pos/orders/{order["id"]}/post-to-gl/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('already been posted', response.data['error'])


class ManualPostTests(POSTestCase):
    def test_post_to_gl_requires_auto_post_setting(self):
        order = self.create_order(quantity=1)
        self.settle(order, '200.00')
        response = self.client.post(f'{self.base}/pos/orders/{order["id"]}/post-to-gl/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_post_to_gl_returns_accounting_summary(self):
        order = self.create_order(quantity=1)
        self.settle(order, '200.00')
        POSConfiguration.objects.filter(business_unit=self.unit).update(auto_post_to_gl=True)

        response = self.client.post(f'{self.base}/pos/orders/{order["id"]}/post-to-gl/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['is_posted'])
        self.assertIsNone(response.data['ar_invoice'])
        self.assertEqual(response.data['totals']['total'], '112.00')
        lines = response.data['journal_entry']['lines']
        self.assertEqual({line['account_code'] for line in lines}, {'1000', '4000', '2100'})

        response = self.client.get(f'{self.base}/pos/orders/{order["id"]}/accounting-summary/')
        self.assertTrue(response.data['journal_entry']['is_posted'])

    def test_open_order_cannot_be_posted(self):
        POSConfiguration.objects.filter(business_unit=self.unit).update(auto_post_to_gl=True)
        order = self.create_order()
        response = self.client.post(f'{self.base}/pos/orders/{order["id"]}/post-to-gl/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class ConfigurationTests(POSTestCase):
    def test_validate_configuration(self):
        response = self.client.get(f'{self.base}/pos/validate-configuration/')
        self.assertTrue(response.data['is_valid'])
        self.assertEqual(len(response.data['warnings']), 1)

        AccountingPeriod.objects.filter(business_unit=self.unit).delete()
        response = self.client.get(f'{self.base}/pos/validate-configuration/')
        self.assertFalse(response.data['is_valid'])
        self.assertIn('No open accounting period covers today', response.data['issues'])

    def test_missing_configuration_is_invalid(self):
        POSConfiguration.objects.filter(business_unit=self.unit).delete()
        response = self.client.get(f'{self.base}/pos/validate-configuration/')
        self.assertFalse(response.data['is_valid'])

    def test_configuration_is_admin_only(self):
        response = self.client.get(f'{self.base}/pos/configuration/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_second_configuration_conflicts(self):
        self.client.authenticate_user(TestDataFactory.create_user(is_superuser=True))
        response = self.client.post(
            f'{self.base}/pos/configuration/', {'default_customer_bp_code': 'WALKIN'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_mapping_upsert(self):
        admin = TestDataFactory.create_user()
        TestDataFactory.assign(admin, self.unit, Role.ADMIN)
        self.client.authenticate_user(admin)
        url = f'{self.base}/pos/menu-item-gl-mappings/'
        data = {'menu_item': self.adobo.id, 'sales_account': self.accounts['revenue'].id}
        self.assertEqual(self.client.post(url, data, format='json').status_code, status.HTTP_201_CREATED)

        data['sales_account'] = self.accounts['discounts'].id
        response = self.client.post(url, data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['sales_account_code'], '4900')

        response = self.client.get(f'{self.base}/pos/menu-items-with-mappings/')
        self.assertEqual(response.data[0]['gl_mapping']['sales_account'], self.accounts['discounts'].id)
