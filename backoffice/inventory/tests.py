"""
Test suite for the inventory module
Tests: locations, stock records, adjustments, requisitions
"""
from decimal import Decimal

from django.test import TestCase
from rest_framework import status

from backoffice.core.models import AuditLog, Role
from backoffice.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backoffice.financials.models import NumberingSeries
from backoffice.inventory.models import InventoryStock, InventoryMovement, StockRequisition


class InventoryTestCase(TestCase):
    def setUp(self):
        self.unit = TestDataFactory.create_business_unit()
        self.admin = TestDataFactory.create_user()
        TestDataFactory.assign(self.admin, self.unit, Role.ADMIN)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)
        self.base = f'/api/v1/{self.unit.id}'

        self.item = TestDataFactory.create_inventory_item(self.unit, name='Rice')
        self.store = TestDataFactory.create_location(self.unit, 'Main Store')
        self.kitchen = TestDataFactory.create_location(self.unit, 'Kitchen')


class LocationTests(InventoryTestCase):
    def test_duplicate_location_name_conflicts(self):
        response = self.client.post(f'{self.base}/inventory-locations/', {'name': 'Kitchen'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_location_holding_stock_cannot_be_deleted(self):
        TestDataFactory.create_stock(self.item, self.store, quantity='5')
        response = self.client.delete(f'{self.base}/inventory-locations/{self.store.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_empty_location_can_be_deleted(self):
        TestDataFactory.create_stock(self.item, self.kitchen, quantity='0')
        response = self.client.delete(f'{self.base}/inventory-locations/{self.kitchen.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)


class StockTests(InventoryTestCase):
    def test_create_stock_record(self):
        data = {'inventory_item': self.item.id, 'location': self.store.id, 'reorder_point': '5'}
        response = self.client.post(f'{self.base}/inventory-stocks/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Decimal(response.data['quantity_on_hand']), Decimal('0'))
        self.assertTrue(response.data['is_low_stock'])

    def test_duplicate_stock_record_conflicts(self):
        TestDataFactory.create_stock(self.item, self.store)
        data = {'inventory_item': self.item.id, 'location': self.store.id}
        response = self.client.post(f'{self.base}/inventory-stocks/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_location_of_another_unit_is_rejected(self):
        foreign = TestDataFactory.create_location(TestDataFactory.create_business_unit())
        data = {'inventory_item': self.item.id, 'location': foreign.id}
        response = self.client.post(f'{self.base}/inventory-stocks/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_low_stock_filter(self):
        TestDataFactory.create_stock(self.item, self.store, quantity='2', reorder_point='5')
        TestDataFactory.create_stock(self.item, self.kitchen, quantity='20', reorder_point='5')
        response = self.client.get(f'{self.base}/inventory-stocks/?low_stock=true')
        self.assertEqual([stock['location_name'] for stock in response.data], ['Main Store'])

    def test_patch_ignores_quantity(self):
        stock = TestDataFactory.create_stock(self.item, self.store, quantity='3')
        data = {'reorder_point': '10', 'quantity_on_hand': '999'}
        response = self.client.patch(f'{self.base}/inventory-stocks/{stock.id}/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        stock.refresh_from_db()
        self.assertEqual(stock.reorder_point, Decimal('10'))
        self.assertEqual(stock.quantity_on_hand, Decimal('3'))


class StockAdjustmentTests(InventoryTestCase):
    def setUp(self):
        super().setUp()
        self.stock = TestDataFactory.create_stock(self.item, self.store, quantity='10')

    def adjust(self, adjustment_type, quantity):
        data = {
            'inventory_stock': self.stock.id, 'adjustment_type': adjustment_type,
            'quantity': quantity, 'reason': 'Count', 'notes': 'Weekly count',
        }
        return self.client.post(f'{self.base}/inventory-stocks/adjust/', data, format='json')

    def test_increase_and_decrease(self):
        response = self.adjust('INCREASE', '5')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Decimal(response.data['stock']['quantity_on_hand']), Decimal('15'))
        self.assertEqual(response.data['movement']['reason'], 'Count - Weekly count')

        self.adjust('DECREASE', '12')
        self.stock.refresh_from_db()
        self.assertEqual(self.stock.quantity_on_hand, Decimal('3'))
        self.assertEqual(self.stock.movements.count(), 2)

    def test_decrease_below_zero_is_rejected(self):
        response = self.adjust('DECREASE', '11')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.stock.refresh_from_db()
        self.assertEqual(self.stock.quantity_on_hand, Decimal('10'))
        self.assertFalse(self.stock.movements.exists())

    def test_zero_quantity_is_rejected(self):
        response = self.adjust('INCREASE', '0')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_movement_history(self):
        self.adjust('INCREASE', '1')
        self.adjust('DECREASE', '2')
        response = self.client.get(f'{self.base}/inventory-stocks/{self.stock.id}/movements/')
        self.assertEqual([Decimal(row['quantity']) for row in response.data], [Decimal('-2'), Decimal('1')])
        self.assertEqual(response.data[0]['type'], InventoryMovement.ADJUSTMENT)


class RequisitionTests(InventoryTestCase):
    def create_requisition(self, quantity='4'):
        data = {
            'from_location': self.store.id,
            'to_location': self.kitchen.id,
            'items': [{'inventory_item': self.item.id, 'requested_quantity': quantity}],
        }
        response = self.client.post(f'{self.base}/stock-requisitions/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        return response.data

    def test_number_falls_back_without_series(self):
        self.assertTrue(self.create_requisition()['requisition_number'].startswith('REQ-'))

    def test_number_uses_series(self):
        TestDataFactory.create_series(self.unit, NumberingSeries.STOCK_REQUISITION, prefix='SR-')
        self.assertEqual(self.create_requisition()['requisition_number'], 'SR-00001')

    def test_same_source_and_destination_is_rejected(self):
        data = {
            'from_location': self.store.id, 'to_location': self.store.id,
            'items': [{'inventory_item': self.item.id, 'requested_quantity': '1'}],
        }
        response = self.client.post(f'{self.base}/stock-requisitions/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_fulfill_transfers_stock(self):
        TestDataFactory.create_stock(self.item, self.store, quantity='10')
        requisition = self.create_requisition('4')
        response = self.client.post(f'{self.base}/stock-requisitions/{requisition["id"]}/fulfill/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], StockRequisition.FULFILLED)
        self.assertEqual(Decimal(response.data['items'][0]['fulfilled_quantity']), Decimal('4'))

        source = InventoryStock.objects.get(inventory_item=self.item, location=self.store)
        destination = InventoryStock.objects.get(inventory_item=self.item, location=self.kitchen)
        self.assertEqual(source.quantity_on_hand, Decimal('6'))
        self.assertEqual(destination.quantity_on_hand, Decimal('4'))
        self.assertEqual(destination.movements.get().type, InventoryMovement.TRANSFER_IN)
        self.assertTrue(AuditLog.objects.filter(
            action='stock_transfer', object_reference=requisition['requisition_number']
        ).exists())

    def test_insufficient_stock_leaves_everything_unchanged(self):
        TestDataFactory.create_stock(self.item, self.store, quantity='2')
        requisition = self.create_requisition('4')
        response = self.client.post(f'{self.base}/stock-requisitions/{requisition["id"]}/fulfill/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('Insufficient stock', response.data['error'])
        self.assertEqual(StockRequisition.objects.get(pk=requisition['id']).status, StockRequisition.PENDING)

    def test_fulfilled_requisition_cannot_be_fulfilled_again(self):
        TestDataFactory.create_stock(self.item, self.store, quantity='10')
        requisition = self.create_requisition('4')
        self.client.post(f'{self.base}/stock-requisitions/{requisition["id"]}/fulfill/')
        response = self.client.post(f'{self.base}/stock-requisitions/{requisition["id"]}/fulfill/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_staff_cannot_fulfill(self):
        requisition = self.create_requisition()
        staff = TestDataFactory.create_user()
        TestDataFactory.assign(staff, self.unit, Role.STAFF)
        self.client.authenticate_user(staff)
        response = self.client.post(f'{self.base}/stock-requisitions/{requisition["id"]}/fulfill/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
