"""
Test suite for the catalog module
Tests: reference data, inventory items, menu items, recipes, tenant isolation
"""
from django.core.cache import cache
from django.test import TestCase
from rest_framework import status

from backoffice.catalog.models import UoM, PaymentMethod, Recipe
from backoffice.core.models import Role
from backoffice.core.test_utils import TestDataFactory, AuthenticatedAPIClient


class ReferenceDataTests(TestCase):
    def setUp(self):
        cache.clear()
        self.unit = TestDataFactory.create_business_unit()
        self.admin = TestDataFactory.create_user()
        TestDataFactory.assign(self.admin, self.unit, Role.ADMIN)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)
        self.base = f'/api/v1/{self.unit.id}'

    def test_create_uom(self):
        response = self.client.post(f'{self.base}/uoms/', {'name': 'Kilogram', 'symbol': 'kg'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(UoM.objects.filter(business_unit=self.unit, symbol='kg').exists())

    def test_duplicate_uom_name_conflicts(self):
        TestDataFactory.create_uom(self.unit, name='Kilogram', symbol='kg')
        response = self.client.post(f'{self.base}/uoms/', {'name': 'Kilogram', 'symbol': 'KG'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_same_name_in_another_unit_is_allowed(self):
        TestDataFactory.create_uom(TestDataFactory.create_business_unit(), name='Kilogram', symbol='kg')
        response = self.client.post(f'{self.base}/uoms/', {'name': 'Kilogram', 'symbol': 'kg'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_staff_cannot_create_reference_data(self):
        staff = TestDataFactory.create_user()
        TestDataFactory.assign(staff, self.unit, Role.STAFF)
        self.client.authenticate_user(staff)
        response = self.client.post(f'{self.base}/tax-codes/', {'code': 'VAT12', 'rate': '12.00'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_uom_in_use_cannot_be_deleted(self):
        uom = TestDataFactory.create_uom(self.unit)
        TestDataFactory.create_inventory_item(self.unit, uom=uom)
        response = self.client.delete(f'{self.base}/uoms/{uom.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('Cannot delete', response.data['error'])

    def test_payment_method_list_is_refreshed_after_change(self):
        TestDataFactory.create_payment_method(self.unit, 'Cash')
        response = self.client.get(f'{self.base}/payment-methods/')
        self.assertEqual(len(response.data), 1)

        with self.captureOnCommitCallbacks(execute=True):
            PaymentMethod.objects.create(business_unit=self.unit, name='Card')
        response = self.client.get(f'{self.base}/payment-methods/')
        self.assertEqual({method['name'] for method in response.data}, {'Cash', 'Card'})

    def test_payment_method_active_filter(self):
        TestDataFactory.create_payment_method(self.unit, 'Cash')
        PaymentMethod.objects.create(business_unit=self.unit, name='Voucher', is_active=False)
        response = self.client.get(f'{self.base}/payment-methods/?active=true')
        self.assertEqual([method['name'] for method in response.data], ['Cash'])


class InventoryItemTests(TestCase):
    def setUp(self):
        cache.clear()
        self.unit = TestDataFactory.create_business_unit()
        self.admin = TestDataFactory.create_user()
        TestDataFactory.assign(self.admin, self.unit, Role.ADMIN)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)
        self.base = f'/api/v1/{self.unit.id}'
        self.uom = TestDataFactory.create_uom(self.unit)

    def test_create_inventory_item(self):
        data = {'name': 'Rice', 'uom': self.uom.id, 'standard_cost': '45.50'}
        response = self.client.post(f'{self.base}/inventory-items/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['uom_symbol'], self.uom.symbol)

    def test_uom_of_another_unit_is_rejected(self):
        foreign_uom = TestDataFactory.create_uom(TestDataFactory.create_business_unit())
        data = {'name': 'Rice', 'uom': foreign_uom.id, 'standard_cost': '45.50'}
        response = self.client.post(f'{self.base}/inventory-items/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('uom', response.data)

    def test_list_items_with_their_own_uoms(self):
        TestDataFactory.create_inventory_item(self.unit, name='Rice')
        TestDataFactory.create_inventory_item(self.unit, name='Sugar')
        response = self.client.get(f'{self.base}/inventory-items/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual({item['name'] for item in response.data}, {'Rice', 'Sugar'})

    def test_item_of_another_unit_is_not_found(self):
        foreign_item = TestDataFactory.create_inventory_item(TestDataFactory.create_business_unit())
        response = self.client.get(f'{self.base}/inventory-items/{foreign_item.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_search_filter(self):
        TestDataFactory.create_inventory_item(self.unit, name='Jasmine Rice', uom=self.uom)
        TestDataFactory.create_inventory_item(self.unit, name='Cooking Oil', uom=self.uom)
        response = self.client.get(f'{self.base}/inventory-items/?search=rice')
        self.assertEqual([item['name'] for item in response.data], ['Jasmine Rice'])


class MenuAndRecipeTests(TestCase):
    def setUp(self):
        self.unit = TestDataFactory.create_business_unit()
        self.admin = TestDataFactory.create_user()
        TestDataFactory.assign(self.admin, self.unit, Role.ADMIN)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)
        self.base = f'/api/v1/{self.unit.id}'
        self.menu_item = TestDataFactory.create_menu_item(self.unit, name='Adobo')
        self.rice = TestDataFactory.create_inventory_item(self.unit, name='Rice')
        self.pork = TestDataFactory.create_inventory_item(self.unit, name='Pork')

    def test_replace_recipe(self):
        url = f'{self.base}/menu-items/{self.menu_item.id}/recipe/'
        data = {'name': 'Adobo', 'items': [
            {'inventory_item': self.rice.id, 'quantity_used': '0.2'},
            {'inventory_item': self.pork.id, 'quantity_used': '0.15'},
        ]}
        response = self.client.put(url, data, format='json')
        self.assertIn(response.status_code, [status.HTTP_200_OK, status.HTTP_201_CREATED])
        self.assertEqual(Recipe.objects.get(menu_item=self.menu_item).items.count(), 2)

        data = {'items': [{'inventory_item': self.rice.id, 'quantity_used': '0.3'}]}
        response = self.client.put(url, data, format='json')
        self.assertEqual(Recipe.objects.get(menu_item=self.menu_item).items.count(), 1)

        response = self.client.get(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['items'][0]['inventory_item_name'], 'Rice')

    def test_recipe_rejects_duplicate_ingredients(self):
        data = {'items': [
            {'inventory_item': self.rice.id, 'quantity_used': '0.2'},
            {'inventory_item': self.rice.id, 'quantity_used': '0.1'},
        ]}
        response = self.client.put(f'{self.base}/menu-items/{self.menu_item.id}/recipe/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_recipe_rejects_zero_quantity(self):
        data = {'items': [{'inventory_item': self.rice.id, 'quantity_used': '0'}]}
        response = self.client.put(f'{self.base}/menu-items/{self.menu_item.id}/recipe/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_menu_item_reports_recipe_presence(self):
        TestDataFactory.create_recipe(self.menu_item, [(self.rice, '0.2')])
        response = self.client.get(f'{self.base}/menu-items/{self.menu_item.id}/')
        self.assertTrue(response.data['has_recipe'])

    def test_menu_category_with_items_cannot_be_deleted(self):
        response = self.client.delete(f'{self.base}/menu-categories/{self.menu_item.category_id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
