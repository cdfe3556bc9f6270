from django.test import TestCase
from rest_framework import status

from backoffice.core.models import Role
from backoffice.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backoffice.financials.models import AccountType
from backoffice.parties.models import BusinessPartner


class BusinessPartnerTests(TestCase):
    def setUp(self):
        self.unit = TestDataFactory.create_business_unit()
        self.user = TestDataFactory.create_user()
        TestDataFactory.assign(self.user, self.unit, Role.STAFF)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.url = f'/api/v1/{self.unit.id}/business-partners/'

    def test_staff_can_create_partner(self):
        data = {'bp_code': 'V001', 'name': 'Fresh Farms', 'type': BusinessPartner.VENDOR}
        response = self.client.post(self.url, data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['credit_limit'], '0.00')

    def test_duplicate_code_conflicts(self):
        TestDataFactory.create_partner(self.unit, bp_code='C001')
        data = {'bp_code': 'C001', 'name': 'Someone Else', 'type': BusinessPartner.CUSTOMER}
        response = self.client.post(self.url, data, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_negative_credit_limit_is_rejected(self):
        data = {'bp_code': 'C002', 'name': 'Debtor', 'type': BusinessPartner.CUSTOMER, 'credit_limit': '-1'}
        response = self.client.post(self.url, data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_type_and_search_filters(self):
        TestDataFactory.create_partner(self.unit, BusinessPartner.VENDOR, bp_code='V001', name='Fresh Farms')
        TestDataFactory.create_partner(self.unit, BusinessPartner.VENDOR, bp_code='V002', name='Meat House')
        TestDataFactory.create_partner(self.unit, BusinessPartner.CUSTOMER, bp_code='C001', name='Fresh Catering')

        response = self.client.get(f'{self.url}?type=vendor')
        self.assertEqual({partner['bp_code'] for partner in response.data}, {'V001', 'V002'})

        response = self.client.get(f'{self.url}?search=fresh&type=VENDOR')
        self.assertEqual([partner['bp_code'] for partner in response.data], ['V001'])

    def test_partners_are_scoped_to_unit(self):
        TestDataFactory.create_partner(TestDataFactory.create_business_unit(), bp_code='X001')
        response = self.client.get(self.url)
        self.assertEqual(response.data, [])

    def test_update_to_taken_code_conflicts(self):
        TestDataFactory.create_partner(self.unit, bp_code='C001')
        other = TestDataFactory.create_partner(self.unit, bp_code='C002')
        response = self.client.patch(f'{self.url}{other.id}/', {'bp_code': 'C001'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_partner_with_documents_cannot_be_deleted(self):
        vendor = TestDataFactory.create_partner(self.unit, BusinessPartner.VENDOR)
        expense = TestDataFactory.create_gl_account(self.unit, '5100', 'Supplies', AccountType.EXPENSE)
        invoice = vendor.ap_invoices.create(
            business_unit=self.unit, doc_num='API-00001', posting_date='2024-01-10', due_date='2024-02-10',
            document_date='2024-01-10', created_by=self.user,
        )
        invoice.items.create(description='Napkins', quantity=1, unit_price=50, line_total=50, gl_account=expense)

        response = self.client.delete(f'{self.url}{vendor.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('A/P invoices', response.data['error'])

    def test_unused_partner_can_be_deleted(self):
        partner = TestDataFactory.create_partner(self.unit)
        response = self.client.delete(f'{self.url}{partner.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(BusinessPartner.objects.filter(pk=partner.pk).exists())
