from django.core.cache import cache
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from backoffice.cms.models import FAQ, Feature, Testimonial
from backoffice.core.test_utils import TestDataFactory, AuthenticatedAPIClient


class HomepageTests(TestCase):
    def setUp(self):
        cache.clear()
        self.client = APIClient()

    def test_homepage_is_public_and_lists_active_content(self):
        Feature.objects.create(title='Pool', sort_order=2)
        Feature.objects.create(title='Spa', sort_order=1)
        Feature.objects.create(title='Old wing', is_active=False)
        response = self.client.get('/api/v1/cms/homepage/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([feature['title'] for feature in response.data['features']], ['Spa', 'Pool'])
        self.assertEqual(response.data['faqs'], [])

    def test_homepage_limits_testimonials(self):
        for index in range(8):
            Testimonial.objects.create(guest_name=f'Guest {index}', content='Lovely stay')
        response = self.client.get('/api/v1/cms/homepage/')
        self.assertEqual(len(response.data['testimonials']), 6)

    def test_homepage_cache_is_refreshed_after_change(self):
        self.client.get('/api/v1/cms/homepage/')
        with self.captureOnCommitCallbacks(execute=True):
            FAQ.objects.create(question='Check-in time?', answer='2 PM')
        response = self.client.get('/api/v1/cms/homepage/')
        self.assertEqual(response.data['faqs'][0]['question'], 'Check-in time?')


class ContentManagementTests(TestCase):
    def setUp(self):
        cache.clear()
        self.client = AuthenticatedAPIClient()
        self.staff = TestDataFactory.create_user(is_staff=True)
        self.client.authenticate_user(self.staff)

    def test_staff_can_create_content(self):
        data = {'question': 'Is parking free?', 'answer': 'Yes', 'category': 'General'}
        response = self.client.post('/api/v1/cms/faqs/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(FAQ.objects.filter(question='Is parking free?').exists())

    def test_non_staff_cannot_edit(self):
        self.client.authenticate_user(TestDataFactory.create_user())
        response = self.client.post('/api/v1/cms/features/', {'title': 'Gym'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_unknown_content_type_is_not_found(self):
        response = self.client.get('/api/v1/cms/banners/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_rating_is_validated(self):
        data = {'guest_name': 'Ana', 'content': 'Great', 'rating': 9}
        response = self.client.post('/api/v1/cms/testimonials/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_active_filter_and_update(self):
        feature = Feature.objects.create(title='Pool')
        Feature.objects.create(title='Closed bar', is_active=False)
        response = self.client.get('/api/v1/cms/features/?active=true')
        self.assertEqual([row['title'] for row in response.data], ['Pool'])

        response = self.client.patch(f'/api/v1/cms/features/{feature.id}/', {'is_active': False}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data['is_active'])

    def test_delete_content(self):
        feature = Feature.objects.create(title='Pool')
        response = self.client.delete(f'/api/v1/cms/features/{feature.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Feature.objects.exists())
