from django.conf import settings
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from businesses.models import Business
from categories.models import Category
from users.identity import IdentityProvider
from users.models import Admin, User


class CategoryViewTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(email='admin@example.com', password='adminpassword')
        Admin.objects.create(user=self.user, email=self.user.email)

        self.client = APIClient()
        session = IdentityProvider().open_session(self.user)
        self.client.cookies[settings.SIMPLE_JWT["AUTH_COOKIE"]] = session.access_token

        self.restaurants = Category.objects.create(name_ar='مطاعم', name_en='Restaurants', icon='utensils')
        self.cafes = Category.objects.create(name_ar='مقاهي', name_en='Cafes')

    def test_list_is_ordered_by_arabic_name(self):
        response = self.client.get('/dashboard/categories', {'generation': '7'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 2)
        self.assertEqual(response.data['generation'], '7')
        names = [row['name_ar'] for row in response.data['results']]
        self.assertEqual(names, sorted(names))

    def test_list_is_capped_at_fifty_rows(self):
        Category.objects.bulk_create(Category(name_ar=f'تصنيف {i:02d}') for i in range(60))

        response = self.client.get('/dashboard/categories')

        self.assertEqual(response.data['count'], 62)
        self.assertEqual(len(response.data['results']), 50)

    def test_create_category_normalizes_optional_fields(self):
        response = self.client.post(
            '/dashboard/categories/new',
            {'name_ar': 'صيدليات', 'name_en': '', 'icon': ''},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['redirect'], '/dashboard/categories')
        category = Category.objects.get(name_ar='صيدليات')
        self.assertIsNone(category.name_en)
        self.assertIsNone(category.icon)

    def test_create_category_requires_arabic_name(self):
        payload = {'name_ar': '', 'name_en': 'Pharmacies'}

        response = self.client.post('/dashboard/categories/new', payload, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('name_ar', response.data['errors'])
        self.assertEqual(response.data['values'], payload)

    def test_new_form_defaults(self):
        response = self.client.get('/dashboard/categories/new')
        self.assertEqual(response.data['category'], {'name_ar': '', 'name_en': '', 'icon': ''})

    def test_update_category(self):
        response = self.client.put(
            f'/dashboard/categories/{self.cafes.id}',
            {'name_ar': 'مقاهي', 'name_en': 'Coffee Shops', 'icon': 'coffee'},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.cafes.refresh_from_db()
        self.assertEqual(self.cafes.name_en, 'Coffee Shops')
        self.assertEqual(self.cafes.icon, 'coffee')

    def test_get_missing_category(self):
        response = self.client.get('/dashboard/categories/00000000-0000-0000-0000-000000000000')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error'], 'Category not found')

    def test_delete_keeps_business_references(self):
        """Test that deleting a category leaves referencing businesses untouched"""
        business = Business.objects.create(name='Cafe Baghdad', category=self.cafes)
        cafes_id = self.cafes.id

        response = self.client.delete(f'/dashboard/categories/{cafes_id}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        listed = [row['id'] for row in self.client.get('/dashboard/categories').data['results']]
        self.assertNotIn(str(cafes_id), listed)

        business.refresh_from_db()
        self.assertEqual(business.category_id, cafes_id)

        # The dangling reference shows up without a category name
        row = self.client.get('/dashboard/businesses').data['results'][0]
        self.assertEqual(row['category_id'], str(cafes_id))
        self.assertIsNone(row['category_name'])
