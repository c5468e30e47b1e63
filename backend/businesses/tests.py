# businesses/tests.py
from unittest import mock

from django.conf import settings
from django.db import DatabaseError
from django.forms.models import model_to_dict
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from businesses.models import Business
from categories.models import Category
from users.identity import IdentityProvider
from users.models import Admin, User


class AdminClientMixin:
    def setUp(self):
        self.user = User.objects.create_user(email='admin@example.com', password='adminpassword')
        Admin.objects.create(user=self.user, email=self.user.email)

        # Set up the API client with an administrator session
        self.client = APIClient()
        session = IdentityProvider().open_session(self.user)
        self.client.cookies[settings.SIMPLE_JWT["AUTH_COOKIE"]] = session.access_token


class BusinessListTests(AdminClientMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.cafes = Category.objects.create(name_ar='مقاهي', name_en='Cafes')
        self.restaurants = Category.objects.create(name_ar='مطاعم', name_en='Restaurants')

        Business.objects.create(name='Cafe Nakheel', city='Baghdad', category=self.cafes)
        Business.objects.create(name='Al Caffe', city='baghdad al-jadida', category=self.cafes)
        Business.objects.create(name='Cafe Basra', city='Basra', category=self.cafes)
        Business.objects.create(name='Caffeine Grill', city='Baghdad', category=self.restaurants)
        Business.objects.create(name='Tea House', city='Baghdad', category=self.cafes)

    def test_combined_filters(self):
        """Test that city, category and name filters all apply, ordered by name"""
        response = self.client.get('/dashboard/businesses', {
            'city': 'Baghdad',
            'category': str(self.cafes.id),
            'search': 'caf',
        })

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        names = [row['name'] for row in response.data['results']]
        self.assertEqual(names, ['Al Caffe', 'Cafe Nakheel'])
        self.assertEqual(response.data['count'], 2)
        self.assertEqual(response.data['total_pages'], 1)

    def test_rows_carry_category_name(self):
        response = self.client.get('/dashboard/businesses', {'search': 'grill'})

        row = response.data['results'][0]
        self.assertEqual(row['category_name'], 'مطاعم')
        self.assertEqual(row['category_id'], str(self.restaurants.id))

    def test_category_options_are_included(self):
        response = self.client.get('/dashboard/businesses')

        options = response.data['categories']
        self.assertEqual([option['name_ar'] for option in options], sorted(['مقاهي', 'مطاعم']))

    def test_invalid_category_filter_matches_nothing(self):
        response = self.client.get('/dashboard/businesses', {'category': 'not-a-uuid'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 0)
        self.assertEqual(response.data['total_pages'], 1)

    def test_pagination(self):
        Business.objects.bulk_create(Business(name=f'Shop {i:02d}', city='Erbil') for i in range(45))

        first = self.client.get('/dashboard/businesses', {'city': 'erbil', 'generation': '3'})
        self.assertEqual(first.data['count'], 45)
        self.assertEqual(first.data['total_pages'], 3)
        self.assertEqual(len(first.data['results']), 20)
        self.assertEqual(first.data['results'][0]['name'], 'Shop 00')
        self.assertEqual(first.data['generation'], '3')

        last = self.client.get('/dashboard/businesses', {'city': 'erbil', 'page': 3})
        self.assertEqual(last.data['page'], 3)
        self.assertEqual([row['name'] for row in last.data['results']], [f'Shop {i}' for i in range(40, 45)])

    def test_page_past_the_end(self):
        response = self.client.get('/dashboard/businesses', {'page': 9})

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data, {'error': 'Invalid page.'})


class BusinessFormTests(AdminClientMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.category = Category.objects.create(name_ar='مقاهي', name_en='Cafes')
        self.form = {
            'name': 'Cafe Nakheel',
            'category_id': str(self.category.id),
            'description': '',
            'city': 'Baghdad',
            'address': 'Karrada',
            'phone': '',
            'rating': '4.5',
            'latitude': '33.3128',
            'longitude': '44.3615',
            'features': 'wifi, parking, ',
            'images': '',
        }

    def test_new_form_defaults(self):
        response = self.client.get('/dashboard/businesses/new')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['business']['name'], '')
        self.assertEqual(len(response.data['categories']), 1)

    def test_create_normalizes_form_input(self):
        response = self.client.post('/dashboard/businesses/new', self.form, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['redirect'], '/dashboard/businesses')

        business = Business.objects.get(name='Cafe Nakheel')
        self.assertEqual(business.features, ['wifi', 'parking'])
        self.assertIsNone(business.images)
        self.assertIsNone(business.description)
        self.assertIsNone(business.phone)
        self.assertEqual(business.rating, 4.5)
        self.assertEqual(business.latitude, 33.3128)
        self.assertEqual(business.category_id, self.category.id)

    def test_resubmitting_unmodified_form_keeps_row_identical(self):
        """Test that the edit form round-trips to the same stored row"""
        self.client.post('/dashboard/businesses/new', self.form, format='json')
        business = Business.objects.get(name='Cafe Nakheel')
        before = model_to_dict(business)

        form = self.client.get(f'/dashboard/businesses/{business.id}').data['business']
        self.assertEqual(form['features'], 'wifi, parking')

        response = self.client.put(f'/dashboard/businesses/{business.id}', form, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Business updated.')
        business.refresh_from_db()
        self.assertEqual(model_to_dict(business), before)

    def test_resubmit_keeps_reference_to_deleted_category(self):
        """Test that a business whose category was deleted can still be saved unchanged"""
        self.client.post('/dashboard/businesses/new', self.form, format='json')
        business = Business.objects.get(name='Cafe Nakheel')
        self.client.delete(f'/dashboard/categories/{self.category.id}')

        form = self.client.get(f'/dashboard/businesses/{business.id}').data['business']
        self.assertEqual(form['category_id'], str(self.category.id))

        response = self.client.put(f'/dashboard/businesses/{business.id}', form, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        business.refresh_from_db()
        self.assertEqual(business.category_id, self.category.id)

    def test_unknown_category_is_rejected(self):
        form = dict(self.form, category_id='00000000-0000-0000-0000-000000000000')

        response = self.client.post('/dashboard/businesses/new', form, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('category_id', response.data['errors'])

    def test_blank_category_is_stored_as_null(self):
        self.client.post('/dashboard/businesses/new', dict(self.form, category_id=''), format='json')

        self.assertIsNone(Business.objects.get(name='Cafe Nakheel').category_id)

    def test_list_items_keep_their_commas(self):
        form = {'name': 'Gallery', 'images': ['https://cdn.example.com/a,b.png', ' ', 'https://cdn.example.com/c.png']}

        response = self.client.post('/dashboard/businesses/new', form, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        business = Business.objects.get(name='Gallery')
        self.assertEqual(business.images, ['https://cdn.example.com/a,b.png', 'https://cdn.example.com/c.png'])

    def test_rating_out_of_range_keeps_values(self):
        form = dict(self.form, rating='7')

        response = self.client.post('/dashboard/businesses/new', form, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('rating', response.data['errors'])
        self.assertEqual(response.data['values'], form)
        self.assertFalse(Business.objects.exists())

    def test_name_is_required(self):
        response = self.client.post('/dashboard/businesses/new', dict(self.form, name=''), format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('name', response.data['errors'])

    def test_data_store_error_is_reported_inline(self):
        with mock.patch.object(Business, 'save', side_effect=DatabaseError('connection refused')):
            response = self.client.post('/dashboard/businesses/new', self.form, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'connection refused')
        self.assertEqual(response.data['values'], self.form)

    def test_patch_updates_single_field(self):
        business = Business.objects.create(name='Tea House', city='Mosul')

        response = self.client.patch(f'/dashboard/businesses/{business.id}', {'city': ''}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        business.refresh_from_db()
        self.assertIsNone(business.city)
        self.assertEqual(business.name, 'Tea House')

    def test_delete_business(self):
        business = Business.objects.create(name='Tea House')

        response = self.client.delete(f'/dashboard/businesses/{business.id}')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Business.objects.filter(pk=business.pk).exists())

    def test_missing_business(self):
        response = self.client.get('/dashboard/businesses/00000000-0000-0000-0000-000000000000')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error'], 'Business not found')


class DashboardViewTests(AdminClientMixin, TestCase):
    def test_overview_metrics(self):
        Category.objects.create(name_ar='مقاهي')
        Business.objects.create(name='A', city='Baghdad')
        Business.objects.create(name='B', city='Baghdad')
        Business.objects.create(name='C', city='Basra')
        Business.objects.create(name='D')

        response = self.client.get('/dashboard')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['admin']['email'], 'admin@example.com')
        self.assertEqual(response.data['total_businesses'], 4)
        self.assertEqual(response.data['total_categories'], 1)
        self.assertEqual(response.data['cities_tracked'], 3)
        self.assertEqual(response.data['businesses_by_city'], {'Baghdad': 2, 'Basra': 1, 'Unknown': 1})
