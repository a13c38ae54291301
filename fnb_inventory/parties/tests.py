"""
Test suite for suppliers and customers
"""
from django.contrib import admin
from django.test import RequestFactory, TestCase
from rest_framework import status

from fnb_inventory.core.test_utils import TestDataFactory, api_client, refresh
from fnb_inventory.parties.models import Customer, Supplier


class SupplierAPITests(TestCase):
    """Test supplier endpoints"""

    def setUp(self):
        self.client = api_client()

    def test_create_supplier(self):
        """Test creating a supplier"""
        data = {'name': 'Ocean Catch Pte Ltd', 'contact_person': 'Tan Wei', 'region': 'East'}
        response = self.client.post('/api/suppliers/', data)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'active')

    def test_create_supplier_invalid_email(self):
        """Test supplier email is validated"""
        response = self.client.post('/api/suppliers/', {'name': 'X', 'email': 'not-an-email'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(response.data['error'].startswith('email'))

    def test_filters(self):
        """Test search, region and status filters"""
        TestDataFactory.create_supplier(name='Fresh Foods Supplier', region='Central')
        TestDataFactory.create_supplier(name='Golden Grains', region='West', contact_person='Lim Mei')
        TestDataFactory.create_supplier(name='Old Dairy', region='West', status='inactive')

        response = self.client.get('/api/suppliers/', {'search': 'lim'})
        self.assertEqual([s['name'] for s in response.data], ['Golden Grains'])

        response = self.client.get('/api/suppliers/', {'region': 'west', 'status': 'active'})
        self.assertEqual([s['name'] for s in response.data], ['Golden Grains'])

    def test_regions(self):
        """Test distinct non-empty regions"""
        TestDataFactory.create_supplier(region='West')
        TestDataFactory.create_supplier(region='East')
        TestDataFactory.create_supplier(region='West')
        TestDataFactory.create_supplier(region='')
        response = self.client.get('/api/suppliers/meta/regions/')
        self.assertEqual(response.data, ['East', 'West'])

    def test_detail_embeds_products_and_purchases(self):
        """Test detail shows products and the 10 latest purchases"""
        supplier = TestDataFactory.create_supplier()
        product = TestDataFactory.create_product(supplier=supplier)
        for _ in range(12):
            TestDataFactory.create_purchase(supplier=supplier, items=[(product, 1, '1.00')])
        response = self.client.get(f'/api/suppliers/{supplier.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['products']), 1)
        self.assertEqual(len(response.data['recent_purchases']), 10)

    def test_delete_supplier_reverses_stock(self):
        """Test deleting a supplier removes its purchases and their stock"""
        supplier = TestDataFactory.create_supplier()
        product = TestDataFactory.create_product(stock_quantity=0)
        TestDataFactory.create_purchase(supplier=supplier, items=[(product, 25, '1.00')])
        response = self.client.delete(f'/api/suppliers/{supplier.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Supplier.objects.filter(pk=supplier.id).exists())
        self.assertEqual(refresh(product).stock_quantity, 0)


class CustomerAPITests(TestCase):
    """Test customer endpoints"""

    def setUp(self):
        self.client = api_client()

    def test_create_and_update_customer(self):
        """Test creating then patching a customer"""
        response = self.client.post('/api/customers/', {'name': 'Kopi Corner', 'customer_type': 'restaurant'})
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        customer_id = response.data['id']

        response = self.client.patch(f'/api/customers/{customer_id}/', {'status': 'inactive'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Customer.objects.get(pk=customer_id).status, 'inactive')

    def test_list_embeds_latest_orders(self):
        """Test the customer list carries the 5 most recent orders"""
        customer = TestDataFactory.create_customer(name='Hawker Stall 12')
        product = TestDataFactory.create_product(stock_quantity=100)
        for _ in range(7):
            TestDataFactory.create_order(customer=customer, items=[(product, 1, '2.00')])
        response = self.client.get('/api/customers/')
        self.assertEqual(len(response.data[0]['recent_orders']), 5)

        response = self.client.get(f'/api/customers/{customer.id}/')
        self.assertEqual(len(response.data['orders']), 7)

    def test_search(self):
        """Test search matches name, email or phone"""
        TestDataFactory.create_customer(name='Bakery One', phone='61112222')
        TestDataFactory.create_customer(name='Cafe Two', phone='69998888')
        response = self.client.get('/api/customers/', {'search': '9998'})
        self.assertEqual([c['name'] for c in response.data], ['Cafe Two'])

    def test_delete_customer_returns_stock(self):
        """Test deleting a customer returns the stock of its orders"""
        customer = TestDataFactory.create_customer()
        product = TestDataFactory.create_product(stock_quantity=10)
        TestDataFactory.create_order(customer=customer, items=[(product, 4, '1.00')])
        response = self.client.delete(f'/api/customers/{customer.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(refresh(product).stock_quantity, 10)

    def test_missing_customer(self):
        """Test unknown customer returns 404"""
        response = self.client.get('/api/customers/999999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class PartiesAdminTests(TestCase):
    """Test supplier and customer admin deletes reverse document stock"""

    def setUp(self):
        self.request = RequestFactory().post('/admin/')
        self.product = TestDataFactory.create_product(stock_quantity=50)

    def test_admin_delete_supplier(self):
        """Test deleting a supplier in the admin removes its purchased stock"""
        supplier = TestDataFactory.create_supplier()
        TestDataFactory.create_purchase(supplier=supplier, items=[(self.product, 20, '1.00')])
        self.assertEqual(refresh(self.product).stock_quantity, 70)

        admin.site._registry[Supplier].delete_model(self.request, supplier)
        self.assertFalse(Supplier.objects.filter(pk=supplier.pk).exists())
        self.assertEqual(refresh(self.product).stock_quantity, 50)

    def test_admin_bulk_delete_customers(self):
        """Test the delete-selected action returns every customer's ordered stock"""
        for _ in range(2):
            customer = TestDataFactory.create_customer()
            TestDataFactory.create_order(customer=customer, items=[(self.product, 10, '1.00')])
        self.assertEqual(refresh(self.product).stock_quantity, 30)

        admin.site._registry[Customer].delete_queryset(self.request, Customer.objects.all())
        self.assertFalse(Customer.objects.exists())
        self.assertEqual(refresh(self.product).stock_quantity, 50)
