"""
Test suite for customer orders
"""
from decimal import Decimal

from django.contrib import admin
from django.test import RequestFactory, TestCase
from rest_framework import status

from fnb_inventory.core.test_utils import TestDataFactory, api_client, refresh
from fnb_inventory.sales.models import CustomerOrder, CustomerOrderItem


class OrderAPITests(TestCase):
    """Test order endpoints"""

    def setUp(self):
        self.client = api_client()
        self.customer = TestDataFactory.create_customer(name='Kopi Corner')
        self.product = TestDataFactory.create_product(name='Evaporated Milk 410g', stock_quantity=60)

    def _create(self, quantity=12, unit_price='1.80', **extra):
        data = {
            'customer_id': self.customer.id,
            'order_date': '2026-04-15',
            'shipping_address': '12 Tanjong Pagar Rd',
            'items': [{'product_id': self.product.id, 'quantity': quantity, 'unit_price': unit_price}],
        }
        data.update(extra)
        return self.client.post('/api/customer-orders/', data)

    def test_create_order(self):
        """Test placing an order returns it with items and takes stock"""
        response = self._create()
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['customer_name'], 'Kopi Corner')
        self.assertEqual(response.data['status'], 'pending')
        self.assertEqual(response.data['total_amount'], Decimal('21.60'))
        self.assertEqual(refresh(self.product).stock_quantity, 48)

    def test_create_order_insufficient_stock(self):
        """Test ordering more than is in stock fails and writes nothing"""
        response = self._create(quantity=61)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('Insufficient stock', response.data['error'])
        self.assertEqual(CustomerOrder.objects.count(), 0)
        self.assertEqual(refresh(self.product).stock_quantity, 60)

    def test_update_header(self):
        """Test PUT edits header fields only"""
        order_id = self._create().data['id']
        response = self.client.put(
            f'/api/customer-orders/{order_id}/',
            {'customer_id': self.customer.id, 'status': 'shipped', 'shipping_address': '1 Harbourfront'}
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'shipped')
        self.assertEqual(len(response.data['items']), 1)

    def test_update_header_invalid_status(self):
        """Test unknown statuses are rejected"""
        order_id = self._create().data['id']
        response = self.client.patch(f'/api/customer-orders/{order_id}/', {'status': 'lost'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_item_endpoints(self):
        """Test add, update and delete of order items"""
        order_id = self._create().data['id']

        response = self.client.post(
            f'/api/customer-orders/{order_id}/items/',
            {'product_id': self.product.id, 'quantity': 8, 'unit_price': '1.75'}
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        item_id = response.data['id']
        self.assertEqual(refresh(self.product).stock_quantity, 40)
        self.assertEqual(CustomerOrder.objects.get(pk=order_id).total_amount, Decimal('35.60'))

        response = self.client.patch(f'/api/customer-orders/{order_id}/items/{item_id}/', {'quantity': 3})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(refresh(self.product).stock_quantity, 45)
        self.assertEqual(CustomerOrder.objects.get(pk=order_id).total_amount, Decimal('26.85'))

        response = self.client.delete(f'/api/customer-orders/{order_id}/items/{item_id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(CustomerOrderItem.objects.filter(pk=item_id).exists())
        self.assertEqual(refresh(self.product).stock_quantity, 48)

    def test_delete_item_of_missing_order(self):
        """Test item routes 404 for unknown orders"""
        response = self.client.delete('/api/customer-orders/999999/items/1/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_delete_order(self):
        """Test deleting an order returns its stock"""
        order_id = self._create().data['id']
        response = self.client.delete(f'/api/customer-orders/{order_id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(refresh(self.product).stock_quantity, 60)

    def test_list_filters(self):
        """Test customer and status filters"""
        other = TestDataFactory.create_customer(name='Bakery One')
        self._create()
        TestDataFactory.create_order(customer=other, items=[(self.product, 1, '1.00')], status='cancelled')

        response = self.client.get('/api/customer-orders/', {'customer_id': other.id})
        self.assertEqual([o['customer_name'] for o in response.data], ['Bakery One'])

        response = self.client.get('/api/customer-orders/', {'status': 'cancelled', 'search': 'bakery'})
        self.assertEqual(len(response.data), 1)


class OrderAdminTests(TestCase):
    """Test admin deletes return ordered stock"""

    def setUp(self):
        self.model_admin = admin.site._registry[CustomerOrder]
        self.request = RequestFactory().post('/admin/')
        self.product = TestDataFactory.create_product(stock_quantity=100)

    def test_admin_delete_returns_stock(self):
        """Test deleting one order in the admin puts its stock back"""
        order = TestDataFactory.create_order(items=[(self.product, 30, '1.50')])
        self.assertEqual(refresh(self.product).stock_quantity, 70)

        self.model_admin.delete_model(self.request, order)
        self.assertFalse(CustomerOrder.objects.exists())
        self.assertFalse(CustomerOrderItem.objects.exists())
        self.assertEqual(refresh(self.product).stock_quantity, 100)

    def test_admin_bulk_delete_returns_stock(self):
        """Test the delete-selected action goes through the ledger"""
        TestDataFactory.create_order(items=[(self.product, 30, '1.50')])
        TestDataFactory.create_order(items=[(self.product, 20, '1.50')])
        self.assertEqual(refresh(self.product).stock_quantity, 50)

        self.model_admin.delete_queryset(self.request, CustomerOrder.objects.all())
        self.assertEqual(refresh(self.product).stock_quantity, 100)
