"""
Test suite for supplier purchases
Tests: purchase creation with items, header edits, item endpoints, filters, stock effects
"""
from decimal import Decimal

from django.contrib import admin
from django.test import RequestFactory, TestCase
from rest_framework import status

from fnb_inventory.core.test_utils import TestDataFactory, api_client, refresh
from fnb_inventory.purchasing.models import SupplierPurchase, SupplierPurchaseItem


class PurchaseModelTests(TestCase):
    """Test SupplierPurchase and SupplierPurchaseItem model methods"""

    def test_purchase_str(self):
        """Test purchase string representation"""
        purchase = TestDataFactory.create_purchase()
        self.assertEqual(str(purchase), f'Purchase-{purchase.id}')

    def test_item_line_total(self):
        """Test item line total matches the stored subtotal"""
        product = TestDataFactory.create_product()
        purchase = TestDataFactory.create_purchase(items=[(product, 7, '1.15')])
        item = purchase.items.get()
        self.assertEqual(item.get_line_total(), Decimal('8.05'))
        self.assertEqual(item.subtotal, item.get_line_total())


class PurchaseAPITests(TestCase):
    """Test purchase endpoints"""

    def setUp(self):
        self.client = api_client()
        self.supplier = TestDataFactory.create_supplier(name='Fresh Foods Supplier')
        self.product = TestDataFactory.create_product(name='Chicken Thigh 1kg', stock_quantity=100)

    def _create(self, quantity=10, unit_cost='5.00', **extra):
        data = {
            'supplier_id': self.supplier.id,
            'purchase_date': '2026-03-02',
            'status': 'completed',
            'items': [{'product_id': self.product.id, 'quantity': quantity, 'unit_cost': unit_cost}],
        }
        data.update(extra)
        return self.client.post('/api/supplier-purchases/', data)

    def test_create_purchase(self):
        """Test creating a purchase returns it with items and names"""
        response = self._create()
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['supplier_name'], 'Fresh Foods Supplier')
        self.assertEqual(response.data['total_amount'], Decimal('50.00'))
        self.assertEqual(len(response.data['items']), 1)
        self.assertEqual(response.data['items'][0]['product_name'], 'Chicken Thigh 1kg')
        self.assertEqual(refresh(self.product).stock_quantity, 110)

    def test_create_accepts_unit_price(self):
        """Test unit_price is accepted in place of unit_cost"""
        data = {
            'supplier_id': self.supplier.id,
            'items': [{'product_id': self.product.id, 'quantity': 2, 'unit_price': '1.50'}],
        }
        response = self.client.post('/api/supplier-purchases/', data)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['items'][0]['unit_cost'], Decimal('1.50'))

    def test_create_with_unknown_product(self):
        """Test an unknown product aborts the whole purchase"""
        data = {
            'supplier_id': self.supplier.id,
            'items': [
                {'product_id': self.product.id, 'quantity': 10, 'unit_cost': '5.00'},
                {'product_id': 999999, 'quantity': 1, 'unit_cost': '1.00'},
            ],
        }
        response = self.client.post('/api/supplier-purchases/', data)
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(SupplierPurchase.objects.count(), 0)
        self.assertEqual(refresh(self.product).stock_quantity, 100)

    def test_create_with_unknown_supplier(self):
        """Test an unknown supplier is reported as not found"""
        response = self._create(supplier_id=999999)
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_create_with_zero_quantity(self):
        """Test quantity must be at least 1"""
        response = self._create(quantity=0)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('details', response.data)

    def test_update_header_only(self):
        """Test PATCH changes header fields and keeps totals"""
        purchase_id = self._create().data['id']
        response = self.client.patch(f'/api/supplier-purchases/{purchase_id}/', {'status': 'cancelled', 'notes': 'Late'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'cancelled')
        self.assertEqual(response.data['total_amount'], Decimal('50.00'))
        self.assertEqual(refresh(self.product).stock_quantity, 110)

    def test_item_endpoints(self):
        """Test add, update and delete of purchase items via the API"""
        purchase_id = self._create().data['id']
        oil = TestDataFactory.create_product(name='Canola Oil', stock_quantity=0)

        response = self.client.post(
            f'/api/supplier-purchases/{purchase_id}/items/',
            {'product_id': oil.id, 'quantity': 6, 'unit_cost': '4.00'}
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        item_id = response.data['id']
        self.assertEqual(refresh(oil).stock_quantity, 6)

        response = self.client.put(
            f'/api/supplier-purchases/{purchase_id}/items/{item_id}/',
            {'quantity': 4, 'unit_cost': '4.50'}
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['subtotal'], Decimal('18.00'))
        self.assertEqual(refresh(oil).stock_quantity, 4)
        self.assertEqual(SupplierPurchase.objects.get(pk=purchase_id).total_amount, Decimal('68.00'))

        response = self.client.get(f'/api/supplier-purchases/{purchase_id}/items/')
        self.assertEqual(len(response.data), 2)

        response = self.client.delete(f'/api/supplier-purchases/{purchase_id}/items/{item_id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(refresh(oil).stock_quantity, 0)
        self.assertEqual(SupplierPurchase.objects.get(pk=purchase_id).total_amount, Decimal('50.00'))

    def test_update_item_requires_a_change(self):
        """Test an empty item update is rejected"""
        purchase_id = self._create().data['id']
        item_id = SupplierPurchaseItem.objects.get(purchase_id=purchase_id).id
        response = self.client.patch(f'/api/supplier-purchases/{purchase_id}/items/{item_id}/', {})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_delete_purchase(self):
        """Test deleting a purchase reverses its stock"""
        purchase_id = self._create().data['id']
        response = self.client.delete(f'/api/supplier-purchases/{purchase_id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'message': 'Purchase deleted successfully'})
        self.assertEqual(refresh(self.product).stock_quantity, 100)

    def test_list_filters(self):
        """Test supplier, status, search and date range filters"""
        other = TestDataFactory.create_supplier(name='Golden Grains')
        self._create()
        self._create(purchase_date='2026-05-10', status='pending')
        TestDataFactory.create_purchase(supplier=other, items=[(self.product, 1, '1.00')])

        response = self.client.get('/api/supplier-purchases/', {'supplier_id': self.supplier.id})
        self.assertEqual(len(response.data), 2)

        response = self.client.get('/api/supplier-purchases/', {'status': 'pending'})
        self.assertEqual(len(response.data), 1)

        response = self.client.get('/api/supplier-purchases/', {'search': 'golden'})
        self.assertEqual([p['supplier_name'] for p in response.data], ['Golden Grains'])

        response = self.client.get(
            '/api/supplier-purchases/', {'startDate': '2026-03-01', 'endDate': '2026-03-31'}
        )
        self.assertEqual([p['purchase_date'] for p in response.data], ['2026-03-02'])


class PurchaseAdminTests(TestCase):
    """Test admin deletes keep stock in step with purchase items"""

    def setUp(self):
        self.model_admin = admin.site._registry[SupplierPurchase]
        self.request = RequestFactory().post('/admin/')
        self.product = TestDataFactory.create_product(stock_quantity=100)

    def test_admin_delete_reverses_stock(self):
        """Test deleting one purchase in the admin takes its stock back out"""
        purchase = TestDataFactory.create_purchase(items=[(self.product, 10, '2.00')])
        self.assertEqual(refresh(self.product).stock_quantity, 110)

        self.model_admin.delete_model(self.request, purchase)
        self.assertFalse(SupplierPurchase.objects.exists())
        self.assertFalse(SupplierPurchaseItem.objects.exists())
        self.assertEqual(refresh(self.product).stock_quantity, 100)

    def test_admin_bulk_delete_reverses_stock(self):
        """Test the delete-selected action goes through the ledger"""
        TestDataFactory.create_purchase(items=[(self.product, 10, '2.00')])
        TestDataFactory.create_purchase(items=[(self.product, 5, '2.00')])
        self.assertEqual(refresh(self.product).stock_quantity, 115)

        self.model_admin.delete_queryset(self.request, SupplierPurchase.objects.all())
        self.assertFalse(SupplierPurchase.objects.exists())
        self.assertEqual(refresh(self.product).stock_quantity, 100)
