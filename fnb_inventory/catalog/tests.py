"""
Test suite for the catalog module
Tests: products CRUD, filters, categories, low-stock alert
"""
from decimal import Decimal

from django.contrib import admin
from django.test import RequestFactory, TestCase
from rest_framework import status

from fnb_inventory.catalog.models import Product, ProductCategory
from fnb_inventory.core.test_utils import TestDataFactory, api_client, refresh


class ProductModelTests(TestCase):
    """Test Product model methods"""

    def test_is_low_stock(self):
        """Test low stock compares against the product's reorder level"""
        product = TestDataFactory.create_product(stock_quantity=49, reorder_level=50)
        self.assertTrue(product.is_low_stock())
        product.stock_quantity = 50
        self.assertFalse(product.is_low_stock())

    def test_inventory_value(self):
        """Test inventory value is stock times unit price"""
        product = TestDataFactory.create_product(stock_quantity=12, unit_price=Decimal('2.50'))
        self.assertEqual(product.get_inventory_value(), Decimal('30.00'))


class ProductAPITests(TestCase):
    """Test product endpoints"""

    def setUp(self):
        self.client = api_client()
        self.category = TestDataFactory.create_category(name='Condiments')
        self.supplier = TestDataFactory.create_supplier(name='Fresh Foods Supplier')

    def test_create_product(self):
        """Test creating a product with an opening stock"""
        data = {
            'name': 'Chilli Sauce 500ml',
            'category_id': self.category.id,
            'supplier_id': self.supplier.id,
            'unit': 'bottle',
            'unit_price': '3.20',
            'stock_quantity': 240,
            'reorder_level': 50,
        }
        response = self.client.post('/api/products/', data)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['category_name'], 'Condiments')
        self.assertEqual(response.data['supplier_name'], 'Fresh Foods Supplier')
        self.assertEqual(response.data['stock_quantity'], 240)

    def test_create_product_negative_price(self):
        """Test negative prices are rejected"""
        response = self.client.post('/api/products/', {'name': 'Bad', 'unit_price': '-1.00'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('error', response.data)

    def test_update_does_not_change_stock(self):
        """Test stock can't be overwritten after creation"""
        product = TestDataFactory.create_product(stock_quantity=80)
        response = self.client.patch(f'/api/products/{product.id}/', {'stock_quantity': 5, 'unit_price': '9.99'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        product = refresh(product)
        self.assertEqual(product.stock_quantity, 80)
        self.assertEqual(product.unit_price, Decimal('9.99'))

    def test_list_filters(self):
        """Test search, category and low-stock filters"""
        TestDataFactory.create_product(name='Fish Sauce', category=self.category, stock_quantity=20)
        TestDataFactory.create_product(name='Oyster Sauce', category=self.category, stock_quantity=500)
        TestDataFactory.create_product(name='Basmati Rice', stock_quantity=10, supplier=self.supplier)

        response = self.client.get('/api/products/', {'search': 'sauce'})
        self.assertEqual({p['name'] for p in response.data}, {'Fish Sauce', 'Oyster Sauce'})

        response = self.client.get('/api/products/', {'category_id': self.category.id, 'lowStock': 'true'})
        self.assertEqual([p['name'] for p in response.data], ['Fish Sauce'])

        response = self.client.get('/api/products/', {'supplier_id': self.supplier.id})
        self.assertEqual([p['name'] for p in response.data], ['Basmati Rice'])

    def test_delete_product(self):
        """Test deleting a product fixes totals of documents that used it"""
        product = TestDataFactory.create_product(stock_quantity=10)
        other = TestDataFactory.create_product(stock_quantity=10)
        purchase = TestDataFactory.create_purchase(items=[(product, 5, '1.00'), (other, 1, '4.00')])

        response = self.client.delete(f'/api/products/{product.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'message': 'Product deleted successfully'})
        self.assertFalse(Product.objects.filter(pk=product.id).exists())
        self.assertEqual(refresh(purchase).total_amount, Decimal('4.00'))

    def test_low_stock_alert(self):
        """Test the alert lists products below their reorder level, lowest first"""
        TestDataFactory.create_product(name='A', stock_quantity=30, reorder_level=40)
        TestDataFactory.create_product(name='B', stock_quantity=5, reorder_level=10)
        TestDataFactory.create_product(name='C', stock_quantity=40, reorder_level=40)
        response = self.client.get('/api/products/alerts/low-stock/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([p['name'] for p in response.data], ['B', 'A'])


class CategoryAPITests(TestCase):
    """Test category endpoints"""

    def setUp(self):
        self.client = api_client()

    def test_list_categories(self):
        """Test categories list with product counts"""
        category = TestDataFactory.create_category(name='Beverages')
        TestDataFactory.create_product(category=category)
        response = self.client.get('/api/products/meta/categories/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data[0]['name'], 'Beverages')
        self.assertEqual(response.data[0]['product_count'], 1)

    def test_create_category(self):
        """Test creating a category"""
        response = self.client.post('/api/products/meta/categories/', {'name': 'Frozen'})
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(ProductCategory.objects.filter(name='Frozen').exists())

    def test_duplicate_category(self):
        """Test a duplicate category name is a conflict"""
        TestDataFactory.create_category(name='Frozen')
        response = self.client.post('/api/products/meta/categories/', {'name': 'Frozen'})
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertIn('error', response.data)


class ProductAdminTests(TestCase):
    """Test product admin deletes keep document totals consistent"""

    def test_admin_delete_recalculates_totals(self):
        """Test deleting a product in the admin recomputes the totals it was part of"""
        rice = TestDataFactory.create_product(name='Jasmine Rice 5kg')
        oil = TestDataFactory.create_product(name='Peanut Oil 2L')
        purchase = TestDataFactory.create_purchase(items=[(rice, 2, '5.00'), (oil, 1, '3.00')])
        order = TestDataFactory.create_order(items=[(rice, 1, '6.00'), (oil, 1, '4.00')])

        admin.site._registry[Product].delete_model(RequestFactory().post('/admin/'), rice)
        self.assertFalse(Product.objects.filter(name='Jasmine Rice 5kg').exists())
        self.assertEqual(refresh(purchase).total_amount, Decimal('3.00'))
        self.assertEqual(refresh(order).total_amount, Decimal('4.00'))

    def test_admin_bulk_delete_recalculates_totals(self):
        """Test the delete-selected action recomputes totals for every product removed"""
        rice = TestDataFactory.create_product(name='Jasmine Rice 5kg')
        oil = TestDataFactory.create_product(name='Peanut Oil 2L')
        keep = TestDataFactory.create_product(name='Sea Salt 1kg')
        purchase = TestDataFactory.create_purchase(items=[(rice, 2, '5.00'), (oil, 1, '3.00'), (keep, 1, '1.50')])

        admin.site._registry[Product].delete_queryset(
            RequestFactory().post('/admin/'), Product.objects.filter(pk__in=[rice.pk, oil.pk])
        )
        self.assertEqual(refresh(purchase).total_amount, Decimal('1.50'))
