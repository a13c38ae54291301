"""
Test utilities and factories for creating test data
"""
import random
import string
from decimal import Decimal

from django.utils import timezone
from rest_framework.test import APIClient

from fnb_inventory.catalog.models import Product, ProductCategory
from fnb_inventory.inventory.services import order_ledger, purchase_ledger
from fnb_inventory.parties.models import Customer, Supplier
from fnb_inventory.purchasing.models import SupplierPurchase
from fnb_inventory.sales.models import CustomerOrder


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_category(name=None, description=''):
        """Create a test category"""
        if not name:
            name = f'Category_{TestDataFactory.random_string(6)}'
        return ProductCategory.objects.create(name=name, description=description)

    @staticmethod
    def create_supplier(name=None, region='Central', status='active', **kwargs):
        """Create a test supplier"""
        if not name:
            name = f'Supplier_{TestDataFactory.random_string(6)}'
        return Supplier.objects.create(
            name=name,
            contact_person=kwargs.pop('contact_person', 'Test Contact'),
            email=kwargs.pop('email', f'{name.lower()}@test.com'),
            phone=kwargs.pop('phone', '6512345678'),
            region=region,
            status=status,
            **kwargs
        )

    @staticmethod
    def create_customer(name=None, customer_type='retail', status='active', **kwargs):
        """Create a test customer"""
        if not name:
            name = f'Customer_{TestDataFactory.random_string(6)}'
        return Customer.objects.create(
            name=name,
            email=kwargs.pop('email', f'{name.lower()}@test.com'),
            phone=kwargs.pop('phone', '6587654321'),
            customer_type=customer_type,
            status=status,
            **kwargs
        )

    @staticmethod
    def create_product(name=None, category=None, supplier=None, unit_price=Decimal('10.00'),
                       stock_quantity=100, reorder_level=100, unit='pcs'):
        """Create a test product with a given opening stock"""
        if not name:
            name = f'Product_{TestDataFactory.random_string(6)}'
        return Product.objects.create(
            name=name,
            category=category,
            supplier=supplier,
            unit=unit,
            unit_price=unit_price,
            stock_quantity=stock_quantity,
            reorder_level=reorder_level,
        )

    @staticmethod
    def create_purchase(supplier=None, items=None, purchase_date=None, status='completed', notes=''):
        """Create a purchase through the ledger.

        ``items`` is a list of ``(product, quantity, unit_cost)`` tuples.
        """
        supplier = supplier or TestDataFactory.create_supplier()
        fields = {
            'supplier_id': supplier.id,
            'purchase_date': purchase_date or timezone.localdate(),
            'status': status,
            'notes': notes,
        }
        lines = [
            {'product_id': product.id, 'quantity': quantity, 'unit_price': Decimal(str(price))}
            for product, quantity, price in (items or [])
        ]
        purchase = purchase_ledger.create_with_items(fields, lines)
        return SupplierPurchase.objects.get(pk=purchase.pk)

    @staticmethod
    def create_order(customer=None, items=None, order_date=None, status='completed', shipping_address=''):
        """Create an order through the ledger.

        ``items`` is a list of ``(product, quantity, unit_price)`` tuples.
        """
        customer = customer or TestDataFactory.create_customer()
        fields = {
            'customer_id': customer.id,
            'order_date': order_date or timezone.localdate(),
            'status': status,
            'shipping_address': shipping_address,
        }
        lines = [
            {'product_id': product.id, 'quantity': quantity, 'unit_price': Decimal(str(price))}
            for product, quantity, price in (items or [])
        ]
        order = order_ledger.create_with_items(fields, lines)
        return CustomerOrder.objects.get(pk=order.pk)


def refresh(instance):
    """Reload a model instance from the database"""
    instance.refresh_from_db()
    return instance


def api_client():
    """JSON API client; the API is unauthenticated"""
    client = APIClient()
    client.default_format = 'json'
    return client
