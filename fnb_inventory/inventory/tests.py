"""
Test suite for the line-item ledger
Tests: document creation, item add/update/delete, stock and total consistency, rollback
"""
from decimal import Decimal

from django.db import connection
from django.test import TestCase
from django.test.utils import CaptureQueriesContext

from fnb_inventory.core.exceptions import NotFound, ValidationFailed
from fnb_inventory.core.test_utils import TestDataFactory, refresh
from fnb_inventory.inventory.services import (
    delete_customer, delete_product, delete_supplier, order_ledger, purchase_ledger
)
from fnb_inventory.purchasing.models import SupplierPurchase, SupplierPurchaseItem
from fnb_inventory.sales.models import CustomerOrder, CustomerOrderItem


class PurchaseLedgerTests(TestCase):
    """Test purchase items adding stock and keeping totals"""

    def setUp(self):
        self.supplier = TestDataFactory.create_supplier()
        self.rice = TestDataFactory.create_product(name='Jasmine Rice 5kg', stock_quantity=100)
        self.oil = TestDataFactory.create_product(name='Peanut Oil 2L', stock_quantity=40)

    def _create(self, items):
        return purchase_ledger.create_with_items(
            {'supplier_id': self.supplier.id, 'status': 'completed'},
            items
        )

    def test_create_with_items(self):
        """Test creating a purchase sets subtotals, total and stock"""
        purchase = self._create([
            {'product_id': self.rice.id, 'quantity': 10, 'unit_price': Decimal('5.00')},
            {'product_id': self.oil.id, 'quantity': 3, 'unit_price': Decimal('7.25')},
        ])
        purchase = refresh(purchase)
        self.assertEqual(purchase.total_amount, Decimal('71.75'))
        self.assertEqual(purchase.items.count(), 2)
        self.assertEqual(purchase.get_items_total(), purchase.total_amount)
        self.assertEqual(refresh(self.rice).stock_quantity, 110)
        self.assertEqual(refresh(self.oil).stock_quantity, 43)

    def test_create_without_items(self):
        """Test a purchase can be created empty with a zero total"""
        purchase = self._create([])
        self.assertEqual(refresh(purchase).total_amount, Decimal('0.00'))

    def test_create_rolls_back_on_unknown_product(self):
        """Test a bad second line leaves no purchase, no items and no stock change"""
        with self.assertRaises(NotFound):
            self._create([
                {'product_id': self.rice.id, 'quantity': 10, 'unit_price': Decimal('5.00')},
                {'product_id': 999999, 'quantity': 1, 'unit_price': Decimal('1.00')},
            ])
        self.assertEqual(SupplierPurchase.objects.count(), 0)
        self.assertEqual(SupplierPurchaseItem.objects.count(), 0)
        self.assertEqual(refresh(self.rice).stock_quantity, 100)

    def test_create_rejects_invalid_quantity(self):
        """Test zero quantity is rejected before anything is written"""
        with self.assertRaises(ValidationFailed):
            self._create([{'product_id': self.rice.id, 'quantity': 0, 'unit_price': Decimal('5.00')}])
        self.assertEqual(SupplierPurchase.objects.count(), 0)

    def test_create_rejects_negative_price(self):
        """Test negative unit cost is rejected"""
        with self.assertRaises(ValidationFailed):
            self._create([{'product_id': self.rice.id, 'quantity': 1, 'unit_price': Decimal('-1.00')}])

    def test_create_rejects_boolean_quantity(self):
        """Test True/False are not accepted as quantities 1/0"""
        for flag in (True, False):
            with self.assertRaises(ValidationFailed):
                self._create([{'product_id': self.rice.id, 'quantity': flag, 'unit_price': Decimal('5.00')}])
        with self.assertRaises(ValidationFailed):
            purchase_ledger.add_item(self._create([]).id, self.rice.id, True, Decimal('5.00'))
        self.assertEqual(SupplierPurchaseItem.objects.count(), 0)
        self.assertEqual(refresh(self.rice).stock_quantity, 100)

    def test_create_locks_products_in_id_order(self):
        """Test all products are locked in one id-ordered query before stock moves"""
        with CaptureQueriesContext(connection) as ctx:
            self._create([
                {'product_id': self.oil.id, 'quantity': 1, 'unit_price': Decimal('1.00')},
                {'product_id': self.rice.id, 'quantity': 1, 'unit_price': Decimal('1.00')},
            ])
        product_queries = [q['sql'] for q in ctx.captured_queries if 'FROM "products"' in q['sql']]
        self.assertIn(' IN (', product_queries[0])
        self.assertIn('ORDER BY "products"."id" ASC', product_queries[0])

    def test_delete_parent_locks_products_in_id_order(self):
        """Test deleting a purchase locks its products in id order first"""
        purchase = self._create([
            {'product_id': self.oil.id, 'quantity': 1, 'unit_price': Decimal('1.00')},
            {'product_id': self.rice.id, 'quantity': 1, 'unit_price': Decimal('1.00')},
        ])
        with CaptureQueriesContext(connection) as ctx:
            purchase_ledger.delete_parent(purchase.id)
        product_queries = [q['sql'] for q in ctx.captured_queries if 'FROM "products"' in q['sql']]
        self.assertIn(' IN (', product_queries[0])
        self.assertIn('ORDER BY "products"."id" ASC', product_queries[0])

    def test_create_with_missing_product_listed_first(self):
        """Test a missing product aborts before any stock changes"""
        with self.assertRaises(NotFound):
            self._create([
                {'product_id': 999999, 'quantity': 1, 'unit_price': Decimal('1.00')},
                {'product_id': self.rice.id, 'quantity': 5, 'unit_price': Decimal('1.00')},
            ])
        self.assertEqual(SupplierPurchase.objects.count(), 0)
        self.assertEqual(refresh(self.rice).stock_quantity, 100)

    def test_create_for_unknown_supplier(self):
        """Test creating a purchase for a missing supplier"""
        with self.assertRaises(NotFound):
            purchase_ledger.create_with_items({'supplier_id': 424242}, [])

    def test_add_item(self):
        """Test adding an item increases stock and total"""
        purchase = self._create([{'product_id': self.rice.id, 'quantity': 10, 'unit_price': Decimal('5.00')}])
        item = purchase_ledger.add_item(purchase.id, self.oil.id, 4, Decimal('2.50'))
        self.assertEqual(item.subtotal, Decimal('10.00'))
        self.assertEqual(refresh(purchase).total_amount, Decimal('60.00'))
        self.assertEqual(refresh(self.oil).stock_quantity, 44)

    def test_add_item_to_missing_purchase(self):
        """Test adding to a purchase that does not exist"""
        with self.assertRaises(NotFound):
            purchase_ledger.add_item(999999, self.rice.id, 1, Decimal('1.00'))
        self.assertEqual(refresh(self.rice).stock_quantity, 100)

    def test_add_item_unknown_product(self):
        """Test adding an unknown product leaves the purchase unchanged"""
        purchase = self._create([{'product_id': self.rice.id, 'quantity': 2, 'unit_price': Decimal('5.00')}])
        with self.assertRaises(NotFound):
            purchase_ledger.add_item(purchase.id, 999999, 1, Decimal('1.00'))
        self.assertEqual(refresh(purchase).total_amount, Decimal('10.00'))
        self.assertEqual(purchase.items.count(), 1)

    def test_update_item_quantity_applies_delta(self):
        """Test changing quantity 10 -> 15 moves stock by 5 and total by the subtotal delta"""
        purchase = self._create([{'product_id': self.rice.id, 'quantity': 10, 'unit_price': Decimal('5.00')}])
        item = purchase.items.get()
        self.assertEqual(refresh(self.rice).stock_quantity, 110)

        purchase_ledger.update_item(purchase.id, item.id, quantity=15, unit_price=Decimal('5.00'))

        self.assertEqual(refresh(self.rice).stock_quantity, 115)
        self.assertEqual(refresh(item).subtotal, Decimal('75.00'))
        self.assertEqual(refresh(purchase).total_amount, Decimal('75.00'))

    def test_update_item_price_only(self):
        """Test changing only the unit cost leaves stock alone"""
        purchase = self._create([{'product_id': self.rice.id, 'quantity': 10, 'unit_price': Decimal('5.00')}])
        item = purchase.items.get()
        purchase_ledger.update_item(purchase.id, item.id, unit_price=Decimal('6.10'))
        self.assertEqual(refresh(self.rice).stock_quantity, 110)
        self.assertEqual(refresh(item).quantity, 10)
        self.assertEqual(refresh(purchase).total_amount, Decimal('61.00'))

    def test_update_item_below_available_stock(self):
        """Test lowering a purchase quantity cannot take stock below zero"""
        product = TestDataFactory.create_product(stock_quantity=0)
        purchase = self._create([{'product_id': product.id, 'quantity': 10, 'unit_price': Decimal('1.00')}])
        order = TestDataFactory.create_order(items=[(product, 8, '2.00')])
        self.assertEqual(refresh(product).stock_quantity, 2)

        item = purchase.items.get()
        with self.assertRaises(ValidationFailed):
            purchase_ledger.update_item(purchase.id, item.id, quantity=5)
        self.assertEqual(refresh(item).quantity, 10)
        self.assertEqual(refresh(product).stock_quantity, 2)
        self.assertEqual(refresh(purchase).total_amount, Decimal('10.00'))
        self.assertEqual(refresh(order).total_amount, Decimal('16.00'))

    def test_update_item_of_other_purchase(self):
        """Test an item can only be edited through its own purchase"""
        first = self._create([{'product_id': self.rice.id, 'quantity': 1, 'unit_price': Decimal('1.00')}])
        second = self._create([])
        with self.assertRaises(NotFound):
            purchase_ledger.update_item(second.id, first.items.get().id, quantity=2)

    def test_delete_item_reverses_stock(self):
        """Test deleting an item takes its quantity back out of stock"""
        purchase = self._create([
            {'product_id': self.rice.id, 'quantity': 10, 'unit_price': Decimal('5.00')},
            {'product_id': self.oil.id, 'quantity': 2, 'unit_price': Decimal('3.00')},
        ])
        item = purchase.items.get(product=self.rice)
        purchase_ledger.delete_item(purchase.id, item.id)
        self.assertEqual(refresh(self.rice).stock_quantity, 100)
        self.assertEqual(refresh(purchase).total_amount, Decimal('6.00'))
        self.assertFalse(SupplierPurchaseItem.objects.filter(pk=item.id).exists())

    def test_delete_parent_reverses_all_stock(self):
        """Test creating then deleting a purchase restores the starting stock"""
        purchase = self._create([
            {'product_id': self.rice.id, 'quantity': 10, 'unit_price': Decimal('5.00')},
            {'product_id': self.oil.id, 'quantity': 2, 'unit_price': Decimal('3.00')},
        ])
        purchase_ledger.delete_parent(purchase.id)
        self.assertEqual(refresh(self.rice).stock_quantity, 100)
        self.assertEqual(refresh(self.oil).stock_quantity, 40)
        self.assertEqual(SupplierPurchase.objects.count(), 0)
        self.assertEqual(SupplierPurchaseItem.objects.count(), 0)

    def test_subtotal_rounding(self):
        """Test unit cost is rounded half-up to cents before multiplying"""
        purchase = self._create([{'product_id': self.rice.id, 'quantity': 3, 'unit_price': Decimal('0.335')}])
        self.assertEqual(purchase.items.get().subtotal, Decimal('1.02'))
        self.assertEqual(refresh(purchase).total_amount, Decimal('1.02'))

    def test_recalculate_total(self):
        """Test the total can be rebuilt from item subtotals"""
        purchase = self._create([{'product_id': self.rice.id, 'quantity': 4, 'unit_price': Decimal('2.50')}])
        SupplierPurchase.objects.filter(pk=purchase.pk).update(total_amount=Decimal('999.00'))
        purchase = purchase_ledger.recalculate_total(purchase.id)
        self.assertEqual(purchase.total_amount, Decimal('10.00'))

    def test_update_parent_header(self):
        """Test editing header fields does not touch items, total or stock"""
        purchase = self._create([{'product_id': self.rice.id, 'quantity': 4, 'unit_price': Decimal('2.50')}])
        other = TestDataFactory.create_supplier()
        purchase_ledger.update_parent(purchase.id, {'supplier_id': other.id, 'status': 'cancelled'})
        purchase = refresh(purchase)
        self.assertEqual(purchase.supplier_id, other.id)
        self.assertEqual(purchase.status, 'cancelled')
        self.assertEqual(purchase.total_amount, Decimal('10.00'))
        self.assertEqual(refresh(self.rice).stock_quantity, 104)


class OrderLedgerTests(TestCase):
    """Test order items removing stock"""

    def setUp(self):
        self.customer = TestDataFactory.create_customer()
        self.product = TestDataFactory.create_product(name='Soy Sauce 1L', stock_quantity=50)

    def test_order_decreases_stock(self):
        """Test placing an order takes stock out"""
        order = TestDataFactory.create_order(customer=self.customer, items=[(self.product, 20, '3.40')])
        self.assertEqual(order.total_amount, Decimal('68.00'))
        self.assertEqual(refresh(self.product).stock_quantity, 30)

    def test_order_insufficient_stock(self):
        """Test an order larger than stock is rejected and nothing is written"""
        with self.assertRaises(ValidationFailed):
            TestDataFactory.create_order(customer=self.customer, items=[(self.product, 51, '3.40')])
        self.assertEqual(CustomerOrder.objects.count(), 0)
        self.assertEqual(CustomerOrderItem.objects.count(), 0)
        self.assertEqual(refresh(self.product).stock_quantity, 50)

    def test_update_order_item_increase(self):
        """Test increasing an order line takes only the extra units"""
        order = TestDataFactory.create_order(customer=self.customer, items=[(self.product, 10, '2.00')])
        item = order.items.get()
        order_ledger.update_item(order.id, item.id, quantity=25)
        self.assertEqual(refresh(self.product).stock_quantity, 25)
        self.assertEqual(refresh(order).total_amount, Decimal('50.00'))

    def test_update_order_item_beyond_stock(self):
        """Test increasing an order line past available stock fails cleanly"""
        order = TestDataFactory.create_order(customer=self.customer, items=[(self.product, 10, '2.00')])
        item = order.items.get()
        with self.assertRaises(ValidationFailed):
            order_ledger.update_item(order.id, item.id, quantity=61)
        self.assertEqual(refresh(item).quantity, 10)
        self.assertEqual(refresh(self.product).stock_quantity, 40)

    def test_delete_order_returns_stock(self):
        """Test deleting an order puts its stock back"""
        order = TestDataFactory.create_order(customer=self.customer, items=[(self.product, 10, '2.00')])
        order_ledger.delete_parent(order.id)
        self.assertEqual(refresh(self.product).stock_quantity, 50)


class CascadeTests(TestCase):
    """Test deletes that cascade into purchases and orders"""

    def test_delete_product_recalculates_totals(self):
        """Test deleting a product removes its lines and fixes document totals"""
        keep = TestDataFactory.create_product(stock_quantity=10)
        drop = TestDataFactory.create_product(stock_quantity=10)
        purchase = TestDataFactory.create_purchase(items=[(keep, 2, '1.00'), (drop, 3, '2.00')])
        order = TestDataFactory.create_order(items=[(keep, 1, '5.00'), (drop, 1, '5.00')])

        delete_product(drop)

        self.assertEqual(refresh(purchase).total_amount, Decimal('2.00'))
        self.assertEqual(refresh(order).total_amount, Decimal('5.00'))
        self.assertEqual(refresh(keep).stock_quantity, 11)

    def test_delete_supplier_reverses_purchases(self):
        """Test deleting a supplier removes its purchases and their stock"""
        product = TestDataFactory.create_product(stock_quantity=5)
        supplier = TestDataFactory.create_supplier()
        TestDataFactory.create_purchase(supplier=supplier, items=[(product, 20, '1.00')])
        delete_supplier(supplier)
        self.assertEqual(refresh(product).stock_quantity, 5)
        self.assertEqual(SupplierPurchase.objects.count(), 0)

    def test_delete_customer_returns_stock(self):
        """Test deleting a customer removes its orders and returns their stock"""
        product = TestDataFactory.create_product(stock_quantity=30)
        customer = TestDataFactory.create_customer()
        TestDataFactory.create_order(customer=customer, items=[(product, 12, '1.00')])
        delete_customer(customer)
        self.assertEqual(refresh(product).stock_quantity, 30)
        self.assertEqual(CustomerOrder.objects.count(), 0)
