"""
Test suite for shared core pieces
Tests: money rounding, error envelope, health check, demo data
"""
from decimal import Decimal
from io import StringIO

from django.core.management import CommandError, call_command
from django.test import SimpleTestCase, TestCase
from rest_framework import status

from fnb_inventory.catalog.models import Product
from fnb_inventory.core.exceptions import Conflict, NotFound, ValidationFailed, first_error_message
from fnb_inventory.core.money import compute_subtotal, to_money
from fnb_inventory.core.test_utils import api_client
from fnb_inventory.purchasing.models import SupplierPurchase
from fnb_inventory.sales.models import CustomerOrder


class MoneyTests(SimpleTestCase):
    """Test monetary rounding helpers"""

    def test_to_money_rounds_half_up(self):
        """Test half-cent values round away from zero"""
        self.assertEqual(to_money('2.675'), Decimal('2.68'))
        self.assertEqual(to_money(Decimal('1.005')), Decimal('1.01'))
        self.assertEqual(to_money(3), Decimal('3.00'))

    def test_to_money_none(self):
        """Test None is treated as zero"""
        self.assertEqual(to_money(None), Decimal('0.00'))

    def test_compute_subtotal(self):
        """Test subtotal uses the rounded unit price"""
        self.assertEqual(compute_subtotal(3, Decimal('0.335')), Decimal('1.02'))
        self.assertEqual(compute_subtotal(15, Decimal('5.00')), Decimal('75.00'))


class ErrorMessageTests(SimpleTestCase):
    """Test flattening of error structures"""

    def test_field_error(self):
        """Test a field error is prefixed with the field name"""
        self.assertEqual(first_error_message({'quantity': ['Ensure this value is greater than or equal to 1.']}),
                         'quantity: Ensure this value is greater than or equal to 1.')

    def test_non_field_error(self):
        """Test non-field errors are returned as-is"""
        self.assertEqual(first_error_message({'non_field_errors': ['Provide quantity']}), 'Provide quantity')

    def test_nested_list_error(self):
        """Test nested item errors are reached"""
        detail = {'items': [{}, {'product_id': ['A valid integer is required.']}]}
        self.assertEqual(first_error_message(detail), 'items: product_id: A valid integer is required.')

    def test_detail_key(self):
        """Test the detail key wins"""
        self.assertEqual(first_error_message({'detail': 'Not found.'}), 'Not found.')

    def test_domain_error_status_codes(self):
        """Test each domain error carries its HTTP status"""
        self.assertEqual(NotFound().status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(ValidationFailed().status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Conflict().status_code, status.HTTP_409_CONFLICT)


class ErrorEnvelopeTests(TestCase):
    """Test errors leave the API as {"error": ...}"""

    def setUp(self):
        self.client = api_client()

    def test_not_found_envelope(self):
        """Test a missing record returns 404 with an error message"""
        response = self.client.get('/api/products/999999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertIn('error', response.data)

    def test_validation_envelope(self):
        """Test serializer errors carry the message and the details"""
        response = self.client.post('/api/products/', {'name': ''})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('error', response.data)
        self.assertIn('details', response.data)
        self.assertIn('name', response.data['details'])

    def test_ledger_not_found_envelope(self):
        """Test domain errors raised by the ledger use the same envelope"""
        response = self.client.delete('/api/supplier-purchases/999999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data, {'error': 'Purchase 999999 not found'})


class HealthTests(TestCase):
    """Test the health endpoint"""

    def test_health(self):
        """Test health check responds ok"""
        response = api_client().get('/api/health/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'status': 'ok'})


class SeedDemoDataTests(TestCase):
    """Test the demo data command"""

    def test_seed_keeps_totals_consistent(self):
        """Test seeded documents have totals equal to their item subtotals"""
        call_command('seed_demo_data', stdout=StringIO())
        self.assertTrue(Product.objects.exists())
        self.assertTrue(SupplierPurchase.objects.exists())
        for purchase in SupplierPurchase.objects.all():
            self.assertEqual(purchase.total_amount, purchase.get_items_total())
        for order in CustomerOrder.objects.all():
            self.assertEqual(order.total_amount, order.get_items_total())

    def test_seed_requires_clear_when_data_exists(self):
        """Test reseeding without --clear is refused, and --clear reseeds"""
        call_command('seed_demo_data', stdout=StringIO())
        product_count = Product.objects.count()
        with self.assertRaises(CommandError):
            call_command('seed_demo_data', stdout=StringIO())
        call_command('seed_demo_data', '--clear', stdout=StringIO())
        self.assertEqual(Product.objects.count(), product_count)
