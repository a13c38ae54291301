"""
Test suite for Reports module
Tests: dashboard summary, low stock, stock distribution, top sellers, supply risk,
purchase forecast, customer product trends
"""
from datetime import date, timedelta
from decimal import Decimal

from django.test import SimpleTestCase, TestCase
from django.utils import timezone
from rest_framework import status

from fnb_inventory.core.test_utils import TestDataFactory, api_client
from fnb_inventory.reports import queries


class ClassifierTests(SimpleTestCase):
    """Test the report classifiers"""

    def test_supply_risk_levels(self):
        """Test supplier counts map to risk levels"""
        self.assertEqual(queries.classify_supply_risk(0), 'critical')
        self.assertEqual(queries.classify_supply_risk(1), 'high')
        self.assertEqual(queries.classify_supply_risk(2), 'medium')
        self.assertEqual(queries.classify_supply_risk(3), 'low')
        self.assertEqual(queries.classify_supply_risk(7), 'low')

    def test_purchase_priority(self):
        """Test priority thresholds at the reorder level and 1.5x"""
        self.assertEqual(queries.classify_purchase_priority(99, 100), 'URGENT')
        self.assertEqual(queries.classify_purchase_priority(100, 100), 'SOON')
        self.assertEqual(queries.classify_purchase_priority(149, 100), 'SOON')
        self.assertEqual(queries.classify_purchase_priority(150, 100), 'PLANNED')

    def test_trend(self):
        """Test trend classification around +/-20%"""
        self.assertEqual(queries.classify_trend(10, 15), 'INCREASING')
        self.assertEqual(queries.classify_trend(10, 12), 'STABLE')
        self.assertEqual(queries.classify_trend(10, 8), 'STABLE')
        self.assertEqual(queries.classify_trend(10, 7), 'DECLINING')
        self.assertEqual(queries.classify_trend(0, 4), 'INCREASING')

    def test_change_percentage(self):
        """Test change percentage is rounded to one decimal and undefined without a baseline"""
        self.assertEqual(queries.change_percentage(10, 15), 50.0)
        self.assertEqual(queries.change_percentage(3, 2), -33.3)
        self.assertIsNone(queries.change_percentage(0, 5))


class StockReportTests(TestCase):
    """Test stock based reports"""

    def setUp(self):
        self.client = api_client()

    def test_stock_distribution(self):
        """Test stock bands for [50, 150, 350, 99, 300]"""
        for stock in [50, 150, 350, 99, 300]:
            TestDataFactory.create_product(stock_quantity=stock)
        response = self.client.get('/api/dashboard/stock-distribution/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'critical': 2, 'low': 1, 'sufficient': 2})

    def test_low_stock_alerts(self):
        """Test products under 100 units, lowest first, limited"""
        category = TestDataFactory.create_category(name='Dairy')
        TestDataFactory.create_product(name='Butter', stock_quantity=40, category=category)
        TestDataFactory.create_product(name='Cheese', stock_quantity=5)
        TestDataFactory.create_product(name='Milk', stock_quantity=100)

        response = self.client.get('/api/dashboard/low-stock-alerts/')
        self.assertEqual([p['name'] for p in response.data], ['Cheese', 'Butter'])
        self.assertEqual(response.data[1]['category'], 'Dairy')

        response = self.client.get('/api/dashboard/low-stock-alerts/', {'limit': 1})
        self.assertEqual(len(response.data), 1)

    def test_summary(self):
        """Test dashboard summary totals"""
        product = TestDataFactory.create_product(stock_quantity=100, reorder_level=50, unit_price=Decimal('2.50'))
        TestDataFactory.create_product(stock_quantity=10, reorder_level=50, unit_price=Decimal('1.00'))
        today = timezone.localdate()
        TestDataFactory.create_order(items=[(product, 10, '3.00')], order_date=today)
        TestDataFactory.create_order(items=[(product, 10, '3.00')], order_date=today, status='cancelled')
        TestDataFactory.create_order(items=[(product, 1, '3.00')], order_date=date(today.year - 1, 6, 1))

        response = self.client.get('/api/dashboard/summary/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['totalProducts'], 2)
        self.assertEqual(response.data['lowStockCount'], 1)
        # 79 x 2.50 + 10 x 1.00
        self.assertEqual(response.data['totalInventoryValue'], 207.5)
        self.assertEqual(response.data['ytdOrdersCount'], 2)
        self.assertEqual(response.data['ytdRevenue'], 30.0)


class SalesReportTests(TestCase):
    """Test sales based reports"""

    def setUp(self):
        self.client = api_client()

    def test_top_selling_products(self):
        """Test products ranked by quantity sold across orders"""
        rice = TestDataFactory.create_product(name='Rice', stock_quantity=500)
        noodles = TestDataFactory.create_product(name='Noodles', stock_quantity=500)
        TestDataFactory.create_order(items=[(rice, 5, '2.00'), (noodles, 20, '1.00')])
        TestDataFactory.create_order(items=[(rice, 30, '2.00')], status='pending')

        response = self.client.get('/api/dashboard/top-selling-products/')
        self.assertEqual([row['product_name'] for row in response.data], ['Rice', 'Noodles'])
        self.assertEqual(response.data[0]['total_sold'], 35)
        self.assertEqual(response.data[0]['total_revenue'], 70.0)

        response = self.client.get('/api/dashboard/top-selling-products/', {'status': 'completed'})
        self.assertEqual(response.data[0]['product_name'], 'Noodles')

        response = self.client.get('/api/dashboard/top-selling-products/', {'status': 'nonsense'})
        self.assertEqual([row['product_name'] for row in response.data], ['Rice', 'Noodles'])
        self.assertEqual(response.data[0]['total_sold'], 35)

    def test_customer_trend_increasing(self):
        """Test qty 10 before the mean date and 15 after it is INCREASING by 50%"""
        customer = TestDataFactory.create_customer(name='Kopi Corner')
        product = TestDataFactory.create_product(name='Condensed Milk', stock_quantity=500)
        TestDataFactory.create_order(customer=customer, items=[(product, 10, '1.00')], order_date=date(2026, 1, 10))
        TestDataFactory.create_order(customer=customer, items=[(product, 15, '1.00')], order_date=date(2026, 3, 10))

        response = self.client.get('/api/customers/trends/product-analysis/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        row = response.data[0]
        self.assertEqual(row['earlier_qty'], 10)
        self.assertEqual(row['recent_qty'], 15)
        self.assertEqual(row['earlier_orders'], 1)
        self.assertEqual(row['recent_orders'], 1)
        self.assertEqual(row['change_percentage'], 50.0)
        self.assertEqual(row['trend'], 'INCREASING')

    def test_customer_trend_without_baseline(self):
        """Test a product only bought recently has no change percentage"""
        customer = TestDataFactory.create_customer()
        staple = TestDataFactory.create_product(name='Flour', stock_quantity=500)
        newcomer = TestDataFactory.create_product(name='Yeast', stock_quantity=500)
        TestDataFactory.create_order(customer=customer, items=[(staple, 10, '1.00')], order_date=date(2026, 1, 1))
        TestDataFactory.create_order(
            customer=customer, items=[(staple, 10, '1.00'), (newcomer, 4, '1.00')], order_date=date(2026, 2, 1)
        )

        rows = queries.customer_product_trends(customer_id=customer.id)
        yeast = next(row for row in rows if row['product_name'] == 'Yeast')
        self.assertEqual(yeast['earlier_qty'], 0)
        self.assertIsNone(yeast['change_percentage'])
        self.assertEqual(yeast['trend'], 'INCREASING')
        flour = next(row for row in rows if row['product_name'] == 'Flour')
        self.assertEqual(flour['trend'], 'STABLE')

    def test_customer_trend_filters_and_status(self):
        """Test only completed orders count and the trend filter applies"""
        customer = TestDataFactory.create_customer(name='Bakery One')
        product = TestDataFactory.create_product(stock_quantity=500)
        TestDataFactory.create_order(customer=customer, items=[(product, 20, '1.00')], order_date=date(2026, 1, 1))
        TestDataFactory.create_order(customer=customer, items=[(product, 5, '1.00')], order_date=date(2026, 2, 1))
        TestDataFactory.create_order(
            customer=customer, items=[(product, 100, '1.00')], order_date=date(2026, 3, 1), status='pending'
        )

        response = self.client.get('/api/customers/trends/product-analysis/', {'trend': 'declining'})
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['recent_qty'], 5)

        response = self.client.get('/api/customers/trends/product-analysis/', {'trend': 'INCREASING'})
        self.assertEqual(response.data, [])

        response = self.client.get('/api/customers/trends/product-analysis/', {'trend': 'bogus'})
        self.assertEqual(len(response.data), 1)

    def test_customer_trend_split_weights_each_order(self):
        """Test the split point is the mean over orders, so same-day orders each count"""
        customer = TestDataFactory.create_customer()
        product = TestDataFactory.create_product(stock_quantity=500)
        for _ in range(3):
            TestDataFactory.create_order(customer=customer, items=[(product, 5, '1.00')], order_date=date(2026, 1, 1))
        TestDataFactory.create_order(customer=customer, items=[(product, 4, '1.00')], order_date=date(2026, 1, 11))
        TestDataFactory.create_order(customer=customer, items=[(product, 6, '1.00')], order_date=date(2026, 1, 31))

        # mean over orders is Jan 9, so the Jan 11 order is recent
        row = queries.customer_product_trends(customer_id=customer.id)[0]
        self.assertEqual(row['earlier_qty'], 15)
        self.assertEqual(row['earlier_orders'], 3)
        self.assertEqual(row['recent_qty'], 10)
        self.assertEqual(row['recent_orders'], 2)
        self.assertEqual(row['trend'], 'DECLINING')


class PurchasingReportTests(TestCase):
    """Test purchase based reports"""

    def setUp(self):
        self.client = api_client()

    def test_supply_risk(self):
        """Test 0 suppliers is critical and 3 distinct suppliers is low risk"""
        orphan = TestDataFactory.create_product(name='Saffron')
        common = TestDataFactory.create_product(name='Sugar')
        for _ in range(3):
            TestDataFactory.create_purchase(supplier=TestDataFactory.create_supplier(), items=[(common, 1, '1.00')])

        response = self.client.get('/api/dashboard/supply-risk-report/')
        rows = {row['product_id']: row for row in response.data}
        self.assertEqual(rows[orphan.id]['supplier_count'], 0)
        self.assertEqual(rows[orphan.id]['risk_level'], 'critical')
        self.assertEqual(rows[common.id]['supplier_count'], 3)
        self.assertEqual(rows[common.id]['risk_level'], 'low')
        self.assertEqual(response.data[0]['product_id'], orphan.id)

    def test_purchase_forecast(self):
        """Test forecast aggregates completed purchases and sorts by priority"""
        today = timezone.localdate()
        urgent = TestDataFactory.create_product(name='Eggs', stock_quantity=0, reorder_level=1000, unit_price=Decimal('0.30'))
        planned = TestDataFactory.create_product(name='Salt', stock_quantity=1000, reorder_level=100)
        supplier = TestDataFactory.create_supplier()
        TestDataFactory.create_purchase(supplier=supplier, items=[(urgent, 30, '0.20')], purchase_date=today - timedelta(days=40))
        TestDataFactory.create_purchase(supplier=supplier, items=[(urgent, 45, '0.20')], purchase_date=today - timedelta(days=10))
        TestDataFactory.create_purchase(
            supplier=supplier, items=[(urgent, 500, '0.20')], purchase_date=today, status='pending'
        )

        response = self.client.get('/api/dashboard/purchase-forecast/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['name'] for row in response.data], ['Eggs', 'Salt'])

        eggs = response.data[0]
        self.assertEqual(eggs['purchase_priority'], 'URGENT')
        self.assertEqual(eggs['total_purchases'], 2)
        self.assertEqual(eggs['forecasted_monthly_qty'], 38)
        self.assertEqual(eggs['days_since_purchase'], 10)
        self.assertEqual(eggs['estimated_monthly_cost'], 11.4)

        salt = response.data[1]
        self.assertEqual(salt['total_purchases'], 0)
        self.assertIsNone(salt['last_purchase_date'])
        self.assertIsNone(salt['forecasted_monthly_qty'])
        self.assertIsNone(salt['avg_days_between_purchases'])
        self.assertIsNone(salt['estimated_monthly_cost'])

        response = self.client.get('/api/dashboard/purchase-forecast/', {'include_all': 'true'})
        eggs = next(row for row in response.data if row['name'] == 'Eggs')
        self.assertEqual(eggs['total_purchases'], 3)
        self.assertEqual(eggs['days_since_purchase'], 0)

    def test_purchase_forecast_days_between_purchases(self):
        """Test the first-to-last span is spread over the distinct purchase months"""
        product = TestDataFactory.create_product(name='Coconut Milk 1L', stock_quantity=500)
        supplier = TestDataFactory.create_supplier()
        TestDataFactory.create_purchase(supplier=supplier, items=[(product, 10, '1.00')], purchase_date=date(2026, 1, 20))
        TestDataFactory.create_purchase(supplier=supplier, items=[(product, 10, '1.00')], purchase_date=date(2026, 1, 25))
        TestDataFactory.create_purchase(supplier=supplier, items=[(product, 10, '1.00')], purchase_date=date(2026, 3, 1))

        row = queries.purchase_forecast(today=date(2026, 4, 1))[0]
        # 40 days between Jan 20 and Mar 1, over January and March
        self.assertEqual(row['avg_days_between_purchases'], 20)
        self.assertEqual(row['total_purchases'], 3)
        self.assertEqual(row['days_since_purchase'], 31)
