"""
Management command to load demo F&B data
Usage: python manage.py seed_demo_data [--clear]

Purchases and orders go through the line-item ledger so that document totals
and product stock stay consistent with their items.
"""
from datetime import timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from django.utils import timezone

from fnb_inventory.catalog.models import Product, ProductCategory
from fnb_inventory.inventory.services import order_ledger, purchase_ledger
from fnb_inventory.parties.models import Customer, Supplier
from fnb_inventory.purchasing.models import SupplierPurchase
from fnb_inventory.sales.models import CustomerOrder

CATEGORIES = [
    ('Grains', 'Rice, noodles and flour'),
    ('Oils & Sauces', 'Cooking oils, soy and chilli sauces'),
    ('Dairy', 'Milk, butter and cream'),
    ('Beverages', 'Coffee, tea and juices'),
    ('Meat & Seafood', 'Chilled and frozen proteins'),
    ('Packaging', 'Takeaway containers and cups'),
]

SUPPLIERS = [
    # name, contact, email, phone, region
    ('Fresh Foods Supplier', 'Tan Kok Leong', 'orders@freshfoods.sg', '+65 6123 4567', 'Central'),
    ('Straits Grain Traders', 'Nur Aisyah', 'sales@straitsgrain.sg', '+65 6234 1188', 'West'),
    ('Harbour Beverage Co', 'Daniel Ong', 'daniel@harbourbev.sg', '+65 6345 2290', 'East'),
    ('Jurong Cold Chain', 'Priya Raman', 'priya@jurongcold.sg', '+65 6456 3301', 'West'),
    ('GreenBox Packaging', 'Marcus Lee', 'hello@greenbox.sg', '+65 6567 4412', 'North'),
]

PRODUCTS = [
    # name, category, unit, unit price, opening stock, reorder level, supplier index
    ('Jasmine Rice 25kg', 'Grains', 'bag', '38.50', 120, 40, 1),
    ('Hokkien Noodles 1kg', 'Grains', 'pack', '3.20', 260, 150, 1),
    ('Plain Flour 10kg', 'Grains', 'bag', '14.90', 35, 30, 1),
    ('Peanut Oil 2L', 'Oils & Sauces', 'bottle', '9.80', 90, 100, 0),
    ('Light Soy Sauce 1.9L', 'Oils & Sauces', 'bottle', '6.40', 400, 120, 0),
    ('Sambal Chilli 1kg', 'Oils & Sauces', 'tub', '11.20', 55, 60, 0),
    ('Evaporated Milk 410g', 'Dairy', 'can', '1.45', 600, 200, 0),
    ('Salted Butter 5kg', 'Dairy', 'block', '42.00', 18, 20, 3),
    ('Kopi Beans 1kg', 'Beverages', 'bag', '24.00', 75, 50, 2),
    ('Teh Leaves 500g', 'Beverages', 'pack', '12.50', 140, 60, 2),
    ('Calamansi Juice 1L', 'Beverages', 'bottle', '4.60', 310, 100, 2),
    ('Chicken Thigh 2kg', 'Meat & Seafood', 'pack', '13.80', 80, 100, 3),
    ('Frozen Prawns 1kg', 'Meat & Seafood', 'pack', '19.90', 45, 40, 3),
    ('Kraft Bowl 750ml (50)', 'Packaging', 'sleeve', '8.90', 500, 150, 4),
    ('Paper Cup 12oz (100)', 'Packaging', 'sleeve', '7.50', 220, 150, 4),
]

CUSTOMERS = [
    # name, type, email, phone, address
    ('Kopi Corner Tiong Bahru', 'restaurant', 'owner@kopicorner.sg', '+65 8123 0001', '55 Tiong Bahru Rd'),
    ('Ah Seng Hawker Stall', 'hawker', 'ahseng@mail.sg', '+65 8123 0002', '#01-23 Maxwell Food Centre'),
    ('Sunrise Bakery', 'retail', 'hello@sunrisebakery.sg', '+65 8123 0003', '8 Joo Chiat Pl'),
    ('Marina Catering Pte Ltd', 'wholesale', 'ops@marinacatering.sg', '+65 8123 0004', '20 Pandan Loop'),
    ('Little India Curry House', 'restaurant', 'curry@lih.sg', '+65 8123 0005', '41 Race Course Rd'),
]

# days ago, supplier index, status, [(product index, quantity, unit cost)]
PURCHASES = [
    (170, 1, 'completed', [(0, 40, '31.00'), (1, 100, '2.40'), (2, 20, '11.50')]),
    (140, 0, 'completed', [(3, 60, '7.90'), (4, 120, '4.80'), (6, 300, '1.05')]),
    (110, 2, 'completed', [(8, 30, '18.00'), (9, 50, '9.20'), (10, 120, '3.30')]),
    (95, 3, 'completed', [(7, 10, '35.00'), (11, 80, '10.40'), (12, 30, '15.80')]),
    (80, 1, 'completed', [(0, 30, '31.50'), (1, 120, '2.35')]),
    (60, 4, 'completed', [(13, 200, '6.40'), (14, 150, '5.20')]),
    (45, 0, 'completed', [(3, 50, '8.10'), (5, 40, '8.40'), (6, 250, '1.02')]),
    (30, 3, 'completed', [(11, 60, '10.20'), (12, 25, '16.00')]),
    (21, 2, 'processing', [(8, 40, '18.50'), (10, 100, '3.20')]),
    (12, 3, 'ordered', [(7, 12, '34.50'), (12, 20, '16.20')]),
    (4, 1, 'pending', [(0, 25, '32.00'), (2, 15, '11.80')]),
    (2, 0, 'cancelled', [(4, 60, '4.75')]),
]

# days ago, customer index, status, [(product index, quantity, unit price)]
ORDERS = [
    (160, 0, 'completed', [(8, 6, '24.00'), (6, 48, '1.45'), (14, 4, '7.50')]),
    (150, 1, 'completed', [(1, 30, '3.20'), (4, 6, '6.40'), (5, 4, '11.20')]),
    (130, 2, 'completed', [(2, 8, '14.90'), (7, 3, '42.00'), (6, 24, '1.45')]),
    (120, 3, 'completed', [(0, 12, '38.00'), (11, 20, '13.50'), (13, 30, '8.70')]),
    (100, 4, 'completed', [(0, 5, '38.50'), (3, 6, '9.80'), (12, 4, '19.90')]),
    (90, 0, 'completed', [(8, 8, '24.00'), (6, 60, '1.45'), (14, 5, '7.50')]),
    (75, 1, 'completed', [(1, 25, '3.20'), (4, 8, '6.40')]),
    (60, 3, 'completed', [(0, 10, '38.00'), (11, 15, '13.50'), (13, 35, '8.70')]),
    (50, 2, 'delivered', [(2, 10, '14.90'), (7, 2, '42.00')]),
    (40, 4, 'completed', [(0, 9, '38.50'), (3, 10, '9.80'), (12, 6, '19.90')]),
    (30, 0, 'completed', [(8, 12, '23.50'), (6, 72, '1.40'), (14, 6, '7.50')]),
    (20, 1, 'completed', [(1, 15, '3.20'), (4, 4, '6.40'), (5, 6, '11.20')]),
    (14, 3, 'shipped', [(0, 14, '38.00'), (13, 40, '8.70')]),
    (10, 2, 'completed', [(2, 6, '14.90'), (6, 30, '1.45')]),
    (6, 4, 'processing', [(3, 8, '9.80'), (12, 5, '19.90')]),
    (3, 0, 'pending', [(9, 10, '12.50'), (10, 24, '4.60')]),
    (1, 3, 'cancelled', [(11, 10, '13.50')]),
]


class Command(BaseCommand):
    help = "Seeds demo categories, suppliers, products, customers, purchases and orders"

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Delete existing inventory data before seeding',
        )

    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write(self.style.WARNING("Clearing existing inventory data..."))
            with transaction.atomic():
                CustomerOrder.objects.all().delete()
                SupplierPurchase.objects.all().delete()
                Product.objects.all().delete()
                ProductCategory.objects.all().delete()
                Customer.objects.all().delete()
                Supplier.objects.all().delete()
        elif Product.objects.exists():
            raise CommandError("Database already has products; rerun with --clear to reseed")

        today = timezone.localdate()

        with transaction.atomic():
            categories = {
                name: ProductCategory.objects.create(name=name, description=description)
                for name, description in CATEGORIES
            }
            suppliers = [
                Supplier.objects.create(
                    name=name, contact_person=contact, email=email, phone=phone,
                    address=f'{region} Distribution Hub, Singapore', region=region,
                )
                for name, contact, email, phone, region in SUPPLIERS
            ]
            # Opening stock is what was on hand before the seeded history
            products = [
                Product.objects.create(
                    name=name, category=categories[category], unit=unit, unit_price=Decimal(price),
                    stock_quantity=stock, reorder_level=reorder, supplier=suppliers[supplier_index],
                )
                for name, category, unit, price, stock, reorder, supplier_index in PRODUCTS
            ]
            customers = [
                Customer.objects.create(
                    name=name, customer_type=customer_type, email=email, phone=phone, address=address,
                )
                for name, customer_type, email, phone, address in CUSTOMERS
            ]

            for days_ago, supplier_index, status, lines in PURCHASES:
                purchase_ledger.create_with_items(
                    {
                        'supplier_id': suppliers[supplier_index].id,
                        'purchase_date': today - timedelta(days=days_ago),
                        'status': status,
                    },
                    [
                        {'product_id': products[p].id, 'quantity': qty, 'unit_price': Decimal(cost)}
                        for p, qty, cost in lines
                    ],
                )

            for days_ago, customer_index, status, lines in ORDERS:
                customer = customers[customer_index]
                order_ledger.create_with_items(
                    {
                        'customer_id': customer.id,
                        'order_date': today - timedelta(days=days_ago),
                        'status': status,
                        'shipping_address': customer.address,
                    },
                    [
                        {'product_id': products[p].id, 'quantity': qty, 'unit_price': Decimal(price)}
                        for p, qty, price in lines
                    ],
                )

        self.stdout.write(self.style.SUCCESS(
            f"Seeded {len(categories)} categories, {len(suppliers)} suppliers, {len(products)} products, "
            f"{len(customers)} customers, {len(PURCHASES)} purchases and {len(ORDERS)} orders"
        ))
