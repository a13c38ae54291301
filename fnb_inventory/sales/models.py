from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Sum
from django.utils import timezone
from decimal import Decimal
from fnb_inventory.catalog.models import Product
from fnb_inventory.core.money import compute_subtotal, to_money
from fnb_inventory.parties.models import Customer


class CustomerOrder(models.Model):
    """Sales order placed by a customer. Order items remove stock."""
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('processing', 'Processing'),
        ('shipped', 'Shipped'),
        ('completed', 'Completed'),
        ('delivered', 'Delivered'),
        ('cancelled', 'Cancelled'),
    ]

    customer = models.ForeignKey(Customer, on_delete=models.CASCADE, related_name='orders')
    order_date = models.DateField(default=timezone.localdate)
    # Derived: sum of item subtotals, maintained by the line-item ledger
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'), validators=[MinValueValidator(Decimal('0'))])
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')
    shipping_address = models.TextField(blank=True)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Order-{self.id}"

    def get_items_total(self):
        """Sum of item subtotals as stored on the items"""
        return to_money(self.items.aggregate(total=Sum('subtotal'))['total'])

    class Meta:
        db_table = 'customer_orders'
        ordering = ['-order_date', '-id']
        indexes = [
            models.Index(fields=['status'], name='idx_order_status'),
            models.Index(fields=['customer', 'status'], name='idx_order_customer_status'),
        ]


class CustomerOrderItem(models.Model):
    """Order line items"""
    order = models.ForeignKey(CustomerOrder, on_delete=models.CASCADE, related_name='items')
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='order_items')
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    unit_price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(Decimal('0'))])
    subtotal = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(Decimal('0'))])
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def get_line_total(self):
        return compute_subtotal(self.quantity, self.unit_price)

    class Meta:
        db_table = 'customer_order_items'
        ordering = ['id']
        indexes = [
            models.Index(fields=['order', 'product'], name='idx_orditem_ord_product'),
        ]
