from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Sum
from django.utils import timezone
from decimal import Decimal
from fnb_inventory.catalog.models import Product
from fnb_inventory.core.money import compute_subtotal, to_money
from fnb_inventory.parties.models import Supplier


class SupplierPurchase(models.Model):
    """Purchase from a supplier. Purchase items add stock."""
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('ordered', 'Ordered'),
        ('processing', 'Processing'),
        ('completed', 'Completed'),
        ('cancelled', 'Cancelled'),
    ]

    supplier = models.ForeignKey(Supplier, on_delete=models.CASCADE, related_name='purchases')
    purchase_date = models.DateField(default=timezone.localdate)
    # Derived: sum of item subtotals, maintained by the line-item ledger
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'), validators=[MinValueValidator(Decimal('0'))])
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Purchase-{self.id}"

    def get_items_total(self):
        """Sum of item subtotals as stored on the items"""
        return to_money(self.items.aggregate(total=Sum('subtotal'))['total'])

    class Meta:
        db_table = 'supplier_purchases'
        ordering = ['-purchase_date', '-id']
        indexes = [
            models.Index(fields=['status'], name='idx_purchase_status'),
            models.Index(fields=['supplier', 'status'], name='idx_purchase_supplier_status'),
        ]


class SupplierPurchaseItem(models.Model):
    """Purchase line items"""
    purchase = models.ForeignKey(SupplierPurchase, on_delete=models.CASCADE, related_name='items')
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='purchase_items')
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    unit_cost = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(Decimal('0'))])
    subtotal = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(Decimal('0'))])
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def get_line_total(self):
        return compute_subtotal(self.quantity, self.unit_cost)

    class Meta:
        db_table = 'supplier_purchase_items'
        ordering = ['id']
        indexes = [
            models.Index(fields=['purchase', 'product'], name='idx_puritem_pur_product'),
        ]
