from django.contrib import admin
from django.db import transaction

from fnb_inventory.inventory.services import purchase_ledger
from .models import SupplierPurchase, SupplierPurchaseItem


class SupplierPurchaseItemInline(admin.TabularInline):
    model = SupplierPurchaseItem
    extra = 0
    fields = ['product', 'quantity', 'unit_cost', 'subtotal']
    # Items are edited through the API so stock and totals stay in step
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(SupplierPurchase)
class SupplierPurchaseAdmin(admin.ModelAdmin):
    list_display = ['id', 'supplier', 'purchase_date', 'total_amount', 'status', 'created_at']
    list_filter = ['status', 'purchase_date']
    search_fields = ['supplier__name', 'notes']
    readonly_fields = ['total_amount', 'created_at', 'updated_at']
    inlines = [SupplierPurchaseItemInline]
    date_hierarchy = 'purchase_date'

    def delete_model(self, request, obj):
        purchase_ledger.delete_parent(obj.pk)

    def delete_queryset(self, request, queryset):
        with transaction.atomic():
            for purchase_id in queryset.values_list('pk', flat=True):
                purchase_ledger.delete_parent(purchase_id)
