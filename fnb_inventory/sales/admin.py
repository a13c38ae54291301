from django.contrib import admin
from django.db import transaction

from fnb_inventory.inventory.services import order_ledger
from .models import CustomerOrder, CustomerOrderItem


class CustomerOrderItemInline(admin.TabularInline):
    model = CustomerOrderItem
    extra = 0
    fields = ['product', 'quantity', 'unit_price', 'subtotal']
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(CustomerOrder)
class CustomerOrderAdmin(admin.ModelAdmin):
    list_display = ['id', 'customer', 'order_date', 'total_amount', 'status', 'created_at']
    list_filter = ['status', 'order_date']
    search_fields = ['customer__name', 'shipping_address', 'notes']
    readonly_fields = ['total_amount', 'created_at', 'updated_at']
    inlines = [CustomerOrderItemInline]
    date_hierarchy = 'order_date'

    def delete_model(self, request, obj):
        order_ledger.delete_parent(obj.pk)

    def delete_queryset(self, request, queryset):
        with transaction.atomic():
            for order_id in queryset.values_list('pk', flat=True):
                order_ledger.delete_parent(order_id)
