from django.contrib import admin
from django.db import transaction

from fnb_inventory.inventory.services import delete_customer, delete_supplier
from .models import Customer, Supplier


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    list_display = ['name', 'contact_person', 'phone', 'email', 'region', 'status', 'created_at']
    list_filter = ['status', 'region']
    search_fields = ['name', 'contact_person', 'email']
    ordering = ['name']

    # Purchases go through the ledger so their stock is reversed
    def delete_model(self, request, obj):
        delete_supplier(obj)

    def delete_queryset(self, request, queryset):
        with transaction.atomic():
            for supplier in queryset:
                delete_supplier(supplier)


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ['name', 'customer_type', 'phone', 'email', 'status', 'created_at']
    list_filter = ['status', 'customer_type']
    search_fields = ['name', 'phone', 'email']
    ordering = ['name']

    def delete_model(self, request, obj):
        delete_customer(obj)

    def delete_queryset(self, request, queryset):
        with transaction.atomic():
            for customer in queryset:
                delete_customer(customer)
