from django.contrib import admin
from django.db import transaction

from fnb_inventory.inventory.services import delete_product
from .models import Product, ProductCategory


@admin.register(ProductCategory)
class ProductCategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'description', 'created_at']
    search_fields = ['name']
    ordering = ['name']


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['name', 'category', 'supplier', 'unit', 'unit_price', 'stock_quantity', 'reorder_level', 'updated_at']
    list_filter = ['category', 'supplier']
    search_fields = ['name', 'description']
    # Stock moves through purchases and orders
    readonly_fields = ['stock_quantity', 'created_at', 'updated_at']
    ordering = ['name']

    def delete_model(self, request, obj):
        delete_product(obj)

    def delete_queryset(self, request, queryset):
        with transaction.atomic():
            for product in queryset:
                delete_product(product)
