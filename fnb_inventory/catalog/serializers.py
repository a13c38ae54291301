from rest_framework import serializers
from .models import Product, ProductCategory
from fnb_inventory.parties.models import Supplier


class ProductCategorySerializer(serializers.ModelSerializer):
    product_count = serializers.IntegerField(read_only=True, required=False)

    class Meta:
        model = ProductCategory
        fields = ['id', 'name', 'description', 'product_count', 'created_at', 'updated_at']
        # Uniqueness is enforced by the database and reported as a conflict
        extra_kwargs = {'name': {'validators': []}}


class ProductSerializer(serializers.ModelSerializer):
    category_id = serializers.PrimaryKeyRelatedField(
        source='category', queryset=ProductCategory.objects.all(), allow_null=True, required=False
    )
    category_name = serializers.CharField(source='category.name', read_only=True, default=None)
    supplier_id = serializers.PrimaryKeyRelatedField(
        source='supplier', queryset=Supplier.objects.all(), allow_null=True, required=False
    )
    supplier_name = serializers.CharField(source='supplier.name', read_only=True, default=None)
    is_low_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = Product
        fields = [
            'id', 'name', 'description', 'category_id', 'category_name', 'unit', 'unit_price',
            'stock_quantity', 'reorder_level', 'supplier_id', 'supplier_name', 'is_low_stock',
            'created_at', 'updated_at'
        ]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # Stock is only set on creation; afterwards purchases and orders move it
        if self.instance is not None:
            self.fields['stock_quantity'].read_only = True
