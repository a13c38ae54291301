from rest_framework import serializers
from .models import SupplierPurchase, SupplierPurchaseItem
from fnb_inventory.inventory.serializers import LineItemInputSerializer, LineItemUpdateSerializer


def _accept_unit_cost(data):
    """Purchase lines are priced as ``unit_cost``; accept it as an alias of ``unit_price``"""
    if hasattr(data, 'keys') and 'unit_cost' in data and 'unit_price' not in data:
        data = {key: data[key] for key in data.keys()}
        data['unit_price'] = data.pop('unit_cost')
    return data


class SupplierPurchaseItemSerializer(serializers.ModelSerializer):
    product_id = serializers.IntegerField(read_only=True)
    product_name = serializers.CharField(source='product.name', read_only=True)
    product_unit = serializers.CharField(source='product.unit', read_only=True)
    purchase_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = SupplierPurchaseItem
        fields = [
            'id', 'purchase_id', 'product_id', 'product_name', 'product_unit',
            'quantity', 'unit_cost', 'subtotal', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class SupplierPurchaseSerializer(serializers.ModelSerializer):
    supplier_id = serializers.IntegerField(read_only=True)
    supplier_name = serializers.CharField(source='supplier.name', read_only=True)
    items = SupplierPurchaseItemSerializer(many=True, read_only=True)

    class Meta:
        model = SupplierPurchase
        fields = [
            'id', 'supplier_id', 'supplier_name', 'purchase_date', 'total_amount', 'status', 'notes',
            'items', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class PurchaseItemInputSerializer(LineItemInputSerializer):
    def to_internal_value(self, data):
        return super().to_internal_value(_accept_unit_cost(data))


class PurchaseItemUpdateSerializer(LineItemUpdateSerializer):
    def to_internal_value(self, data):
        return super().to_internal_value(_accept_unit_cost(data))


class PurchaseHeaderSerializer(serializers.Serializer):
    """Editable purchase header fields"""
    supplier_id = serializers.IntegerField()
    purchase_date = serializers.DateField(required=False)
    status = serializers.ChoiceField(choices=SupplierPurchase.STATUS_CHOICES, required=False)
    notes = serializers.CharField(required=False, allow_blank=True)


class PurchaseCreateSerializer(PurchaseHeaderSerializer):
    items = PurchaseItemInputSerializer(many=True, required=False)
