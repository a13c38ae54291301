from rest_framework import serializers
from .models import CustomerOrder, CustomerOrderItem
from fnb_inventory.inventory.serializers import LineItemInputSerializer


class CustomerOrderItemSerializer(serializers.ModelSerializer):
    product_id = serializers.IntegerField(read_only=True)
    product_name = serializers.CharField(source='product.name', read_only=True)
    product_unit = serializers.CharField(source='product.unit', read_only=True)
    order_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = CustomerOrderItem
        fields = [
            'id', 'order_id', 'product_id', 'product_name', 'product_unit',
            'quantity', 'unit_price', 'subtotal', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class CustomerOrderSerializer(serializers.ModelSerializer):
    customer_id = serializers.IntegerField(read_only=True)
    customer_name = serializers.CharField(source='customer.name', read_only=True)
    items = CustomerOrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = CustomerOrder
        fields = [
            'id', 'customer_id', 'customer_name', 'order_date', 'total_amount', 'status',
            'shipping_address', 'notes', 'items', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class OrderHeaderSerializer(serializers.Serializer):
    """Editable order header fields"""
    customer_id = serializers.IntegerField()
    order_date = serializers.DateField(required=False)
    status = serializers.ChoiceField(choices=CustomerOrder.STATUS_CHOICES, required=False)
    shipping_address = serializers.CharField(required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)


class OrderCreateSerializer(OrderHeaderSerializer):
    items = LineItemInputSerializer(many=True, required=False)
