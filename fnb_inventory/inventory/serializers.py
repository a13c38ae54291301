from decimal import Decimal

from rest_framework import serializers


class LineItemInputSerializer(serializers.Serializer):
    """One line of a purchase or order as submitted by the client"""
    product_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1)
    unit_price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0'))


class LineItemUpdateSerializer(serializers.Serializer):
    """Quantity and/or price change for an existing line"""
    quantity = serializers.IntegerField(min_value=1, required=False)
    unit_price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0'), required=False)

    def validate(self, attrs):
        if 'quantity' not in attrs and 'unit_price' not in attrs:
            raise serializers.ValidationError('Provide quantity and/or unit_price')
        return attrs
