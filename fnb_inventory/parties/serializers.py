from rest_framework import serializers
from .models import Customer, Supplier


class SupplierSerializer(serializers.ModelSerializer):
    class Meta:
        model = Supplier
        fields = [
            'id', 'name', 'contact_person', 'email', 'phone', 'address', 'region', 'status',
            'created_at', 'updated_at'
        ]


class SupplierProductSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    unit = serializers.CharField()
    unit_price = serializers.DecimalField(max_digits=10, decimal_places=2)
    stock_quantity = serializers.IntegerField()


class SupplierPurchaseSummarySerializer(serializers.Serializer):
    id = serializers.IntegerField()
    purchase_date = serializers.DateField()
    total_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    status = serializers.CharField()


class SupplierDetailSerializer(SupplierSerializer):
    """Supplier with the products it carries and its 10 latest purchases"""
    products = serializers.SerializerMethodField()
    recent_purchases = serializers.SerializerMethodField()

    class Meta(SupplierSerializer.Meta):
        fields = SupplierSerializer.Meta.fields + ['products', 'recent_purchases']

    def get_products(self, obj):
        return SupplierProductSerializer(obj.products.order_by('name'), many=True).data

    def get_recent_purchases(self, obj):
        purchases = obj.purchases.order_by('-purchase_date', '-id')[:10]
        return SupplierPurchaseSummarySerializer(purchases, many=True).data


class CustomerOrderSummarySerializer(serializers.Serializer):
    id = serializers.IntegerField()
    order_date = serializers.DateField()
    total_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    status = serializers.CharField()


class CustomerSerializer(serializers.ModelSerializer):
    class Meta:
        model = Customer
        fields = [
            'id', 'name', 'email', 'phone', 'address', 'customer_type', 'status',
            'created_at', 'updated_at'
        ]


class CustomerListSerializer(CustomerSerializer):
    """Customer row with the 5 most recent orders"""
    recent_orders = serializers.SerializerMethodField()

    class Meta(CustomerSerializer.Meta):
        fields = CustomerSerializer.Meta.fields + ['recent_orders']

    def get_recent_orders(self, obj):
        orders = sorted(obj.orders.all(), key=lambda o: (o.order_date, o.id), reverse=True)[:5]
        return CustomerOrderSummarySerializer(orders, many=True).data


class CustomerDetailSerializer(CustomerSerializer):
    orders = serializers.SerializerMethodField()

    class Meta(CustomerSerializer.Meta):
        fields = CustomerSerializer.Meta.fields + ['orders']

    def get_orders(self, obj):
        return CustomerOrderSummarySerializer(obj.orders.order_by('-order_date', '-id'), many=True).data
