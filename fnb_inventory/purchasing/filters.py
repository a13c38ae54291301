import django_filters
from .models import SupplierPurchase


class SupplierPurchaseFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(field_name='supplier__name', lookup_expr='icontains', label='Search')
    supplier_id = django_filters.NumberFilter(field_name='supplier_id', lookup_expr='exact')
    status = django_filters.CharFilter(field_name='status', lookup_expr='exact')
    startDate = django_filters.DateFilter(field_name='purchase_date', lookup_expr='gte')
    endDate = django_filters.DateFilter(field_name='purchase_date', lookup_expr='lte')

    class Meta:
        model = SupplierPurchase
        fields = ['search', 'supplier_id', 'status', 'startDate', 'endDate']
