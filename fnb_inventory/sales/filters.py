import django_filters
from .models import CustomerOrder


class CustomerOrderFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(field_name='customer__name', lookup_expr='icontains', label='Search')
    customer_id = django_filters.NumberFilter(field_name='customer_id', lookup_expr='exact')
    status = django_filters.CharFilter(field_name='status', lookup_expr='exact')
    startDate = django_filters.DateFilter(field_name='order_date', lookup_expr='gte')
    endDate = django_filters.DateFilter(field_name='order_date', lookup_expr='lte')

    class Meta:
        model = CustomerOrder
        fields = ['search', 'customer_id', 'status', 'startDate', 'endDate']
