import django_filters
from django.db.models import Q
from .models import Customer, Supplier


class SupplierFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(method='filter_search', label='Search')
    region = django_filters.CharFilter(field_name='region', lookup_expr='iexact')
    status = django_filters.CharFilter(field_name='status', lookup_expr='exact')

    class Meta:
        model = Supplier
        fields = ['search', 'region', 'status']

    def filter_search(self, queryset, name, value):
        """Match supplier name or contact person"""
        value = (value or '').strip()
        if not value:
            return queryset
        return queryset.filter(Q(name__icontains=value) | Q(contact_person__icontains=value))


class CustomerFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(method='filter_search', label='Search')
    customer_type = django_filters.CharFilter(field_name='customer_type', lookup_expr='iexact')
    status = django_filters.CharFilter(field_name='status', lookup_expr='exact')

    class Meta:
        model = Customer
        fields = ['search', 'customer_type', 'status']

    def filter_search(self, queryset, name, value):
        """Match name, email or phone"""
        value = (value or '').strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(name__icontains=value) | Q(email__icontains=value) | Q(phone__icontains=value)
        )
