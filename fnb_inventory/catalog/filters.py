import django_filters
from django.conf import settings
from django.db.models import Q
from .models import Product


class ProductFilter(django_filters.FilterSet):
    """Filters for the product list"""
    search = django_filters.CharFilter(method='filter_search', label='Search')
    category_id = django_filters.NumberFilter(field_name='category_id', lookup_expr='exact')
    supplier_id = django_filters.NumberFilter(field_name='supplier_id', lookup_expr='exact')
    lowStock = django_filters.CharFilter(method='filter_low_stock', label='Low Stock')

    class Meta:
        model = Product
        fields = ['search', 'category_id', 'supplier_id', 'lowStock']

    def filter_search(self, queryset, name, value):
        """Match name, description or category name"""
        value = (value or '').strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(name__icontains=value) |
            Q(description__icontains=value) |
            Q(category__name__icontains=value)
        )

    def filter_low_stock(self, queryset, name, value):
        if str(value).lower() in ('true', '1', 'yes'):
            return queryset.filter(stock_quantity__lt=settings.REPORT_LOW_STOCK_THRESHOLD)
        return queryset
