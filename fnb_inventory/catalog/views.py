import logging

from django.db import IntegrityError, transaction
from django.db.models import Count, F
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from fnb_inventory.core.exceptions import Conflict
from fnb_inventory.inventory.services import delete_product
from .filters import ProductFilter
from .models import Product, ProductCategory
from .serializers import ProductCategorySerializer, ProductSerializer

logger = logging.getLogger(__name__)


def _product_queryset():
    return Product.objects.select_related('category', 'supplier')


@api_view(['GET', 'POST'])
def product_list_create(request):
    """List products (filterable) or create a new product"""
    if request.method == 'GET':
        queryset = ProductFilter(request.query_params, queryset=_product_queryset()).qs
        serializer = ProductSerializer(queryset, many=True)
        return Response(serializer.data)

    serializer = ProductSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    product = serializer.save()
    logger.info(f"Product {product.id} '{product.name}' created with stock {product.stock_quantity}")
    return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
def product_detail(request, pk):
    """Retrieve, update or delete a product"""
    product = get_object_or_404(_product_queryset(), pk=pk)

    if request.method == 'GET':
        return Response(ProductSerializer(product).data)

    if request.method in ('PUT', 'PATCH'):
        serializer = ProductSerializer(product, data=request.data, partial=request.method == 'PATCH')
        serializer.is_valid(raise_exception=True)
        product = serializer.save()
        return Response(ProductSerializer(product).data)

    # DELETE
    delete_product(product)
    return Response({'message': 'Product deleted successfully'})


@api_view(['GET', 'POST'])
def category_list_create(request):
    """List categories with their product counts, or create a category"""
    if request.method == 'GET':
        categories = ProductCategory.objects.annotate(product_count=Count('products')).order_by('name')
        return Response(ProductCategorySerializer(categories, many=True).data)

    serializer = ProductCategorySerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    try:
        with transaction.atomic():
            category = serializer.save()
    except IntegrityError:
        raise Conflict(f"Category '{serializer.validated_data['name']}' already exists")
    return Response(ProductCategorySerializer(category).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
def product_low_stock(request):
    """Products whose stock has fallen below their own reorder level"""
    queryset = _product_queryset().filter(stock_quantity__lt=F('reorder_level')).order_by('stock_quantity', 'name')
    return Response(ProductSerializer(queryset, many=True).data)
