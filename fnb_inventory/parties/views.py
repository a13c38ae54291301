import logging

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from fnb_inventory.inventory.services import delete_customer, delete_supplier
from .filters import CustomerFilter, SupplierFilter
from .models import Customer, Supplier
from .serializers import (
    CustomerDetailSerializer, CustomerListSerializer, CustomerSerializer,
    SupplierDetailSerializer, SupplierSerializer
)

logger = logging.getLogger(__name__)


# Supplier views
@api_view(['GET', 'POST'])
def supplier_list_create(request):
    """List suppliers or create a new supplier"""
    if request.method == 'GET':
        queryset = SupplierFilter(request.query_params, queryset=Supplier.objects.all().order_by('name')).qs
        return Response(SupplierSerializer(queryset, many=True).data)

    serializer = SupplierSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    supplier = serializer.save()
    logger.info(f"Supplier {supplier.id} '{supplier.name}' created")
    return Response(serializer.data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
def supplier_detail(request, pk):
    """Retrieve, update or delete a supplier"""
    supplier = get_object_or_404(Supplier, pk=pk)

    if request.method == 'GET':
        return Response(SupplierDetailSerializer(supplier).data)

    if request.method in ('PUT', 'PATCH'):
        serializer = SupplierSerializer(supplier, data=request.data, partial=request.method == 'PATCH')
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)

    # DELETE: purchases go with the supplier and their stock is taken back out
    delete_supplier(supplier)
    return Response({'message': 'Supplier deleted successfully'})


@api_view(['GET'])
def supplier_regions(request):
    """Distinct non-empty supplier regions"""
    regions = (
        Supplier.objects.exclude(region='')
        .values_list('region', flat=True)
        .distinct()
        .order_by('region')
    )
    return Response(list(regions))


# Customer views
@api_view(['GET', 'POST'])
def customer_list_create(request):
    """List customers with their latest orders, or create a customer"""
    if request.method == 'GET':
        queryset = Customer.objects.all().order_by('name').prefetch_related('orders')
        queryset = CustomerFilter(request.query_params, queryset=queryset).qs
        return Response(CustomerListSerializer(queryset, many=True).data)

    serializer = CustomerSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    customer = serializer.save()
    logger.info(f"Customer {customer.id} '{customer.name}' created")
    return Response(serializer.data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
def customer_detail(request, pk):
    """Retrieve, update or delete a customer"""
    customer = get_object_or_404(Customer, pk=pk)

    if request.method == 'GET':
        return Response(CustomerDetailSerializer(customer).data)

    if request.method in ('PUT', 'PATCH'):
        serializer = CustomerSerializer(customer, data=request.data, partial=request.method == 'PATCH')
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)

    # DELETE: orders go with the customer and their stock is returned
    delete_customer(customer)
    return Response({'message': 'Customer deleted successfully'})
