from django.db.models import Prefetch
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from fnb_inventory.inventory.services import purchase_ledger
from .filters import SupplierPurchaseFilter
from .models import SupplierPurchase, SupplierPurchaseItem
from .serializers import (
    PurchaseCreateSerializer, PurchaseHeaderSerializer, PurchaseItemInputSerializer,
    PurchaseItemUpdateSerializer, SupplierPurchaseItemSerializer, SupplierPurchaseSerializer
)


def _purchase_queryset():
    items = SupplierPurchaseItem.objects.select_related('product').order_by('id')
    return SupplierPurchase.objects.select_related('supplier').prefetch_related(Prefetch('items', queryset=items))


def _purchase_response(purchase_id, status_code=status.HTTP_200_OK):
    purchase = _purchase_queryset().get(pk=purchase_id)
    return Response(SupplierPurchaseSerializer(purchase).data, status=status_code)


@api_view(['GET', 'POST'])
def purchase_list_create(request):
    """List purchases (filterable) or create a purchase together with its items"""
    if request.method == 'GET':
        queryset = SupplierPurchaseFilter(request.query_params, queryset=_purchase_queryset()).qs
        return Response(SupplierPurchaseSerializer(queryset, many=True).data)

    serializer = PurchaseCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = dict(serializer.validated_data)
    items = data.pop('items', [])
    purchase = purchase_ledger.create_with_items(data, items)
    return _purchase_response(purchase.id, status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
def purchase_detail(request, pk):
    """Retrieve a purchase, edit its header, or delete it (reversing its stock)"""
    if request.method == 'GET':
        purchase = get_object_or_404(_purchase_queryset(), pk=pk)
        return Response(SupplierPurchaseSerializer(purchase).data)

    if request.method in ('PUT', 'PATCH'):
        serializer = PurchaseHeaderSerializer(data=request.data, partial=request.method == 'PATCH')
        serializer.is_valid(raise_exception=True)
        purchase_ledger.update_parent(pk, serializer.validated_data)
        return _purchase_response(pk)

    # DELETE
    purchase_ledger.delete_parent(pk)
    return Response({'message': 'Purchase deleted successfully'})


@api_view(['GET', 'POST'])
def purchase_items(request, pk):
    """List or add items of a purchase"""
    purchase = get_object_or_404(SupplierPurchase, pk=pk)

    if request.method == 'GET':
        items = purchase.items.select_related('product').order_by('id')
        return Response(SupplierPurchaseItemSerializer(items, many=True).data)

    serializer = PurchaseItemInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    item = purchase_ledger.add_item(purchase.id, **serializer.validated_data)
    return Response(SupplierPurchaseItemSerializer(item).data, status=status.HTTP_201_CREATED)


@api_view(['PUT', 'PATCH', 'DELETE'])
def purchase_item_detail(request, pk, item_id):
    """Change quantity/cost of a purchase item, or remove it"""
    if request.method == 'DELETE':
        purchase_ledger.delete_item(pk, item_id)
        return Response({'message': 'Item deleted successfully'})

    serializer = PurchaseItemUpdateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    item = purchase_ledger.update_item(
        pk, item_id,
        quantity=serializer.validated_data.get('quantity'),
        unit_price=serializer.validated_data.get('unit_price'),
    )
    return Response(SupplierPurchaseItemSerializer(item).data)
