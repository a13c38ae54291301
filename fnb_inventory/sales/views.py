from django.db.models import Prefetch
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from fnb_inventory.inventory.serializers import LineItemInputSerializer, LineItemUpdateSerializer
from fnb_inventory.inventory.services import order_ledger
from .filters import CustomerOrderFilter
from .models import CustomerOrder, CustomerOrderItem
from .serializers import (
    CustomerOrderItemSerializer, CustomerOrderSerializer, OrderCreateSerializer, OrderHeaderSerializer
)


def _order_queryset():
    items = CustomerOrderItem.objects.select_related('product').order_by('id')
    return CustomerOrder.objects.select_related('customer').prefetch_related(Prefetch('items', queryset=items))


@api_view(['GET', 'POST'])
def order_list_create(request):
    """List orders (filterable) or place an order together with its items"""
    if request.method == 'GET':
        queryset = CustomerOrderFilter(request.query_params, queryset=_order_queryset()).qs
        return Response(CustomerOrderSerializer(queryset, many=True).data)

    serializer = OrderCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = dict(serializer.validated_data)
    items = data.pop('items', [])
    order = order_ledger.create_with_items(data, items)
    order = _order_queryset().get(pk=order.id)
    return Response(CustomerOrderSerializer(order).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
def order_detail(request, pk):
    """Retrieve an order, edit its header, or delete it (returning its stock)"""
    if request.method == 'GET':
        order = get_object_or_404(_order_queryset(), pk=pk)
        return Response(CustomerOrderSerializer(order).data)

    if request.method in ('PUT', 'PATCH'):
        serializer = OrderHeaderSerializer(data=request.data, partial=request.method == 'PATCH')
        serializer.is_valid(raise_exception=True)
        order_ledger.update_parent(pk, serializer.validated_data)
        order = _order_queryset().get(pk=pk)
        return Response(CustomerOrderSerializer(order).data)

    # DELETE
    order_ledger.delete_parent(pk)
    return Response({'message': 'Order deleted successfully'})


@api_view(['GET', 'POST'])
def order_items(request, pk):
    """List or add items of an order"""
    order = get_object_or_404(CustomerOrder, pk=pk)

    if request.method == 'GET':
        items = order.items.select_related('product').order_by('id')
        return Response(CustomerOrderItemSerializer(items, many=True).data)

    serializer = LineItemInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    item = order_ledger.add_item(order.id, **serializer.validated_data)
    return Response(CustomerOrderItemSerializer(item).data, status=status.HTTP_201_CREATED)


@api_view(['PUT', 'PATCH', 'DELETE'])
def order_item_detail(request, pk, item_id):
    """Change quantity/price of an order item, or remove it"""
    if request.method == 'DELETE':
        order_ledger.delete_item(pk, item_id)
        return Response({'message': 'Item deleted successfully'})

    serializer = LineItemUpdateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    item = order_ledger.update_item(
        pk, item_id,
        quantity=serializer.validated_data.get('quantity'),
        unit_price=serializer.validated_data.get('unit_price'),
    )
    return Response(CustomerOrderItemSerializer(item).data)
