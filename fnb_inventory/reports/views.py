import logging

from rest_framework.decorators import api_view
from rest_framework.response import Response

from fnb_inventory.sales.models import CustomerOrder

from . import queries

logger = logging.getLogger('fnb_inventory.reports')

ORDER_STATUSES = {value for value, _ in CustomerOrder.STATUS_CHOICES}


def _int_param(request, name, default=None):
    """Positive integer query parameter; anything else falls back to ``default``"""
    raw = request.query_params.get(name)
    if raw in (None, ''):
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        logger.debug(f"Ignoring non-numeric {name}={raw!r}")
        return default
    return value if value > 0 else default


def _bool_param(request, name):
    return str(request.query_params.get(name, '')).lower() in ('true', '1', 'yes')


@api_view(['GET'])
def dashboard_summary(request):
    """Headline totals: products, low stock, inventory value, year-to-date orders"""
    return Response(queries.dashboard_summary())


@api_view(['GET'])
def low_stock_alerts(request):
    """Products under the dashboard alert threshold"""
    return Response(queries.low_stock_alerts(limit=_int_param(request, 'limit')))


@api_view(['GET'])
def top_selling_products(request):
    """Top products by quantity sold"""
    limit = _int_param(request, 'limit')
    order_status = (request.query_params.get('status') or '').lower()
    if order_status not in ORDER_STATUSES:
        order_status = None
    return Response(queries.top_selling_products(limit=limit, status=order_status))


@api_view(['GET'])
def stock_distribution(request):
    """Product counts per stock band"""
    return Response(queries.stock_distribution())


@api_view(['GET'])
def supply_risk_report(request):
    """Products by number of distinct suppliers"""
    return Response(queries.supply_risk_report())


@api_view(['GET'])
def purchase_forecast(request):
    """Per-product reorder forecast from purchase history"""
    return Response(queries.purchase_forecast(include_all=_bool_param(request, 'include_all')))


@api_view(['GET'])
def customer_product_trends(request):
    """Customer x product demand trend between earlier and recent orders"""
    trend = (request.query_params.get('trend') or '').upper()
    if trend not in queries.TRENDS:
        trend = None
    customer_id = _int_param(request, 'customer_id')
    return Response(queries.customer_product_trends(customer_id=customer_id, trend=trend))
