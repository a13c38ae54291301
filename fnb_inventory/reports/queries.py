"""
Read-only reporting queries behind the dashboard and the customer trend page.

Each function returns plain dicts/lists ready for ``Response``. Money comes out
as ``float`` and quantities as ``int``.
"""
import logging
from collections import defaultdict
from decimal import Decimal, ROUND_HALF_UP

from django.conf import settings
from django.db.models import Avg, Count, DecimalField, ExpressionWrapper, F, Max, Min, Q, Sum
from django.db.models.functions import TruncMonth
from django.utils import timezone

from fnb_inventory.catalog.models import Product
from fnb_inventory.sales.models import CustomerOrder, CustomerOrderItem

logger = logging.getLogger('fnb_inventory.reports')

CRITICAL_STOCK = 100
LOW_STOCK = 300

SUPPLY_RISK_LEVELS = {0: 'critical', 1: 'high', 2: 'medium'}

TREND_INCREASING = 'INCREASING'
TREND_DECLINING = 'DECLINING'
TREND_STABLE = 'STABLE'
TRENDS = (TREND_INCREASING, TREND_DECLINING, TREND_STABLE)

PRIORITY_ORDER = {'URGENT': 0, 'SOON': 1, 'PLANNED': 2}


def _round_int(value):
    """Round half away from zero to a whole number"""
    if value is None:
        return None
    return int(Decimal(str(value)).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def _money(value):
    return float(Decimal(str(value or 0)).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP))


# ----------------------------------------------------------------------
# Classifiers
# ----------------------------------------------------------------------

def classify_supply_risk(supplier_count):
    return SUPPLY_RISK_LEVELS.get(supplier_count, 'low')


def classify_purchase_priority(stock_quantity, reorder_level):
    if stock_quantity < reorder_level:
        return 'URGENT'
    if stock_quantity < reorder_level * Decimal('1.5'):
        return 'SOON'
    return 'PLANNED'


def classify_trend(earlier_qty, recent_qty):
    if recent_qty > earlier_qty * Decimal('1.2'):
        return TREND_INCREASING
    if recent_qty < earlier_qty * Decimal('0.8'):
        return TREND_DECLINING
    return TREND_STABLE


def change_percentage(earlier_qty, recent_qty):
    """Percent change from the earlier to the recent period, None without a baseline"""
    if not earlier_qty:
        return None
    change = (Decimal(recent_qty) - Decimal(earlier_qty)) / Decimal(earlier_qty) * 100
    return float(change.quantize(Decimal('0.1'), rounding=ROUND_HALF_UP))


# ----------------------------------------------------------------------
# Stock
# ----------------------------------------------------------------------

def low_stock_alerts(threshold=None, limit=None):
    """Products under the fixed alert threshold, lowest stock first"""
    threshold = settings.REPORT_LOW_STOCK_THRESHOLD if threshold is None else threshold
    limit = settings.REPORT_LOW_STOCK_LIMIT if limit is None else limit
    products = (
        Product.objects.filter(stock_quantity__lt=threshold)
        .select_related('category')
        .order_by('stock_quantity', 'name')[:limit]
    )
    return [
        {
            'product_id': product.id,
            'name': product.name,
            'stock_quantity': product.stock_quantity,
            'reorder_level': product.reorder_level,
            'unit_price': float(product.unit_price),
            'category': product.category.name if product.category else None,
        }
        for product in products
    ]


def stock_distribution():
    """Count products per stock band; the bands partition the catalogue"""
    counts = Product.objects.aggregate(
        critical=Count('id', filter=Q(stock_quantity__lt=CRITICAL_STOCK)),
        low=Count('id', filter=Q(stock_quantity__gte=CRITICAL_STOCK, stock_quantity__lt=LOW_STOCK)),
        sufficient=Count('id', filter=Q(stock_quantity__gte=LOW_STOCK)),
    )
    return {band: counts[band] or 0 for band in ('critical', 'low', 'sufficient')}


# ----------------------------------------------------------------------
# Sales
# ----------------------------------------------------------------------

def top_selling_products(limit=None, status=None):
    """Products ranked by total quantity ordered"""
    limit = settings.REPORT_TOP_SELLING_LIMIT if limit is None else limit
    items = CustomerOrderItem.objects.all()
    if status:
        items = items.filter(order__status=status)

    rows = (
        items.values('product_id', 'product__name', 'product__category__name', 'product__unit_price')
        .annotate(total_sold=Sum('quantity'), total_revenue=Sum('subtotal'))
        .order_by('-total_sold', 'product__name')[:limit]
    )
    return [
        {
            'product_id': row['product_id'],
            'product_name': row['product__name'],
            'product_category': row['product__category__name'],
            'product_unit_price': float(row['product__unit_price']),
            'total_sold': row['total_sold'] or 0,
            'total_revenue': _money(row['total_revenue']),
        }
        for row in rows
    ]


def dashboard_summary(today=None):
    """Headline numbers for the dashboard"""
    today = today or timezone.localdate()
    inventory_value = Product.objects.aggregate(
        total=Sum(ExpressionWrapper(
            F('stock_quantity') * F('unit_price'),
            output_field=DecimalField(max_digits=16, decimal_places=2)
        ))
    )['total']

    ytd_orders = CustomerOrder.objects.filter(order_date__year=today.year)
    ytd_revenue = ytd_orders.exclude(status='cancelled').aggregate(total=Sum('total_amount'))['total']

    return {
        'totalProducts': Product.objects.count(),
        'lowStockCount': Product.objects.filter(stock_quantity__lt=F('reorder_level')).count(),
        'totalInventoryValue': _money(inventory_value),
        'ytdOrdersCount': ytd_orders.count(),
        'ytdRevenue': _money(ytd_revenue),
    }


# ----------------------------------------------------------------------
# Purchasing
# ----------------------------------------------------------------------

def supply_risk_report():
    """Every product with the number of distinct suppliers it was ever bought from"""
    products = (
        Product.objects.select_related('category')
        .annotate(supplier_count=Count('purchase_items__purchase__supplier', distinct=True))
        .order_by('supplier_count', 'name')
    )
    return [
        {
            'product_id': product.id,
            'name': product.name,
            'category': product.category.name if product.category else None,
            'unit_price': float(product.unit_price),
            'stock_quantity': product.stock_quantity,
            'supplier_count': product.supplier_count,
            'risk_level': classify_supply_risk(product.supplier_count),
        }
        for product in products
    ]


def purchase_forecast(include_all=False, today=None):
    """Reorder forecast per product from its purchase history.

    Only completed purchases count unless ``include_all`` is set. Products
    without history are still listed, with empty history fields.
    """
    today = today or timezone.localdate()
    history = None if include_all else Q(purchase_items__purchase__status='completed')

    products = Product.objects.select_related('category').annotate(
        total_purchases=Count('purchase_items', filter=history),
        avg_purchase_qty=Avg('purchase_items__quantity', filter=history),
        last_purchase_date=Max('purchase_items__purchase__purchase_date', filter=history),
        first_purchase_date=Min('purchase_items__purchase__purchase_date', filter=history),
        purchase_months=Count(TruncMonth('purchase_items__purchase__purchase_date'), filter=history, distinct=True),
    )

    rows = []
    for product in products:
        forecasted = _round_int(product.avg_purchase_qty)
        last_date = product.last_purchase_date
        days_since = (today - last_date).days if last_date else None
        avg_days_between = None
        if last_date and product.purchase_months:
            span = (last_date - product.first_purchase_date).days
            avg_days_between = _round_int(Decimal(span) / Decimal(product.purchase_months))

        rows.append({
            'product_id': product.id,
            'name': product.name,
            'category': product.category.name if product.category else None,
            'stock_quantity': product.stock_quantity,
            'reorder_level': product.reorder_level,
            'unit_price': float(product.unit_price),
            'total_purchases': product.total_purchases,
            'avg_purchase_qty': (
                float(Decimal(str(product.avg_purchase_qty)).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP))
                if product.avg_purchase_qty is not None else None
            ),
            'forecasted_monthly_qty': forecasted,
            'last_purchase_date': last_date.isoformat() if last_date else None,
            'days_since_purchase': days_since,
            'avg_days_between_purchases': avg_days_between,
            'purchase_priority': classify_purchase_priority(product.stock_quantity, product.reorder_level),
            'estimated_monthly_cost': (
                _money(product.unit_price * forecasted) if forecasted is not None else None
            ),
        })

    # Most pressing first; within a priority the longest-unpurchased (or never) first
    rows.sort(key=lambda row: (
        PRIORITY_ORDER[row['purchase_priority']],
        row['last_purchase_date'] is not None,
        row['last_purchase_date'] or '',
        row['name'],
    ))
    return rows


# ----------------------------------------------------------------------
# Customers
# ----------------------------------------------------------------------

def customer_product_trends(customer_id=None, trend=None):
    """Compare what each customer ordered before and after their mean order date.

    Only completed orders are considered. A customer's split point is the mean
    of the dates of their distinct orders; orders dated before it are
    "earlier", orders on or after it are "recent".
    """
    items = (
        CustomerOrderItem.objects.filter(order__status='completed')
        .select_related('order__customer', 'product')
        .order_by('order__customer_id', 'order__order_date', 'order_id', 'id')
    )
    if customer_id is not None:
        items = items.filter(order__customer_id=customer_id)
    items = list(items)

    order_dates = defaultdict(dict)
    for item in items:
        order_dates[item.order.customer_id][item.order_id] = item.order.order_date

    split_points = {}
    for cust_id, dates in order_dates.items():
        ordinals = [d.toordinal() for d in dates.values()]
        split_points[cust_id] = Decimal(sum(ordinals)) / Decimal(len(ordinals))

    pairs = {}
    for item in items:
        customer = item.order.customer
        key = (customer.id, item.product_id)
        pair = pairs.get(key)
        if pair is None:
            pair = pairs[key] = {
                'customer_id': customer.id,
                'customer_name': customer.name,
                'product_id': item.product_id,
                'product_name': item.product.name,
                'earlier_qty': 0,
                'recent_qty': 0,
                'earlier_order_ids': set(),
                'recent_order_ids': set(),
            }
        if item.order.order_date.toordinal() < split_points[customer.id]:
            pair['earlier_qty'] += item.quantity
            pair['earlier_order_ids'].add(item.order_id)
        else:
            pair['recent_qty'] += item.quantity
            pair['recent_order_ids'].add(item.order_id)

    rows = []
    for pair in pairs.values():
        earlier_qty, recent_qty = pair['earlier_qty'], pair['recent_qty']
        if earlier_qty == 0 and recent_qty == 0:
            continue
        row_trend = classify_trend(earlier_qty, recent_qty)
        if trend and row_trend != trend:
            continue
        rows.append({
            'customer_id': pair['customer_id'],
            'customer_name': pair['customer_name'],
            'product_id': pair['product_id'],
            'product_name': pair['product_name'],
            'earlier_qty': earlier_qty,
            'recent_qty': recent_qty,
            'earlier_orders': len(pair['earlier_order_ids']),
            'recent_orders': len(pair['recent_order_ids']),
            'change_percentage': change_percentage(earlier_qty, recent_qty),
            'trend': row_trend,
        })

    rows.sort(key=lambda row: (row['customer_name'], row['product_name'], row['customer_id'], row['product_id']))
    logger.debug(f"Customer product trends: {len(rows)} pair(s) from {len(items)} completed item(s)")
    return rows
