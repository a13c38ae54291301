"""
Line-item ledger for purchases and orders.

A parent document (supplier purchase or customer order) owns line items. Each
item mutation keeps three things in step inside one transaction:

* the item's ``subtotal`` (quantity x price, rounded to cents),
* the parent's ``total_amount`` (sum of item subtotals),
* the product's ``stock_quantity`` (purchases add stock, orders remove it).

Rows holding an accumulator are locked with ``SELECT ... FOR UPDATE`` before
they are read, always parent first and product second, so concurrent
mutations on the same document or product are serialized. Operations touching
several products lock all of them up front in primary-key order.
"""
import logging
from contextlib import contextmanager
from decimal import Decimal

from django.db import transaction
from django.db.models import Sum

from fnb_inventory.catalog.models import Product
from fnb_inventory.core.exceptions import InventoryError, NotFound, ValidationFailed
from fnb_inventory.core.money import ZERO, compute_subtotal, to_money
from fnb_inventory.purchasing.models import SupplierPurchase, SupplierPurchaseItem
from fnb_inventory.sales.models import CustomerOrder, CustomerOrderItem

logger = logging.getLogger(__name__)

STOCK_IN = 1
STOCK_OUT = -1


class LineItemLedger:
    """Applies the create/add/update/delete item protocol to one kind of document.

    Args:
        parent_model: document model (``SupplierPurchase`` / ``CustomerOrder``)
        item_model: line item model, reachable from the parent as ``items``
        parent_field: name of the item's FK to the parent (``purchase`` / ``order``)
        owner_field: name of the parent's required FK (``supplier`` / ``customer``)
        price_field: item price column (``unit_cost`` / ``unit_price``)
        stock_direction: ``STOCK_IN`` for purchases, ``STOCK_OUT`` for orders
        label: human readable document name used in messages
    """

    def __init__(self, parent_model, item_model, parent_field, owner_field, price_field, stock_direction, label):
        self.parent_model = parent_model
        self.item_model = item_model
        self.parent_field = parent_field
        self.owner_field = owner_field
        self.price_field = price_field
        self.stock_direction = stock_direction
        self.label = label

    # ------------------------------------------------------------------
    # Validation and row locking
    # ------------------------------------------------------------------

    def _validate_line(self, quantity, unit_price):
        """Return (quantity, unit_price) normalized, or raise ValidationFailed"""
        if isinstance(quantity, bool):
            raise ValidationFailed('Quantity must be a whole number')
        try:
            quantity_int = int(quantity)
        except (TypeError, ValueError):
            raise ValidationFailed('Quantity must be a whole number')
        if quantity_int != quantity and not isinstance(quantity, str):
            raise ValidationFailed('Quantity must be a whole number')
        if quantity_int < 1:
            raise ValidationFailed('Quantity must be at least 1')

        if unit_price is None:
            raise ValidationFailed(f'{self.price_field} is required')
        try:
            price = to_money(unit_price)
        except ArithmeticError:
            raise ValidationFailed(f'{self.price_field} must be a number')
        if price < 0:
            raise ValidationFailed(f'{self.price_field} cannot be negative')
        return quantity_int, price

    def _ensure_owner_exists(self, owner_id):
        owner_model = self.parent_model._meta.get_field(self.owner_field).related_model
        if owner_id is None:
            raise ValidationFailed(f'{self.owner_field}_id is required')
        if not owner_model.objects.filter(pk=owner_id).exists():
            raise NotFound(f'{owner_model._meta.verbose_name.capitalize()} {owner_id} not found')

    def _lock_parent(self, parent_id):
        try:
            return self.parent_model.objects.select_for_update().get(pk=parent_id)
        except self.parent_model.DoesNotExist:
            raise NotFound(f'{self.label} {parent_id} not found')

    def _lock_item(self, parent, item_id):
        try:
            return self.item_model.objects.select_for_update().get(pk=item_id, **{self.parent_field: parent})
        except self.item_model.DoesNotExist:
            raise NotFound(f'Item {item_id} not found on {self.label.lower()} {parent.pk}')

    def _lock_product(self, product_id):
        try:
            return Product.objects.select_for_update().get(pk=product_id)
        except (Product.DoesNotExist, ValueError, TypeError):
            raise NotFound(f'Product {product_id} not found')

    def _lock_products(self, product_ids):
        """Lock every listed product in primary-key order; any missing id aborts"""
        wanted = set()
        for product_id in product_ids:
            try:
                wanted.add(int(product_id))
            except (TypeError, ValueError):
                raise NotFound(f'Product {product_id} not found')
        locked = Product.objects.select_for_update().filter(pk__in=wanted).order_by('pk')
        found = {product.pk for product in locked}
        missing = sorted(wanted - found)
        if missing:
            raise NotFound(f'Product {missing[0]} not found')
        return found

    # ------------------------------------------------------------------
    # Accumulators
    # ------------------------------------------------------------------

    def _apply_stock(self, product_id, quantity_delta):
        """Move stock by ``quantity_delta`` units in this ledger's direction.

        A negative ``quantity_delta`` reverses a previous effect. Stock can never
        go below zero; the caller's transaction is aborted instead.
        """
        product = self._lock_product(product_id)
        change = self.stock_direction * quantity_delta
        if change == 0:
            return product
        new_stock = product.stock_quantity + change
        if new_stock < 0:
            raise ValidationFailed(
                f'Insufficient stock for {product.name}: {product.stock_quantity} available, '
                f'{-change} required'
            )
        product.stock_quantity = new_stock
        product.save(update_fields=['stock_quantity', 'updated_at'])
        return product

    def _adjust_total(self, parent, delta):
        parent.total_amount = to_money(parent.total_amount + delta)
        if parent.total_amount < 0:
            # Only reachable if totals were edited outside the ledger
            logger.warning(f'{self.label} {parent.pk} total went negative; recalculating from items')
            parent.total_amount = self._items_total(parent)
        parent.save(update_fields=['total_amount', 'updated_at'])

    def _items_total(self, parent):
        total = self.item_model.objects.filter(**{self.parent_field: parent}).aggregate(total=Sum('subtotal'))['total']
        return to_money(total)

    def _insert_item(self, parent, product_id, quantity, unit_price):
        product = self._apply_stock(product_id, quantity)
        item = self.item_model.objects.create(**{
            self.parent_field: parent,
            'product': product,
            'quantity': quantity,
            self.price_field: unit_price,
            'subtotal': compute_subtotal(quantity, unit_price),
        })
        return item

    # ------------------------------------------------------------------
    # Protocol operations
    # ------------------------------------------------------------------

    @contextmanager
    def _unit_of_work(self, action):
        """One transaction per operation; domain rejections are logged and re-raised"""
        try:
            with transaction.atomic():
                yield
        except InventoryError as exc:
            logger.warning(f'{self.label} {action} rejected: {exc.detail}')
            raise

    def create_with_items(self, parent_fields, items):
        """Create a document and all of its items in one unit of work.

        ``parent_fields`` holds the document columns (``<owner>_id``, date,
        status, notes...). ``items`` is a list of dicts with ``product_id``,
        ``quantity`` and ``unit_price``. All lines are validated before the
        first write; an unknown product aborts the whole document.
        """
        with self._unit_of_work('create'):
            lines = []
            for entry in items or []:
                quantity, price = self._validate_line(entry.get('quantity'), entry.get('unit_price'))
                if entry.get('product_id') is None:
                    raise ValidationFailed('product_id is required for every item')
                lines.append((entry['product_id'], quantity, price))

            fields = dict(parent_fields)
            self._ensure_owner_exists(fields.get(f'{self.owner_field}_id'))
            self._lock_products(product_id for product_id, _, _ in lines)
            fields['total_amount'] = ZERO
            parent = self.parent_model.objects.create(**fields)

            running_total = Decimal('0')
            for product_id, quantity, price in lines:
                item = self._insert_item(parent, product_id, quantity, price)
                running_total += item.subtotal

            parent.total_amount = to_money(running_total)
            parent.save(update_fields=['total_amount', 'updated_at'])

        logger.info(f'{self.label} {parent.pk} created with {len(lines)} item(s), total {parent.total_amount}')
        return parent

    def add_item(self, parent_id, product_id, quantity, unit_price):
        """Add one line to an existing document"""
        with self._unit_of_work(f'{parent_id} add item'):
            quantity, price = self._validate_line(quantity, unit_price)
            parent = self._lock_parent(parent_id)
            item = self._insert_item(parent, product_id, quantity, price)
            self._adjust_total(parent, item.subtotal)

        logger.info(
            f'{self.label} {parent.pk}: added item {item.pk} (product {product_id}, qty {quantity}), '
            f'total now {parent.total_amount}'
        )
        return item

    def update_item(self, parent_id, item_id, quantity=None, unit_price=None):
        """Change quantity and/or price of a line, applying only the net change"""
        with self._unit_of_work(f'{parent_id} update item {item_id}'):
            parent = self._lock_parent(parent_id)
            item = self._lock_item(parent, item_id)

            quantity, price = self._validate_line(
                item.quantity if quantity is None else quantity,
                getattr(item, self.price_field) if unit_price is None else unit_price,
            )
            old_quantity = item.quantity
            old_subtotal = item.subtotal
            new_subtotal = compute_subtotal(quantity, price)

            self._apply_stock(item.product_id, quantity - old_quantity)

            item.quantity = quantity
            setattr(item, self.price_field, price)
            item.subtotal = new_subtotal
            item.save(update_fields=['quantity', self.price_field, 'subtotal', 'updated_at'])

            self._adjust_total(parent, new_subtotal - old_subtotal)

        logger.info(
            f'{self.label} {parent.pk}: item {item.pk} qty {old_quantity}->{quantity}, '
            f'subtotal {old_subtotal}->{new_subtotal}, total now {parent.total_amount}'
        )
        return item

    def delete_item(self, parent_id, item_id):
        """Remove a line and reverse its stock effect"""
        with self._unit_of_work(f'{parent_id} delete item {item_id}'):
            parent = self._lock_parent(parent_id)
            item = self._lock_item(parent, item_id)

            self._apply_stock(item.product_id, -item.quantity)
            item.delete()
            self._adjust_total(parent, -item.subtotal)

        logger.info(f'{self.label} {parent.pk}: deleted item {item_id}, total now {parent.total_amount}')

    def update_parent(self, parent_id, fields):
        """Edit document header columns. Items, totals and stock are untouched."""
        owner_key = f'{self.owner_field}_id'
        with self._unit_of_work(f'{parent_id} update'):
            parent = self._lock_parent(parent_id)
            if owner_key in fields:
                self._ensure_owner_exists(fields[owner_key])
            for name, value in fields.items():
                setattr(parent, name, value)
            parent.save()
        logger.info(f'{self.label} {parent.pk} updated ({", ".join(sorted(fields)) or "no fields"})')
        return parent

    def delete_parent(self, parent_id):
        """Delete a document with all its items, reversing every stock effect"""
        with self._unit_of_work(f'{parent_id} delete'):
            parent = self._lock_parent(parent_id)
            items = list(self.item_model.objects.filter(**{self.parent_field: parent}).order_by('id'))
            self._lock_products(item.product_id for item in items)
            for item in items:
                self._apply_stock(item.product_id, -item.quantity)
            parent.delete()

        logger.info(f'{self.label} {parent_id} deleted with {len(items)} item(s); stock reversed')

    def recalculate_total(self, parent_id):
        """Recompute ``total_amount`` from the stored item subtotals"""
        with transaction.atomic():
            parent = self._lock_parent(parent_id)
            parent.total_amount = self._items_total(parent)
            parent.save(update_fields=['total_amount', 'updated_at'])
        return parent


purchase_ledger = LineItemLedger(
    parent_model=SupplierPurchase,
    item_model=SupplierPurchaseItem,
    parent_field='purchase',
    owner_field='supplier',
    price_field='unit_cost',
    stock_direction=STOCK_IN,
    label='Purchase',
)

order_ledger = LineItemLedger(
    parent_model=CustomerOrder,
    item_model=CustomerOrderItem,
    parent_field='order',
    owner_field='customer',
    price_field='unit_price',
    stock_direction=STOCK_OUT,
    label='Order',
)


# ----------------------------------------------------------------------
# Cascades that must keep the ledger invariants
# ----------------------------------------------------------------------

def delete_product(product):
    """Delete a product; its line items cascade and affected totals are recomputed"""
    with transaction.atomic():
        purchase_ids = list(product.purchase_items.values_list('purchase_id', flat=True).distinct())
        order_ids = list(product.order_items.values_list('order_id', flat=True).distinct())
        product_id = product.pk
        product.delete()
        for purchase_id in purchase_ids:
            purchase_ledger.recalculate_total(purchase_id)
        for order_id in order_ids:
            order_ledger.recalculate_total(order_id)
    logger.info(
        f'Product {product_id} deleted; recalculated {len(purchase_ids)} purchase(s) '
        f'and {len(order_ids)} order(s)'
    )


def delete_supplier(supplier):
    """Delete a supplier and its purchases, reversing the purchases' stock"""
    with transaction.atomic():
        purchase_ids = list(supplier.purchases.values_list('id', flat=True))
        for purchase_id in purchase_ids:
            purchase_ledger.delete_parent(purchase_id)
        supplier.delete()
    logger.info(f'Supplier deleted with {len(purchase_ids)} purchase(s)')


def delete_customer(customer):
    """Delete a customer and its orders, returning the ordered stock"""
    with transaction.atomic():
        order_ids = list(customer.orders.values_list('id', flat=True))
        for order_id in order_ids:
            order_ledger.delete_parent(order_id)
        customer.delete()
    logger.info(f'Customer deleted with {len(order_ids)} order(s)')
