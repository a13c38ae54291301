"""Monetary helpers. Amounts are rounded when computed, never when read."""
from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal('0.01')
ZERO = Decimal('0.00')


def to_money(value):
    """Round a number to 2 decimal places (half up)"""
    if value is None:
        return ZERO
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def compute_subtotal(quantity, unit_price):
    """Line subtotal = quantity x unit price, rounded to cents"""
    return to_money(Decimal(int(quantity)) * to_money(unit_price))
