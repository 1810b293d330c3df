"""Order total derived from the item price, selected extras and quantity."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from storefront.models import Extra, Item
from storefront.money import ZERO


def extras_subtotal(extras: Iterable[Extra]) -> Decimal:
    """Sum of value x quantity over all extras (zero-quantity rows add nothing)."""
    return sum((extra.value * extra.quantity for extra in extras), ZERO)


def cart_total(item: Item | None, extras: Iterable[Extra], quantity: int) -> Decimal:
    """Return ``(price + extras) * quantity``, or zero while no item is loaded."""
    if item is None:
        return ZERO
    return (item.price + extras_subtotal(extras)) * quantity
