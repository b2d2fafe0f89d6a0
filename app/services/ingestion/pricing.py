"""Order pricing."""
from typing import Any, List
from pydantic import BaseModel

from app.services.ingestion.coercion import coerce_number
from app.services.ingestion.models import Number, OrderItem


class OrderTotals(BaseModel):
    """Derived monetary totals of an order."""

    subtotal: Number
    tax_amount: Number
    discount_amount: Number
    total: Number


def calculate_subtotal(items: List[OrderItem]) -> Number:
    """Sum of unit_price x quantity over all items."""
    return sum(item.unit_price * item.quantity for item in items)


def calculate_totals(items: List[OrderItem], tax_amount: Any = None, discount_amount: Any = None) -> OrderTotals:
    """
    Compute subtotal and total for normalized items.

    Tax and discount are taken as asserted by the aggregator and are not
    recomputed from a configured tax rate. Non-numeric values resolve to 0.
    The total is clamped at 0.
    """
    subtotal = calculate_subtotal(items)
    tax = coerce_number(tax_amount, 0)
    discount = coerce_number(discount_amount, 0)
    return OrderTotals(
        subtotal=subtotal,
        tax_amount=tax,
        discount_amount=discount,
        total=max(0, subtotal - discount + tax),
    )
