"""Canonical order and kitchen ticket models."""
from typing import Any, List, Optional, Union
from pydantic import BaseModel

Number = Union[int, float]


class Modifier(BaseModel):
    """Modifier applied to an order item."""

    group_name: str = "Modifier"
    name: str = ""
    price_adjustment: Number = 0


class OrderItem(BaseModel):
    """Canonical order line."""

    menu_item_id: str = "external"
    name: str = "Item"
    quantity: Number = 1
    unit_price: Number = 0
    notes: Optional[str] = None
    modifiers: List[Modifier] = []
    is_combo: bool = False
    combo_id: Optional[str] = None


class Order(BaseModel):
    """Canonical order as stored in the order ledger."""

    id: str
    restaurant_id: str
    employee_id: str = "aggregator_webhook"
    type: str = "delivery"
    payment_method: str = "cash"
    status: str = "pending"  # pending, confirmed, completed, cancelled
    items: List[OrderItem] = []
    subtotal: Number = 0
    tax_amount: Number = 0
    discount_amount: Number = 0
    total: Number = 0
    discount_id: Optional[Any] = None
    discount_name: Optional[Any] = None
    fbr_invoice_number: Optional[Any] = None
    customer_name: Optional[Any] = None
    customer_phone: Optional[Any] = None
    source: str = "aggregator"
    external_payload: Optional[Any] = None
    idempotency_key: Optional[str] = None
    created_at: str


class KdsItem(BaseModel):
    """Kitchen-facing projection of an order item. Carries no pricing."""

    menu_item_id: str
    name: str
    quantity: Number
    modifiers: List[str] = []
    notes: Optional[str] = None
    station: Optional[str] = None
    status: str = "pending"  # pending, preparing, ready
    status_updated_at: Optional[str] = None


class KdsTicket(BaseModel):
    """Kitchen display ticket, 1:1 with an order by ``order_id``."""

    order_id: str
    restaurant_id: str
    order_number: str
    order_type: str
    items: List[KdsItem] = []
    customer_name: Optional[Any] = None
    table_number: Optional[Any] = None
    special_instructions: Optional[Any] = None
    priority: str = "normal"
    is_on_hold: bool = False
    estimated_prep_minutes: Number = 15
    created_at: str
    completed_at: Optional[str] = None
