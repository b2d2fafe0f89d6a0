"""Kitchen display ticket projection."""
from typing import Any, List, Optional

from app.services.ingestion.models import KdsItem, KdsTicket, Order, OrderItem


def project_kds_item(item: OrderItem) -> KdsItem:
    """Project an order item for the kitchen: names only, no pricing."""
    return KdsItem(
        menu_item_id=item.menu_item_id,
        name=item.name,
        quantity=item.quantity,
        modifiers=[modifier.name for modifier in item.modifiers if modifier.name],
        notes=item.notes,
        station=None,
        status="pending",
        status_updated_at=None,
    )


def project_kds_items(items: List[OrderItem]) -> List[KdsItem]:
    return [project_kds_item(item) for item in items]


def build_kds_ticket(
    order: Order,
    order_number: str,
    table_number: Optional[Any] = None,
    special_instructions: Optional[Any] = None,
    priority: str = "normal",
    is_on_hold: bool = False,
    estimated_prep_minutes: float = 15,
) -> KdsTicket:
    """
    Derive the kitchen ticket for a freshly created order.

    The ticket shares the order's id and restaurant id. It is derived once
    at creation time and not kept in sync with later order edits.
    """
    return KdsTicket(
        order_id=order.id,
        restaurant_id=order.restaurant_id,
        order_number=order_number,
        order_type=order.type,
        items=project_kds_items(order.items),
        customer_name=order.customer_name,
        table_number=table_number,
        special_instructions=special_instructions,
        priority=priority,
        is_on_hold=is_on_hold,
        estimated_prep_minutes=estimated_prep_minutes,
        created_at=order.created_at,
        completed_at=None,
    )
