"""Unit tests for kitchen ticket projection."""
from app.services.ingestion.models import Modifier, Order, OrderItem
from app.services.ingestion.normalizer import normalize_items
from app.services.ingestion.projector import build_kds_ticket, project_kds_item, project_kds_items

PRICING_FIELDS = {"unit_price", "price", "price_adjustment", "subtotal", "total", "tax_amount"}


def _order(items):
    return Order(
        id="8f14e45f-ceea-467f-a0e6-7a4f1b2c3d4e",
        restaurant_id="R1",
        type="delivery",
        items=items,
        customer_name="Sara M.",
        created_at="2026-01-15T12:00:00+00:00",
    )


class TestProjectKdsItems:
    """Test item projection."""

    def test_pricing_fields_dropped(self):
        kds_item = project_kds_item(
            OrderItem(
                menu_item_id="X1",
                name="Burger",
                quantity=2,
                unit_price=450,
                modifiers=[Modifier(group_name="Size", name="Large", price_adjustment=80)],
            )
        )
        dumped = kds_item.model_dump()

        assert PRICING_FIELDS.isdisjoint(dumped)
        assert dumped["menu_item_id"] == "X1"
        assert dumped["name"] == "Burger"
        assert dumped["quantity"] == 2

    def test_modifiers_flattened_to_names(self):
        item = OrderItem(
            modifiers=[
                Modifier(group_name="Size", name="Large", price_adjustment=80),
                Modifier(group_name="Toppings", name="Bacon", price_adjustment=80),
                Modifier(group_name="Toppings", name="", price_adjustment=0),
            ]
        )
        assert project_kds_item(item).modifiers == ["Large", "Bacon"]

    def test_tracking_defaults(self):
        kds_item = project_kds_item(OrderItem(notes="no onions"))

        assert kds_item.notes == "no onions"
        assert kds_item.station is None
        assert kds_item.status == "pending"
        assert kds_item.status_updated_at is None

    def test_same_count_and_names(self):
        items = normalize_items([{"title": "Burger"}, {"title": "Fries"}, {"name": "Cola"}])
        kds_items = project_kds_items(items)

        assert len(kds_items) == len(items)
        assert [k.name for k in kds_items] == [i.name for i in items]


class TestBuildKdsTicket:
    """Test ticket assembly."""

    def test_ticket_shares_order_identity(self):
        order = _order([OrderItem(name="Burger", quantity=2, unit_price=450)])
        ticket = build_kds_ticket(order, order_number="8F14E45F")

        assert ticket.order_id == order.id
        assert ticket.restaurant_id == order.restaurant_id
        assert ticket.order_type == "delivery"
        assert ticket.customer_name == "Sara M."
        assert ticket.created_at == order.created_at
        assert ticket.completed_at is None

    def test_ticket_defaults(self):
        ticket = build_kds_ticket(_order([]), order_number="A1")

        assert ticket.items == []
        assert ticket.priority == "normal"
        assert ticket.is_on_hold is False
        assert ticket.estimated_prep_minutes == 15
        assert ticket.table_number is None
        assert ticket.special_instructions is None

    def test_ticket_has_no_pricing(self):
        order = _order([OrderItem(name="Burger", quantity=2, unit_price=450)])
        dumped = build_kds_ticket(order, order_number="A1").model_dump()

        assert PRICING_FIELDS.isdisjoint(dumped)
        for item in dumped["items"]:
            assert PRICING_FIELDS.isdisjoint(item)

    def test_ticket_is_a_snapshot(self):
        """Later edits to the order do not reach an already built ticket."""
        order = _order([OrderItem(name="Burger", quantity=1)])
        ticket = build_kds_ticket(order, order_number="A1")

        order.items[0].quantity = 5

        assert ticket.items[0].quantity == 1
