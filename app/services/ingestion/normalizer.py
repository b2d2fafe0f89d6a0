"""Aggregator payload normalizer.

Every aggregator integration differs only in which field names it fills in,
not in semantics. Each canonical field is resolved from an ordered list of
aliases and falls back to a fixed default, so unrecognized shapes degrade
to defaults instead of being rejected.
"""
from typing import Any, List

from app.services.ingestion.coercion import (
    as_list,
    as_mapping,
    coerce_bool,
    coerce_number,
    coerce_str,
    first_of,
)
from app.services.ingestion.models import Modifier, OrderItem

DEFAULT_MENU_ITEM_ID = "external"
DEFAULT_ITEM_NAME = "Item"
DEFAULT_QUANTITY = 1
DEFAULT_UNIT_PRICE = 0
DEFAULT_MODIFIER_GROUP = "Modifier"


def normalize_modifier(raw: Any) -> Modifier:
    """Map one external modifier record to a Modifier."""
    source = as_mapping(raw)
    return Modifier(
        group_name=coerce_str(first_of(source, "group", "group_name"), DEFAULT_MODIFIER_GROUP),
        name=coerce_str(first_of(source, "name", "title"), ""),
        price_adjustment=coerce_number(first_of(source, "price_adjustment", "price"), 0),
    )


def normalize_modifiers(raw: Any) -> List[Modifier]:
    return [normalize_modifier(entry) for entry in as_list(raw)]


def normalize_item(raw: Any) -> OrderItem:
    """Map one external item record to an OrderItem."""
    source = as_mapping(raw)
    is_combo = coerce_bool(source.get("is_combo"), False)
    combo_id = source.get("combo_id")
    notes = source.get("notes")

    return OrderItem(
        menu_item_id=coerce_str(first_of(source, "menu_item_id", "sku", "id"), DEFAULT_MENU_ITEM_ID),
        name=coerce_str(first_of(source, "name", "title"), DEFAULT_ITEM_NAME),
        quantity=coerce_number(source.get("quantity"), DEFAULT_QUANTITY),
        unit_price=coerce_number(first_of(source, "unit_price", "price"), DEFAULT_UNIT_PRICE),
        notes=str(notes) if notes else None,
        modifiers=normalize_modifiers(source.get("modifiers")),
        is_combo=is_combo,
        combo_id=str(combo_id) if is_combo and combo_id else None,
    )


def normalize_items(raw: Any) -> List[OrderItem]:
    """
    Normalize an external item list into canonical order items.

    Never raises. A non-list value yields an empty list and non-mapping
    entries resolve to an all-default item.
    """
    return [normalize_item(entry) for entry in as_list(raw)]
