"""Document store collection layout for ingested orders."""
from urllib.parse import quote

from app.services.store.base import collection_path

RESTAURANTS = "restaurants"
ORDERS = "orders"
OUTBOX = "ingestion_outbox"


def kds_orders_collection(restaurant_id: str) -> str:
    return collection_path(RESTAURANTS, restaurant_id, "kds_orders")


def ingestion_keys_collection(restaurant_id: str) -> str:
    return collection_path(RESTAURANTS, restaurant_id, "ingestion_keys")


def idempotency_key(source: str, external_order_id: str) -> str:
    """Deduplication key for an aggregator-side order id, safe as a doc id."""
    return quote(f"{source}:{external_order_id}", safe=":")
