"""Aggregator order ingestion."""
import asyncio
import json
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Mapping, Optional
from pydantic import BaseModel

from app.core.errors import IngestionError, Internal, InvalidArgument, NotFound, as_ingestion_error
from app.services.access.gate import WEBHOOK_SECRET_HEADER, require_webhook_secret
from app.services.ingestion.coercion import coerce_bool, coerce_number, coerce_str, first_of
from app.services.ingestion.models import KdsTicket, Order
from app.services.ingestion.normalizer import normalize_items
from app.services.ingestion.paths import (
    ORDERS,
    OUTBOX,
    RESTAURANTS,
    idempotency_key,
    ingestion_keys_collection,
    kds_orders_collection,
)
from app.services.ingestion.pricing import calculate_totals
from app.services.ingestion.projector import build_kds_ticket
from app.services.ingestion.stages import IngestionStage
from app.services.store.base import DocumentExistsError, DocumentStore

logger = logging.getLogger(__name__)

SOURCE_HEADER = "x-aggregator-source"
WEBHOOK_EMPLOYEE_ID = "aggregator_webhook"


class IngestionResult(BaseModel):
    """Outcome of a successful ingestion."""

    order_id: str
    duplicate: bool = False


def parse_payload(body: bytes) -> Dict[str, Any]:
    """Decode a webhook body. An empty body is an empty payload."""
    if not body or not body.strip():
        return {}
    try:
        payload = json.loads(body)
    except (ValueError, UnicodeDecodeError) as e:
        raise InvalidArgument(f"Request body is not valid JSON: {e}") from e
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise InvalidArgument("Request body must be a JSON object.")
    return payload


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class OrderIngestionService:
    """
    Turns an aggregator webhook delivery into an order and a kitchen ticket.

    The service holds no per-request state; the document store is the only
    shared resource.
    """

    def __init__(
        self,
        store: DocumentStore,
        webhook_secret: Optional[str] = None,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
        clock: Callable[[], str] = utc_now_iso,
    ):
        self.store = store
        self.webhook_secret = webhook_secret
        self.id_factory = id_factory
        self.clock = clock

    async def handle(self, body: bytes, headers: Mapping[str, str]) -> IngestionResult:
        """
        Authenticate and decode a raw webhook delivery, then ingest it.

        Args:
            body: Raw request body
            headers: Request headers (case-insensitive mapping for real requests)

        Returns:
            IngestionResult with the created (or original) order id
        """
        stage = IngestionStage.AUTHENTICATING
        try:
            require_webhook_secret(headers.get(WEBHOOK_SECRET_HEADER), self.webhook_secret)
            stage = IngestionStage.VALIDATING
            payload = parse_payload(body)
        except IngestionError as e:
            self._log_failure(stage, e)
            raise

        return await self.ingest(payload, source_header=headers.get(SOURCE_HEADER))

    async def ingest(self, payload: Mapping[str, Any], source_header: Optional[str] = None) -> IngestionResult:
        """Validate, normalize, price and persist a decoded webhook payload."""
        stage = IngestionStage.VALIDATING
        try:
            restaurant_id = coerce_str(first_of(payload, "restaurantId", "restaurant_id"), "")
            if not restaurant_id:
                raise InvalidArgument("restaurantId is required in payload.")
            if "/" in restaurant_id:
                raise InvalidArgument("restaurantId must not contain '/'.")

            if await self.store.get(RESTAURANTS, restaurant_id) is None:
                raise NotFound("Restaurant not found.")

            stage = IngestionStage.NORMALIZING
            items = normalize_items(payload.get("items"))

            stage = IngestionStage.PRICING
            totals = calculate_totals(
                items,
                tax_amount=first_of(payload, "tax_amount", "taxAmount"),
                discount_amount=first_of(payload, "discount_amount", "discountAmount"),
            )

            order_id = self.id_factory()
            source = coerce_str(first_of(payload, "source", default=source_header), "aggregator").lower()
            external_order_id = first_of(payload, "externalOrderId", "external_order_id")
            dedup_key = idempotency_key(source, str(external_order_id)) if external_order_id else None

            order = Order(
                id=order_id,
                restaurant_id=restaurant_id,
                employee_id=WEBHOOK_EMPLOYEE_ID,
                type=coerce_str(first_of(payload, "orderType", "order_type"), "delivery"),
                payment_method=coerce_str(first_of(payload, "payment_method", "paymentMethod"), "cash"),
                status=coerce_str(payload.get("status"), "pending"),
                items=items,
                subtotal=totals.subtotal,
                tax_amount=totals.tax_amount,
                discount_amount=totals.discount_amount,
                total=totals.total,
                discount_id=payload.get("discount_id"),
                discount_name=payload.get("discount_name"),
                fbr_invoice_number=payload.get("fbr_invoice_number"),
                customer_name=first_of(payload, "customer_name", "customerName"),
                customer_phone=first_of(payload, "customer_phone", "customerPhone"),
                source=source,
                external_payload=payload.get("external_payload"),
                idempotency_key=dedup_key,
                created_at=self.clock(),
            )
            ticket = build_kds_ticket(
                order,
                order_number=coerce_str(first_of(payload, "orderNumber", "order_number"), order_id[:8].upper()),
                table_number=first_of(payload, "table_number", "tableNumber"),
                special_instructions=first_of(payload, "special_instructions", "specialInstructions"),
                priority=coerce_str(payload.get("priority"), "normal"),
                is_on_hold=coerce_bool(first_of(payload, "is_on_hold", "isOnHold"), False),
                estimated_prep_minutes=coerce_number(
                    first_of(payload, "estimated_prep_minutes", "estimatedPrepMinutes"), 15
                ),
            )

            stage = IngestionStage.PERSISTING
            result = await self._persist(order, ticket)

            stage = IngestionStage.RESPONDING
            logger.info(
                f"[INGESTION] Order {'deduplicated' if result.duplicate else 'created'} - "
                f"order_id: {result.order_id}, restaurant_id: {restaurant_id}, source: {source}, "
                f"items: {len(items)}, total: {totals.total}"
            )
            return result

        except Exception as e:
            error = as_ingestion_error(e)
            self._log_failure(stage, error)
            if error is e:
                raise
            raise error from e

    async def _persist(self, order: Order, ticket: KdsTicket) -> IngestionResult:
        """
        Write the order and its ticket.

        An outbox record holding both documents is written first and cleared
        last, so a partial write is rolled forward by the outbox reconciler
        instead of being left as an orphan.
        """
        order_doc = order.model_dump()
        ticket_doc = ticket.model_dump()
        await self.store.create(
            OUTBOX,
            order.id,
            {"order": order_doc, "ticket": ticket_doc, "created_at": order.created_at},
        )

        if order.idempotency_key:
            keys_collection = ingestion_keys_collection(order.restaurant_id)
            try:
                await self.store.create(
                    keys_collection,
                    order.idempotency_key,
                    {"order_id": order.id, "created_at": order.created_at},
                )
            except DocumentExistsError:
                await self.store.delete(OUTBOX, order.id)
                claim = await self.store.get(keys_collection, order.idempotency_key) or {}
                original_id = claim.get("order_id")
                if not original_id:
                    raise Internal(f"Idempotency key {order.idempotency_key} has no order id.")
                logger.info(
                    f"[INGESTION] Duplicate delivery - key: {order.idempotency_key}, "
                    f"original order_id: {original_id}"
                )
                return IngestionResult(order_id=original_id, duplicate=True)
            except Exception:
                await self.store.delete(OUTBOX, order.id)
                raise

        results = await asyncio.gather(
            self.store.set(ORDERS, order.id, order_doc),
            self.store.set(kds_orders_collection(order.restaurant_id), order.id, ticket_doc),
            return_exceptions=True,
        )
        failures = [r for r in results if isinstance(r, BaseException)]
        if failures:
            logger.error(
                f"[INGESTION] Order/ticket write failed, left in outbox - order_id: {order.id}, "
                f"order write: {'failed' if isinstance(results[0], BaseException) else 'ok'}, "
                f"ticket write: {'failed' if isinstance(results[1], BaseException) else 'ok'}"
            )
            raise failures[0]

        await self.store.delete(OUTBOX, order.id)
        return IngestionResult(order_id=order.id)

    def _log_failure(self, stage: IngestionStage, error: IngestionError) -> None:
        internal = isinstance(error, Internal)
        logger.log(
            logging.ERROR if internal else logging.WARNING,
            f"[INGESTION] {IngestionStage.FAILED} during {stage} - "
            f"{error.kind}: {error.message}",
            exc_info=internal,
        )
