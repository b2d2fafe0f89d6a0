"""Outbox reconciler for partially written orders."""
import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable

from app.services.ingestion.paths import ORDERS, OUTBOX, kds_orders_collection
from app.services.store.base import DocumentStore

logger = logging.getLogger(__name__)


class OutboxReconciler:
    """
    Completes order/ticket pairs whose write did not finish.

    The ingestion handler leaves an outbox record behind when either write
    fails. Re-writing both documents is a full-document set of the same
    content, so a pass may safely repeat work that already succeeded.
    """

    def __init__(
        self,
        store: DocumentStore,
        grace_seconds: float = 30.0,
        now: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.store = store
        self.grace = timedelta(seconds=grace_seconds)
        self.now = now

    def _is_due(self, record: dict) -> bool:
        created_at = record.get("created_at")
        if not created_at:
            return True
        try:
            created = datetime.fromisoformat(str(created_at).replace("Z", "+00:00"))
        except ValueError:
            return True
        if created.tzinfo is None:
            created = created.replace(tzinfo=timezone.utc)
        return self.now() - created >= self.grace

    async def run_once(self) -> int:
        """Reconcile every due outbox record. Returns the number completed."""
        records = await self.store.list(OUTBOX)
        reconciled = 0
        for order_id, record in records:
            if not self._is_due(record):
                continue

            order_doc = record.get("order")
            ticket_doc = record.get("ticket")
            if not order_doc or not ticket_doc:
                logger.error(f"[OUTBOX] Malformed outbox record, skipping - order_id: {order_id}")
                continue

            try:
                await asyncio.gather(
                    self.store.set(ORDERS, order_id, order_doc),
                    self.store.set(kds_orders_collection(order_doc["restaurant_id"]), order_id, ticket_doc),
                )
                await self.store.delete(OUTBOX, order_id)
            except Exception as e:
                logger.error(
                    f"[OUTBOX] Failed to reconcile order - order_id: {order_id}, "
                    f"Error: {type(e).__name__}: {str(e)}",
                    exc_info=True,
                )
                continue

            reconciled += 1
            logger.info(f"[OUTBOX] Reconciled order and ticket - order_id: {order_id}")

        if reconciled:
            logger.info(f"[OUTBOX] Reconciliation pass complete - {reconciled} of {len(records)} records")
        return reconciled

    async def run_forever(self, interval_seconds: float) -> None:
        """Run reconciliation passes until cancelled."""
        while True:
            try:
                await self.run_once()
            except Exception as e:
                logger.error(
                    f"[OUTBOX] Reconciliation pass failed - Error: {type(e).__name__}: {str(e)}",
                    exc_info=True,
                )
            await asyncio.sleep(interval_seconds)
