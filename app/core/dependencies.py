"""FastAPI dependencies."""
from functools import lru_cache

from app.core.config import settings
from app.db.database import AsyncSessionLocal
from app.services.access.gate import AccessGate, StoreAccessGate
from app.services.ingestion.handler import OrderIngestionService
from app.services.ingestion.reconciler import OutboxReconciler
from app.services.store.base import DocumentStore
from app.services.store.in_memory_store import InMemoryDocumentStore
from app.services.store.sql_store import SqlDocumentStore


@lru_cache(maxsize=1)
def get_document_store() -> DocumentStore:
    """Get the process-wide document store for the configured backend."""
    if settings.store_backend == "memory":
        return InMemoryDocumentStore(seed_file=settings.store_seed_file)
    if settings.store_backend == "sql":
        return SqlDocumentStore(AsyncSessionLocal)
    raise ValueError(f"Unknown store backend: {settings.store_backend}")


def get_ingestion_service() -> OrderIngestionService:
    """Get order ingestion service instance."""
    return OrderIngestionService(
        store=get_document_store(),
        webhook_secret=settings.aggregator_webhook_secret,
    )


def get_access_gate() -> AccessGate:
    """Get access gate instance."""
    return StoreAccessGate(get_document_store())


def get_outbox_reconciler() -> OutboxReconciler:
    """Get outbox reconciler instance."""
    return OutboxReconciler(get_document_store(), grace_seconds=settings.outbox_grace_seconds)
