"""Shared test fixtures and configuration."""
import pytest
import os
from itertools import count
from pathlib import Path
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

# Set test environment variables before importing app
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("OUTBOX_RECONCILE_INTERVAL_SECONDS", "0")

from app.main import app
from app.db.models import Base
from app.core.config import Settings
from app.core.dependencies import get_access_gate, get_ingestion_service, get_outbox_reconciler
from app.services.access.gate import StoreAccessGate
from app.services.ingestion.handler import OrderIngestionService
from app.services.ingestion.reconciler import OutboxReconciler
from app.services.store.in_memory_store import InMemoryDocumentStore
from app.services.store.sql_store import SqlDocumentStore

TEST_WEBHOOK_SECRET = "test-webhook-secret"
FIXED_CREATED_AT = "2026-01-15T12:00:00+00:00"


class FailingDocumentStore(InMemoryDocumentStore):
    """In-memory store whose ``set`` or ``create`` fails for selected collections."""

    def __init__(self, seed_file=None, fail_collections=(), fail_create_collections=()):
        super().__init__(seed_file=seed_file)
        self.fail_collections = set(fail_collections)
        self.fail_create_collections = set(fail_create_collections)
        self.set_calls = []

    @staticmethod
    def _matches(collection, names):
        return any(collection == c or collection.endswith(f"/{c}") for c in names)

    async def set(self, collection, doc_id, data):
        self.set_calls.append(collection)
        if self._matches(collection, self.fail_collections):
            raise RuntimeError(f"store unavailable for {collection}")
        await super().set(collection, doc_id, data)

    async def create(self, collection, doc_id, data):
        if self._matches(collection, self.fail_create_collections):
            raise RuntimeError(f"store unavailable for {collection}")
        await super().create(collection, doc_id, data)


@pytest.fixture
def test_settings():
    """Override settings for testing."""
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        store_backend="memory",
        aggregator_webhook_secret=TEST_WEBHOOK_SECRET,
        outbox_reconcile_interval_seconds=0,
        outbox_grace_seconds=0,
    )


@pytest.fixture
def test_store_path():
    """Return path to the test store seed YAML file."""
    return Path(__file__).parent / "fixtures" / "test_store.yaml"


@pytest.fixture
def memory_store(test_store_path):
    """In-memory document store seeded with restaurants R1, R2 and two users."""
    return InMemoryDocumentStore(seed_file=str(test_store_path))


@pytest.fixture
def failing_store(test_store_path):
    """Factory for a seeded store whose writes fail for the given collections."""
    def _make(*fail_collections, fail_create=()):
        return FailingDocumentStore(
            seed_file=str(test_store_path),
            fail_collections=fail_collections,
            fail_create_collections=fail_create,
        )
    return _make


@pytest.fixture
def sequential_ids():
    """Deterministic order id factory: order-0001, order-0002, ..."""
    counter = count(1)
    return lambda: f"order-{next(counter):04d}-aaaa-bbbb"


@pytest.fixture
def ingestion_service(memory_store):
    """Ingestion service without a webhook secret."""
    return OrderIngestionService(store=memory_store, clock=lambda: FIXED_CREATED_AT)


@pytest.fixture
async def sql_store(tmp_path):
    """SQL document store on a temporary SQLite file."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'documents.db'}")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield SqlDocumentStore(async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False))

    await engine.dispose()


@pytest.fixture
def test_client(memory_store):
    """Create FastAPI test client backed by the in-memory store, no webhook secret."""
    app.dependency_overrides[get_ingestion_service] = lambda: OrderIngestionService(store=memory_store)
    app.dependency_overrides[get_access_gate] = lambda: StoreAccessGate(memory_store)
    app.dependency_overrides[get_outbox_reconciler] = lambda: OutboxReconciler(memory_store, grace_seconds=0)

    client = TestClient(app)

    yield client

    # Clear overrides
    app.dependency_overrides.clear()


@pytest.fixture
def secured_client(test_client, memory_store, test_settings):
    """Test client whose webhook requires the shared secret."""
    app.dependency_overrides[get_ingestion_service] = lambda: OrderIngestionService(
        store=memory_store,
        webhook_secret=test_settings.aggregator_webhook_secret,
    )
    return test_client
