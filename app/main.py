"""Main FastAPI application."""
import asyncio
import contextlib
import logging
from fastapi import FastAPI
from contextlib import asynccontextmanager

from app.core.config import settings
from app.core.dependencies import get_outbox_reconciler
from app.core.logging import setup_logging
from app.db.database import init_db
from app.api import admin, health
from app.api.webhooks import aggregator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    setup_logging()
    if settings.store_backend == "sql":
        await init_db()
    if not settings.aggregator_webhook_secret:
        logger.warning("AGGREGATOR_WEBHOOK_SECRET is not set, webhook secret check is disabled")

    reconcile_task = None
    if settings.outbox_reconcile_interval_seconds > 0:
        reconciler = get_outbox_reconciler()
        reconcile_task = asyncio.create_task(
            reconciler.run_forever(settings.outbox_reconcile_interval_seconds)
        )
    yield
    # Shutdown
    if reconcile_task is not None:
        reconcile_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await reconcile_task


app = FastAPI(
    title="Aggregator Order Intake",
    description="Order intake webhook for third-party ordering aggregators",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(health.router, tags=["health"])
app.include_router(aggregator.router, prefix="/webhooks", tags=["webhooks"])
app.include_router(admin.router, tags=["admin"])
