"""Ingestion stage enumeration."""
from enum import Enum


class IngestionStage(str, Enum):
    """Stages of a single webhook ingestion request."""

    AUTHENTICATING = "authenticating"  # Shared-secret check
    VALIDATING = "validating"  # Body shape and restaurant lookup
    NORMALIZING = "normalizing"  # External items to canonical items
    PRICING = "pricing"  # Subtotal and total
    PERSISTING = "persisting"  # Outbox, idempotency claim, order + ticket writes
    RESPONDING = "responding"  # Order id handed back to the aggregator
    FAILED = "failed"  # Terminal, reachable from any stage

    def __str__(self) -> str:
        """Return the string value of the stage."""
        return self.value
