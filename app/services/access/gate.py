"""Access checks for the webhook and privileged endpoints."""
import hmac
import logging
from abc import ABC, abstractmethod
from typing import Optional

from app.core.errors import PermissionDenied, Unauthenticated
from app.services.store.base import DocumentStore

logger = logging.getLogger(__name__)

WEBHOOK_SECRET_HEADER = "x-webhook-secret"
CALLER_UID_HEADER = "x-caller-uid"
SUPER_ADMIN_ROLE = "super_admin"
USERS = "users"


def require_webhook_secret(provided: Optional[str], configured: Optional[str]) -> None:
    """
    Check the shared webhook secret.

    When no secret is configured for the deployment the check is disabled.
    """
    if not configured:
        return
    if not provided or not hmac.compare_digest(provided.encode(), configured.encode()):
        raise PermissionDenied("Invalid webhook secret.")


class AccessGate(ABC):
    """Resolves a caller identity to a role. Backed by an external identity service."""

    @abstractmethod
    async def resolve_role(self, caller_uid: str) -> Optional[str]:
        """Return the caller's role name, or None if the caller has no profile."""
        pass


class StoreAccessGate(AccessGate):
    """Reads ``role_name`` from the caller's profile in the ``users`` collection."""

    def __init__(self, store: DocumentStore):
        self.store = store

    async def resolve_role(self, caller_uid: str) -> Optional[str]:
        if "/" in caller_uid:
            return None
        profile = await self.store.get(USERS, caller_uid)
        if profile is None:
            return None
        return profile.get("role_name")


async def require_role(gate: AccessGate, caller_uid: Optional[str], role: str) -> None:
    """Raise unless the caller is identified and holds ``role``."""
    if not caller_uid:
        raise Unauthenticated("Authentication required.")

    resolved = await gate.resolve_role(caller_uid)
    if resolved is None:
        raise PermissionDenied("User profile missing.")
    if resolved != role:
        logger.warning(f"[ACCESS] Caller {caller_uid} has role '{resolved}', '{role}' required")
        raise PermissionDenied(f"{role} privileges required.")
