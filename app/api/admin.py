"""Privileged maintenance endpoints."""
import logging
from fastapi import APIRouter, Request, Depends
from fastapi.responses import JSONResponse

from app.core.dependencies import get_access_gate, get_outbox_reconciler
from app.core.errors import IngestionError, as_ingestion_error
from app.services.access.gate import CALLER_UID_HEADER, SUPER_ADMIN_ROLE, AccessGate, require_role
from app.services.ingestion.reconciler import OutboxReconciler

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/api/admin/outbox/reconcile")
async def reconcile_outbox(
    request: Request,
    access_gate: AccessGate = Depends(get_access_gate),
    reconciler: OutboxReconciler = Depends(get_outbox_reconciler),
):
    """
    Run one outbox reconciliation pass on demand.

    The caller uid is set by the identity proxy in front of the service.
    """
    caller_uid = request.headers.get(CALLER_UID_HEADER)
    try:
        await require_role(access_gate, caller_uid, SUPER_ADMIN_ROLE)
        reconciled = await reconciler.run_once()
    except Exception as e:
        error = as_ingestion_error(e)
        logger.error(
            f"[ADMIN RECONCILE] Request failed - caller: {caller_uid}, "
            f"{error.kind}: {error.message}",
            exc_info=not isinstance(e, IngestionError),
        )
        return JSONResponse(status_code=error.status_code, content=error.to_response())

    logger.info(f"[ADMIN RECONCILE] Pass complete - caller: {caller_uid}, reconciled: {reconciled}")
    return {"ok": True, "reconciled": reconciled}
