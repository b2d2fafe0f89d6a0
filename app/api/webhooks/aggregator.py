"""Aggregator order webhook endpoint."""
import logging
from fastapi import APIRouter, Request, Depends
from fastapi.responses import JSONResponse, PlainTextResponse

from app.core.dependencies import get_ingestion_service
from app.core.errors import IngestionError
from app.services.ingestion.handler import OrderIngestionService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.api_route("/aggregator", methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"])
async def handle_aggregator_order(
    request: Request,
    ingestion_service: OrderIngestionService = Depends(get_ingestion_service),
):
    """
    Accept an order pushed by a third-party aggregator.

    Only POST is accepted. Everything else is answered with a plain-text 405
    before any other check runs.
    """
    client = request.client.host if request.client else "unknown"
    if request.method != "POST":
        logger.warning(f"[AGGREGATOR WEBHOOK] Rejected {request.method} request - Client: {client}")
        return PlainTextResponse("Method Not Allowed", status_code=405)

    logger.info(f"[AGGREGATOR WEBHOOK] Delivery received - Client: {client}")

    try:
        body = await request.body()
        result = await ingestion_service.handle(body, request.headers)
    except IngestionError as e:
        return JSONResponse(status_code=e.status_code, content=e.to_response())

    content = {"ok": True, "orderId": result.order_id}
    if result.duplicate:
        content["duplicate"] = True
    return JSONResponse(status_code=200, content=content)
