"""HTTP route handlers exposing the order relay endpoint."""

import json
import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from relay.handler import EMPTY_PAYLOAD_MESSAGE, RelayHandler
from relay.metrics import record_outcome
from relay.results import BadRequest

router = APIRouter()
logger = logging.getLogger("relay_logger")


def get_handler(request: Request) -> RelayHandler:
    return request.app.state.relay_handler


@router.post("/webhook")
@router.post("/order")
async def webhook(request: Request) -> JSONResponse:
    """Relay the posted order to Coinbase and report the outcome.

    The raw body is parsed here rather than through a pydantic model so that
    every field the sender provides is forwarded untouched.

    Parameters
    ----------
    request: Request
        Incoming FastAPI request carrying the order as JSON.

    Returns
    -------
    JSONResponse
        ``{"status", "data"}`` on success, ``{"error", "category", "details"}``
        otherwise.
    """
    raw = await request.body()
    try:
        payload = json.loads(raw) if raw else None
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        logger.warning(f"Inbound body is not valid JSON: {exc}")
        result = BadRequest(reason=EMPTY_PAYLOAD_MESSAGE)
        record_outcome(result.category)
        return JSONResponse(result.to_response(), status_code=result.http_status())

    result = await get_handler(request).relay(payload)
    return JSONResponse(result.to_response(), status_code=result.http_status())
