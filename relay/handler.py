"""Relay state machine: validate, sign, dispatch once, classify.

One call to ``RelayHandler.relay`` walks
``Received -> Validated -> Signed -> Dispatched`` and ends in exactly one
``RelayResult``. Nothing is retried and no state is shared between calls.
"""

import logging
from typing import Any, Mapping

from config.settings import Settings
from relay.client import BrokerageClient, HttpError, Ok, TransportError
from relay.errors import CanonicalizationError, ConfigurationError
from relay.metrics import record_outcome
from relay.results import (
    BadRequest,
    LocalError,
    NoResponse,
    RelayResult,
    RemoteRejected,
    Success,
)
from relay.signer import Signer

logger = logging.getLogger("relay_logger")

ORDER_METHOD = "POST"
EMPTY_PAYLOAD_MESSAGE = (
    "Request body is empty or invalid. Configure the sender to post order details as a JSON object."
)


class RelayHandler:
    """Forwards one order payload per call to the brokerage orders endpoint."""

    def __init__(self, config: Settings, signer: Signer, client: BrokerageClient):
        self.path = config.ORDERS_PATH
        self.signer = signer
        self.client = client

    @classmethod
    def from_settings(cls, config: Settings, transport=None) -> "RelayHandler":
        """Build the signer and client from ``config``.

        Args:
            config: Settings loaded at process start.
            transport: Optional httpx transport handed to the client.
        """
        client = BrokerageClient(
            config.COINBASE_API_URL,
            timeout=config.OUTBOUND_TIMEOUT,
            transport=transport,
        )
        return cls(config, Signer(config), client)

    async def relay(self, payload: Any) -> RelayResult:
        result = await self._relay(payload)
        record_outcome(result.category)
        return result

    async def _relay(self, payload: Any) -> RelayResult:
        logger.info(f"Webhook received with order details: {payload}")

        if not isinstance(payload, Mapping) or not payload:
            logger.error("Inbound payload is empty or not a JSON object")
            return BadRequest(reason=EMPTY_PAYLOAD_MESSAGE)

        try:
            credential = self.signer.sign(ORDER_METHOD, self.path, dict(payload))
        except ConfigurationError as exc:
            logger.error(f"Signing configuration error: {exc}")
            return LocalError(cause=str(exc), category="configuration")
        except CanonicalizationError as exc:
            logger.warning(f"Inbound payload cannot be serialized: {exc}")
            return BadRequest(reason=f"Request body cannot be encoded as JSON: {exc}")
        except Exception as exc:
            logger.exception("Failed to prepare the outbound request")
            return LocalError(cause=str(exc))

        logger.info(f"Request signed with {self.signer.scheme.value}")

        outcome = await self.client.post(self.path, credential.content, credential.headers())

        if isinstance(outcome, Ok):
            logger.info(f"Coinbase accepted the order: {outcome.body}")
            return Success(status_code=outcome.status_code, body=outcome.body)
        if isinstance(outcome, HttpError):
            logger.error(f"Coinbase API error: {outcome.status_code} {outcome.body}")
            return RemoteRejected(status_code=outcome.status_code, body=outcome.body)
        if isinstance(outcome, TransportError):
            logger.error(f"No response from Coinbase: {outcome.cause}")
            return NoResponse(cause=outcome.cause)
        raise TypeError(f"Unexpected outbound result: {outcome!r}")
