"""Outbound HTTP client for the brokerage API.

``BrokerageClient.post`` never raises for network or HTTP failures. It returns
one of ``Ok``, ``HttpError`` or ``TransportError`` so callers classify the
outcome by type instead of inspecting exceptions.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

import httpx

logger = logging.getLogger("relay_logger")


@dataclass(frozen=True)
class Ok:
    status_code: int
    body: Any


@dataclass(frozen=True)
class HttpError:
    status_code: int
    body: Any


@dataclass(frozen=True)
class TransportError:
    cause: str


OutboundResult = Union[Ok, HttpError, TransportError]


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return response.text


class BrokerageClient:
    """Issues single, unretried POST requests against the brokerage API.

    One ``httpx.AsyncClient`` is opened on first use and reused so that
    connections to the API are pooled. ``aclose`` releases it at shutdown.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Create a client.

        Args:
            base_url: Scheme and host of the API, e.g. ``https://api.coinbase.com``.
            timeout: Seconds allowed for connect, write and read.
            transport: Optional httpx transport, used by tests to stub the API.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._session: Optional[httpx.AsyncClient] = None

    def url_for(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def session(self) -> httpx.AsyncClient:
        """Return the shared ``httpx.AsyncClient``, opening it if needed."""
        if self._session is None or self._session.is_closed:
            self._session = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)
        return self._session

    async def aclose(self) -> None:
        if self._session is not None:
            await self._session.aclose()
            self._session = None

    async def post(self, path: str, content: bytes, headers: Dict[str, str]) -> OutboundResult:
        """Send ``content`` verbatim to ``path``.

        Returns:
            OutboundResult: ``Ok`` for 2xx, ``HttpError`` for any other
            status, ``TransportError`` when no usable response was received.
        """
        url = self.url_for(path)
        try:
            response = await self.session().post(url, content=content, headers=headers)
        except httpx.TimeoutException as exc:
            logger.warning(f"Timed out waiting for {url}: {exc!r}")
            return TransportError(cause=f"timeout: {exc}")
        except httpx.TransportError as exc:
            logger.warning(f"No response from {url}: {exc!r}")
            return TransportError(cause=f"network: {exc}")
        except httpx.RequestError as exc:
            # Undecodable bodies, redirect loops and other request-level failures
            logger.warning(f"Unusable response from {url}: {exc!r}")
            return TransportError(cause=f"network: {exc}")

        body = _decode_body(response)
        if response.is_success:
            return Ok(status_code=response.status_code, body=body)
        return HttpError(status_code=response.status_code, body=body)
