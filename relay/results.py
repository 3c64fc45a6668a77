"""Terminal outcomes of a relay invocation and their client-facing rendering."""

import json
from dataclasses import dataclass
from typing import Any, Dict, Union

from fastapi import status

FAILURE_MESSAGE = "Failed to process the order or communicate with Coinbase."


@dataclass(frozen=True)
class Success:
    status_code: int
    body: Any
    category = "success"

    def http_status(self) -> int:
        return status.HTTP_200_OK

    def to_response(self) -> Dict[str, Any]:
        return {"status": "Order sent", "data": self.body}


@dataclass(frozen=True)
class BadRequest:
    reason: str
    category = "bad_request"

    def http_status(self) -> int:
        return status.HTTP_400_BAD_REQUEST

    def to_response(self) -> Dict[str, Any]:
        return {"error": self.reason, "category": self.category}


@dataclass(frozen=True)
class RemoteRejected:
    status_code: int
    body: Any
    category = "remote_rejected"

    def http_status(self) -> int:
        return status.HTTP_500_INTERNAL_SERVER_ERROR

    def to_response(self) -> Dict[str, Any]:
        body = self.body if isinstance(self.body, str) else json.dumps(self.body)
        return {
            "error": FAILURE_MESSAGE,
            "category": self.category,
            "details": f"Coinbase API error ({self.status_code}): {body}",
        }


@dataclass(frozen=True)
class NoResponse:
    cause: str
    category = "no_response"

    def http_status(self) -> int:
        return status.HTTP_500_INTERNAL_SERVER_ERROR

    def to_response(self) -> Dict[str, Any]:
        return {
            "error": FAILURE_MESSAGE,
            "category": self.category,
            "details": "Could not reach the Coinbase API or the request timed out.",
        }


@dataclass(frozen=True)
class LocalError:
    """A failure before dispatch. ``category`` is ``configuration`` or ``local``."""
    cause: str
    category: str = "local"

    def http_status(self) -> int:
        return status.HTTP_500_INTERNAL_SERVER_ERROR

    def to_response(self) -> Dict[str, Any]:
        prefix = "Configuration error" if self.category == "configuration" else "Internal server error"
        return {
            "error": FAILURE_MESSAGE,
            "category": self.category,
            "details": f"{prefix}: {self.cause}",
        }


RelayResult = Union[Success, BadRequest, RemoteRejected, NoResponse, LocalError]
