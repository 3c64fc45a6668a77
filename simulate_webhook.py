"""Utility script that sends a test order to the relay.

This module can be run directly to simulate how an automation tool such as
Make.com would call the ``/webhook`` endpoint. The order is a small market buy
with a fresh client order id so that repeated runs are not deduplicated.
"""

import json
import sys
import time
import uuid
from typing import Dict, Optional

import requests

from relay.utils import setup_logger

logger = setup_logger("simulate_webhook")

# Target endpoint of the locally running relay
URL = "http://127.0.0.1:3000/webhook"

# Static headers for JSON payloads
HEADERS = {"Content-Type": "application/json"}


def build_payload(product_id: str = "BTC-USD", side: str = "BUY", quote_size: str = "10") -> Dict[str, object]:
    """Return a market order in the Advanced Trade request format."""
    return {
        "client_order_id": str(uuid.uuid4()),
        "product_id": product_id,
        "side": side,
        "order_configuration": {
            "market_market_ioc": {"quote_size": quote_size},
        },
    }


def send_test_webhook(url: str = URL, payload: Optional[Dict[str, object]] = None) -> requests.Response:
    """Send an order to ``url`` and return the response.

    Args:
        url (str): Address of the webhook endpoint.
        payload (dict, optional): Order to send. Defaults to ``build_payload()``.

    Returns:
        requests.Response: HTTP response from the server.
    """
    payload = payload if payload is not None else build_payload()

    start = time.monotonic()
    response = requests.post(url, data=json.dumps(payload), headers=HEADERS, timeout=70)
    end = time.monotonic()

    logger.info("Status Code: %s", response.status_code)
    logger.info("Response Time: %.4f seconds", end - start)
    logger.info("Response Body: %s", response.text)

    return response


if __name__ == "__main__":
    send_test_webhook(sys.argv[1] if len(sys.argv) > 1 else URL)
