import os
import sys

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

sys.path.append(os.path.dirname(os.path.dirname(__file__)))

# Keep the process settings independent of the developer's shell and .env
os.environ.setdefault("SIGNING_SCHEME", "jwt")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

ORDERS_PATH = "/api/v3/brokerage/orders"


def pem_for(key) -> str:
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()


@pytest.fixture
def ec_key():
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture
def ec_pem(ec_key):
    return pem_for(ec_key)
