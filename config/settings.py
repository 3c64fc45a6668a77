"""
Relay configuration loaded from .env using Pydantic v2 settings model.
"""

from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Coinbase rejects JWTs whose lifetime falls outside this window
MIN_JWT_TTL = 60
MAX_JWT_TTL = 180


class Settings(BaseSettings):
    """
    Settings loaded from environment variables or .env file.

    Secrets default to empty strings so the service can start without them;
    a request that needs a missing secret fails with a configuration error.

    Fields:
        SIGNING_SCHEME (str): ``"jwt"`` (ES256 bearer token) or ``"hmac"``
            (CB-ACCESS-* signature headers).
        JWT_SUBJECT (str): ``"body_hash"`` puts the SHA256 of the request in
            the ``sub`` claim, ``"key_id"`` puts the key id there. Pick one per
            deployment; the remote verifier must agree.
        JWT_TTL (int): Seconds between ``nbf`` and ``exp`` (60-180).
        API_KEY_ID (str): Key id used as JWT issuer.
        PRIVATE_KEY (str): PEM encoded EC private key. Literal ``\\n``
            sequences are turned into real line breaks.
        API_KEY (str): API key sent in ``CB-ACCESS-KEY``.
        API_SECRET (str): Shared secret for HMAC signing.
        COINBASE_API_URL (str): Base URL of the brokerage API.
        ORDERS_PATH (str): Path of the order creation endpoint.
        OUTBOUND_TIMEOUT (float): Seconds to wait for the brokerage.
        LOG_LEVEL (str): Logging verbosity (DEBUG, INFO, etc.).
        PORT (int): Port the HTTP listener binds to.
    """
    SIGNING_SCHEME: Literal["jwt", "hmac"] = "jwt"
    JWT_SUBJECT: Literal["body_hash", "key_id"] = "body_hash"
    JWT_TTL: int = MIN_JWT_TTL
    API_KEY_ID: str = ""
    PRIVATE_KEY: str = ""
    API_KEY: str = ""
    API_SECRET: str = ""
    COINBASE_API_URL: str = "https://api.coinbase.com"
    ORDERS_PATH: str = "/api/v3/brokerage/orders"
    OUTBOUND_TIMEOUT: float = 30.0
    LOG_LEVEL: str = "INFO"
    PORT: int = 3000

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        frozen=True,
    )

    @field_validator("PRIVATE_KEY")
    @classmethod
    def _normalize_newlines(cls, value: str) -> str:
        return value.replace("\\n", "\n").strip()

    @field_validator("JWT_TTL")
    @classmethod
    def _check_ttl(cls, value: int) -> int:
        if not MIN_JWT_TTL <= value <= MAX_JWT_TTL:
            raise ValueError(f"JWT_TTL must be between {MIN_JWT_TTL} and {MAX_JWT_TTL} seconds")
        return value


# Global settings instance
settings = Settings()
