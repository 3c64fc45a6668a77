"""
Request signing for the Coinbase brokerage API.

Supports:
- ES256 bearer tokens (JWT) whose ``sub`` claim is either the SHA256 of
  method + path + canonical body, or the API key id
- HMAC SHA256 signatures sent as ``CB-ACCESS-*`` headers

Every credential carries the exact body bytes that were signed. The relay
sends those bytes as-is, so the signed request and the transmitted request
cannot drift apart.
"""

import base64
import hashlib
import hmac
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Optional, Union

import jwt
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from config.settings import MAX_JWT_TTL, MIN_JWT_TTL, Settings
from relay.canonical import JsonValue, canonicalize, dumps_raw
from relay.errors import ConfigurationError

logger = logging.getLogger("relay_logger")

JWT_ALGORITHM = "ES256"
JWT_AUDIENCE = "coinbase"


class SigningScheme(str, Enum):
    JWT_ES256 = "jwt"
    HMAC_SHA256 = "hmac"


class JwtSubject(str, Enum):
    """Which value goes into the JWT ``sub`` claim.

    The two variants are different contracts with the verifier and must not
    be mixed within one deployment.
    """
    BODY_HASH = "body_hash"
    KEY_ID = "key_id"


@dataclass(frozen=True)
class SigningRequest:
    """The method, path and body of one outbound call, stamped at ``issued_at``."""
    method: str
    path: str
    body: Optional[JsonValue] = None
    issued_at: int = 0

    @property
    def has_body(self) -> bool:
        if self.body is None:
            return False
        if isinstance(self.body, (dict, list, tuple)):
            return len(self.body) > 0
        return True


@dataclass(frozen=True)
class KeyMaterial:
    key_id: str = ""
    private_key: str = field(default="", repr=False)
    api_key: str = ""
    api_secret: str = field(default="", repr=False)

    @classmethod
    def from_settings(cls, config: Settings) -> "KeyMaterial":
        return cls(
            key_id=config.API_KEY_ID,
            private_key=config.PRIVATE_KEY,
            api_key=config.API_KEY,
            api_secret=config.API_SECRET,
        )


@dataclass(frozen=True)
class BearerCredential:
    token: str = field(repr=False)
    content: bytes

    def headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token}",
            "Content-Type": "application/json",
        }


@dataclass(frozen=True)
class HmacCredential:
    api_key: str
    signature: str = field(repr=False)
    timestamp: int
    content: bytes

    def headers(self) -> Dict[str, str]:
        return {
            "CB-ACCESS-KEY": self.api_key,
            "CB-ACCESS-SIGN": self.signature,
            "CB-ACCESS-TIMESTAMP": str(self.timestamp),
            "Content-Type": "application/json",
        }


Credential = Union[BearerCredential, HmacCredential]


def require_key_material(scheme: SigningScheme, key: KeyMaterial) -> None:
    """Raise ``ConfigurationError`` if ``key`` lacks what ``scheme`` needs."""
    if scheme is SigningScheme.JWT_ES256:
        missing = [name for name, value in (("API_KEY_ID", key.key_id), ("PRIVATE_KEY", key.private_key)) if not value]
    else:
        missing = [name for name, value in (("API_KEY", key.api_key), ("API_SECRET", key.api_secret)) if not value]
    if missing:
        raise ConfigurationError(f"Missing configuration: {', '.join(missing)}")


def load_private_key(pem: str) -> ec.EllipticCurvePrivateKey:
    """Parse a PEM encoded P-256 private key.

    Raises:
        ConfigurationError: If the PEM is empty, collapsed onto one line,
            unreadable, or not a P-256 EC key.
    """
    if not pem:
        raise ConfigurationError("PRIVATE_KEY is not set")
    if "-----BEGIN" not in pem or "\n" not in pem:
        raise ConfigurationError("PRIVATE_KEY is not a multi-line PEM block")
    try:
        key = serialization.load_pem_private_key(pem.encode("utf-8"), password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise ConfigurationError(f"PRIVATE_KEY could not be loaded: {exc}") from exc
    if not isinstance(key, ec.EllipticCurvePrivateKey) or not isinstance(key.curve, ec.SECP256R1):
        raise ConfigurationError("PRIVATE_KEY must be an EC P-256 private key for ES256")
    return key


def jwt_content(request: SigningRequest) -> bytes:
    """Body bytes for the JWT scheme: canonical JSON, or nothing."""
    return canonicalize(request.body) if request.has_body else b""


def hmac_content(request: SigningRequest) -> bytes:
    """Body bytes for the HMAC scheme: compact JSON in caller order, or nothing."""
    return dumps_raw(request.body) if request.has_body else b""


def jwt_message(request: SigningRequest, content: bytes) -> bytes:
    return request.method.encode("utf-8") + request.path.encode("utf-8") + content


def hmac_prehash(request: SigningRequest, content: bytes) -> bytes:
    return str(request.issued_at).encode("utf-8") + jwt_message(request, content)


def build_jwt_claims(
    request: SigningRequest,
    content: bytes,
    key_id: str,
    subject: JwtSubject = JwtSubject.BODY_HASH,
    ttl: int = MIN_JWT_TTL,
) -> Dict[str, object]:
    """Return the token payload for ``request``.

    Args:
        request: Outbound request being signed.
        content: Body bytes that will be transmitted.
        key_id: API key id, used as issuer.
        subject: ``sub`` claim variant.
        ttl: Token lifetime, clamped to the 60-180 second window.

    Returns:
        dict: ``aud``, ``iss``, ``sub``, ``nbf`` and ``exp`` claims.
    """
    ttl = max(MIN_JWT_TTL, min(MAX_JWT_TTL, ttl))
    if subject is JwtSubject.BODY_HASH:
        message = jwt_message(request, content)
        sub = hashlib.sha256(message).hexdigest()
        logger.debug("JWT content to hash: %s", message.decode("utf-8"))
        logger.debug("JWT sub hash: %s", sub)
    else:
        sub = key_id
    return {
        "aud": JWT_AUDIENCE,
        "iss": key_id,
        "sub": sub,
        "nbf": request.issued_at,
        "exp": request.issued_at + ttl,
    }


def _sign_jwt(
    request: SigningRequest, key: KeyMaterial, subject: JwtSubject, ttl: int
) -> BearerCredential:
    private_key = load_private_key(key.private_key)
    content = jwt_content(request)
    claims = build_jwt_claims(request, content, key.key_id, subject, ttl)
    logger.debug("JWT claims: %s", claims)
    token = jwt.encode(
        claims,
        private_key,
        algorithm=JWT_ALGORITHM,
        headers={"typ": "JWT"},
    )
    return BearerCredential(token=token, content=content)


def _sign_hmac(request: SigningRequest, key: KeyMaterial) -> HmacCredential:
    content = hmac_content(request)
    prehash = hmac_prehash(request, content)
    logger.debug("HMAC prehash: %s", prehash.decode("utf-8"))
    digest = hmac.new(
        key=key.api_secret.encode("utf-8"),
        msg=prehash,
        digestmod=hashlib.sha256,
    ).digest()
    return HmacCredential(
        api_key=key.api_key,
        signature=base64.b64encode(digest).decode("ascii"),
        timestamp=request.issued_at,
        content=content,
    )


def sign(
    scheme: SigningScheme,
    request: SigningRequest,
    key: KeyMaterial,
    *,
    subject: JwtSubject = JwtSubject.BODY_HASH,
    ttl: int = MIN_JWT_TTL,
) -> Credential:
    """Produce the credential authenticating ``request`` under ``scheme``.

    Raises:
        ConfigurationError: If the key material for ``scheme`` is absent or
            malformed, or ``scheme`` is unknown.
        CanonicalizationError: If the body cannot be serialized.
    """
    try:
        scheme = SigningScheme(scheme)
    except ValueError as exc:
        raise ConfigurationError(f"Unknown signing scheme: {scheme!r}") from exc
    require_key_material(scheme, key)
    logger.debug("Signing %s %s with %s", request.method, request.path, scheme.value)
    if scheme is SigningScheme.JWT_ES256:
        return _sign_jwt(request, key, JwtSubject(subject), ttl)
    return _sign_hmac(request, key)


class Signer:
    """Signs outbound calls with the scheme and keys fixed at start-up."""

    def __init__(self, config: Settings, clock: Callable[[], float] = time.time):
        self.scheme = SigningScheme(config.SIGNING_SCHEME)
        self.subject = JwtSubject(config.JWT_SUBJECT)
        self.ttl = config.JWT_TTL
        self.key = KeyMaterial.from_settings(config)
        self._clock = clock

    def sign(self, method: str, path: str, body: Optional[JsonValue] = None) -> Credential:
        """Sign ``method`` ``path`` ``body`` using the current wall-clock second."""
        request = SigningRequest(
            method=method,
            path=path,
            body=body,
            issued_at=int(self._clock()),
        )
        return sign(self.scheme, request, self.key, subject=self.subject, ttl=self.ttl)
