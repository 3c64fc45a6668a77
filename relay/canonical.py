"""Canonical JSON serialization used as signing input.

``canonicalize`` sorts object keys at every nesting level and emits no
whitespace, so two structurally equal values always produce the same bytes
regardless of the order their keys were inserted in. The brokerage recomputes
the hash of the request on its side, which only works when both serializations
agree byte for byte.
"""

import json
from typing import Any, Dict, List, Union

from relay.errors import CanonicalizationError

JsonValue = Union[None, bool, int, float, str, List["JsonValue"], Dict[str, "JsonValue"]]


def _scalar(value: Any) -> str:
    try:
        return json.dumps(value, ensure_ascii=False, allow_nan=False)
    except ValueError as exc:
        raise CanonicalizationError(f"Cannot encode {value!r} as JSON: {exc}") from exc


def _encode(value: Any) -> str:
    if value is None or isinstance(value, (bool, int, float, str)):
        return _scalar(value)
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(_encode(item) for item in value) + "]"
    if isinstance(value, dict):
        for key in value:
            if not isinstance(key, str):
                raise CanonicalizationError(f"Object keys must be strings, got {key!r}")
        # Python orders str by code point, which matches UTF-8 byte order
        members = (
            _scalar(key) + ":" + _encode(value[key])
            for key in sorted(value)
        )
        return "{" + ",".join(members) + "}"
    raise CanonicalizationError(f"Unsupported JSON type: {type(value).__name__}")


def canonicalize(value: JsonValue) -> bytes:
    """Serialize ``value`` with recursively sorted keys and no whitespace.

    Args:
        value: A JSON-like value built from dicts, lists, strings, numbers,
            booleans and ``None``.

    Returns:
        bytes: UTF-8 encoded canonical JSON.

    Raises:
        CanonicalizationError: If ``value`` contains something JSON cannot
            represent (non-string keys, NaN, sets, arbitrary objects, lone
            surrogates).
    """
    try:
        return _encode(value).encode("utf-8")
    except UnicodeEncodeError as exc:
        raise CanonicalizationError(f"Body is not valid UTF-8 text: {exc}") from exc


def dumps_raw(value: JsonValue) -> bytes:
    """Serialize ``value`` as compact JSON keeping the caller's key order."""
    try:
        text = json.dumps(value, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise CanonicalizationError(f"Cannot encode body as JSON: {exc}") from exc
    try:
        return text.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise CanonicalizationError(f"Body is not valid UTF-8 text: {exc}") from exc
