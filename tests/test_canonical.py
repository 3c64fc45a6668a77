import json

import pytest

from relay.canonical import canonicalize, dumps_raw
from relay.errors import CanonicalizationError


def test_sorts_keys_at_every_level():
    value = {
        "side": "BUY",
        "product_id": "BTC-USD",
        "order_configuration": {"limit_limit_gtc": {"post_only": False, "limit_price": "100", "base_size": "0.1"}},
    }
    assert canonicalize(value) == (
        b'{"order_configuration":{"limit_limit_gtc":{"base_size":"0.1","limit_price":"100","post_only":false}},'
        b'"product_id":"BTC-USD","side":"BUY"}'
    )


def test_insertion_order_does_not_matter():
    first = {"a": 1, "b": {"x": [1, {"q": None, "p": True}], "y": "z"}}
    second = {"b": {"y": "z", "x": [1, {"p": True, "q": None}]}, "a": 1}
    assert canonicalize(first) == canonicalize(second)


def test_array_order_is_preserved():
    assert canonicalize([3, 1, 2]) == b"[3,1,2]"
    assert canonicalize((1, "a")) == b'[1,"a"]'


def test_idempotent_through_parse():
    value = {"z": [{"b": 2, "a": 1}], "a": {"nested": {"d": 4.5, "c": "é"}}}
    once = canonicalize(value)
    assert canonicalize(json.loads(once)) == once


@pytest.mark.parametrize(
    "value, expected",
    [
        ({}, b"{}"),
        ([], b"[]"),
        (None, b"null"),
        (True, b"true"),
        (False, b"false"),
        (0, b"0"),
        (-12, b"-12"),
        (0.25, b"0.25"),
        ("BTC-USD", b'"BTC-USD"'),
    ],
)
def test_scalars_and_empties(value, expected):
    assert canonicalize(value) == expected


def test_non_ascii_is_utf8():
    assert canonicalize({"note": "café"}) == '{"note":"café"}'.encode("utf-8")


def test_escapes_control_characters():
    assert canonicalize({"k": 'a"b\n'}) == b'{"k":"a\\"b\\n"}'


def test_rejects_non_string_keys():
    with pytest.raises(CanonicalizationError):
        canonicalize({1: "a"})


def test_rejects_nan():
    with pytest.raises(CanonicalizationError):
        canonicalize({"price": float("nan")})


def test_rejects_unsupported_types():
    with pytest.raises(CanonicalizationError):
        canonicalize({"ids": {1, 2}})
    with pytest.raises(ValueError):
        canonicalize(b"raw")


def test_dumps_raw_keeps_caller_order():
    assert dumps_raw({"side": "BUY", "product_id": "BTC-USD"}) == b'{"side":"BUY","product_id":"BTC-USD"}'


def test_dumps_raw_rejects_unserializable():
    with pytest.raises(CanonicalizationError):
        dumps_raw({"when": object()})


def test_rejects_lone_surrogate_in_value():
    with pytest.raises(CanonicalizationError):
        canonicalize({"product_id": "\ud800"})


def test_rejects_lone_surrogate_in_key():
    with pytest.raises(CanonicalizationError):
        canonicalize({"\udfff": "BTC-USD"})


def test_dumps_raw_rejects_lone_surrogate():
    with pytest.raises(CanonicalizationError):
        dumps_raw({"product_id": "\ud800"})
