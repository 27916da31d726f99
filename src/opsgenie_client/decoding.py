"""Decoding of JSON response bodies into caller-chosen result shapes.

A result target (`into`) is any callable taking the parsed JSON value and
returning the caller's representation: `json_value` keeps plain dicts and
lists, a dataclass `from_dict` builds typed records, and `list_of(fn)`
applies `fn` to each element of an array. `None` means the caller wants no
decoding at all.
"""

import json
from collections.abc import Callable
from typing import Any

from opsgenie_client.errors.exceptions import DecodeError

Decoder = Callable[[Any], Any]

# Exceptions a result target may raise when the JSON does not fit its shape
TARGET_ERRORS = (TypeError, ValueError, KeyError, AttributeError)


def json_value(data: Any) -> Any:
    """Identity result target: return the parsed JSON unchanged."""
    return data


def list_of(item: Decoder) -> Decoder:
    """Result target for JSON arrays, applying `item` to every element."""

    def decode_list(data: Any) -> list:
        if not isinstance(data, list):
            raise TypeError(f"expected a JSON array, got {type(data).__name__}")
        return [item(element) for element in data]

    return decode_list


def parse_json(raw: bytes | str, context: str) -> Any:
    """Parse raw JSON, raising DecodeError prefixed with `context`."""
    try:
        return json.loads(raw)
    except ValueError as e:
        raise DecodeError(f"{context}: {e}") from e


def apply_target(data: Any, into: Decoder, context: str) -> Any:
    """Run a result target over parsed JSON, raising DecodeError on mismatch."""
    try:
        return into(data)
    except TARGET_ERRORS as e:
        raise DecodeError(f"{context}: {e}") from e


def decode_body(raw: bytes, into: Decoder | None, context: str = "parse response") -> Any:
    """Decode a success body.

    Returns None without parsing when the body is empty or no target was
    supplied.
    """
    if into is None or not raw:
        return None
    return apply_target(parse_json(raw, context), into, context)


def unwrap_data(raw: bytes, into: Decoder | None) -> Any:
    """Decode the `data` member of a `{"data": ...}` envelope.

    Returns None when the body is empty, no target was supplied, or `data` is
    absent or null.
    """
    if into is None or not raw:
        return None

    envelope = parse_json(raw, "parse response")
    if not isinstance(envelope, dict):
        raise DecodeError(f"parse response: expected a JSON object, got {type(envelope).__name__}")

    data = envelope.get("data")
    if data is None:
        return None
    return apply_target(data, into, "decode data")
