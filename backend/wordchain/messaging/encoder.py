"""
JSON encoder/decoder for wire format communication.

Provides functions to encode Python dicts to JSON text and decode JSON text
back to dicts. Used for the WebSocket text protocol.
"""

import json
from typing import Any


def encode(data: dict[str, Any]) -> str:
    """
    Encode a dict to compact JSON text.
    """
    return json.dumps(data, separators=(",", ":"))


class DecodeError(Exception):
    """Error raised when JSON decoding fails."""


# Size limit to prevent resource exhaustion from oversized frames.
MAX_PAYLOAD_LEN = 64 * 1024


def decode(data: str) -> dict[str, Any]:
    """
    Decode JSON text to a dict.

    Raises DecodeError if data is invalid, not an object, or exceeds the size limit.
    """
    if len(data) > MAX_PAYLOAD_LEN:
        raise DecodeError(f"payload too large: {len(data)} chars (max {MAX_PAYLOAD_LEN})")
    try:
        result = json.loads(data)
    except (json.JSONDecodeError, RecursionError) as e:
        raise DecodeError(f"failed to decode JSON data: {e}") from e

    if not isinstance(result, dict):
        raise DecodeError(f"expected object, got {type(result).__name__}")

    return result
