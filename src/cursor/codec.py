"""Opaque cursor token encoding.

Tokens are base64-encoded compact JSON objects keyed by the camelCase
cursor field names. Decoding is total: any malformed token decodes to
``None``, which callers treat exactly like "no cursor supplied".
"""

import base64
import binascii
import json

import structlog

from src.cursor.models import FeedCursor


logger = structlog.get_logger()

_log = logger.bind(component="cursor")


def decode_cursor(token: str | None) -> FeedCursor | None:
    """Decode a cursor token.

    Only string values populate cursor fields; unknown keys and values of
    any other type are dropped.

    Args:
        token: Token received from the client, or None.

    Returns:
        Decoded cursor, or None for a missing or malformed token.
    """
    if not token:
        return None

    try:
        raw = base64.b64decode(token.strip(), validate=True)
        parsed = json.loads(raw.decode("utf-8"))
    except (binascii.Error, ValueError, RecursionError):
        _log.debug("cursor_decode_failed", token_length=len(token))
        return None

    if not isinstance(parsed, dict):
        _log.debug("cursor_wrong_shape", json_type=type(parsed).__name__)
        return None

    values: dict[str, str] = {}
    for name, field_info in FeedCursor.model_fields.items():
        alias = field_info.alias or name
        value = parsed.get(alias)
        if isinstance(value, str):
            values[name] = value

    return FeedCursor(**values)


def encode_cursor(cursor: FeedCursor) -> str:
    """Encode a cursor into an opaque token.

    Args:
        cursor: Cursor to encode.

    Returns:
        Base64 token. Absent watermarks are omitted from the payload.
    """
    payload = cursor.model_dump(by_alias=True, exclude_none=True)
    data = json.dumps(payload, separators=(",", ":"))
    return base64.b64encode(data.encode("utf-8")).decode("ascii")
