from __future__ import annotations

import re

from pushwire.config import get_settings

_NON_HEX_RE = re.compile(r"[^0-9a-fA-F]")


class InvalidTokenLength(ValueError):
    def __init__(self, length: int, expected: int) -> None:
        super().__init__(f"Device token has invalid length: {length} (expected {expected} hex characters)")
        self.length = length
        self.expected = expected


def normalize_token(value: str | bytes | bytearray | memoryview) -> str:
    """
    Normalize a device token to lowercase hex.

    Text input keeps only its hex digits, so separators such as spaces and the
    angle brackets of a pasted `<...>` token are dropped. Raw bytes are
    hex-encoded directly.
    """
    if isinstance(value, str):
        clean = _NON_HEX_RE.sub("", value).lower()
    else:
        clean = bytes(value).hex()

    expected = get_settings().token_hex_length
    if len(clean) != expected:
        raise InvalidTokenLength(length=len(clean), expected=expected)
    return clean
