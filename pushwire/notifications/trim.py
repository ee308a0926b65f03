from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pushwire.notifications.model import Notification

logger = logging.getLogger(__name__)


def _escape(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)[1:-1]


def escaped_size(text: str, encoding: str) -> int:
    """Bytes `text` occupies inside a compiled JSON string literal."""
    # Subtract the empty encoding so codecs that emit a BOM are not overcounted.
    return len(_escape(text).encode(encoding)) - len("".encode(encoding))


def truncate_text(text: str, excess: int, encoding: str, at_word_boundary: bool = False) -> str:
    """Drop characters from the end of `text` until at least `excess` bytes are freed."""
    freed = 0
    end = len(text)
    while freed < excess and end > 0:
        end -= 1
        freed += escaped_size(text[end], encoding)

    kept = text[:end]
    if not at_word_boundary:
        return kept

    if end < len(text) and not text[end].isspace():
        boundary = max((i for i, ch in enumerate(kept) if ch.isspace()), default=-1)
        kept = kept[:boundary] if boundary >= 0 else ""
    return kept.rstrip()


def trim_alert_body(notification: Notification, max_bytes: int) -> int:
    """
    Shorten the alert body of `notification` so its compiled payload fits `max_bytes`.

    Returns the number of characters removed, 0 when the payload already fits,
    or a negative number of bytes the payload would still be over budget
    after removing the whole body.
    """
    if notification.is_compiled:
        excess = notification.length() - max_bytes
        logger.warning(
            "Trim requested after compile, body is frozen",
            extra={"max_bytes": max_bytes, "excess": max(excess, 0)},
        )
        return 0 if excess <= 0 else -excess

    encoding = notification.encoding
    excess = len(notification.render().encode(encoding)) - max_bytes
    if excess <= 0:
        return 0

    body = notification.alert_text
    # A text mdm replaces the whole wire object, so the alert adds no bytes.
    if not isinstance(body, str) or isinstance(notification.mdm, str):
        return -excess

    body_size = escaped_size(body, encoding)
    if body_size < excess:
        return body_size - excess

    kept = truncate_text(body, excess, encoding, at_word_boundary=notification.truncate_at_word_boundary)
    notification.replace_alert_body(kept)
    logger.debug(
        "Alert body trimmed",
        extra={"max_bytes": max_bytes, "excess": excess, "removed_chars": len(body) - len(kept)},
    )
    return len(body) - len(kept)
