from __future__ import annotations

import logging

from pushwire.config import Settings, get_settings
from pushwire.models.notification import PreparedPush
from pushwire.notifications.model import Notification
from pushwire.tokens.normalize import normalize_token

logger = logging.getLogger(__name__)


class NotificationService:
    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    def prepare(self, notification: Notification, token: str | bytes, max_bytes: int | None = None) -> PreparedPush:
        device_token = normalize_token(token)
        budget = max_bytes if max_bytes is not None else self.settings.max_payload_bytes

        trimmed = 0
        if not notification.is_compiled:
            trimmed = notification.trim(budget)

        body = notification.compile()
        length = notification.length()
        over_budget = length > budget
        if over_budget:
            logger.warning(
                "Notification payload exceeds budget after trimming",
                extra={"token": device_token, "length": length, "max_bytes": budget, "excess": length - budget},
            )
        elif trimmed > 0:
            logger.info(
                "Notification alert trimmed to fit budget",
                extra={"token": device_token, "removed_chars": trimmed, "max_bytes": budget},
            )

        return PreparedPush(
            token=device_token,
            headers=notification.headers(),
            body=body,
            length=length,
            trimmed_chars=max(trimmed, 0),
            over_budget=over_budget,
        )
