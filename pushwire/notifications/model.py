from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from pushwire.config import get_settings
from pushwire.models.notification import ApsFields, StructuredAlert
from pushwire.notifications.trim import trim_alert_body

logger = logging.getLogger(__name__)

APNS_DEFAULT_PRIORITY = 10
RESERVED_KEY = "aps"


@dataclass(frozen=True)
class Uncompiled:
    pass


@dataclass(frozen=True)
class Compiled:
    body: str


CompileState = Uncompiled | Compiled


class Notification:
    """
    A single outbound APNs notification.

    Reserved-field setters silently ignore values of the wrong type and keep
    the previous value. `compile()` freezes the JSON body: changes made after
    the first call are not reflected in later calls, so `trim()` must run
    before it.

    The custom payload must not use the reserved "aps" key; the reserved-field
    object always takes that slot in the wire object.
    """

    def __init__(self, payload: Mapping[str, Any] | None = None) -> None:
        settings = get_settings()
        self.encoding = settings.payload_encoding

        self.has_custom_payload = payload is not None
        self.payload: dict[str, Any] = dict(payload) if payload is not None else {}
        if RESERVED_KEY in self.payload:
            logger.warning(
                "Custom payload uses the reserved key, it will be replaced on compile",
                extra={"key": RESERVED_KEY},
            )

        self.aps = ApsFields()
        self._mdm: Any = None
        self.expiry = 0
        self.priority = APNS_DEFAULT_PRIORITY
        self.id: str | None = None
        self.topic: str | None = None

        self.truncate_at_word_boundary = settings.truncate_at_word_boundary
        self._state: CompileState = Uncompiled()

    @property
    def alert(self) -> str | StructuredAlert | None:
        return self.aps.alert

    @alert.setter
    def alert(self, value: Any) -> None:
        if value is None or isinstance(value, (str, StructuredAlert)):
            self.aps.alert = value
        elif isinstance(value, Mapping):
            try:
                self.aps.alert = StructuredAlert.model_validate(dict(value))
            except ValidationError:
                return

    @property
    def alert_text(self) -> str | None:
        alert = self.aps.alert
        if isinstance(alert, StructuredAlert):
            return alert.body
        return alert

    @alert_text.setter
    def alert_text(self, value: Any) -> None:
        if value is not None and not isinstance(value, str):
            return
        if isinstance(self.aps.alert, StructuredAlert):
            self.aps.alert.body = value
        else:
            self.alert = value

    @property
    def badge(self) -> int | None:
        return self.aps.badge

    @badge.setter
    def badge(self, value: Any) -> None:
        if value is None or (isinstance(value, int) and not isinstance(value, bool)):
            self.aps.badge = value
        elif isinstance(value, float) and value.is_integer():
            self.aps.badge = int(value)

    @property
    def sound(self) -> str | None:
        return self.aps.sound

    @sound.setter
    def sound(self, value: Any) -> None:
        if value is None or isinstance(value, str):
            self.aps.sound = value

    @property
    def content_available(self) -> bool:
        return self.aps.content_available == 1

    @content_available.setter
    def content_available(self, value: Any) -> None:
        self.aps.content_available = 1 if value is True else None

    @property
    def mdm(self) -> Any:
        return self._mdm

    @mdm.setter
    def mdm(self, value: Any) -> None:
        self._mdm = value

    @property
    def url_args(self) -> list[Any] | None:
        return self.aps.url_args

    @url_args.setter
    def url_args(self, value: Any) -> None:
        if value is None:
            self.aps.url_args = None
        elif isinstance(value, (list, tuple)):
            self.aps.url_args = list(value)

    @property
    def category(self) -> str | None:
        return self.aps.category

    @category.setter
    def category(self, value: Any) -> None:
        if value is None or isinstance(value, str):
            self.aps.category = value

    def set_expiry(self, expiry: int | None) -> Notification:
        self.expiry = expiry
        return self

    def set_priority(self, priority: int) -> Notification:
        self.priority = priority
        return self

    def set_badge(self, badge: int | None) -> Notification:
        self.badge = badge
        return self

    def set_sound(self, sound: str | None) -> Notification:
        self.sound = sound
        return self

    def set_alert_text(self, text: str | None) -> Notification:
        self.alert_text = text
        return self

    def set_alert_title(self, title: str | None) -> Notification:
        self.prepare_alert().title = title
        return self

    def set_title_loc_key(self, key: str | None) -> Notification:
        self.prepare_alert().title_loc_key = key
        return self

    def set_title_loc_args(self, args: list[Any] | None) -> Notification:
        self.prepare_alert().title_loc_args = args
        return self

    def set_alert_action(self, action: str | None) -> Notification:
        self.prepare_alert().action = action
        return self

    def set_action_loc_key(self, key: str | None) -> Notification:
        # None tells the device to show a single OK button.
        self.prepare_alert().action_loc_key = key
        return self

    def set_loc_key(self, key: str | None) -> Notification:
        self.prepare_alert().loc_key = key or None
        return self

    def set_loc_args(self, args: list[Any] | None) -> Notification:
        self.prepare_alert().loc_args = args or None
        return self

    def set_launch_image(self, image: str | None) -> Notification:
        self.prepare_alert().launch_image = image or None
        return self

    def set_content_available(self, content_available: bool) -> Notification:
        self.content_available = content_available
        return self

    def set_mdm(self, mdm: Any) -> Notification:
        self.mdm = mdm
        return self

    def set_url_args(self, url_args: list[str] | None) -> Notification:
        self.url_args = url_args
        return self

    def set_category(self, category: str | None) -> Notification:
        self.category = category
        return self

    def prepare_alert(self) -> StructuredAlert:
        """Promote the alert to a structured alert, keeping plain text as its body."""
        existing = self.aps.alert
        if not isinstance(existing, StructuredAlert):
            self.aps.alert = StructuredAlert(body=existing if isinstance(existing, str) else None)
        return self.aps.alert

    def replace_alert_body(self, text: str) -> None:
        if isinstance(self.aps.alert, StructuredAlert):
            self.aps.alert.body = text
        else:
            self.aps.alert = text

    def headers(self) -> dict[str, str | int]:
        headers: dict[str, str | int] = {}

        if self.priority != APNS_DEFAULT_PRIORITY:
            headers["apns-priority"] = self.priority

        if self.id:
            headers["apns-id"] = self.id

        if self.expiry and self.expiry > 0:
            headers["apns-expiration"] = self.expiry

        if self.topic:
            headers["apns-topic"] = self.topic

        return headers

    def aps_payload(self) -> dict[str, Any] | None:
        fields = self.aps.wire_dict()
        return fields or None

    def to_wire_object(self) -> dict[str, Any]:
        if isinstance(self._mdm, str):
            return {"mdm": self._mdm}

        wire = {key: value for key, value in self.payload.items() if key != RESERVED_KEY}
        aps = self.aps_payload()
        if aps is not None:
            wire[RESERVED_KEY] = aps
        return wire

    def render(self) -> str:
        """Serialize the current state without freezing it."""
        return json.dumps(self.to_wire_object(), separators=(",", ":"), ensure_ascii=False)

    @property
    def is_compiled(self) -> bool:
        return isinstance(self._state, Compiled)

    def compile(self) -> str:
        """
        Compile the notification to its JSON body.

        Compilation is final: later changes to the notification are not
        reflected in further calls.
        """
        if isinstance(self._state, Compiled):
            return self._state.body

        body = self.render()
        self._state = Compiled(body)
        logger.debug("Notification compiled", extra={"topic": self.topic, "chars": len(body)})
        return body

    def length(self) -> int:
        return len(self.compile().encode(self.encoding))

    def trim(self, max_bytes: int | None = None) -> int:
        """
        Shorten the alert body so the payload fits `max_bytes`.

        Returns the number of characters removed. A negative value is the
        number of bytes still over budget with the body removed entirely.
        Call before `compile()`.
        """
        budget = max_bytes if max_bytes is not None else get_settings().max_payload_bytes
        return trim_alert_body(self, budget)
