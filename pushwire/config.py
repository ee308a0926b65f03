from __future__ import annotations

import codecs
import os
from dataclasses import dataclass


def _positive_int(env_name: str, default: str) -> int:
    raw = os.getenv(env_name, default).strip() or default
    value = int(raw)
    if value <= 0:
        raise ValueError(f"Invalid {env_name}: {raw}. Must be a positive integer")
    return value


def _payload_encoding() -> str:
    raw = os.getenv("PUSHWIRE_PAYLOAD_ENCODING", "utf-8").strip() or "utf-8"
    # Raises LookupError early for an unknown codec name.
    return codecs.lookup(raw).name


@dataclass(frozen=True)
class Settings:
    app_name: str = os.getenv("PUSHWIRE_APP_NAME", "pushwire")

    payload_encoding: str = _payload_encoding()
    max_payload_bytes: int = _positive_int("PUSHWIRE_MAX_PAYLOAD_BYTES", "4096")
    truncate_at_word_boundary: bool = os.getenv("PUSHWIRE_TRUNCATE_AT_WORD_BOUNDARY", "false").lower() == "true"

    token_hex_length: int = _positive_int("PUSHWIRE_TOKEN_HEX_LENGTH", "64")


settings = Settings()


def get_settings() -> Settings:
    return settings
