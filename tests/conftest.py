from __future__ import annotations

from collections.abc import Generator

import pytest

from pushwire.config import Settings

TOKEN = "a9d0ed10e9cfd022a61cb08753f49c5a0b0dfb784697bf9f9d750a1003da19c7"


@pytest.fixture
def token() -> str:
    return TOKEN


@pytest.fixture
def small_budget_settings(monkeypatch) -> Generator[Settings, None, None]:
    import pushwire.config as config_module

    test_settings = Settings(max_payload_bytes=64, truncate_at_word_boundary=True)
    monkeypatch.setattr(config_module, "settings", test_settings, raising=False)
    yield test_settings
