"""
Shared fixtures for luigis-box-client tests.

Every test signs with a fixed clock so headers are reproducible.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import pytest

from luigis_box.core.config import ConfigRegistry

FIXED_NOW = datetime(2017, 6, 29, 12, 11, 16, tzinfo=timezone.utc)
FIXED_HTTP_DATE = "Thu, 29 Jun 2017 12:11:16 GMT"


def make_raw_config(**overrides: Any) -> dict[str, Any]:
    """Raw config in the camelCase shape of configuration files."""
    raw: dict[str, Any] = {
        "host": "https://live.luigisbox.com/",
        "publicKey": "1234-5678",
        "privateKey": "secret-key",
        "connectionTimeout": 4.0,
        "requestTimeout": 10.0,
        "searchTimeout": 2.0,
    }
    raw.update(overrides)
    return raw


@pytest.fixture
def raw_config() -> dict[str, Any]:
    return make_raw_config()


@pytest.fixture
def registry() -> ConfigRegistry:
    """Registry with a default config and a second one for switching."""
    return ConfigRegistry(
        "default",
        {
            "default": make_raw_config(),
            "second": make_raw_config(
                host="https://second.luigisbox.com",
                publicKey="9999-0000",
                privateKey="other-secret",
            ),
        },
    )


@pytest.fixture
def fixed_clock():
    """Clock always returning FIXED_NOW."""
    return lambda: FIXED_NOW
