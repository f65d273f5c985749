from __future__ import annotations

import pytest

from pygrowbox.config import GrowboxConfig
from pygrowbox.exceptions import GrowboxConfigError


def test_defaults() -> None:
    config = GrowboxConfig()
    assert config.feedback_clear_delay == 5.0
    assert config.reconnect_delay == 3.0
    assert config.request_timeout is None
    assert config.url(config.events_path) == "http://192.168.4.1/events"


def test_url_joins_slashes() -> None:
    config = GrowboxConfig(base_url="http://growbox.local/")
    assert config.url("/api/status") == "http://growbox.local/api/status"
    assert config.url("api/status") == "http://growbox.local/api/status"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"base_url": "  "},
        {"request_timeout": 0},
        {"reconnect_delay": -1.0},
        {"feedback_clear_delay": -0.5},
    ],
)
def test_invalid_values_rejected(kwargs: dict[str, object]) -> None:
    with pytest.raises(GrowboxConfigError):
        GrowboxConfig(**kwargs)  # type: ignore[arg-type]
