from __future__ import annotations

from typing import Iterator

import pytest

from settings import get_settings

_ENV_VARS = (
    "OPENWEATHER_MAP_APP_ID",
    "OPENWEATHER_MAP_HOST",
    "UVBOT_REPORTER",
    "TWITTER_CONSUMER_KEY",
    "TWITTER_CONSUMER_SECRET",
    "TWITTER_ACCESS_TOKEN",
    "TWITTER_ACCESS_SECRET",
    "TWITTER_API_HOST",
    "UVBOT_TICK_INTERVAL",
    "UVBOT_POLL_INTERVAL",
    "UVBOT_HTTP_TIMEOUT",
    "UVBOT_API_URL",
    "UVBOT_API_TIMEOUT",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch) -> Iterator[None]:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # dictConfig would bind the root handler to whatever stderr the first
    # CliRunner swapped in; caplog captures records without it.
    monkeypatch.setattr("logging_config._configured", True)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
