from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from exceptions import ConfigurationError


_APP_ID_ENV = "OPENWEATHER_MAP_APP_ID"
_PROVIDER_HOST_ENV = "OPENWEATHER_MAP_HOST"
_REPORTER_ENV = "UVBOT_REPORTER"
_TWITTER_CONSUMER_KEY_ENV = "TWITTER_CONSUMER_KEY"
_TWITTER_CONSUMER_SECRET_ENV = "TWITTER_CONSUMER_SECRET"
_TWITTER_ACCESS_TOKEN_ENV = "TWITTER_ACCESS_TOKEN"
_TWITTER_ACCESS_SECRET_ENV = "TWITTER_ACCESS_SECRET"
_TWITTER_HOST_ENV = "TWITTER_API_HOST"
_TICK_INTERVAL_ENV = "UVBOT_TICK_INTERVAL"
_POLL_INTERVAL_ENV = "UVBOT_POLL_INTERVAL"
_HTTP_TIMEOUT_ENV = "UVBOT_HTTP_TIMEOUT"
_LOG_LEVEL_ENV = "LOG_LEVEL"

REPORTER_KINDS = ("console", "twitter")


@dataclass(frozen=True)
class TwitterAuth:
    consumer_key: str
    consumer_secret: str
    access_token: str
    access_secret: str


@dataclass(frozen=True)
class Settings:
    app_id: Optional[str]
    provider_host: str
    reporter: str
    twitter_auth: Optional[TwitterAuth]
    twitter_host: str
    tick_interval: float
    poll_interval: float
    http_timeout: float
    log_level: str

    def require_app_id(self) -> str:
        if not self.app_id:
            raise ConfigurationError(
                f"An OpenWeather Map app ID is required. Please set the {_APP_ID_ENV} env var"
            )
        return self.app_id

    def require_twitter_auth(self) -> TwitterAuth:
        if self.twitter_auth is None:
            names = ", ".join(
                (
                    _TWITTER_CONSUMER_KEY_ENV,
                    _TWITTER_CONSUMER_SECRET_ENV,
                    _TWITTER_ACCESS_TOKEN_ENV,
                    _TWITTER_ACCESS_SECRET_ENV,
                )
            )
            raise ConfigurationError(f"Twitter credentials are required. Please set {names}")
        return self.twitter_auth


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_optional_env(name: str) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return None
    candidate = value.strip()
    return candidate or None


def _read_seconds(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_reporter(default: str) -> str:
    return _read_str_env(_REPORTER_ENV, default).lower()


def _read_twitter_auth() -> Optional[TwitterAuth]:
    values = [
        _read_optional_env(_TWITTER_CONSUMER_KEY_ENV),
        _read_optional_env(_TWITTER_CONSUMER_SECRET_ENV),
        _read_optional_env(_TWITTER_ACCESS_TOKEN_ENV),
        _read_optional_env(_TWITTER_ACCESS_SECRET_ENV),
    ]
    if any(value is None for value in values):
        return None
    consumer_key, consumer_secret, access_token, access_secret = values
    return TwitterAuth(
        consumer_key=consumer_key,  # type: ignore[arg-type]
        consumer_secret=consumer_secret,  # type: ignore[arg-type]
        access_token=access_token,  # type: ignore[arg-type]
        access_secret=access_secret,  # type: ignore[arg-type]
    )


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        app_id=_read_optional_env(_APP_ID_ENV),
        provider_host=_read_str_env(_PROVIDER_HOST_ENV, "https://api.openweathermap.org").rstrip("/"),
        reporter=_read_reporter("console"),
        twitter_auth=_read_twitter_auth(),
        twitter_host=_read_str_env(_TWITTER_HOST_ENV, "https://api.twitter.com").rstrip("/"),
        tick_interval=_read_seconds(_TICK_INTERVAL_ENV, 2.0),
        poll_interval=_read_seconds(_POLL_INTERVAL_ENV, 120.0),
        http_timeout=_read_seconds(_HTTP_TIMEOUT_ENV, 10.0),
        log_level=_read_log_level("INFO"),
    )
