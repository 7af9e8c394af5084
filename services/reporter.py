"""Alert publishers."""

from __future__ import annotations

import logging
from typing import Callable, Optional, Protocol

import httpx
import typer
from authlib.integrations.httpx_client import OAuth1Client

from exceptions import ReportError
from models.records import Location
from services.alerts import render_alert
from settings import TwitterAuth

logger = logging.getLogger(__name__)

DEFAULT_TWITTER_HOST = "https://api.twitter.com"
STATUS_UPDATE_PATH = "/1.1/statuses/update.json"

AlertRenderer = Callable[[Location, float], str]


class MeasurementReporter(Protocol):
    def report(self, location: Location, uv_index: float) -> None:
        ...


class ConsoleReporter:
    """Writes alerts to stdout. Never fails."""

    def __init__(self, renderer: AlertRenderer = render_alert) -> None:
        self._render = renderer

    def report(self, location: Location, uv_index: float) -> None:
        typer.echo(self._render(location, uv_index))


def build_twitter_client(
    auth: TwitterAuth,
    timeout: float = 10.0,
    transport: Optional[httpx.BaseTransport] = None,
) -> httpx.Client:
    """An ``httpx`` client that signs every request with OAuth 1.0a user credentials."""
    return OAuth1Client(
        auth.consumer_key,
        client_secret=auth.consumer_secret,
        token=auth.access_token,
        token_secret=auth.access_secret,
        timeout=timeout,
        transport=transport,
    )


class TwitterReporter:
    """Posts alerts as status updates."""

    def __init__(
        self,
        client: httpx.Client,
        host: str = DEFAULT_TWITTER_HOST,
        renderer: AlertRenderer = render_alert,
    ) -> None:
        self._client = client
        self._url = f"{host.rstrip('/')}{STATUS_UPDATE_PATH}"
        self._render = renderer

    @classmethod
    def from_auth(
        cls, auth: TwitterAuth, host: str = DEFAULT_TWITTER_HOST, timeout: float = 10.0
    ) -> "TwitterReporter":
        return cls(build_twitter_client(auth, timeout=timeout), host=host)

    def close(self) -> None:
        self._client.close()

    def report(self, location: Location, uv_index: float) -> None:
        alert = self._render(location, uv_index)
        try:
            response = self._client.post(self._url, data={"status": alert})
        except httpx.HTTPError as exc:
            raise ReportError(
                f"failed to tweet {alert!r}: {exc}",
                location=location.display_name,
            ) from exc

        if response.status_code >= 400:
            raise ReportError(
                f"failed to tweet {alert!r}. Response code: {response.status_code}. "
                f"Body: {response.text}",
                location=location.display_name,
                status_code=response.status_code,
            )
        logger.info(
            "Posted alert",
            extra={"location": location.display_name, "uv_index": uv_index},
        )
