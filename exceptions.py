"""Error hierarchy shared by the poller, its collaborators and the CLI."""

from __future__ import annotations


class UVBotError(Exception):
    """Base exception for all uv-bot errors."""


class ConfigurationError(UVBotError):
    """Required configuration is missing or invalid. Fatal at startup."""


class LocationLoadError(UVBotError):
    """A configured location's time zone could not be resolved."""


class MeasurementError(UVBotError):
    """The provider could not produce a UV index for a location."""

    def __init__(self, message: str, *, location: str = "") -> None:
        self.location = location
        super().__init__(message)


class ReportError(UVBotError):
    """An alert could not be published for a location."""

    def __init__(
        self,
        message: str,
        *,
        location: str = "",
        status_code: int | None = None,
    ) -> None:
        self.location = location
        self.status_code = status_code
        super().__init__(message)
