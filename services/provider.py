"""UV index providers."""

from __future__ import annotations

import logging
from typing import Optional, Protocol

import httpx
from pydantic import BaseModel, Field, ValidationError

from exceptions import MeasurementError
from models.records import Location

logger = logging.getLogger(__name__)

DEFAULT_HOST = "https://api.openweathermap.org"
ONE_CALL_PATH = "/data/2.5/onecall"
ONE_CALL_EXCLUDE = "minutely,hourly,alerts,daily"


class MeasurementProvider(Protocol):
    def measure(self, location: Location) -> float:
        ...


class OneCallCurrent(BaseModel):
    """Current conditions block of a One Call response."""

    uvi: float = Field(..., ge=0)


class OneCallResponse(BaseModel):
    current: OneCallCurrent


class OpenWeatherMapProvider:
    """Reads the current UV index from the OpenWeatherMap One Call API."""

    def __init__(
        self,
        app_id: str,
        host: str = DEFAULT_HOST,
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._app_id = app_id
        self._client = client or httpx.Client(base_url=host.rstrip("/"), timeout=timeout)

    def close(self) -> None:
        self._client.close()

    def measure(self, location: Location) -> float:
        params = {
            "lat": location.latitude,
            "lon": location.longitude,
            "appid": self._app_id,
            "exclude": ONE_CALL_EXCLUDE,
        }
        try:
            response = self._client.get(ONE_CALL_PATH, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise MeasurementError(
                f"failed to get UV index for {location.display_name}: "
                f"status {exc.response.status_code}",
                location=location.display_name,
            ) from exc
        except httpx.HTTPError as exc:
            raise MeasurementError(
                f"failed to execute HTTP request for {location.display_name}: {exc}",
                location=location.display_name,
            ) from exc

        try:
            payload = OneCallResponse.model_validate_json(response.content)
        except ValidationError as exc:
            raise MeasurementError(
                f"failed to parse JSON response for {location.display_name}",
                location=location.display_name,
            ) from exc

        logger.debug(
            "Measured UV index",
            extra={"location": location.display_name, "uv_index": payload.current.uvi},
        )
        return payload.current.uvi
