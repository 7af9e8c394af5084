"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from services.poller import PollState
from services.severity import SeverityBand


class LocationStatus(BaseModel):
    """Last reported reading for a monitored location."""

    display_name: str
    iana: str
    latitude: str
    longitude: str
    last_reported_index: Optional[float] = Field(default=None, ge=0)
    severity: Optional[SeverityBand] = None
    reported_at: Optional[datetime] = None


class HealthResponse(BaseModel):
    status: str = "ok"
    poller: PollState


class LocationsResponse(BaseModel):
    locations: List[LocationStatus] = Field(default_factory=list)
