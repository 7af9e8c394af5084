"""HTTP route definitions for the service."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from app.schemas import HealthResponse, LocationStatus, LocationsResponse
from models.locations import get_location
from models.records import Location
from services.poller import Poller, build_default_poller
from services.severity import classify

router = APIRouter()


def get_poller() -> Poller:
    return build_default_poller()


def _location_status(poller: Poller, location: Location) -> LocationStatus:
    item = poller.store.get_item(location.display_name)
    return LocationStatus(
        display_name=location.display_name,
        iana=location.iana,
        latitude=location.latitude,
        longitude=location.longitude,
        last_reported_index=item.uv_index if item else None,
        severity=classify(item.uv_index) if item else None,
        reported_at=item.reported_at if item else None,
    )


@router.get(
    "/locations",
    response_model=LocationsResponse,
    summary="List monitored locations with their last reported UV index.",
)
async def list_locations(poller: Poller = Depends(get_poller)) -> LocationsResponse:
    return LocationsResponse(
        locations=[_location_status(poller, location) for location in poller.locations]
    )


@router.get(
    "/locations/{name}",
    response_model=LocationStatus,
    summary="Fetch the last reported UV index for one location.",
)
async def get_location_status(
    name: str,
    poller: Poller = Depends(get_poller),
) -> LocationStatus:
    try:
        location = get_location(name, poller.locations)
    except KeyError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Location {name!r} is not monitored.",
        ) from exc
    return _location_status(poller, location)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck(poller: Poller = Depends(get_poller)) -> HealthResponse:
    return HealthResponse(poller=poller.state)


@router.get(
    "/",
    response_model=HealthResponse,
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root(poller: Poller = Depends(get_poller)) -> HealthResponse:
    return await healthcheck(poller)
