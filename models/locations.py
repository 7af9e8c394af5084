"""Static registry of the locations the bot watches."""

from __future__ import annotations

from typing import Iterable, Sequence
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from exceptions import LocationLoadError
from models.records import Location

TEL_AVIV = Location(
    display_name="Tel-Aviv",
    iana="Asia/Jerusalem",
    latitude="32.109333",
    longitude="34.855499",
)

LOCATIONS: Sequence[Location] = (TEL_AVIV,)


def get_location(display_name: str, locations: Iterable[Location] = LOCATIONS) -> Location:
    for location in locations:
        if location.display_name.lower() == display_name.strip().lower():
            return location
    raise KeyError(f"Unknown location {display_name!r}.")


def load_timezone(iana: str) -> ZoneInfo:
    """Resolve an IANA time zone name, raising ``LocationLoadError`` if unknown."""
    try:
        return ZoneInfo(iana)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise LocationLoadError(f"failed to load location {iana}: unknown time zone {iana}") from exc


def validate_locations(locations: Iterable[Location] = LOCATIONS) -> None:
    """Check every configured location before the poll loop starts."""
    seen: set[str] = set()
    for location in locations:
        if location.display_name in seen:
            raise LocationLoadError(f"duplicate location {location.display_name!r}")
        seen.add(location.display_name)
        load_timezone(location.iana)
