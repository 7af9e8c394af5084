"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Location:
    """A monitored place. ``display_name`` is the unique key."""

    display_name: str
    iana: str
    latitude: str
    longitude: str
