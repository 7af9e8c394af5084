from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Iterable, Optional

import typer

from models.locations import load_timezone
from models.records import Location
from services.severity import classify

_BAND_COLORS = {
    "low": typer.colors.GREEN,
    "moderate": typer.colors.YELLOW,
    "high": typer.colors.RED,
}


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_measurement(location: Location, uv_index: float) -> None:
    band = classify(uv_index).value
    echo_heading(location.display_name)
    typer.echo(f"uv_index: {uv_index:.1f}")
    typer.secho(f"severity: {band}", fg=_BAND_COLORS[band])


def render_registry(locations: Iterable[Location], now: Optional[datetime] = None) -> None:
    echo_heading("Locations")
    moment = now or datetime.now().astimezone()
    for location in locations:
        local = moment.astimezone(load_timezone(location.iana))
        typer.echo(
            f"  - {location.display_name} ({location.iana}) "
            f"lat={location.latitude} lon={location.longitude} local_time={local:%H:%M}"
        )


def render_location_status(payload: Dict[str, Any]) -> None:
    echo_heading(str(payload.get("display_name")))
    index = payload.get("last_reported_index")
    severity = payload.get("severity")
    echo_key_values(
        [
            ("last_reported_index", index if index is not None else "never reported"),
            ("severity", severity or "n/a"),
            ("reported_at", payload.get("reported_at") or "n/a"),
        ]
    )


def render_status(health: Dict[str, Any], locations: Iterable[Dict[str, Any]]) -> None:
    echo_heading("Service")
    echo_key_values([("status", health.get("status")), ("poller", health.get("poller"))])
    items = list(locations)
    typer.echo()
    if not items:
        typer.echo("No locations monitored.")
        return
    for item in items:
        render_location_status(item)
