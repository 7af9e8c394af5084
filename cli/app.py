from __future__ import annotations

import logging
import signal
from dataclasses import dataclass
from typing import Callable, Dict, NoReturn, Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_location_status, render_measurement, render_registry, render_status
from exceptions import ConfigurationError, LocationLoadError, MeasurementError
from logging_config import configure_logging
from models.locations import LOCATIONS, get_location, validate_locations
from services.poller import Poller, build_poller, build_provider
from settings import get_settings

logger = logging.getLogger(__name__)

_STOP_SIGNALS = (signal.SIGINT, signal.SIGTERM)


@dataclass
class CLIState:
    config: CLIConfig


app = typer.Typer(
    help="Poll UV index readings and publish alerts when the severity band changes.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1, message="CLI state is uninitialized.")
    return state


def _fail(message: str) -> NoReturn:
    typer.secho(message, fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def install_stop_handlers(poller: Poller) -> Dict[int, object]:
    """Route SIGINT/SIGTERM to the poller's stop event. Returns the previous handlers."""

    def handler(signum: int, _frame: object) -> None:
        logger.info("Received %s, stopping", signal.Signals(signum).name)
        poller.stop()

    previous: Dict[int, object] = {}
    for signum in _STOP_SIGNALS:
        previous[signum] = signal.signal(signum, handler)
    return previous


def restore_handlers(previous: Dict[int, object]) -> None:
    for signum, handler in previous.items():
        signal.signal(signum, handler)  # type: ignore[arg-type]


def run_until_stopped(
    poller: Poller,
    install: Callable[[Poller], Dict[int, object]] = install_stop_handlers,
) -> None:
    """Run the loop on its worker thread while this thread waits for a stop signal."""
    previous = install(poller)
    try:
        thread = poller.start()
        while thread.is_alive():
            thread.join(poller.tick_interval)
    finally:
        poller.shutdown()
        restore_handlers(previous)


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Status API base URL (defaults to UVBOT_API_URL env or http://localhost:8000).",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Override LOG_LEVEL for this invocation.",
    ),
) -> None:
    """Entry point for the CLI."""
    configure_logging(log_level.upper() if log_level else None)
    ctx.obj = CLIState(config=load_config(base_url=base_url))


@app.command("run")
def run_command(
    reporter: Optional[str] = typer.Option(
        None,
        "--reporter",
        "-r",
        help="Where alerts go: console or twitter (defaults to UVBOT_REPORTER env).",
    ),
    tick_interval: Optional[float] = typer.Option(
        None,
        "--tick-interval",
        min=0.01,
        help="Seconds between stop-signal checks.",
    ),
    poll_interval: Optional[float] = typer.Option(
        None,
        "--poll-interval",
        min=0.01,
        help="Seconds between measurements of every location.",
    ),
) -> None:
    """Poll every location until interrupted."""
    settings = get_settings()
    try:
        validate_locations(LOCATIONS)
        poller = build_poller(
            settings,
            reporter_kind=reporter,
            tick_interval=tick_interval,
            poll_interval=poll_interval,
        )
    except (ConfigurationError, LocationLoadError) as exc:
        _fail(str(exc))

    typer.echo(
        f"Watching {len(poller.locations)} location(s) "
        f"(poll every {poller.poll_interval:g}s, tick {poller.tick_interval:g}s). Ctrl+C to stop."
    )
    run_until_stopped(poller)


@app.command("serve")
def serve_command(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind."),
    port: int = typer.Option(8000, "--port", help="Port to bind."),
) -> None:
    """Run the status API; the poll loop runs for the lifetime of the server."""
    import uvicorn

    try:
        validate_locations(LOCATIONS)
        build_poller(get_settings()).shutdown()
    except (ConfigurationError, LocationLoadError) as exc:
        _fail(str(exc))
    uvicorn.run("app.main:app", host=host, port=port, log_config=None)


@app.command("measure")
def measure_command(
    location: str = typer.Argument(..., help="Display name of a monitored location."),
) -> None:
    """Fetch and print the current UV index for one location."""
    try:
        target = get_location(location)
    except KeyError as exc:
        raise typer.BadParameter(f"Unknown location {location!r}.") from exc

    try:
        provider = build_provider(get_settings())
    except ConfigurationError as exc:
        _fail(str(exc))

    try:
        uv_index = provider.measure(target)
    except MeasurementError as exc:
        _fail(str(exc))
    finally:
        provider.close()
    render_measurement(target, uv_index)


@app.command("locations")
def locations_command() -> None:
    """List the monitored locations."""
    try:
        render_registry(LOCATIONS)
    except LocationLoadError as exc:
        _fail(str(exc))


@app.command("status")
def status_command(
    ctx: typer.Context,
    location: Optional[str] = typer.Argument(None, help="Only show this location."),
) -> None:
    """Show what a running ``serve`` instance has reported."""
    state = _get_state(ctx)
    client = ApiClient(state.config)
    ctx.call_on_close(client.close)
    if location:
        render_location_status(client.get_location(location))
        return
    render_status(client.get_health(), client.list_locations())
