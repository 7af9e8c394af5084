from __future__ import annotations

import signal
from typing import Any, Dict, List

import pytest
from typer.testing import CliRunner

from cli.app import app, install_stop_handlers, restore_handlers, run_until_stopped
from exceptions import MeasurementError
from models.records import Location
from services.poller import Poller, PollState
from settings import get_settings


class StubClient:
    def __init__(self, config) -> None:
        self.config = config
        self.health: Dict[str, Any] = {"status": "ok", "poller": "running"}
        self.locations: List[Dict[str, Any]] = [
            {
                "display_name": "Tel-Aviv",
                "iana": "Asia/Jerusalem",
                "latitude": "32.109333",
                "longitude": "34.855499",
                "last_reported_index": 4.2,
                "severity": "moderate",
                "reported_at": "2024-06-01T12:00:00Z",
            }
        ]
        self.closed = False

    def get_health(self) -> Dict[str, Any]:
        return self.health

    def list_locations(self) -> List[Dict[str, Any]]:
        return self.locations

    def get_location(self, name: str) -> Dict[str, Any]:
        return dict(self.locations[0], display_name=name)

    def close(self) -> None:
        self.closed = True


class StubProvider:
    def __init__(self, reading: float = 7.5, fail: bool = False) -> None:
        self.reading = reading
        self.fail = fail
        self.closed = False

    def measure(self, location: Location) -> float:
        if self.fail:
            raise MeasurementError("failed to execute HTTP request", location=location.display_name)
        return self.reading

    def close(self) -> None:
        self.closed = True


class NullReporter:
    def report(self, location: Location, uv_index: float) -> None:
        pass


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


def _install_stub(monkeypatch, stub: StubClient) -> None:
    def factory(config):
        stub.config = config
        return stub

    monkeypatch.setattr("cli.app.ApiClient", factory)


def test_locations_lists_registry(runner: CliRunner) -> None:
    result = runner.invoke(app, ["locations"])

    assert result.exit_code == 0
    assert "Tel-Aviv (Asia/Jerusalem)" in result.stdout
    assert "lat=32.109333 lon=34.855499" in result.stdout


def test_measure_prints_index_and_band(monkeypatch, runner: CliRunner) -> None:
    provider = StubProvider(reading=7.5)
    monkeypatch.setattr("cli.app.build_provider", lambda settings: provider)

    result = runner.invoke(app, ["measure", "tel-aviv"])

    assert result.exit_code == 0
    assert "uv_index: 7.5" in result.stdout
    assert "severity: moderate" in result.stdout
    assert provider.closed is True


def test_measure_failure_exits_non_zero(monkeypatch, runner: CliRunner) -> None:
    provider = StubProvider(fail=True)
    monkeypatch.setattr("cli.app.build_provider", lambda settings: provider)

    result = runner.invoke(app, ["measure", "Tel-Aviv"])

    assert result.exit_code == 1
    assert "failed to execute HTTP request" in result.output
    assert provider.closed is True


def test_measure_unknown_location(runner: CliRunner) -> None:
    result = runner.invoke(app, ["measure", "Atlantis"])

    assert result.exit_code == 2


def test_run_requires_app_id(runner: CliRunner) -> None:
    result = runner.invoke(app, ["run"])

    assert result.exit_code == 1
    assert "OPENWEATHER_MAP_APP_ID" in result.output


def test_run_rejects_unknown_reporter(monkeypatch, runner: CliRunner) -> None:
    monkeypatch.setenv("OPENWEATHER_MAP_APP_ID", "abcd")
    get_settings.cache_clear()

    result = runner.invoke(app, ["run", "--reporter", "pager"])

    assert result.exit_code == 1
    assert "Unknown reporter" in result.output


def test_run_wires_poller_from_options(monkeypatch, runner: CliRunner) -> None:
    monkeypatch.setenv("OPENWEATHER_MAP_APP_ID", "abcd")
    get_settings.cache_clear()
    started: List[Poller] = []
    monkeypatch.setattr("cli.app.run_until_stopped", started.append)

    result = runner.invoke(
        app,
        ["run", "--reporter", "console", "--tick-interval", "0.5", "--poll-interval", "30"],
    )

    assert result.exit_code == 0
    assert "poll every 30s, tick 0.5s" in result.stdout
    poller = started[0]
    assert poller.tick_interval == 0.5
    assert poller.poll_interval == 30.0
    poller.shutdown()


def test_status_renders_service_state(monkeypatch, runner: CliRunner) -> None:
    stub = StubClient(config=None)
    _install_stub(monkeypatch, stub)

    result = runner.invoke(app, ["--base-url", "http://bot:9000/", "status"])

    assert result.exit_code == 0
    assert "poller: running" in result.stdout
    assert "last_reported_index: 4.2" in result.stdout
    assert stub.config.base_url == "http://bot:9000"
    assert stub.closed is True


def test_status_for_one_location(monkeypatch, runner: CliRunner) -> None:
    stub = StubClient(config=None)
    _install_stub(monkeypatch, stub)

    result = runner.invoke(app, ["status", "Tel-Aviv"])

    assert result.exit_code == 0
    assert "severity: moderate" in result.stdout
    assert stub.closed is True


def test_serve_rejects_missing_twitter_credentials(monkeypatch, runner: CliRunner) -> None:
    monkeypatch.setenv("OPENWEATHER_MAP_APP_ID", "abcd")
    monkeypatch.setenv("UVBOT_REPORTER", "twitter")
    get_settings.cache_clear()
    served: List[Any] = []
    monkeypatch.setattr("uvicorn.run", lambda *args, **kwargs: served.append(args))

    result = runner.invoke(app, ["serve"])

    assert result.exit_code == 1
    assert "Twitter credentials are required" in result.output
    assert served == []


def test_serve_starts_uvicorn_when_configured(monkeypatch, runner: CliRunner) -> None:
    monkeypatch.setenv("OPENWEATHER_MAP_APP_ID", "abcd")
    get_settings.cache_clear()
    served: List[Dict[str, Any]] = []
    monkeypatch.setattr(
        "uvicorn.run",
        lambda target, **kwargs: served.append(dict(kwargs, target=target)),
    )

    result = runner.invoke(app, ["serve", "--port", "9001"])

    assert result.exit_code == 0
    assert served == [{"target": "app.main:app", "host": "127.0.0.1", "port": 9001, "log_config": None}]


def test_run_until_stopped_returns_when_loop_stops() -> None:
    class StoppingProvider(StubProvider):
        def measure(self, location: Location) -> float:
            poller.stop()
            return super().measure(location)

    provider = StoppingProvider()
    poller = Poller(provider=provider, reporter=NullReporter(), tick_interval=0.01)

    run_until_stopped(poller, install=lambda _poller: {})

    assert poller.state is PollState.stopped
    assert provider.closed is True


def test_stop_signal_sets_poller_stop_event() -> None:
    poller = Poller(provider=StubProvider(), reporter=NullReporter())
    previous = install_stop_handlers(poller)
    try:
        signal.raise_signal(signal.SIGTERM)
    finally:
        restore_handlers(previous)

    assert poller.stop_event.is_set()
