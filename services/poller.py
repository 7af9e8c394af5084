"""Timed measure-then-maybe-report loop over the location registry."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from typing import Callable, List, Optional, Sequence

from datastore.index_store import LastKnownIndexStore
from exceptions import ConfigurationError, MeasurementError, ReportError
from models.locations import LOCATIONS
from models.records import Location
from services.provider import MeasurementProvider, OpenWeatherMapProvider
from services.reporter import ConsoleReporter, MeasurementReporter, TwitterReporter
from services.severity import changed, classify
from settings import REPORTER_KINDS, Settings, get_settings

logger = logging.getLogger(__name__)


class PollState(str, Enum):
    running = "running"
    stopped = "stopped"


@dataclass
class PollSummary:
    """Outcome of a single pass over every location."""

    measured: List[str] = field(default_factory=list)
    reported: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)


class Poller:
    """Polls the provider on ``poll_interval`` and checks for stop every ``tick_interval``."""

    def __init__(
        self,
        provider: MeasurementProvider,
        reporter: MeasurementReporter,
        store: Optional[LastKnownIndexStore] = None,
        locations: Sequence[Location] = LOCATIONS,
        tick_interval: float = 2.0,
        poll_interval: float = 120.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.provider = provider
        self.reporter = reporter
        self.store = store if store is not None else LastKnownIndexStore()
        self.locations = tuple(locations)
        self.tick_interval = tick_interval
        self.poll_interval = poll_interval
        self._clock = clock
        self.stop_event = threading.Event()
        self.state = PollState.running
        self.last_poll: Optional[float] = None
        self._thread: Optional[threading.Thread] = None

    def measure_and_report(self, location: Location) -> bool:
        """Measure one location and report it if its severity band moved.

        Returns True when an alert was published. Provider and reporter
        failures propagate; the store is only written after a successful report.
        """
        name = location.display_name
        uv_index = self.provider.measure(location)
        previous = self.store.get(name)
        if not changed(previous, uv_index):
            logger.debug(
                "Severity unchanged",
                extra={"location": name, "uv_index": uv_index, "previous_index": previous},
            )
            return False

        self.reporter.report(location, uv_index)
        self.store.put(name, uv_index)
        logger.info(
            "Reported UV index",
            extra={
                "location": name,
                "uv_index": uv_index,
                "previous_index": previous,
                "severity": classify(uv_index).value,
            },
        )
        return True

    def poll_once(self) -> PollSummary:
        summary = PollSummary()
        for location in self.locations:
            name = location.display_name
            try:
                reported = self.measure_and_report(location)
            except MeasurementError as exc:
                logger.warning(
                    "Skipping location, measurement failed",
                    extra={"location": name, "reason": str(exc)},
                )
                summary.failed.append(name)
                continue
            except ReportError as exc:
                logger.warning(
                    "Skipping location, report failed",
                    extra={"location": name, "reason": str(exc), "status_code": exc.status_code},
                )
                summary.measured.append(name)
                summary.failed.append(name)
                continue
            except Exception as exc:  # noqa: BLE001 - one location must not stop the cycle
                logger.exception(
                    "Unexpected failure while polling location",
                    extra={"location": name, "reason": str(exc)},
                )
                summary.failed.append(name)
                continue

            summary.measured.append(name)
            if reported:
                summary.reported.append(name)
        return summary

    def poll_due(self) -> bool:
        if self.last_poll is None:
            return True
        return self._clock() - self.last_poll >= self.poll_interval

    def run(self) -> None:
        """Block until ``stop()`` is called. A started cycle always completes."""
        self.state = PollState.running
        logger.info("Poll loop started")
        while not self.stop_event.is_set():
            if self.poll_due():
                logger.info("Measuring UV index")
                self.poll_once()
                self.last_poll = self._clock()
            if self.stop_event.wait(self.tick_interval):
                break
        self.state = PollState.stopped
        logger.info("Received exit signal, poll loop stopped")

    def stop(self) -> None:
        self.stop_event.set()

    def start(self) -> threading.Thread:
        """Run the loop on a dedicated thread."""
        if self._thread is not None and self._thread.is_alive():
            return self._thread
        self._thread = threading.Thread(target=self.run, name="uv-poller", daemon=True)
        self._thread.start()
        return self._thread

    def join(self, timeout: Optional[float] = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)

    def shutdown(self, timeout: Optional[float] = None) -> None:
        """Stop the loop, wait for the worker and release HTTP clients."""
        self.stop()
        self.join(timeout)
        for collaborator in (self.provider, self.reporter):
            close = getattr(collaborator, "close", None)
            if callable(close):
                close()


def build_reporter(settings: Settings, kind: Optional[str] = None) -> MeasurementReporter:
    reporter_kind = (kind or settings.reporter).lower()
    if reporter_kind not in REPORTER_KINDS:
        raise ConfigurationError(
            f"Unknown reporter {reporter_kind!r}; expected one of {', '.join(REPORTER_KINDS)}"
        )
    if reporter_kind == "twitter":
        return TwitterReporter.from_auth(
            settings.require_twitter_auth(),
            host=settings.twitter_host,
            timeout=settings.http_timeout,
        )
    return ConsoleReporter()


def build_provider(settings: Settings) -> OpenWeatherMapProvider:
    return OpenWeatherMapProvider(
        app_id=settings.require_app_id(),
        host=settings.provider_host,
        timeout=settings.http_timeout,
    )


def build_poller(
    settings: Settings,
    reporter_kind: Optional[str] = None,
    tick_interval: Optional[float] = None,
    poll_interval: Optional[float] = None,
) -> Poller:
    """Wire a poller from configuration. Raises ``ConfigurationError`` on missing credentials."""
    provider = build_provider(settings)
    try:
        reporter = build_reporter(settings, reporter_kind)
    except ConfigurationError:
        provider.close()
        raise
    return Poller(
        provider=provider,
        reporter=reporter,
        tick_interval=tick_interval or settings.tick_interval,
        poll_interval=poll_interval or settings.poll_interval,
    )


@lru_cache
def build_default_poller() -> Poller:
    """Factory that wires the poller from environment settings."""
    return build_poller(get_settings())
