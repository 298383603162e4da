"""Do Not Disturb monitor.

Polls the platform probe on an interval and raises edge-triggered
``started`` / ``finished`` events when the DND state flips.

Uses APScheduler's asyncio scheduler as the timer, so a monitor must be
started from inside a running event loop.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Protocol

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from dnd_monitor.probes import DEFAULT_QUERY_TIMEOUT, DndProbe, create_probe

logger = logging.getLogger(__name__)

POLL_INTERVAL_SECONDS = 1.0

# poll_once skips busy ticks itself; this only bounds overlapping queries
# left over from earlier generations
MAX_JOB_INSTANCES = 16

JOB_ID = "dnd-poll"


class SettingsSource(Protocol):
    def get(self, key: str) -> Any: ...


class DndEvent(Enum):
    """Edge events raised by the monitor."""

    STARTED = "started"  # DND turned on
    FINISHED = "finished"  # DND turned off


@dataclass
class MonitorState:
    enabled: bool = False
    is_on_dnd: bool = False
    # Bumped on every start/stop; a tick whose query began under an older
    # generation drops its result
    generation: int = 0
    # Generation of the query currently awaited, if any
    in_flight: int | None = None


class DndMonitor:
    """Background Do Not Disturb monitor.

    Listeners registered with ``add_listener`` are called synchronously,
    in registration order, from the tick that observed the change.

    The timer is an APScheduler ``AsyncIOScheduler``, so ``start()`` (and
    construction with "monitorDnd" enabled) must happen inside a running
    event loop; otherwise APScheduler raises ``RuntimeError``.
    """

    def __init__(
        self,
        settings: SettingsSource,
        probe: DndProbe | None = None,
        interval: float = POLL_INTERVAL_SECONDS,
    ):
        """Initialize the monitor.

        Args:
            settings: Object exposing ``get(key)``; reads "monitorDnd" and
                "queryTimeout"
            probe: Platform probe (default: chosen for this platform)
            interval: Seconds between polls
        """
        self.settings = settings
        self.interval = interval

        if probe is None:
            timeout = settings.get("queryTimeout") or DEFAULT_QUERY_TIMEOUT
            probe = create_probe(query_timeout=float(timeout))
        self.probe = probe

        self.scheduler = AsyncIOScheduler()
        self._state = MonitorState()
        self._listeners: dict[DndEvent, list[Callable[[], None]]] = {
            event: [] for event in DndEvent
        }

        if settings.get("monitorDnd"):
            self.start()

    @property
    def enabled(self) -> bool:
        return self._state.enabled

    @property
    def is_on_dnd(self) -> bool:
        """Last observed DND state (False while stopped)."""
        return self._state.is_on_dnd

    @property
    def desktop_environment(self) -> str | None:
        """Desktop identifier used for detection, on Linux only."""
        return getattr(self.probe, "desktop", None)

    def add_listener(self, event: DndEvent, callback: Callable[[], None]) -> None:
        self._listeners[event].append(callback)

    def remove_listener(self, event: DndEvent, callback: Callable[[], None]) -> None:
        try:
            self._listeners[event].remove(callback)
        except ValueError:
            pass

    def start(self) -> None:
        """Start polling. The first poll runs immediately."""
        if self._state.enabled:
            logger.warning("Do Not Disturb monitoring already running")
            return

        self._state.enabled = True
        self._state.generation += 1

        # Fixed id + replace_existing: never more than one poll job
        self.scheduler.add_job(
            self.poll_once,
            trigger=IntervalTrigger(seconds=self.interval),
            id=JOB_ID,
            replace_existing=True,
            max_instances=MAX_JOB_INSTANCES,
            coalesce=True,
            next_run_time=datetime.now(),
        )
        if not self.scheduler.running:
            self.scheduler.start()

        logger.info("Starting Do Not Disturb monitoring")
        if self.desktop_environment is not None:
            logger.info(f"Desktop environment seems to be {self.desktop_environment}")

    def stop(self) -> None:
        """Stop polling. Resets the DND state without raising ``finished``."""
        if not self._state.enabled:
            return

        self._state.enabled = False
        self._state.is_on_dnd = False
        self._state.generation += 1

        # A query already in flight runs to completion; poll_once drops its
        # result since the generation moved on
        if self.scheduler.get_job(JOB_ID) is not None:
            self.scheduler.remove_job(JOB_ID)

        logger.info("Stopping Do Not Disturb monitoring")

    async def close(self) -> None:
        """Stop polling, shut the scheduler down and release probe resources."""
        self.stop()
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            # AsyncIOScheduler defers shutdown to the event loop
            await asyncio.sleep(0)
        await self.probe.close()

    async def poll_once(self) -> None:
        """Sample the probe once and emit an event if the state flipped."""
        if not self._state.enabled:
            return

        generation = self._state.generation
        # Skip this tick while the previous query of this generation runs
        if self._state.in_flight == generation:
            return

        self._state.in_flight = generation
        try:
            dnd = await self.probe.is_dnd_active()
        finally:
            if self._state.in_flight == generation:
                self._state.in_flight = None

        # Stopped (or restarted) while the query was in flight
        if not self._state.enabled or generation != self._state.generation:
            return

        if not self._state.is_on_dnd and dnd:
            self._state.is_on_dnd = True
            self._emit(DndEvent.STARTED)
        elif self._state.is_on_dnd and not dnd:
            self._state.is_on_dnd = False
            self._emit(DndEvent.FINISHED)

    def _emit(self, event: DndEvent) -> None:
        logger.debug(f"Do Not Disturb {event.value}")
        for callback in list(self._listeners[event]):
            try:
                callback()
            except Exception:
                logger.exception(f"Error in {event.value} listener")
