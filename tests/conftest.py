"""
Shared pytest fixtures and helpers.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable

import pytest_asyncio

from dnd_monitor.monitor import DndEvent, DndMonitor
from dnd_monitor.probes.base import DndProbe


class FakeSettings:
    """Minimal settings collaborator exposing get(key)."""

    def __init__(self, values: dict[str, Any] | None = None):
        self.values = values or {}

    def get(self, key: str) -> Any:
        return self.values.get(key)


class ScriptedProbe(DndProbe):
    """Returns the scripted samples in order, then repeats the last one."""

    def __init__(self, samples: list[bool], desktop: str | None = None):
        super().__init__()
        self.samples = list(samples)
        self.calls = 0
        self.closed = False
        if desktop is not None:
            self.desktop = desktop

    async def _query(self) -> bool:
        index = min(self.calls, len(self.samples) - 1)
        self.calls += 1
        return self.samples[index]

    async def close(self) -> None:
        self.closed = True


class GatedProbe(DndProbe):
    """First query blocks until released and returns True; later ones return False."""

    def __init__(self):
        super().__init__()
        self.calls = 0
        self.release = asyncio.Event()

    async def _query(self) -> bool:
        self.calls += 1
        if self.calls == 1:
            await self.release.wait()
            return True
        return False


async def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met before timeout")
        await asyncio.sleep(0.01)


async def settle() -> None:
    """Give scheduled tasks a chance to run."""
    for _ in range(5):
        await asyncio.sleep(0.01)


def record_events(monitor: DndMonitor) -> list[DndEvent]:
    events: list[DndEvent] = []
    monitor.add_listener(DndEvent.STARTED, lambda: events.append(DndEvent.STARTED))
    monitor.add_listener(DndEvent.FINISHED, lambda: events.append(DndEvent.FINISHED))
    return events


@pytest_asyncio.fixture()
async def make_monitor():
    """Factory for monitors; every monitor is closed on teardown."""
    monitors: list[DndMonitor] = []

    def factory(
        probe: DndProbe,
        enabled: bool = False,
        interval: float = 3600.0,
    ) -> DndMonitor:
        monitor = DndMonitor(
            FakeSettings({"monitorDnd": enabled}),
            probe=probe,
            interval=interval,
        )
        monitors.append(monitor)
        return monitor

    yield factory

    for monitor in monitors:
        await monitor.close()

