"""Cancelable periodic tick that keeps the host's notion of "now" fresh."""

from __future__ import annotations

import asyncio
import datetime
import inspect
import logging
from contextlib import suppress
from typing import Awaitable, Callable, Optional, Union

from .time_context import TimeSnapshot, create_time_snapshot

logger = logging.getLogger(__name__)

DEFAULT_TICK_SECONDS = 60.0

TickCallback = Callable[[], Union[Awaitable[None], None]]
SnapshotListener = Callable[[TimeSnapshot], None]


class Ticker:
    """Run ``callback`` every ``interval_seconds`` on an asyncio task."""

    def __init__(
        self,
        callback: TickCallback,
        interval_seconds: float = DEFAULT_TICK_SECONDS,
        *,
        name: str = "ticker",
    ):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._callback = callback
        self._interval = interval_seconds
        self._name = name
        self._task: asyncio.Task[None] | None = None
        self.tick_count = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start ticking; calling start on a running ticker is a no-op."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name=self._name)
        logger.debug("Started %s every %.1fs", self._name, self._interval)

    async def stop(self) -> None:
        """Cancel the loop and wait for it to finish."""
        task, self._task = self._task, None
        if task is None:
            return
        if not task.done():
            task.cancel()
        with suppress(asyncio.CancelledError):
            await task
        logger.debug("Stopped %s after %d ticks", self._name, self.tick_count)

    async def _run(self) -> None:
        while True:
            try:
                result = self._callback()
                if inspect.isawaitable(result):
                    await result
                self.tick_count += 1
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                logger.warning("%s tick failed: %s", self._name, exc)
            await asyncio.sleep(self._interval)


class DashboardClock:
    """Hold the latest :class:`TimeSnapshot` and refresh it on every tick.

    Views register listeners to re-derive their output when the minute
    rolls over; the engine itself only ever sees the snapshot it is handed.
    """

    def __init__(
        self,
        timezone_name: Optional[str] = None,
        *,
        interval_seconds: float = DEFAULT_TICK_SECONDS,
        now_factory: Optional[Callable[[], datetime.datetime]] = None,
    ):
        self._timezone_name = timezone_name
        self._now_factory = now_factory
        self._listeners: list[SnapshotListener] = []
        self._snapshot = self._take_snapshot()
        self._ticker = Ticker(self.refresh, interval_seconds, name="dashboard-clock")

    def _take_snapshot(self) -> TimeSnapshot:
        now_utc = self._now_factory() if self._now_factory is not None else None
        return create_time_snapshot(self._timezone_name, now_utc=now_utc)

    @property
    def snapshot(self) -> TimeSnapshot:
        return self._snapshot

    @property
    def running(self) -> bool:
        return self._ticker.running

    def set_timezone(self, timezone_name: Optional[str]) -> None:
        self._timezone_name = timezone_name
        self.refresh()

    def add_listener(self, listener: SnapshotListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: SnapshotListener) -> None:
        with suppress(ValueError):
            self._listeners.remove(listener)

    def refresh(self) -> TimeSnapshot:
        """Take a new snapshot and notify listeners."""
        self._snapshot = self._take_snapshot()
        for listener in list(self._listeners):
            try:
                listener(self._snapshot)
            except Exception as exc:
                logger.warning("Clock listener %r failed: %s", listener, exc)
        return self._snapshot

    def start(self) -> None:
        self._ticker.start()

    async def stop(self) -> None:
        await self._ticker.stop()


__all__ = ["DEFAULT_TICK_SECONDS", "DashboardClock", "Ticker"]
