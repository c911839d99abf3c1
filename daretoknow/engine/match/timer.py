"""Countdown clock for the active match."""

import asyncio
import logging
from collections.abc import Callable
from typing import Protocol

from daretoknow.engine.models import Match
from daretoknow.engine.types import EventSink

logger = logging.getLogger(__name__)

TIMER_UPDATE = "timer:update"
TIMER_END = "timer:end"


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Anything with asyncio's ``call_later`` shape."""

    def call_later(
        self, delay: float, callback: Callable[[], None]
    ) -> Cancellable: ...


class LoopScheduler:
    """Schedules on the event loop running the caller (commands and ticks share it)."""

    def call_later(
        self, delay: float, callback: Callable[[], None]
    ) -> asyncio.TimerHandle:
        return asyncio.get_running_loop().call_later(delay, callback)


class MatchTimer:
    """One countdown, attached to whichever match is bound.

    Ticks run as scheduled callbacks on the same loop as command handling, so
    a tick never interleaves with a phase transition.
    """

    def __init__(
        self, sink: EventSink, scheduler: Scheduler, interval: float = 1.0
    ):
        self._sink = sink
        self._scheduler = scheduler
        self.interval = interval
        self._match: Match | None = None
        self._handle: Cancellable | None = None

    @property
    def match(self) -> Match | None:
        return self._match

    def bind(self, match: Match | None) -> None:
        """Attach to a new match, stopping any countdown on the old one."""
        if self._match is not None and self._match is not match:
            self.stop()
        self._match = match

    def start(self, duration: int) -> bool:
        """(Re)start the countdown; a running one is replaced, never stacked."""
        match = self._match
        if match is None:
            return False

        self._cancel()
        match.timer = max(0, duration)
        match.timer_running = True
        self._schedule()
        logger.debug(f"Timer started at {match.timer}s for match {match.id}")
        return True

    def stop(self) -> bool:
        """Cancel the countdown, keeping the last value."""
        self._cancel()
        if self._match is None:
            return False
        self._match.timer_running = False
        return True

    def add(self, seconds: int) -> bool:
        """Adjust a set countdown; no-op while the timer is unset."""
        match = self._match
        if match is None or match.timer is None:
            return False

        match.timer = max(0, match.timer + seconds)
        self._sink(TIMER_UPDATE, match.timer)
        return True

    def cancel(self) -> None:
        """Drop the pending tick without touching the match."""
        self._cancel()

    def _schedule(self) -> None:
        self._handle = self._scheduler.call_later(self.interval, self._tick)

    def _cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _tick(self) -> None:
        self._handle = None
        match = self._match
        if match is None or not match.timer_running:
            return

        if match.timer is None or match.timer <= 0:
            self._expire()
            return

        match.timer -= 1
        self._sink(TIMER_UPDATE, match.timer)
        if match.timer == 0:
            self._expire()
        else:
            self._schedule()

    def _expire(self) -> None:
        self.stop()
        logger.info(f"Timer expired for match {self._match.id if self._match else '?'}")
        self._sink(TIMER_END, None)
