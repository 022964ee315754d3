"""
scheduler.py — Delayed Callbacks for Playback
==============================================
A Scheduler runs one callback after a delay and lets the caller cancel it.
Playback uses it to fire "advance one step" while Playing.

Two strategies, both on an asyncio event loop:

    TimerScheduler   one loop.call_later(delay)
    FrameScheduler   wakes once per frame interval (default 16 ms), measures
                     elapsed time with loop.time() and fires once the delay
                     has passed.  Mirrors a render-loop driven player.

Guarantees (both strategies):
  - A cancelled handle never runs its callback.  The flag is checked again
    at fire time, so a cancel that races a timer already queued on the loop
    still wins.
  - An exception raised by the callback is caught, wrapped in
    SchedulerCallbackError and handed to on_error.  It never reaches the
    event loop's exception handler.

Design decisions:
  - The loop is resolved lazily (asyncio.get_running_loop()) the first time
    something is scheduled, so schedulers can be built outside a running loop.
  - Delays are integer milliseconds; the loop works in seconds.
"""

import asyncio
import logging
from enum import Enum
from typing import Callable, Optional

from config import FRAME_INTERVAL_MS, SCHEDULER_FRAME, SCHEDULER_TIMER
from errors import SchedulerCallbackError

logger = logging.getLogger(__name__)

Callback = Callable[[], None]
ErrorCallback = Callable[[SchedulerCallbackError], None]


class SchedulerKind(Enum):
    TIMER = SCHEDULER_TIMER
    FRAME = SCHEDULER_FRAME


# ---------------------------------------------------------------------------
# Handle
# ---------------------------------------------------------------------------
class ScheduledHandle:
    """
    Attributes:
        delay_ms  : Requested delay.
        cancelled : True once cancel() has been called.
        fired     : True once the callback has run (successfully or not).
    """

    def __init__(self, delay_ms: int, callback: Callback, on_error: Optional[ErrorCallback]):
        self.delay_ms:  int  = delay_ms
        self.cancelled: bool = False
        self.fired:     bool = False
        self._callback = callback
        self._on_error = on_error
        self._timer: Optional[asyncio.TimerHandle] = None

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self) -> None:
        self.cancelled = True
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _fire(self) -> None:
        self._timer = None
        if not self.pending:
            return
        self.fired = True
        try:
            self._callback()
        except Exception as exc:
            error = SchedulerCallbackError(f"Scheduled callback failed: {exc}")
            error.__cause__ = exc
            logger.exception("Scheduled callback raised after %d ms", self.delay_ms)
            if self._on_error is not None:
                self._on_error(error)

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else "fired" if self.fired else "pending"
        return f"ScheduledHandle({self.delay_ms} ms, {state})"


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------
class Scheduler:
    """Base class.  Subclasses arm the handle on the loop."""

    kind: SchedulerKind

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def schedule_after(
        self,
        delay_ms: int,
        callback: Callback,
        on_error: Optional[ErrorCallback] = None,
    ) -> ScheduledHandle:
        if delay_ms < 0:
            raise ValueError(f"delay must be >= 0 ms, got {delay_ms}")
        handle = ScheduledHandle(delay_ms, callback, on_error)
        self._arm(handle)
        return handle

    def cancel(self, handle: Optional[ScheduledHandle]) -> None:
        if handle is not None:
            handle.cancel()

    def _arm(self, handle: ScheduledHandle) -> None:
        raise NotImplementedError


class TimerScheduler(Scheduler):
    kind = SchedulerKind.TIMER

    def _arm(self, handle: ScheduledHandle) -> None:
        handle._timer = self.loop.call_later(handle.delay_ms / 1000.0, handle._fire)


class FrameScheduler(Scheduler):
    kind = SchedulerKind.FRAME

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None, frame_ms: int = FRAME_INTERVAL_MS):
        super().__init__(loop)
        if frame_ms <= 0:
            raise ValueError(f"frame interval must be > 0 ms, got {frame_ms}")
        self.frame_ms = frame_ms

    def _arm(self, handle: ScheduledHandle) -> None:
        deadline = self.loop.time() + handle.delay_ms / 1000.0
        self._next_frame(handle, deadline)

    def _next_frame(self, handle: ScheduledHandle, deadline: float) -> None:
        handle._timer = self.loop.call_later(self.frame_ms / 1000.0, self._on_frame, handle, deadline)

    def _on_frame(self, handle: ScheduledHandle, deadline: float) -> None:
        if not handle.pending:
            return
        # small epsilon: float seconds from integer ms
        if self.loop.time() + 1e-9 >= deadline:
            handle._fire()
        else:
            self._next_frame(handle, deadline)


def make_scheduler(
    kind=SchedulerKind.TIMER,
    loop: Optional[asyncio.AbstractEventLoop] = None,
    frame_ms: int = FRAME_INTERVAL_MS,
) -> Scheduler:
    """Build a scheduler from a SchedulerKind or its string value."""
    kind = SchedulerKind(kind)
    if kind is SchedulerKind.FRAME:
        return FrameScheduler(loop, frame_ms=frame_ms)
    return TimerScheduler(loop)
