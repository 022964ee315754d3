"""
playback.py — Trace Playback Controller
========================================
The PlaybackController is the ONLY object a front-end talks to while a
trace is on screen.  It owns a cursor into an immutable Trace and exposes
a play/pause/step/seek/speed API.

State machine:
    IDLE      →  start()             →  PLAYING
    PLAYING   →  pause()             →  PAUSED
    PAUSED    →  start()             →  PLAYING
    PLAYING   →  (reaches last step) →  COMPLETE
    COMPLETE  →  start()             →  rewind, PLAYING
    IDLE / PAUSED / COMPLETE  →  step_forward() / step_backward() / seek()  →  PAUSED
                                 (COMPLETE when that lands on the last step)
    any       →  reset() / load()    →  IDLE, cursor 0

Invariants:
  - 0 ≤ cursor < len(trace); COMPLETE ⇒ cursor is the last index.
  - While PLAYING there is exactly one outstanding scheduled advance, and
    each advance moves the cursor by exactly one.
  - Manual stepping while PLAYING is refused (returns False).
  - pause(), reset(), load() and dispose() cancel the outstanding advance
    before returning, so no stale callback ever moves the cursor.

A failure inside a scheduled advance (typically a listener raising) is
wrapped in SchedulerCallbackError, stored in `error`, delivered to the
error listeners and forces PAUSED.  It never escapes to the event loop.
"""

import logging
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from algorithms.step import Step, Trace
from config import DEFAULT_SPEED_MS, SPEED_PRESETS
from engine.scheduler import ScheduledHandle, Scheduler, TimerScheduler
from errors import SchedulerCallbackError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------
class PlaybackStatus(Enum):
    IDLE     = "idle"
    PLAYING  = "playing"
    PAUSED   = "paused"
    COMPLETE = "complete"


@dataclass(frozen=True)
class PlaybackState:
    cursor:   int
    status:   PlaybackStatus
    speed_ms: int

    def to_dict(self) -> dict:
        return {"cursor": self.cursor, "status": self.status.value, "speed_ms": self.speed_ms}


Listener = Callable[[PlaybackState, Step], None]
ErrorListener = Callable[[SchedulerCallbackError], None]


def _check_speed(speed_ms) -> int:
    if isinstance(speed_ms, bool) or not isinstance(speed_ms, int) or speed_ms <= 0:
        raise ValueError(f"speed must be a positive number of milliseconds, got {speed_ms!r}")
    return speed_ms


# ---------------------------------------------------------------------------
# Controller
# ---------------------------------------------------------------------------
class PlaybackController:
    """
    Attributes:
        id : Short unique id, also the key in a PlaybackRegistry.

    The registry is optional.  When given, the controller registers itself
    on creation, unregisters on dispose(), and asks the registry to pause
    its peers every time it starts playing (exclusive playback).

    Complete means the cursor is on the last step, with one exception: a
    one-step trace sits at cursor 0 (its last index) in Idle until start().
    """

    def __init__(
        self,
        trace: Trace,
        scheduler: Optional[Scheduler] = None,
        registry=None,
        speed_ms: int = DEFAULT_SPEED_MS,
        controller_id: Optional[str] = None,
    ):
        self.id:         str                          = controller_id or str(uuid.uuid4())[:8]
        self._trace:     Trace                        = trace
        self._scheduler: Scheduler                    = scheduler or TimerScheduler()
        self._registry                                = registry
        self._cursor:    int                          = 0
        self._status:    PlaybackStatus               = PlaybackStatus.IDLE
        self._speed_ms:  int                          = _check_speed(speed_ms)
        self._handle:    Optional[ScheduledHandle]    = None
        self._error:     Optional[SchedulerCallbackError] = None
        self._disposed:  bool                         = False
        self._listeners:       List[Listener]      = []
        self._error_listeners: List[ErrorListener] = []

        if registry is not None:
            registry.register(self)

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def trace(self) -> Trace:
        return self._trace

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def status(self) -> PlaybackStatus:
        return self._status

    @property
    def speed_ms(self) -> int:
        return self._speed_ms

    @property
    def current_step(self) -> Step:
        return self._trace[self._cursor]

    @property
    def state(self) -> PlaybackState:
        return PlaybackState(self._cursor, self._status, self._speed_ms)

    @property
    def error(self) -> Optional[SchedulerCallbackError]:
        return self._error

    @property
    def last_index(self) -> int:
        return len(self._trace) - 1

    @property
    def is_playing(self) -> bool:
        return self._status is PlaybackStatus.PLAYING

    @property
    def disposed(self) -> bool:
        return self._disposed

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call listener(state, step) after every change.  Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def subscribe_errors(self, listener: ErrorListener) -> Callable[[], None]:
        self._error_listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._error_listeners:
                self._error_listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Play / Pause
    # ------------------------------------------------------------------
    def start(self) -> bool:
        """Begin automatic playback.  Returns False if already playing."""
        self._check_alive()
        if self._status is PlaybackStatus.PLAYING:
            return False
        if self._status is PlaybackStatus.COMPLETE:
            self._cursor = 0
        if self._registry is not None:
            self._registry.claim(self)

        self._error = None
        if self._cursor == self.last_index:
            self._set_status(PlaybackStatus.COMPLETE)
        else:
            self._set_status(PlaybackStatus.PLAYING)
            self._schedule_next()
        self._notify()
        return True

    def pause(self) -> bool:
        if self._status is not PlaybackStatus.PLAYING:
            return False
        self._cancel_pending()
        self._set_status(PlaybackStatus.PAUSED)
        self._notify()
        return True

    def toggle_play(self) -> bool:
        return self.pause() if self.is_playing else self.start()

    def reset(self) -> None:
        """Back to IDLE at step 0."""
        self._cancel_pending()
        self._cursor = 0
        self._set_status(PlaybackStatus.IDLE)
        self._notify()

    def load(self, trace: Trace) -> None:
        """Swap in a fresh trace and reset."""
        self._check_alive()
        self._cancel_pending()
        self._trace = trace
        self._error = None
        self.reset()

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def step_forward(self) -> bool:
        """Advance one step.  Returns False while playing or already at the end."""
        if self._status is PlaybackStatus.PLAYING or self._cursor >= self.last_index:
            return False
        self._move_to(self._cursor + 1)
        return True

    def step_backward(self) -> bool:
        """Rewind one step.  Returns False while playing or already at the start."""
        if self._status is PlaybackStatus.PLAYING or self._cursor == 0:
            return False
        self._move_to(self._cursor - 1)
        return True

    def seek(self, index: int) -> bool:
        """Jump to an arbitrary step.  Returns False while playing."""
        if not 0 <= index <= self.last_index:
            raise IndexError(f"step {index} out of range 0..{self.last_index}")
        if self._status is PlaybackStatus.PLAYING:
            return False
        self._move_to(index)
        return True

    # ------------------------------------------------------------------
    # Speed
    # ------------------------------------------------------------------
    def set_speed(self, speed_ms: int) -> None:
        """Milliseconds between automatic steps.  Applies to the next advance."""
        self._speed_ms = _check_speed(speed_ms)
        if self._status is PlaybackStatus.PLAYING:
            self._cancel_pending()
            self._schedule_next()
        self._notify()

    def set_speed_preset(self, preset: str) -> None:
        if preset not in SPEED_PRESETS:
            raise ValueError(f"unknown speed preset {preset!r}, choose from {', '.join(SPEED_PRESETS)}")
        self.set_speed(SPEED_PRESETS[preset])

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------
    def dispose(self) -> None:
        if self._disposed:
            return
        self._cancel_pending()
        if self._status is PlaybackStatus.PLAYING:
            self._set_status(PlaybackStatus.PAUSED)
        if self._registry is not None:
            self._registry.unregister(self.id)
        self._listeners.clear()
        self._error_listeners.clear()
        self._disposed = True
        logger.debug("Controller %s disposed", self.id)

    # ------------------------------------------------------------------
    # Error channel
    # ------------------------------------------------------------------
    def report_error(self, exc: Exception) -> None:
        """
        Route a failure to this controller's error listeners and force
        PAUSED.  Used by the scheduler callback and by the registry.
        """
        if isinstance(exc, SchedulerCallbackError):
            error = exc
        else:
            error = SchedulerCallbackError(f"Playback failed: {exc}", controller_id=self.id)
            error.__cause__ = exc
        error.controller_id = self.id
        self._error = error

        self._cancel_pending()
        if self._status is PlaybackStatus.PLAYING:
            self._set_status(PlaybackStatus.PAUSED)

        for listener in list(self._error_listeners):
            try:
                listener(error)
            except Exception:
                logger.exception("Error listener of controller %s raised", self.id)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _schedule_next(self) -> None:
        self._handle = self._scheduler.schedule_after(self._speed_ms, self._advance, self.report_error)

    def _cancel_pending(self) -> None:
        if self._handle is not None:
            self._scheduler.cancel(self._handle)
            self._handle = None

    def _advance(self) -> None:
        """Scheduled tick: exactly one step forward."""
        self._handle = None
        if self._status is not PlaybackStatus.PLAYING:
            return
        self._cursor += 1
        if self._cursor >= self.last_index:
            self._cursor = self.last_index
            self._set_status(PlaybackStatus.COMPLETE)
        self._notify()
        # a listener may have paused or reset us
        if self._status is PlaybackStatus.PLAYING and self._handle is None:
            self._schedule_next()

    def _move_to(self, index: int) -> None:
        self._cursor = index
        if index == self.last_index:
            self._set_status(PlaybackStatus.COMPLETE)
        else:
            self._set_status(PlaybackStatus.PAUSED)
        self._notify()

    def _set_status(self, status: PlaybackStatus) -> None:
        if status is not self._status:
            logger.debug("Controller %s: %s → %s at step %d",
                         self.id, self._status.value, status.value, self._cursor)
        self._status = status

    def _notify(self) -> None:
        state = self.state
        step = self.current_step
        for listener in list(self._listeners):
            listener(state, step)

    def _check_alive(self) -> None:
        if self._disposed:
            raise RuntimeError(f"controller {self.id} has been disposed")

    def __repr__(self) -> str:
        return (f"PlaybackController({self.id}, {self._trace.algorithm}, "
                f"{self._cursor}/{self.last_index}, {self._status.value})")
