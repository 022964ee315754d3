"""
engine/
-------
Playback & recording layer.

    from engine import PlaybackController, PlaybackRegistry, make_scheduler
    from engine import Recorder, compare
"""

from engine.scheduler import (
    FrameScheduler,
    ScheduledHandle,
    Scheduler,
    SchedulerKind,
    TimerScheduler,
    make_scheduler,
)
from engine.playback import PlaybackController, PlaybackState, PlaybackStatus
from engine.registry import PlaybackRegistry
from engine.recorder import (
    ComparisonResult,
    Recorder,
    RunMetrics,
    compare,
    step_to_dict,
    to_jsonable,
    trace_to_dict,
)

__all__ = [
    "FrameScheduler",
    "ScheduledHandle",
    "Scheduler",
    "SchedulerKind",
    "TimerScheduler",
    "make_scheduler",
    "PlaybackController",
    "PlaybackState",
    "PlaybackStatus",
    "PlaybackRegistry",
    "ComparisonResult",
    "Recorder",
    "RunMetrics",
    "compare",
    "step_to_dict",
    "to_jsonable",
    "trace_to_dict",
]
