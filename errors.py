"""
errors.py — Error Taxonomy
===========================
Every exception the core raises on purpose lives here.

    VisualizerError
    ├── ValidationError          bad problem instance, caught at the boundary
    ├── AlgorithmInvariantError  internal contract broken, fatal
    │   └── IndexOutOfRange      disjoint-set index outside [0, n)
    └── SchedulerCallbackError   a playback callback raised, isolated per controller

Validation errors are turned into user-visible messages by the HTTP / CLI
layer.  Invariant errors are bugs and propagate untouched.  Scheduler
callback errors never leave the scheduler: they are handed to the owning
controller's error channel.
"""

from typing import Iterable, List, Optional


class VisualizerError(Exception):
    """Base class for all errors raised by the trace & playback core."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(VisualizerError):
    """
    A problem instance failed validation.  No trace is generated.

    Attributes:
        errors : Every problem found, in the order they were detected.
    """

    def __init__(self, errors: Iterable[str]):
        self.errors: List[str] = list(errors) or ["Invalid input"]
        super().__init__("; ".join(self.errors))


class AlgorithmInvariantError(VisualizerError):
    """An internal contract was violated while generating a trace."""


class IndexOutOfRange(AlgorithmInvariantError, IndexError):
    """A disjoint-set operation was given an index outside the structure."""

    def __init__(self, index: int, size: int):
        self.index = index
        self.size = size
        super().__init__(f"Index {index} out of range for disjoint set of size {size}")


class SchedulerCallbackError(VisualizerError):
    """
    A scheduled playback callback raised.  The original exception is
    chained as ``__cause__``.
    """

    def __init__(self, message: str, controller_id: Optional[str] = None):
        self.controller_id = controller_id
        super().__init__(message)


__all__ = [
    "VisualizerError",
    "ValidationError",
    "AlgorithmInvariantError",
    "IndexOutOfRange",
    "SchedulerCallbackError",
]
