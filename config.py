"""
config.py — Defaults & Settings
================================
Named constants shared by the engine, the validator and the web layer,
plus a small `Settings` object the Flask app builds from its config.

Speed is expressed in milliseconds per step everywhere.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping


# ---------------------------------------------------------------------------
# Speed presets (milliseconds per step)
# ---------------------------------------------------------------------------
SPEED_PRESETS: Dict[str, int] = {
    "slow":   1000,   # teaching mode
    "medium": 300,
    "fast":   150,
    "turbo":  50,     # demo mode
}

DEFAULT_SPEED_MS:     int = SPEED_PRESETS["medium"]
FRAME_INTERVAL_MS:    int = 16          # ~60 fps paint cadence

# ---------------------------------------------------------------------------
# Input limits
# ---------------------------------------------------------------------------
DEFAULT_MAX_VERTICES: int = 20
DEFAULT_MAX_CITIES:   int = 9           # backtracking is factorial

# ---------------------------------------------------------------------------
# Scheduler selection
# ---------------------------------------------------------------------------
SCHEDULER_TIMER: str = "timer"
SCHEDULER_FRAME: str = "frame"
DEFAULT_SCHEDULER: str = SCHEDULER_TIMER


@dataclass(frozen=True)
class Settings:
    """
    Attributes:
        max_vertices : Largest custom graph the validator accepts.
        max_cities   : Largest TSP instance the validator accepts.
        speed_ms     : Initial playback speed for new controllers.
        scheduler    : "timer" or "frame".
        frame_ms     : Paint cadence for the frame scheduler.
    """

    max_vertices: int = DEFAULT_MAX_VERTICES
    max_cities:   int = DEFAULT_MAX_CITIES
    speed_ms:     int = DEFAULT_SPEED_MS
    scheduler:    str = DEFAULT_SCHEDULER
    frame_ms:     int = FRAME_INTERVAL_MS

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "Settings":
        """Read upper-case keys (Flask config style), falling back to defaults."""
        return cls(
            max_vertices=int(mapping.get("MAX_VERTICES", DEFAULT_MAX_VERTICES)),
            max_cities=int(mapping.get("MAX_CITIES", DEFAULT_MAX_CITIES)),
            speed_ms=int(mapping.get("SPEED_MS", DEFAULT_SPEED_MS)),
            scheduler=str(mapping.get("SCHEDULER", DEFAULT_SCHEDULER)),
            frame_ms=int(mapping.get("FRAME_MS", FRAME_INTERVAL_MS)),
        )

    def as_flask_config(self) -> Dict[str, Any]:
        return {
            "MAX_VERTICES": self.max_vertices,
            "MAX_CITIES":   self.max_cities,
            "SPEED_MS":     self.speed_ms,
            "SCHEDULER":    self.scheduler,
            "FRAME_MS":     self.frame_ms,
        }
