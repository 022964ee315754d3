"""
registry.py — Live Playback Controllers
========================================
Tracks every live PlaybackController so a page (or a CLI session) can act
on all of them at once.  An explicit object, passed to each controller; no
module-level singleton.

    registry = PlaybackRegistry()
    a = PlaybackController(trace_a, registry=registry)
    b = PlaybackController(trace_b, registry=registry)
    a.start()          # exclusive mode: b is paused first
    registry.pause_all()

Errors raised while pausing or resetting one controller are routed to that
controller's error channel; the loop carries on with the others.
"""

import logging
from typing import TYPE_CHECKING, Dict, List, Optional

if TYPE_CHECKING:
    from engine.playback import PlaybackController

logger = logging.getLogger(__name__)


class PlaybackRegistry:
    """
    Attributes:
        exclusive : When True, starting one controller pauses all others.
    """

    def __init__(self, exclusive: bool = True):
        self.exclusive = exclusive
        self._controllers: Dict[str, "PlaybackController"] = {}

    def register(self, controller: "PlaybackController") -> None:
        if controller.id in self._controllers and self._controllers[controller.id] is not controller:
            raise ValueError(f"controller id {controller.id!r} is already registered")
        self._controllers[controller.id] = controller
        logger.debug("Registered controller %s", controller.id)

    def unregister(self, controller_id: str) -> bool:
        removed = self._controllers.pop(controller_id, None) is not None
        if removed:
            logger.debug("Unregistered controller %s", controller_id)
        return removed

    def get(self, controller_id: str) -> Optional["PlaybackController"]:
        return self._controllers.get(controller_id)

    def active_ids(self) -> List[str]:
        """Ids of every registered controller, in registration order."""
        return list(self._controllers)

    def __len__(self) -> int:
        return len(self._controllers)

    def __contains__(self, controller_id: str) -> bool:
        return controller_id in self._controllers

    # ------------------------------------------------------------------
    # Bulk actions
    # ------------------------------------------------------------------
    def pause_all(self, except_id: Optional[str] = None) -> None:
        for controller in list(self._controllers.values()):
            if controller.id == except_id:
                continue
            try:
                controller.pause()
            except Exception as exc:
                logger.warning("Pausing controller %s failed: %s", controller.id, exc)
                controller.report_error(exc)

    def reset_all(self) -> None:
        for controller in list(self._controllers.values()):
            try:
                controller.reset()
            except Exception as exc:
                logger.warning("Resetting controller %s failed: %s", controller.id, exc)
                controller.report_error(exc)

    def claim(self, controller: "PlaybackController") -> None:
        """Called by a controller about to play."""
        if self.exclusive:
            self.pause_all(except_id=controller.id)
