import logging
from typing import Dict, List, Optional

from PyQt5.QtCore import QObject, pyqtSignal

from dsviz.core.constants import DEFAULT_SPEED
from dsviz.core.timeline import PlaybackState, TargetResolver, Timeline, clamp_speed

logger = logging.getLogger(__name__)


class GlobalController(QObject):
    """
    Holds the global playback speed and every named timeline, so that all
    animations on screen share one speed and one lifetime owner.

    Create one per application (or per test) and pass it to whoever needs a
    timeline.
    """

    speedChanged = pyqtSignal(float)
    orchestratorCreated = pyqtSignal(str)
    orchestratorDestroyed = pyqtSignal(str)

    def __init__(self, target_resolver: Optional[TargetResolver] = None,
                 parent: Optional[QObject] = None):
        super().__init__(parent)
        self._speed = DEFAULT_SPEED
        self._target_resolver = target_resolver
        self._timelines: Dict[str, Timeline] = {}

    @property
    def speed(self) -> float:
        return self._speed

    def set_speed(self, value: float) -> float:
        """Clamp and broadcast the speed multiplier to every timeline."""
        value = clamp_speed(value)
        if abs(value - self._speed) > 1e-3:
            self._speed = value
            for timeline in self._timelines.values():
                timeline.set_speed(value)
            self.speedChanged.emit(self._speed)
        return self._speed

    # ---------- Registry ----------

    def get_orchestrator(self, timeline_id: str = "main") -> Timeline:
        """Return the timeline registered under ``timeline_id``, creating it on first use."""
        timeline = self._timelines.get(timeline_id)
        if timeline is None:
            timeline = Timeline(self._target_resolver, speed=self._speed, parent=self)
            self._timelines[timeline_id] = timeline
            timeline.stateChanged.connect(
                lambda state, tl=timeline: self._forget(timeline_id, tl, state)
            )
            logger.debug("created timeline %r", timeline_id)
            self.orchestratorCreated.emit(timeline_id)
        return timeline

    def has_orchestrator(self, timeline_id: str) -> bool:
        return timeline_id in self._timelines

    def orchestrator_ids(self) -> List[str]:
        return list(self._timelines)

    def destroy_orchestrator(self, timeline_id: str) -> bool:
        timeline = self._timelines.pop(timeline_id, None)
        if timeline is None:
            return False
        timeline.destroy()
        logger.debug("destroyed timeline %r", timeline_id)
        self.orchestratorDestroyed.emit(timeline_id)
        return True

    def _forget(self, timeline_id: str, timeline: Timeline, state: str):
        # a timeline destroyed directly leaves the registry; the next
        # get_orchestrator call then creates a fresh one
        if state != PlaybackState.DESTROYED.value or self._timelines.get(timeline_id) is not timeline:
            return
        del self._timelines[timeline_id]
        logger.debug("timeline %r destroyed outside the registry", timeline_id)
        self.orchestratorDestroyed.emit(timeline_id)

    def destroy_all(self):
        for timeline_id in list(self._timelines):
            self.destroy_orchestrator(timeline_id)
