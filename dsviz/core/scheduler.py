from typing import Optional

from PyQt5.QtCore import QElapsedTimer, QObject, QTimer

from dsviz.core.constants import FRAME_INTERVAL_MS
from dsviz.core.timeline import PlaybackState, Timeline


class FrameDriver(QObject):
    """
    Feeds a timeline with wall-clock time from a QTimer running on the Qt
    event loop. ``tick`` can be called directly to drive frames by hand.
    """

    def __init__(self, timeline: Timeline, interval_ms: int = FRAME_INTERVAL_MS,
                 parent: Optional[QObject] = None):
        super().__init__(parent)
        self.timeline = timeline
        self._clock = QElapsedTimer()
        self._timer = QTimer(self)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self._on_timeout)
        timeline.finished.connect(self.stop)
        timeline.stateChanged.connect(self._on_state_changed)

    @property
    def interval(self) -> int:
        return self._timer.interval()

    def is_active(self) -> bool:
        return self._timer.isActive()

    def start(self):
        self._clock.start()
        self._timer.start()

    def stop(self):
        self._timer.stop()

    def tick(self, elapsed_ms: float) -> bool:
        return self.timeline.advance(elapsed_ms)

    def _on_timeout(self):
        self.tick(self._clock.restart())

    def _on_state_changed(self, state: str):
        if state == PlaybackState.DESTROYED.value:
            self.stop()
