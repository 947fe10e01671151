import logging
from enum import Enum
from typing import Any, Callable, List, Optional, Sequence

from PyQt5.QtCore import QObject, pyqtSignal

from dsviz.core.animation import resolve_easing
from dsviz.core.constants import DEFAULT_SPEED, MAX_SPEED, MIN_SPEED
from dsviz.core.types import AnimationInstruction

logger = logging.getLogger(__name__)

TargetResolver = Callable[[str], Any]


class PlaybackState(str, Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    PLAYING = "playing"
    PAUSED = "paused"
    STOPPED = "stopped"
    DESTROYED = "destroyed"


def clamp_speed(value: float) -> float:
    return max(MIN_SPEED, min(MAX_SPEED, float(value)))


class Timeline(QObject):
    """
    Seekable playback of an ordered instruction list.

    The timeline never schedules itself: whoever owns the frame clock calls
    :meth:`advance` with the elapsed milliseconds (see ``FrameDriver``).
    Observers connect to the signals, which are emitted synchronously:

    - ``progressChanged(current_step, progress)`` on every step change
    - ``instructionStarted(instruction, handle)`` when a bound step begins
    - ``stateChanged(state)`` and ``finished()``
    """

    progressChanged = pyqtSignal(int, float)
    instructionStarted = pyqtSignal(object, object)
    stateChanged = pyqtSignal(str)
    finished = pyqtSignal()

    def __init__(self, target_resolver: Optional[TargetResolver] = None,
                 speed: float = DEFAULT_SPEED, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._resolver = target_resolver
        self._instructions: List[AnimationInstruction] = []
        self._bindings: List[Any] = []
        self._state = PlaybackState.UNINITIALIZED
        self._current_step = 0
        self._elapsed_in_step = 0.0
        self._speed = clamp_speed(speed)
        self._loop = False

    # ---------- Properties ----------

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def current_step(self) -> int:
        return self._current_step

    @property
    def total_steps(self) -> int:
        return len(self._instructions)

    @property
    def speed(self) -> float:
        return self._speed

    @property
    def loop(self) -> bool:
        return self._loop

    @property
    def instructions(self) -> List[AnimationInstruction]:
        return list(self._instructions)

    def is_initialized(self) -> bool:
        return self._state not in (PlaybackState.UNINITIALIZED, PlaybackState.DESTROYED)

    def is_playing(self) -> bool:
        return self._state is PlaybackState.PLAYING

    def is_bound(self, step: int) -> bool:
        return 0 <= step < len(self._bindings) and self._bindings[step] is not None

    def target_for(self, step: int):
        return self._bindings[step] if 0 <= step < len(self._bindings) else None

    @property
    def current_instruction(self) -> Optional[AnimationInstruction]:
        if not self._instructions:
            return None
        return self._instructions[self._current_step]

    # ---------- Setup ----------

    def create_timeline(self, instructions: Sequence[AnimationInstruction],
                        target_resolver: Optional[TargetResolver] = None) -> bool:
        if self._state is PlaybackState.DESTROYED:
            logger.warning("Timeline destroyed; create_timeline ignored")
            return False
        if target_resolver is not None:
            self._resolver = target_resolver

        self._reset()
        self._instructions = list(instructions)
        self._bindings = [self._bind(instruction) for instruction in self._instructions]
        self._set_state(PlaybackState.READY)
        return True

    def _bind(self, instruction: AnimationInstruction):
        if self._resolver is None:
            return instruction.target_id
        handle = self._resolver(instruction.target_id)
        if handle is None:
            logger.warning("Target element not found: %s", instruction.target_id)
        return handle

    def clear(self):
        """Drop every instruction and return to the uninitialized state."""
        if self._state is PlaybackState.DESTROYED:
            return
        self._reset()
        self._set_state(PlaybackState.UNINITIALIZED)

    def _reset(self):
        self._instructions = []
        self._bindings = []
        self._current_step = 0
        self._elapsed_in_step = 0.0

    def destroy(self):
        """Release instructions, bindings and observers. Terminal."""
        if self._state is PlaybackState.DESTROYED:
            return
        self._reset()
        self._resolver = None
        self._set_state(PlaybackState.DESTROYED)
        for signal in (self.progressChanged, self.instructionStarted,
                       self.stateChanged, self.finished):
            try:
                signal.disconnect()
            except TypeError:
                # raised when the signal has no connections
                pass
        self.setParent(None)

    # ---------- Playback ----------

    def play(self) -> bool:
        if not self._require_active("play"):
            return False
        if self._state is PlaybackState.PLAYING:
            return False
        if self._state is PlaybackState.STOPPED:
            self._set_step(0, announce=False)
        self._set_state(PlaybackState.PLAYING)
        if not self._instructions:
            self._finish()
            return True
        if self._elapsed_in_step == 0:
            self._announce(self._current_step)
        return True

    def pause(self) -> bool:
        if not self._require_active("pause"):
            return False
        if self._state is not PlaybackState.PLAYING:
            return False
        self._set_state(PlaybackState.PAUSED)
        return True

    def stop(self) -> bool:
        if not self._require_active("stop"):
            return False
        self._set_step(0, announce=False)
        self._set_state(PlaybackState.READY)
        return True

    def step_forward(self) -> bool:
        if not self._require_active("step_forward") or not self._instructions:
            return False
        if self._current_step < self.total_steps - 1:
            self._set_step(self._current_step + 1)
        elif self._loop:
            self._set_step(0)
        else:
            return False
        return True

    def step_backward(self) -> bool:
        if not self._require_active("step_backward"):
            return False
        if self._current_step <= 0:
            return False
        self._set_step(self._current_step - 1)
        return True

    def go_to_step(self, step: int) -> bool:
        if not self._require_active("go_to_step"):
            return False
        if not isinstance(step, int) or step < 0 or step >= self.total_steps:
            logger.warning("Invalid step: %s", step)
            return False
        self._set_step(step)
        return True

    def set_speed(self, factor: float) -> float:
        """Clamp and apply a playback speed multiplier; returns the applied value."""
        if self._state is PlaybackState.DESTROYED:
            logger.warning("Timeline destroyed; set_speed ignored")
            return self._speed
        self._speed = clamp_speed(factor)
        return self._speed

    def set_loop(self, enabled: bool):
        self._loop = bool(enabled)

    def toggle_loop(self) -> bool:
        self._loop = not self._loop
        return self._loop

    # ---------- Clock ----------

    def _step_duration(self, step: int) -> int:
        """Unscaled length of a step; skipped (unbound) steps take no time."""
        if not self.is_bound(step):
            return 0
        return self._instructions[step].total_duration

    def scaled_duration(self, step: Optional[int] = None) -> int:
        """Wall-clock milliseconds a step takes at the current speed."""
        step = self._current_step if step is None else step
        base = self._step_duration(step)
        if base <= 0:
            return 0
        return max(1, int(base / self._speed))

    def advance(self, elapsed_ms: float) -> bool:
        """Feed elapsed wall-clock time; returns False unless playing."""
        if self._state is not PlaybackState.PLAYING:
            return False

        self._elapsed_in_step += max(0.0, elapsed_ms) * self._speed
        cycle = sum(self._step_duration(step) for step in range(self.total_steps))
        hops = 0
        while self._state is PlaybackState.PLAYING:
            duration = self._step_duration(self._current_step)
            if self._elapsed_in_step < duration:
                break
            overflow = self._elapsed_in_step - duration
            if self._current_step < self.total_steps - 1:
                self._set_step(self._current_step + 1)
            elif self._loop and (cycle > 0 or hops < self.total_steps):
                self._set_step(0)
            else:
                self._elapsed_in_step = float(duration)
                self._finish()
                break
            self._elapsed_in_step = overflow
            hops += 1
            if cycle == 0 and hops >= self.total_steps:
                break
        return True

    def step_progress(self) -> float:
        """Eased 0..1 progress within the current instruction."""
        instruction = self.current_instruction
        if instruction is None:
            return 0.0
        duration = self._step_duration(self._current_step)
        if duration <= 0:
            return 1.0
        local = max(0.0, self._elapsed_in_step - instruction.delay)
        raw = min(1.0, local / max(1, instruction.duration))
        return resolve_easing(instruction.easing).valueForProgress(raw)

    def get_progress(self) -> float:
        if not self.is_initialized() or not self._instructions:
            return 0.0
        return self._current_step / self.total_steps

    # ---------- Internal helpers ----------

    def _require_active(self, operation: str) -> bool:
        if self._state is PlaybackState.DESTROYED:
            logger.warning("Timeline destroyed; %s ignored", operation)
            return False
        if self._state is PlaybackState.UNINITIALIZED:
            logger.warning("Timeline not initialized; %s ignored", operation)
            return False
        return True

    def _set_state(self, state: PlaybackState):
        if state is self._state:
            return
        logger.debug("timeline %s -> %s", self._state.value, state.value)
        self._state = state
        self.stateChanged.emit(state.value)

    def _set_step(self, step: int, announce: bool = True):
        self._current_step = step
        self._elapsed_in_step = 0.0
        self.progressChanged.emit(step, self.get_progress())
        if announce:
            self._announce(step)

    def _announce(self, step: int):
        if self.is_bound(step):
            self.instructionStarted.emit(self._instructions[step], self._bindings[step])

    def _finish(self):
        self._set_state(PlaybackState.STOPPED)
        self.finished.emit()
