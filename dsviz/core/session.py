import copy
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from dsviz.core.animation import AnimationToolkit
from dsviz.core.base_model import StructureModel
from dsviz.core.diff import compute_diff
from dsviz.core.engines import create_engine, resolve_kind
from dsviz.core.errors import UnknownOperationError
from dsviz.core.global_ctrl import GlobalController
from dsviz.core.timeline import Timeline
from dsviz.core.types import AnimationInstruction, StructureKind, Transition

logger = logging.getLogger(__name__)

# Contract methods that are not structure operations
_NOT_OPERATIONS = frozenset({"snapshot", "to_visual", "from_snapshot"})


@dataclass(frozen=True)
class ExecutionStep:
    """One recorded operation: what ran, what it returned, the state it left."""

    index: int
    operation: str
    args: Tuple[Any, ...]
    result: Any
    snapshot: Dict[str, Any]
    transitions: Tuple[Transition, ...]
    description: str = ""


def describe_call(operation: str, args: Tuple[Any, ...], result: Any) -> str:
    """Render a step as a readable call, e.g. ``insert(2, 99) -> True``."""
    return f"{operation}({', '.join(repr(arg) for arg in args)}) -> {result!r}"


class StructureSession:
    """
    Runs operations against one structure engine and turns every mutation
    into an animation on a timeline owned by ``global_ctrl``:

        session = StructureSession(ctrl, "array", values=[1, 2, 3])
        session.perform("push", 4)
        ctrl.get_orchestrator("main").play()

    Each call is recorded so the engine can be rewound to any earlier step.
    """

    def __init__(self, global_ctrl: GlobalController, kind, timeline_id: str = "main",
                 toolkit: Optional[AnimationToolkit] = None, **engine_options: Any):
        self.global_ctrl = global_ctrl
        self.timeline_id = timeline_id
        self.toolkit = toolkit or AnimationToolkit()
        self.kind: StructureKind = resolve_kind(kind)
        self.engine: StructureModel = create_engine(self.kind, **engine_options)
        self._initial = self.engine.snapshot()
        self._history: List[ExecutionStep] = []
        self._last_transitions: List[Transition] = []

    @property
    def timeline(self) -> Timeline:
        return self.global_ctrl.get_orchestrator(self.timeline_id)

    @property
    def history(self) -> List[ExecutionStep]:
        return list(self._history)

    @property
    def last_transitions(self) -> List[Transition]:
        return list(self._last_transitions)

    def _operation(self, name: str):
        method = getattr(self.engine, name, None) if not name.startswith("_") else None
        if method is None or not callable(method) or name in _NOT_OPERATIONS:
            raise UnknownOperationError(
                f"{type(self.engine).__name__} has no operation {name!r}"
            )
        return method

    def perform(self, operation: str, *args: Any) -> Any:
        """Run ``operation`` on the engine, animate the change and record it."""
        method = self._operation(operation)
        before = self.engine.snapshot()
        result = method(*args)
        after = self.engine.snapshot()

        transitions = compute_diff(before, after, self.kind)
        self._load_instructions(self.toolkit.generate(transitions))
        self._last_transitions = transitions

        step = ExecutionStep(
            index=len(self._history),
            operation=operation,
            args=tuple(args),
            result=result,
            snapshot=after,
            transitions=tuple(transitions),
            description=describe_call(operation, tuple(args), result),
        )
        self._history.append(step)
        logger.debug("step %d: %s%r -> %d transitions",
                     step.index, operation, step.args, len(transitions))
        return result

    def highlight(self, target_ids: Iterable[str], **metadata: Any) -> List[AnimationInstruction]:
        """Load a highlight pass over ``target_ids`` (a search path, a visit order)."""
        instructions = self.toolkit.highlight(target_ids, **metadata)
        self._load_instructions(instructions)
        return instructions

    def _load_instructions(self, instructions: List[AnimationInstruction]):
        timeline = self.timeline
        timeline.create_timeline(instructions)
        timeline.set_speed(self.global_ctrl.speed)

    def go_to_step(self, index: int) -> bool:
        """
        Restore the engine to the state recorded after step ``index``;
        ``-1`` restores the state the session started from.
        """
        if index < -1 or index >= len(self._history):
            logger.warning("Invalid execution step: %s", index)
            return False
        snapshot = self._initial if index == -1 else self._history[index].snapshot
        self.engine.load_snapshot(copy.deepcopy(snapshot))
        return True

    def clear_history(self):
        """Forget the trace; the current state becomes the new starting point."""
        self._history.clear()
        self._last_transitions = []
        self._initial = self.engine.snapshot()

    def switch_kind(self, kind, **engine_options: Any):
        """Discard the engine, trace and pending animation and start a new structure."""
        self.kind = resolve_kind(kind)
        self.engine = create_engine(self.kind, **engine_options)
        self._initial = self.engine.snapshot()
        self._history.clear()
        self._last_transitions = []
        self.timeline.clear()
