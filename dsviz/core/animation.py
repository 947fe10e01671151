import logging
from typing import Iterable, List, Optional

from PyQt5.QtCore import QEasingCurve

from dsviz.core.constants import (
    DEFAULT_DELAY_MS,
    DEFAULT_DURATION_MS,
    DEFAULT_EASING,
    HIGHLIGHT_DURATION_MS,
)
from dsviz.core.types import AnimationInstruction, AnimationVerb, Transition, TransitionKind

logger = logging.getLogger(__name__)

EASING_ALIASES = {
    "linear": QEasingCurve.Linear,
    "easeIn": QEasingCurve.InQuad,
    "easeOut": QEasingCurve.OutQuad,
    "easeInOut": QEasingCurve.InOutQuad,
    "easeInCubic": QEasingCurve.InCubic,
    "easeOutCubic": QEasingCurve.OutCubic,
    "easeInOutCubic": QEasingCurve.InOutCubic,
    "bounce": QEasingCurve.OutBounce,
    "elastic": QEasingCurve.OutElastic,
}

VERB_FOR_TRANSITION = {
    TransitionKind.INSERT: AnimationVerb.INSERT,
    TransitionKind.DELETE: AnimationVerb.DELETE,
    TransitionKind.UPDATE: AnimationVerb.UPDATE,
    TransitionKind.MOVE: AnimationVerb.MOVE,
}


def is_known_easing(name: str) -> bool:
    if name in EASING_ALIASES:
        return True
    return isinstance(getattr(QEasingCurve, name, None), QEasingCurve.Type)


def resolve_easing(name: Optional[str]) -> QEasingCurve:
    """
    Turn an easing name into a QEasingCurve. Accepts the short aliases
    (``easeInOut``, ``bounce`` ...) or any QEasingCurve type name
    (``OutBack``); unknown names fall back to the default easing.
    """
    name = name or DEFAULT_EASING
    if name in EASING_ALIASES:
        return QEasingCurve(EASING_ALIASES[name])
    curve_type = getattr(QEasingCurve, name, None)
    if isinstance(curve_type, QEasingCurve.Type):
        return QEasingCurve(curve_type)
    logger.warning("unknown easing %r, using %s", name, DEFAULT_EASING)
    return QEasingCurve(EASING_ALIASES[DEFAULT_EASING])


class AnimationToolkit:
    """
    Helper factory to standardize instruction creation so that every
    transition gets the same verb mapping and default timing.
    """

    def __init__(self, duration: int = DEFAULT_DURATION_MS, easing: str = DEFAULT_EASING,
                 delay: int = DEFAULT_DELAY_MS, stagger: int = 0):
        self.duration = duration
        self.easing = easing
        self.delay = delay
        self.stagger = stagger

    def instruction_for(self, transition: Transition, duration: Optional[int] = None,
                        easing: Optional[str] = None, delay: Optional[int] = None,
                        **metadata) -> AnimationInstruction:
        return AnimationInstruction(
            verb=VERB_FOR_TRANSITION[transition.kind],
            target_id=transition.element_id,
            duration=self.duration if duration is None else duration,
            delay=self.delay if delay is None else delay,
            easing=easing or self.easing,
            from_=transition.from_,
            to=transition.to,
            metadata=metadata,
        )

    def generate(self, transitions: Iterable[Transition], duration: Optional[int] = None,
                 easing: Optional[str] = None) -> List[AnimationInstruction]:
        """One instruction per transition, in order; ``stagger`` adds a growing delay."""
        return [
            self.instruction_for(
                transition,
                duration=duration,
                easing=easing,
                delay=self.delay + self.stagger * index,
            )
            for index, transition in enumerate(transitions)
        ]

    def highlight(self, target_ids: Iterable[str], duration: int = HIGHLIGHT_DURATION_MS,
                  **metadata) -> List[AnimationInstruction]:
        """Flash each target in turn, e.g. a BST search path or a BFS visit order."""
        return [
            AnimationInstruction(
                verb=AnimationVerb.HIGHLIGHT,
                target_id=target_id,
                duration=duration,
                delay=self.delay,
                easing=self.easing,
                metadata=dict(metadata, order=index),
            )
            for index, target_id in enumerate(target_ids)
        ]


def generate_instructions(transitions: Iterable[Transition], duration: Optional[int] = None,
                          easing: Optional[str] = None) -> List[AnimationInstruction]:
    """Default-timed instructions for ``transitions``."""
    return AnimationToolkit().generate(transitions, duration=duration, easing=easing)
