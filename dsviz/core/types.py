"""Value types exchanged between engines, the diff engine and the timeline."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from dsviz.core.constants import DEFAULT_DELAY_MS, DEFAULT_DURATION_MS, DEFAULT_EASING


class StructureKind(str, Enum):
    ARRAY = "array"
    LINKED_LIST = "linkedlist"
    STACK = "stack"
    QUEUE = "queue"
    HASH_TABLE = "hashtable"
    TREE = "tree"
    GRAPH = "graph"

    @classmethod
    def parse(cls, value) -> Optional["StructureKind"]:
        """Return the matching kind, or None for an unknown name."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            return None


class TransitionKind(str, Enum):
    INSERT = "INSERT"
    DELETE = "DELETE"
    UPDATE = "UPDATE"
    MOVE = "MOVE"


class AnimationVerb(str, Enum):
    INSERT = "INSERT"
    DELETE = "DELETE"
    UPDATE = "UPDATE"
    MOVE = "MOVE"
    HIGHLIGHT = "HIGHLIGHT"
    SCALE = "SCALE"
    FADE_IN = "FADE_IN"
    FADE_OUT = "FADE_OUT"
    PATH_DRAW = "PATH_DRAW"


@dataclass(frozen=True)
class Transition:
    """One atomic visual change between two snapshots."""

    kind: TransitionKind
    element_id: str
    from_: Optional[Dict[str, Any]] = None
    to: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.kind.value,
            "elementId": self.element_id,
            "from": self.from_,
            "to": self.to,
        }


@dataclass(frozen=True)
class AnimationInstruction:
    """A transition translated into a visual verb, a target and timing hints."""

    verb: AnimationVerb
    target_id: str
    duration: int = DEFAULT_DURATION_MS
    delay: int = DEFAULT_DELAY_MS
    easing: str = DEFAULT_EASING
    from_: Optional[Dict[str, Any]] = None
    to: Optional[Dict[str, Any]] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def total_duration(self) -> int:
        return self.delay + self.duration

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.verb.value,
            "targetId": self.target_id,
            "duration": self.duration,
            "delay": self.delay,
            "easing": self.easing,
            "from": self.from_,
            "to": self.to,
            "metadata": dict(self.metadata),
        }
