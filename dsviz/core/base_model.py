import itertools
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional, TypeVar

from dsviz.core.errors import SnapshotFormatError

ValueT = TypeVar("ValueT")

_ID_SUFFIX = re.compile(r"-(\d+)$")


class StructureModel(ABC):
    """
    Base class for structure engines, providing:
    - the snapshot / load_snapshot contract used by the diff engine
    - a rendering-agnostic ``to_visual`` element list
    - deterministic id minting that survives a snapshot round trip

    Engines never raise for expected conditions (empty, full, missing,
    out of range); they return None / False / -1 instead.
    """

    kind = None
    id_prefix = "node"

    def __init__(self):
        self._id_iter = itertools.count()

    # ---------- Contract ----------

    @abstractmethod
    def snapshot(self) -> Dict[str, Any]:
        """Return a fresh JSON-serializable copy of the full state."""

    @abstractmethod
    def load_snapshot(self, snapshot: Dict[str, Any]) -> None:
        """Replace the state with ``snapshot``, rebuilding every link."""

    @abstractmethod
    def to_visual(self) -> List[Dict[str, Any]]:
        """Addressable elements, each carrying the id used in transitions."""

    @abstractmethod
    def clear(self) -> None:
        ...

    @abstractmethod
    def __len__(self) -> int:
        ...

    @classmethod
    def from_snapshot(cls, snapshot: Dict[str, Any]):
        model = cls()
        model.load_snapshot(snapshot)
        return model

    def create_from_iterable(self, values: Iterable[Any]) -> None:
        raise NotImplementedError

    # ---------- Id helpers ----------

    def _new_id(self) -> str:
        return f"{self.id_prefix}-{next(self._id_iter)}"

    def _reseed_ids(self, ids: Iterable[str]) -> None:
        """Continue numbering after the highest ``<prefix>-N`` id in ``ids``."""
        max_id = -1
        for node_id in ids:
            match = _ID_SUFFIX.search(str(node_id))
            if match:
                max_id = max(max_id, int(match.group(1)))
        self._id_iter = itertools.count(max_id + 1)

    def _reset_ids(self) -> None:
        self._id_iter = itertools.count()


def require_mapping(snapshot, *keys: str, kind: Optional[str] = None) -> Dict[str, Any]:
    """Check that ``snapshot`` is a dict holding ``keys``; return it."""
    label = kind or "structure"
    if not isinstance(snapshot, dict):
        raise SnapshotFormatError(
            f"{label} snapshot must be a mapping, got {type(snapshot).__name__}"
        )
    missing = [key for key in keys if key not in snapshot]
    if missing:
        raise SnapshotFormatError(f"{label} snapshot is missing {', '.join(missing)}")
    return snapshot


def require_list(snapshot: Dict[str, Any], key: str, kind: Optional[str] = None) -> List[Any]:
    value = snapshot[key]
    if not isinstance(value, list):
        raise SnapshotFormatError(
            f"{kind or 'structure'} snapshot field {key!r} must be a list, "
            f"got {type(value).__name__}"
        )
    return value


def require_max_size(value, kind: Optional[str] = None) -> int:
    # bool is an int subclass, so reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise SnapshotFormatError(f"invalid {kind or 'structure'} maxSize: {value!r}")
    return value
