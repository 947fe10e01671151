from typing import Dict, Generic, List, Optional

from dsviz.core.base_model import (
    StructureModel,
    ValueT,
    require_list,
    require_mapping,
    require_max_size,
)
from dsviz.core.constants import DEFAULT_MAX_SIZE
from dsviz.core.errors import SnapshotFormatError
from dsviz.core.types import StructureKind


class BoundedStackModel(StructureModel, Generic[ValueT]):
    """LIFO stack backed by a Python list; pushes past ``max_size`` are rejected."""

    kind = StructureKind.STACK
    id_prefix = "stack"

    def __init__(self, max_size: int = DEFAULT_MAX_SIZE):
        super().__init__()
        self.max_size = max_size
        self._items: List[ValueT] = []

    def snapshot(self):
        return {"items": list(self._items), "maxSize": self.max_size}

    def push(self, value: ValueT) -> bool:
        if self.is_full():
            return False
        self._items.append(value)
        return True

    def pop(self) -> Optional[ValueT]:
        if not self._items:
            return None
        return self._items.pop()

    def peek(self) -> Optional[ValueT]:
        if not self._items:
            return None
        return self._items[-1]

    def is_empty(self) -> bool:
        return not self._items

    def is_full(self) -> bool:
        return len(self._items) >= self.max_size

    def size(self) -> int:
        return len(self._items)

    def __len__(self):
        return len(self._items)

    def clear(self):
        self._items = []

    def create_from_iterable(self, values):
        self.clear()
        for value in values:
            if not self.push(value):
                break

    def load_snapshot(self, snapshot):
        require_mapping(snapshot, "items", kind="stack")
        items = list(require_list(snapshot, "items", kind="stack"))
        max_size = require_max_size(snapshot.get("maxSize", self.max_size), kind="stack")
        if len(items) > max_size:
            raise SnapshotFormatError(
                f"stack snapshot holds {len(items)} items but maxSize is {max_size}"
            )
        self.max_size = max_size
        self._items = items

    def to_visual(self) -> List[Dict]:
        return [
            {"id": f"stack-{index}", "index": index, "value": value}
            for index, value in enumerate(self._items)
        ]
