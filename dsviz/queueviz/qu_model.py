from collections import deque
from typing import Deque, Dict, Generic, List, Optional

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


class BoundedQueueModel(StructureModel, Generic[ValueT]):
    """
    FIFO queue. The deque has no ``maxlen``; a full queue rejects
    ``enqueue`` instead of dropping the oldest item.
    """

    kind = StructureKind.QUEUE
    id_prefix = "queue"

    def __init__(self, max_size: int = DEFAULT_MAX_SIZE):
        super().__init__()
        self.max_size = max_size
        self._items: Deque[ValueT] = deque()

    def snapshot(self):
        return {"items": list(self._items), "maxSize": self.max_size}

    def enqueue(self, value: ValueT) -> bool:
        if self.is_full():
            return False
        self._items.append(value)
        return True

    def dequeue(self) -> Optional[ValueT]:
        if not self._items:
            return None
        return self._items.popleft()

    def peek(self) -> Optional[ValueT]:
        return self._items[0] if self._items else None

    def rear(self) -> Optional[ValueT]:
        return self._items[-1] if self._items else None

    def is_empty(self) -> bool:
        return not self._items

    def is_full(self) -> bool:
        return len(self._items) >= self.max_size

    def size(self) -> int:
        return len(self._items)

    def __len__(self):
        return len(self._items)

    def clear(self):
        self._items.clear()

    def create_from_iterable(self, values):
        self.clear()
        for value in values:
            if not self.enqueue(value):
                break

    def load_snapshot(self, snapshot):
        require_mapping(snapshot, "items", kind="queue")
        items = require_list(snapshot, "items", kind="queue")
        max_size = require_max_size(snapshot.get("maxSize", self.max_size), kind="queue")
        if len(items) > max_size:
            raise SnapshotFormatError(
                f"queue snapshot holds {len(items)} items but maxSize is {max_size}"
            )
        self.max_size = max_size
        self._items = deque(items)

    def to_visual(self) -> List[Dict]:
        return [
            {"id": f"queue-{index}", "index": index, "value": value}
            for index, value in enumerate(self._items)
        ]
