from functools import cmp_to_key
from typing import Any, Callable, Dict, Generic, Iterable, List, Optional

from dsviz.core.base_model import StructureModel, ValueT, require_mapping
from dsviz.core.errors import SnapshotFormatError
from dsviz.core.types import StructureKind


class SequenceModel(StructureModel, Generic[ValueT]):
    """
    Contiguous sequence (1-D, or 2-D stored row-major with a fixed column
    count). Element identity is positional: ``array-<index>``.
    """

    kind = StructureKind.ARRAY
    id_prefix = "array"

    def __init__(self, values: Optional[Iterable[ValueT]] = None, dimensions: int = 1,
                 columns: Optional[int] = None):
        super().__init__()
        if dimensions not in (1, 2):
            raise ValueError("dimensions must be 1 or 2")
        self.dimensions = dimensions
        self.columns = columns
        self._items: List[ValueT] = list(values) if values is not None else []

    @property
    def length(self) -> int:
        return len(self._items)

    def __len__(self):
        return len(self._items)

    def _in_range(self, index: int) -> bool:
        return isinstance(index, int) and 0 <= index < len(self._items)

    def clear(self):
        self._items.clear()

    def create_from_iterable(self, values):
        self._items = list(values)

    def get_data(self) -> List[ValueT]:
        return list(self._items)

    def get(self, index: int) -> Optional[ValueT]:
        if not self._in_range(index):
            return None
        return self._items[index]

    def set(self, index: int, value: ValueT) -> bool:
        if not self._in_range(index):
            return False
        self._items[index] = value
        return True

    def push(self, value: ValueT) -> int:
        self._items.append(value)
        return len(self._items)

    def pop(self) -> Optional[ValueT]:
        if not self._items:
            return None
        return self._items.pop()

    def insert(self, index: int, value: ValueT) -> bool:
        if not isinstance(index, int) or index < 0 or index > len(self._items):
            return False
        self._items.insert(index, value)
        return True

    def remove(self, index: int) -> Optional[ValueT]:
        if not self._in_range(index):
            return None
        return self._items.pop(index)

    def swap(self, i: int, j: int) -> bool:
        if not (self._in_range(i) and self._in_range(j)):
            return False
        self._items[i], self._items[j] = self._items[j], self._items[i]
        return True

    def reverse(self):
        self._items.reverse()

    def sort(self, comparator: Optional[Callable[[Any, Any], int]] = None, key=None,
             reverse: bool = False):
        """Stable in-place sort; ``comparator`` is a cmp-style function."""
        if comparator is not None:
            key = cmp_to_key(comparator)
        self._items.sort(key=key, reverse=reverse)

    def index_of(self, value: ValueT) -> int:
        for index, item in enumerate(self._items):
            if item == value:
                return index
        return -1

    # ---------- 2-D helpers ----------

    def _cell_index(self, row: int, col: int) -> Optional[int]:
        if self.dimensions != 2 or not self.columns:
            return None
        if row < 0 or col < 0 or col >= self.columns:
            return None
        index = row * self.columns + col
        return index if index < len(self._items) else None

    def get_cell(self, row: int, col: int) -> Optional[ValueT]:
        index = self._cell_index(row, col)
        return None if index is None else self._items[index]

    def set_cell(self, row: int, col: int, value: ValueT) -> bool:
        index = self._cell_index(row, col)
        if index is None:
            return False
        self._items[index] = value
        return True

    # ---------- Snapshot ----------

    def snapshot(self) -> Dict[str, Any]:
        return {
            "data": list(self._items),
            "dimensions": self.dimensions,
            "columns": self.columns,
        }

    def load_snapshot(self, snapshot):
        require_mapping(snapshot, "data", kind="array")
        data = snapshot["data"]
        if not isinstance(data, list):
            raise SnapshotFormatError("array snapshot data must be a list")
        dimensions = snapshot.get("dimensions", 1)
        if dimensions not in (1, 2):
            raise SnapshotFormatError(f"unsupported array dimensions: {dimensions!r}")
        self.dimensions = dimensions
        self.columns = snapshot.get("columns")
        self._items = list(data)

    def to_visual(self) -> List[Dict[str, Any]]:
        elements = []
        for index, value in enumerate(self._items):
            element = {"id": f"array-{index}", "index": index, "value": value}
            if self.dimensions == 2 and self.columns:
                element["row"], element["col"] = divmod(index, self.columns)
            elements.append(element)
        return elements
