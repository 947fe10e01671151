import logging
import math
from typing import Any, Dict, List, Optional

from dsviz.core.base_model import StructureModel, require_list, require_mapping
from dsviz.core.constants import DEFAULT_HASH_CAPACITY, MAX_LOAD_FACTOR
from dsviz.core.errors import SnapshotFormatError
from dsviz.core.types import StructureKind

logger = logging.getLogger(__name__)


def string_hash(text: str) -> int:
    """Polynomial hash over UTF-16 code units, ``h * 31 + c`` with signed 32-bit wraparound."""
    h = 0
    data = text.encode("utf-16-le")
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = ((h << 5) - h + unit) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return h


def _key_text(key) -> str:
    if key is None:
        return "null"
    if isinstance(key, bool):
        return "true" if key else "false"
    return str(key)


def _same_key(a, b) -> bool:
    return isinstance(a, bool) == isinstance(b, bool) and a == b


class ChainedHashTableModel(StructureModel):
    """
    Hash table using separate chaining. Each bucket is a list of ``[key, value]``
    nodes with the most recently inserted node first; capacity doubles and
    every entry is rehashed once ``size / capacity`` exceeds the load factor.
    """

    kind = StructureKind.HASH_TABLE
    id_prefix = "hash"

    def __init__(self, capacity: int = DEFAULT_HASH_CAPACITY):
        super().__init__()
        if capacity < 1:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._buckets: List[List[List[Any]]] = [[] for _ in range(capacity)]
        self._size = 0

    @property
    def size(self) -> int:
        return self._size

    @property
    def load_factor(self) -> float:
        return self._size / self.capacity

    def __len__(self):
        return self._size

    def hash_key(self, key) -> int:
        if isinstance(key, str):
            h = string_hash(key)
        elif isinstance(key, (int, float)) and not isinstance(key, bool) and math.isfinite(key):
            h = int(abs(key))
        else:
            h = string_hash(_key_text(key))
        return abs(h) % self.capacity

    def _find_node(self, key):
        for node in self._buckets[self.hash_key(key)]:
            if _same_key(node[0], key):
                return node
        return None

    # ---------- Operations ----------

    def set(self, key, value) -> bool:
        """Insert or overwrite; returns True when a new key was added."""
        node = self._find_node(key)
        if node is not None:
            node[1] = value
            return False

        self._buckets[self.hash_key(key)].insert(0, [key, value])
        self._size += 1
        if self.load_factor > MAX_LOAD_FACTOR:
            self._resize(self.capacity * 2)
        return True

    def get(self, key) -> Optional[Any]:
        node = self._find_node(key)
        return None if node is None else node[1]

    def has(self, key) -> bool:
        return self._find_node(key) is not None

    def delete(self, key) -> bool:
        bucket = self._buckets[self.hash_key(key)]
        for position, node in enumerate(bucket):
            if _same_key(node[0], key):
                del bucket[position]
                self._size -= 1
                return True
        return False

    def clear(self):
        self._buckets = [[] for _ in range(self.capacity)]
        self._size = 0

    def create_from_iterable(self, values):
        """Load ``(key, value)`` pairs, or the items of a mapping."""
        self.clear()
        pairs = values.items() if isinstance(values, dict) else values
        for key, value in pairs:
            self.set(key, value)

    def _resize(self, new_capacity: int):
        old_buckets = self._buckets
        logger.debug("resizing hash table %d -> %d", self.capacity, new_capacity)
        self.capacity = new_capacity
        self._buckets = [[] for _ in range(new_capacity)]
        # chains stay most-recent-first across a resize
        for bucket in old_buckets:
            for key, value in reversed(bucket):
                self._buckets[self.hash_key(key)].insert(0, [key, value])

    # ---------- Reads ----------

    def keys(self) -> List[Any]:
        return [node[0] for bucket in self._buckets for node in bucket]

    def values(self) -> List[Any]:
        return [node[1] for bucket in self._buckets for node in bucket]

    def entries(self) -> List[Dict[str, Any]]:
        return [
            {"key": node[0], "value": node[1]}
            for bucket in self._buckets
            for node in bucket
        ]

    def bucket_entries(self, bucket_index: int) -> List[Dict[str, Any]]:
        if not 0 <= bucket_index < self.capacity:
            return []
        return [{"key": key, "value": value} for key, value in self._buckets[bucket_index]]

    def buckets(self) -> List[List[Dict[str, Any]]]:
        return [self.bucket_entries(index) for index in range(self.capacity)]

    # ---------- Snapshot ----------

    def snapshot(self):
        return {"capacity": self.capacity, "size": self._size, "entries": self.entries()}

    def load_snapshot(self, snapshot):
        require_mapping(snapshot, "capacity", "entries", kind="hashtable")
        capacity = snapshot["capacity"]
        if not isinstance(capacity, int) or capacity < 1:
            raise SnapshotFormatError(f"invalid hash table capacity: {capacity!r}")

        self.capacity = capacity
        self.clear()
        # entries are listed head-first per bucket; prepending them in
        # reverse rebuilds every chain in the same order
        for entry in reversed(require_list(snapshot, "entries", kind="hashtable")):
            key = require_mapping(entry, "key", "value", kind="hashtable entry")["key"]
            self._buckets[self.hash_key(key)].insert(0, [key, entry["value"]])
            self._size += 1

    def to_visual(self) -> List[Dict[str, Any]]:
        elements = []
        for bucket_index, bucket in enumerate(self._buckets):
            for position, (key, value) in enumerate(bucket):
                elements.append(
                    {
                        "id": f"hash-{key}",
                        "bucket": bucket_index,
                        "position": position,
                        "key": key,
                        "value": value,
                    }
                )
        return elements
