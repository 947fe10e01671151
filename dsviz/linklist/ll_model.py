from typing import Any, Dict, Iterator, List, Optional

from dsviz.core.base_model import StructureModel, require_list, require_mapping
from dsviz.core.errors import SnapshotFormatError
from dsviz.core.types import StructureKind

CHAIN_TYPES = ("singly", "doubly", "circular", "doubly_circular")


class LinkedChainModel(StructureModel):
    """
    Linked list model implemented with dictionaries to keep the model side
    purely data-driven: nodes live in an id-keyed arena and link to each
    other by id.

    ``circular`` closes ``tail.next -> head``; ``doubly_circular`` also keeps
    ``head.prev -> tail``. ``prev`` links are only maintained for the doubly
    variants.
    """

    kind = StructureKind.LINKED_LIST
    id_prefix = "node"

    def __init__(self, chain_type: str = "singly"):
        super().__init__()
        if chain_type not in CHAIN_TYPES:
            raise ValueError(f"unknown chain type: {chain_type!r}")
        self.chain_type = chain_type
        self.head: Optional[str] = None
        self.tail: Optional[str] = None
        self.nodes: Dict[str, Dict] = {}
        self.length = 0

    @property
    def is_doubly(self) -> bool:
        return self.chain_type in ("doubly", "doubly_circular")

    @property
    def is_circular(self) -> bool:
        return self.chain_type in ("circular", "doubly_circular")

    def __len__(self):
        return self.length

    def size(self) -> int:
        return self.length

    def _new_node(self, value):
        node_id = self._new_id()
        node = {"id": node_id, "value": value, "next": None, "prev": None}
        self.nodes[node_id] = node
        self.length += 1
        return node_id

    def clear(self):
        self.head = None
        self.tail = None
        self.nodes.clear()
        self.length = 0

    def create_from_iterable(self, values):
        self.clear()
        for value in values:
            self.append(value)

    # ---------- Link helpers ----------

    def _link(self, left_id: str, right_id: Optional[str]):
        self.nodes[left_id]["next"] = right_id
        if right_id is not None and self.is_doubly:
            self.nodes[right_id]["prev"] = left_id

    def _close_ends(self):
        """Re-terminate (or re-close) the chain after the head/tail moved."""
        if self.head is None:
            self.tail = None
            return
        head = self.nodes[self.head]
        tail = self.nodes[self.tail]
        if self.is_circular:
            tail["next"] = self.head
            head["prev"] = self.tail if self.is_doubly else None
        else:
            tail["next"] = None
            head["prev"] = None

    def _iter_ids(self) -> Iterator[str]:
        current = self.head
        visited = 0
        while current is not None and visited < self.length:
            yield current
            visited += 1
            current = self.nodes[current]["next"]
            if current == self.head:
                break

    def _node_id_at(self, index: int) -> Optional[str]:
        if not isinstance(index, int) or index < 0 or index >= self.length:
            return None
        current = self.head
        for _ in range(index):
            current = self.nodes[current]["next"]
        return current

    def node_ids(self) -> List[str]:
        return list(self._iter_ids())

    # ---------- Insertion ----------

    def prepend(self, value) -> str:
        node_id = self._new_node(value)
        if self.head is None:
            self.head = self.tail = node_id
        else:
            self._link(node_id, self.head)
            self.head = node_id
        self._close_ends()
        return node_id

    def append(self, value) -> str:
        node_id = self._new_node(value)
        if self.tail is None:
            self.head = self.tail = node_id
        else:
            self._link(self.tail, node_id)
            self.tail = node_id
        self._close_ends()
        return node_id

    def insert_at(self, index: int, value) -> bool:
        if not isinstance(index, int) or index < 0 or index > self.length:
            return False
        if index == 0:
            self.prepend(value)
            return True
        if index == self.length:
            self.append(value)
            return True

        prev_id = self._node_id_at(index - 1)
        next_id = self.nodes[prev_id]["next"]
        node_id = self._new_node(value)
        self._link(prev_id, node_id)
        self._link(node_id, next_id)
        return True

    # ---------- Removal ----------

    def remove_head(self):
        if self.head is None:
            return None
        removed_id = self.head
        if self.length == 1:
            self.head = self.tail = None
        else:
            self.head = self.nodes[removed_id]["next"]
        return self._drop(removed_id)

    def remove_tail(self):
        if self.tail is None:
            return None
        removed_id = self.tail
        if self.length == 1:
            self.head = self.tail = None
        elif self.is_doubly:
            self.tail = self.nodes[removed_id]["prev"]
        else:
            # singly variants walk to the node before the tail
            self.tail = self._node_id_at(self.length - 2)
        return self._drop(removed_id)

    def remove_at(self, index: int):
        if not isinstance(index, int) or index < 0 or index >= self.length:
            return None
        if index == 0:
            return self.remove_head()
        if index == self.length - 1:
            return self.remove_tail()

        prev_id = self._node_id_at(index - 1)
        removed_id = self.nodes[prev_id]["next"]
        self._link(prev_id, self.nodes[removed_id]["next"])
        removed = self.nodes.pop(removed_id)
        self.length -= 1
        return removed["value"]

    def _drop(self, node_id: str):
        removed = self.nodes.pop(node_id)
        self.length -= 1
        if self.head is not None:
            self._close_ends()
        return removed["value"]

    # ---------- Access ----------

    def find(self, value) -> int:
        for index, node_id in enumerate(self._iter_ids()):
            if self.nodes[node_id]["value"] == value:
                return index
        return -1

    def get(self, index: int):
        node_id = self._node_id_at(index)
        return None if node_id is None else self.nodes[node_id]["value"]

    def set(self, index: int, value) -> bool:
        node_id = self._node_id_at(index)
        if node_id is None:
            return False
        self.nodes[node_id]["value"] = value
        return True

    def values(self) -> List[Any]:
        return [self.nodes[node_id]["value"] for node_id in self._iter_ids()]

    def reverse(self):
        ordered = self.node_ids()
        if len(ordered) < 2:
            return
        ordered.reverse()
        for node_id in ordered:
            self.nodes[node_id]["prev"] = None
        for left_id, right_id in zip(ordered, ordered[1:]):
            self._link(left_id, right_id)
        self.head, self.tail = ordered[0], ordered[-1]
        self._close_ends()

    # ---------- Snapshot ----------

    def snapshot(self) -> Dict[str, Any]:
        return {
            "type": self.chain_type,
            "elements": [
                {"id": node_id, "value": self.nodes[node_id]["value"]}
                for node_id in self._iter_ids()
            ],
            "length": self.length,
        }

    def load_snapshot(self, snapshot):
        require_mapping(snapshot, "elements", kind="linkedlist")
        chain_type = snapshot.get("type", self.chain_type)
        if chain_type not in CHAIN_TYPES:
            raise SnapshotFormatError(f"unknown chain type: {chain_type!r}")

        self.clear()
        self.chain_type = chain_type
        ordered = []
        for element in require_list(snapshot, "elements", kind="linkedlist"):
            require_mapping(element, "id", "value", kind="linkedlist element")
            node_id = str(element["id"])
            if node_id in self.nodes:
                raise SnapshotFormatError(f"duplicate node id {node_id!r}")
            self.nodes[node_id] = {
                "id": node_id,
                "value": element["value"],
                "next": None,
                "prev": None,
            }
            ordered.append(node_id)

        self.length = len(ordered)
        for left_id, right_id in zip(ordered, ordered[1:]):
            self._link(left_id, right_id)
        if ordered:
            self.head, self.tail = ordered[0], ordered[-1]
            self._close_ends()
        self._reseed_ids(ordered)

    def to_visual(self) -> List[Dict[str, Any]]:
        elements = []
        for index, node_id in enumerate(self._iter_ids()):
            node = self.nodes[node_id]
            elements.append(
                {
                    "id": node_id,
                    "index": index,
                    "value": node["value"],
                    "next": node["next"],
                    "prev": node["prev"],
                }
            )
        return elements
