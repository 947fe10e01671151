from collections import deque
from typing import Any, Dict, List, Optional, Tuple

from dsviz.core.base_model import StructureModel, require_mapping
from dsviz.core.errors import SnapshotFormatError
from dsviz.core.types import StructureKind

TREE_TYPES = ("bst", "avl")


class BinarySearchTreeModel(StructureModel):
    """
    Binary search tree data model; nodes carry a unique id so that the view
    can animate incrementally. With ``tree_type="avl"`` every insert and
    delete rebalances on the way back up the recursion.
    """

    kind = StructureKind.TREE
    id_prefix = "tree-node"

    def __init__(self, tree_type: str = "bst"):
        super().__init__()
        if tree_type not in TREE_TYPES:
            raise ValueError(f"unknown tree type: {tree_type!r}")
        self.tree_type = tree_type
        self._nodes: Dict[str, Dict[str, Any]] = {}
        self._root: Optional[str] = None

    @property
    def root(self) -> Optional[str]:
        return self._root

    @property
    def size(self) -> int:
        return len(self._nodes)

    def __len__(self):
        return len(self._nodes)

    def clear(self):
        self._nodes.clear()
        self._root = None

    def create_from_iterable(self, values):
        self.clear()
        for value in values:
            self.insert(value)

    def value_of(self, node_id: str):
        node = self._nodes.get(node_id)
        return node["value"] if node else None

    # ---------- Insert ----------

    def insert(self, value) -> bool:
        """Returns False (and leaves the tree untouched) for a duplicate value."""
        before = len(self._nodes)
        self._root = self._insert(self._root, value)
        return len(self._nodes) > before

    def _insert(self, node_id: Optional[str], value) -> str:
        if node_id is None:
            return self._make_node(value)

        node = self._nodes[node_id]
        if value < node["value"]:
            node["left"] = self._insert(node["left"], value)
        elif value > node["value"]:
            node["right"] = self._insert(node["right"], value)
        else:
            return node_id

        return self._rebalance(node_id)

    # ---------- Delete ----------

    def delete(self, value) -> bool:
        if not self.search(value):
            return False
        self._root = self._delete(self._root, value)
        return True

    def _delete(self, node_id: Optional[str], value) -> Optional[str]:
        if node_id is None:
            return None

        node = self._nodes[node_id]
        if value < node["value"]:
            node["left"] = self._delete(node["left"], value)
        elif value > node["value"]:
            node["right"] = self._delete(node["right"], value)
        else:
            if node["left"] is None or node["right"] is None:
                replacement = node["left"] if node["left"] is not None else node["right"]
                del self._nodes[node_id]
                return replacement

            # two children: take the in-order successor's value, then remove it
            successor = self._nodes[self._min_node(node["right"])]
            node["value"] = successor["value"]
            node["right"] = self._delete(node["right"], successor["value"])

        return self._rebalance(node_id)

    # ---------- Balancing ----------

    def _height(self, node_id: Optional[str]) -> int:
        return self._nodes[node_id]["height"] if node_id is not None else 0

    def _update_height(self, node_id: str):
        node = self._nodes[node_id]
        node["height"] = 1 + max(self._height(node["left"]), self._height(node["right"]))

    def balance_factor(self, node_id: Optional[str]) -> int:
        if node_id is None:
            return 0
        node = self._nodes[node_id]
        return self._height(node["left"]) - self._height(node["right"])

    def _rebalance(self, node_id: str) -> str:
        self._update_height(node_id)
        if self.tree_type != "avl":
            return node_id

        node = self._nodes[node_id]
        balance = self.balance_factor(node_id)

        # left-left
        if balance > 1 and self.balance_factor(node["left"]) >= 0:
            return self._rotate_right(node_id)
        # right-right
        if balance < -1 and self.balance_factor(node["right"]) <= 0:
            return self._rotate_left(node_id)
        # left-right
        if balance > 1 and self.balance_factor(node["left"]) < 0:
            node["left"] = self._rotate_left(node["left"])
            return self._rotate_right(node_id)
        # right-left
        if balance < -1 and self.balance_factor(node["right"]) > 0:
            node["right"] = self._rotate_right(node["right"])
            return self._rotate_left(node_id)

        return node_id

    def _rotate_right(self, y_id: str) -> str:
        y = self._nodes[y_id]
        x_id = y["left"]
        x = self._nodes[x_id]
        y["left"] = x["right"]
        x["right"] = y_id
        self._update_height(y_id)
        self._update_height(x_id)
        return x_id

    def _rotate_left(self, x_id: str) -> str:
        x = self._nodes[x_id]
        y_id = x["right"]
        y = self._nodes[y_id]
        x["right"] = y["left"]
        y["left"] = x_id
        self._update_height(x_id)
        self._update_height(y_id)
        return y_id

    def is_balanced(self) -> bool:
        return all(abs(self.balance_factor(node_id)) <= 1 for node_id in self._nodes)

    def height(self) -> int:
        return self._height(self._root)

    # ---------- Search ----------

    def search(self, value) -> bool:
        return self.find(value)[0] is not None

    def find(self, value) -> Tuple[Optional[str], List[str]]:
        """
        Return (node id, search path ids); the id is None when the value is
        absent. The path is what a view highlights while searching.
        """
        path: List[str] = []
        current_id = self._root
        while current_id is not None:
            path.append(current_id)
            node = self._nodes[current_id]
            if value == node["value"]:
                return current_id, path
            current_id = node["left"] if value < node["value"] else node["right"]
        return None, path

    def _min_node(self, node_id: str) -> str:
        while self._nodes[node_id]["left"] is not None:
            node_id = self._nodes[node_id]["left"]
        return node_id

    def min_value(self):
        return None if self._root is None else self._nodes[self._min_node(self._root)]["value"]

    def max_value(self):
        if self._root is None:
            return None
        node_id = self._root
        while self._nodes[node_id]["right"] is not None:
            node_id = self._nodes[node_id]["right"]
        return self._nodes[node_id]["value"]

    # ---------- Traversals ----------

    def in_order(self) -> List[Any]:
        result: List[Any] = []

        def walk(node_id):
            if node_id is not None:
                node = self._nodes[node_id]
                walk(node["left"])
                result.append(node["value"])
                walk(node["right"])

        walk(self._root)
        return result

    def pre_order(self) -> List[Any]:
        result: List[Any] = []

        def walk(node_id):
            if node_id is not None:
                node = self._nodes[node_id]
                result.append(node["value"])
                walk(node["left"])
                walk(node["right"])

        walk(self._root)
        return result

    def post_order(self) -> List[Any]:
        result: List[Any] = []

        def walk(node_id):
            if node_id is not None:
                node = self._nodes[node_id]
                walk(node["left"])
                walk(node["right"])
                result.append(node["value"])

        walk(self._root)
        return result

    def level_order(self) -> List[Any]:
        result: List[Any] = []
        frontier = deque([self._root] if self._root is not None else [])
        while frontier:
            node = self._nodes[frontier.popleft()]
            result.append(node["value"])
            for child in (node["left"], node["right"]):
                if child is not None:
                    frontier.append(child)
        return result

    # ---------- Snapshot ----------

    def snapshot(self) -> Dict[str, Any]:
        return {
            "type": self.tree_type,
            "size": len(self._nodes),
            "root": self._serialize(self._root),
        }

    def _serialize(self, node_id: Optional[str]):
        if node_id is None:
            return None
        node = self._nodes[node_id]
        return {
            "id": node["id"],
            "value": node["value"],
            "left": self._serialize(node["left"]),
            "right": self._serialize(node["right"]),
            "height": node["height"],
        }

    def load_snapshot(self, snapshot):
        require_mapping(snapshot, "root", kind="tree")
        tree_type = snapshot.get("type", self.tree_type)
        if tree_type not in TREE_TYPES:
            raise SnapshotFormatError(f"unknown tree type: {tree_type!r}")
        self.clear()
        self.tree_type = tree_type
        self._root = self._rebuild(snapshot["root"])
        self._reseed_ids(self._nodes)

    def _rebuild(self, info) -> Optional[str]:
        if info is None:
            return None
        require_mapping(info, "id", "value", kind="tree node")
        node_id = str(info["id"])
        if node_id in self._nodes:
            raise SnapshotFormatError(f"duplicate tree node id {node_id!r}")
        node = {"id": node_id, "value": info["value"], "left": None, "right": None, "height": 1}
        self._nodes[node_id] = node
        node["left"] = self._rebuild(info.get("left"))
        node["right"] = self._rebuild(info.get("right"))
        self._update_height(node_id)
        return node_id

    def to_visual(self) -> List[Dict[str, Any]]:
        """Pre-order node list with parent links and depth for layout."""
        elements: List[Dict[str, Any]] = []

        def walk(node_id, parent_id, side, depth):
            if node_id is None:
                return
            node = self._nodes[node_id]
            elements.append(
                {
                    "id": node_id,
                    "value": node["value"],
                    "parent": parent_id,
                    "side": side,
                    "depth": depth,
                    "left": node["left"],
                    "right": node["right"],
                    "height": node["height"],
                }
            )
            walk(node["left"], node_id, "left", depth + 1)
            walk(node["right"], node_id, "right", depth + 1)

        walk(self._root, None, None, 0)
        return elements

    # ---------- Internal helpers ----------

    def _make_node(self, value) -> str:
        node_id = self._new_id()
        self._nodes[node_id] = {
            "id": node_id,
            "value": value,
            "left": None,
            "right": None,
            "height": 1,
        }
        return node_id
