import heapq
import itertools
from collections import deque
from typing import Any, Callable, Dict, List, Optional, Tuple

from dsviz.core.base_model import StructureModel, require_list, require_mapping
from dsviz.core.errors import SnapshotFormatError
from dsviz.core.types import StructureKind

GRAPH_TYPES = ("directed", "undirected")

VisitCallback = Callable[[Dict[str, Any]], None]


def edge_id(source: str, target: str) -> str:
    return f"edge-{source}-{target}"


class GraphModel(StructureModel):
    """
    Directed or undirected graph stored as node / edge maps plus an adjacency
    map of insertion-ordered neighbour ids. An undirected edge is stored as
    two directed entries with mirrored endpoints and the same weight.
    """

    kind = StructureKind.GRAPH
    id_prefix = "node"

    def __init__(self, graph_type: str = "undirected", weighted: bool = False):
        super().__init__()
        if graph_type not in GRAPH_TYPES:
            raise ValueError(f"unknown graph type: {graph_type!r}")
        self.graph_type = graph_type
        self.weighted = weighted
        self._nodes: Dict[str, Dict[str, Any]] = {}
        self._edges: Dict[str, Dict[str, Any]] = {}
        # dict keys double as an ordered set
        self._adjacency: Dict[str, Dict[str, None]] = {}

    @property
    def directed(self) -> bool:
        return self.graph_type == "directed"

    def __len__(self):
        return len(self._nodes)

    def clear(self):
        self._nodes.clear()
        self._edges.clear()
        self._adjacency.clear()
        self._reset_ids()

    def create_from_iterable(self, values):
        """Add one node per value."""
        self.clear()
        for value in values:
            self.add_node(value)

    # ---------- Nodes ----------

    def add_node(self, value) -> str:
        node_id = self._new_id()
        self._nodes[node_id] = {"id": node_id, "value": value}
        self._adjacency[node_id] = {}
        return node_id

    def remove_node(self, node_id: str) -> bool:
        if node_id not in self._nodes:
            return False
        for neighbor_id in list(self._adjacency[node_id]):
            self.remove_edge(node_id, neighbor_id)
        if self.directed:
            for source_id, neighbors in self._adjacency.items():
                if node_id in neighbors:
                    self.remove_edge(source_id, node_id)
        del self._nodes[node_id]
        del self._adjacency[node_id]
        return True

    def update_node(self, node_id: str, value) -> bool:
        node = self._nodes.get(node_id)
        if node is None:
            return False
        node["value"] = value
        return True

    def get_node(self, node_id: str) -> Optional[Dict[str, Any]]:
        node = self._nodes.get(node_id)
        return dict(node) if node else None

    def get_nodes(self) -> List[Dict[str, Any]]:
        return [dict(node) for node in self._nodes.values()]

    def node_count(self) -> int:
        return len(self._nodes)

    # ---------- Edges ----------

    def _store_edge(self, source: str, target: str, weight):
        self._edges[edge_id(source, target)] = {
            "id": edge_id(source, target),
            "source": source,
            "target": target,
            "weight": weight,
        }
        self._adjacency[source][target] = None

    def add_edge(self, source: str, target: str, weight: Optional[float] = None) -> bool:
        if source not in self._nodes or target not in self._nodes:
            return False
        weight = weight if self.weighted else None
        self._store_edge(source, target, weight)
        if not self.directed:
            self._store_edge(target, source, weight)
        return True

    def remove_edge(self, source: str, target: str) -> bool:
        if self._edges.pop(edge_id(source, target), None) is None:
            return False
        self._adjacency[source].pop(target, None)
        if not self.directed:
            self._edges.pop(edge_id(target, source), None)
            self._adjacency[target].pop(source, None)
        return True

    def has_edge(self, source: str, target: str) -> bool:
        return edge_id(source, target) in self._edges

    def get_edges(self) -> List[Dict[str, Any]]:
        return [dict(edge) for edge in self._edges.values()]

    def edge_count(self) -> int:
        if self.directed:
            return len(self._edges)
        # an undirected self-loop is stored once, every other edge twice
        loops = sum(1 for edge in self._edges.values() if edge["source"] == edge["target"])
        return (len(self._edges) + loops) // 2

    def get_neighbors(self, node_id: str) -> List[Dict[str, Any]]:
        return [dict(self._nodes[n]) for n in self._adjacency.get(node_id, {})]

    def get_degree(self, node_id: str) -> int:
        """Outgoing adjacency count."""
        return len(self._adjacency.get(node_id, {}))

    # ---------- Traversal ----------

    def bfs(self, start_id: str, callback: Optional[VisitCallback] = None) -> List[Dict[str, Any]]:
        if start_id not in self._nodes:
            return []
        visited = {start_id}
        frontier = deque([start_id])
        result = []
        while frontier:
            node_id = frontier.popleft()
            node = dict(self._nodes[node_id])
            result.append(node)
            if callback:
                callback(node)
            for neighbor_id in self._adjacency[node_id]:
                if neighbor_id not in visited:
                    visited.add(neighbor_id)
                    frontier.append(neighbor_id)
        return result

    def dfs(self, start_id: str, callback: Optional[VisitCallback] = None) -> List[Dict[str, Any]]:
        visited = set()
        result = []

        def traverse(node_id):
            if node_id in visited or node_id not in self._nodes:
                return
            visited.add(node_id)
            node = dict(self._nodes[node_id])
            result.append(node)
            if callback:
                callback(node)
            for neighbor_id in self._adjacency[node_id]:
                traverse(neighbor_id)

        traverse(start_id)
        return result

    def has_path(self, source: str, target: str) -> bool:
        if source not in self._nodes or target not in self._nodes:
            return False
        visited = {source}
        frontier = deque([source])
        while frontier:
            node_id = frontier.popleft()
            if node_id == target:
                return True
            for neighbor_id in self._adjacency[node_id]:
                if neighbor_id not in visited:
                    visited.add(neighbor_id)
                    frontier.append(neighbor_id)
        return False

    def shortest_path(self, source: str, target: str) -> Tuple[Optional[float], List[str]]:
        """
        Dijkstra over edge weights (each edge counts 1 in an unweighted graph).

        Returns (distance, node ids from source to target), or (None, [])
        when the target is unreachable.
        """
        if source not in self._nodes or target not in self._nodes:
            return None, []

        distances: Dict[str, float] = {source: 0}
        previous: Dict[str, str] = {}
        tie = itertools.count()
        heap = [(0, next(tie), source)]
        done = set()
        while heap:
            distance, _, node_id = heapq.heappop(heap)
            if node_id in done:
                continue
            done.add(node_id)
            if node_id == target:
                break
            for neighbor_id in self._adjacency[node_id]:
                weight = self._edges[edge_id(node_id, neighbor_id)]["weight"]
                candidate = distance + (1 if weight is None else weight)
                if candidate < distances.get(neighbor_id, float("inf")):
                    distances[neighbor_id] = candidate
                    previous[neighbor_id] = node_id
                    heapq.heappush(heap, (candidate, next(tie), neighbor_id))

        if target not in distances:
            return None, []
        path = [target]
        while path[-1] != source:
            path.append(previous[path[-1]])
        path.reverse()
        return distances[target], path

    # ---------- Snapshot ----------

    def snapshot(self) -> Dict[str, Any]:
        return {
            "type": self.graph_type,
            "weighted": self.weighted,
            "nodes": self.get_nodes(),
            "edges": self.get_edges(),
        }

    def load_snapshot(self, snapshot):
        require_mapping(snapshot, "nodes", "edges", kind="graph")
        graph_type = snapshot.get("type", self.graph_type)
        if graph_type not in GRAPH_TYPES:
            raise SnapshotFormatError(f"unknown graph type: {graph_type!r}")

        self.clear()
        self.graph_type = graph_type
        self.weighted = bool(snapshot.get("weighted", self.weighted))
        for info in require_list(snapshot, "nodes", kind="graph"):
            require_mapping(info, "id", kind="graph node")
            node_id = str(info["id"])
            self._nodes[node_id] = {"id": node_id, "value": info.get("value")}
            self._adjacency[node_id] = {}
        for info in require_list(snapshot, "edges", kind="graph"):
            require_mapping(info, "source", "target", kind="graph edge")
            source, target = str(info["source"]), str(info["target"])
            if source not in self._nodes or target not in self._nodes:
                raise SnapshotFormatError(f"edge {source}->{target} references an unknown node")
            self._store_edge(source, target, info.get("weight"))
        self._reseed_ids(self._nodes)

    def to_visual(self) -> List[Dict[str, Any]]:
        elements = [
            {"id": node["id"], "kind": "node", "value": node["value"],
             "degree": self.get_degree(node["id"])}
            for node in self._nodes.values()
        ]
        elements.extend(
            {"id": edge["id"], "kind": "edge", "source": edge["source"],
             "target": edge["target"], "weight": edge["weight"]}
            for edge in self._edges.values()
        )
        return elements
