"""State diff engine.

``compute_diff`` turns two snapshots of the same structure kind into an
ordered list of transitions. Every function here is pure: snapshots are read,
never modified, and ``compute_diff(s, s, kind)`` is always empty.

Sequence diffs are a greedy linear scan with equality-based, first-match
lookups. With duplicate values the Move/Update classification follows scan
order and is not guaranteed to be the "intended" one.
"""

from typing import Any, Callable, Dict, List, Optional, Sequence

from dsviz.core.types import StructureKind, Transition, TransitionKind

EMPTY_SNAPSHOTS: Dict[StructureKind, Dict[str, Any]] = {
    StructureKind.ARRAY: {"data": []},
    StructureKind.LINKED_LIST: {"elements": []},
    StructureKind.STACK: {"items": []},
    StructureKind.QUEUE: {"items": []},
    StructureKind.HASH_TABLE: {"entries": []},
    StructureKind.TREE: {"root": None},
    StructureKind.GRAPH: {"nodes": [], "edges": []},
}


def _same(a, b) -> bool:
    return a is b or a == b


def _contains(values: Sequence[Any], value) -> bool:
    return any(_same(item, value) for item in values)


def _first_index(values: Sequence[Any], value) -> int:
    for index, item in enumerate(values):
        if _same(item, value):
            return index
    return -1


def _hashable(key):
    try:
        hash(key)
    except TypeError:
        return ("unhashable", repr(key))
    return key


# ---------- Sequence ----------

def _sequence_values(snapshot) -> List[Any]:
    if isinstance(snapshot, dict):
        return list(snapshot.get("data", []))
    return list(snapshot or [])


def _sequence_diff(prev, next_) -> List[Transition]:
    old = _sequence_values(prev)
    new = _sequence_values(next_)
    transitions: List[Transition] = []

    for index, value in enumerate(old):
        if not _contains(new, value):
            transitions.append(
                Transition(TransitionKind.DELETE, f"array-{index}",
                           from_={"index": index, "value": value})
            )

    for index, value in enumerate(new):
        element_id = f"array-{index}"
        if index >= len(old):
            transitions.append(
                Transition(TransitionKind.INSERT, element_id, to={"index": index, "value": value})
            )
            continue
        if _same(old[index], value):
            continue

        prev_index = _first_index(old, value)
        if prev_index != -1:
            transitions.append(
                Transition(TransitionKind.MOVE, element_id,
                           from_={"index": prev_index, "value": value},
                           to={"index": index, "value": value})
            )
        elif _contains(new, old[index]):
            # the displaced value survives elsewhere, so this one is new
            transitions.append(
                Transition(TransitionKind.INSERT, element_id, to={"index": index, "value": value})
            )
        else:
            transitions.append(
                Transition(TransitionKind.UPDATE, element_id,
                           from_={"index": index, "value": old[index]},
                           to={"index": index, "value": value})
            )

    return transitions


def apply_sequence_diff(prev, transitions: Sequence[Transition]) -> List[Any]:
    """
    Replay sequence transitions onto ``prev``.

    Exact for diffs made only of Insert/Delete/Update; a diff containing
    Moves is replayed position by position, which is ambiguous when the
    sequence shrinks or holds duplicate values.
    """
    old = _sequence_values(prev)
    writes: Dict[int, Any] = {}
    dropped = set()
    for transition in transitions:
        if transition.kind is TransitionKind.DELETE:
            dropped.add(transition.from_["index"])
        elif transition.to is not None and "index" in transition.to:
            writes[transition.to["index"]] = transition.to.get("value")

    size = max([len(old)] + [index + 1 for index in writes])
    result = [old[index] if index < len(old) else None for index in range(size)]
    for index, value in writes.items():
        result[index] = value
    return [
        value for index, value in enumerate(result)
        if index not in dropped or index in writes
    ]


# ---------- Linked chain / stack / queue ----------

def _chain_diff(prev, next_) -> List[Transition]:
    old = list(prev.get("elements", []))
    new = list(next_.get("elements", []))
    transitions: List[Transition] = []

    for index in range(max(len(old), len(new))):
        before = old[index] if index < len(old) else None
        after = new[index] if index < len(new) else None
        if before is None:
            transitions.append(
                Transition(TransitionKind.INSERT, after["id"],
                           to={"index": index, "value": after["value"]})
            )
        elif after is None:
            transitions.append(
                Transition(TransitionKind.DELETE, before["id"],
                           from_={"index": index, "value": before["value"]})
            )
        elif not _same(before["value"], after["value"]):
            transitions.append(
                Transition(TransitionKind.UPDATE, before["id"],
                           from_={"index": index, "value": before["value"]},
                           to={"index": index, "value": after["value"]})
            )
    return transitions


def _linear_diff(prefix: str) -> Callable[[Dict, Dict], List[Transition]]:
    def diff(prev, next_) -> List[Transition]:
        old = list(prev.get("items", []))
        new = list(next_.get("items", []))
        transitions: List[Transition] = []

        for index in range(min(len(old), len(new))):
            if not _same(old[index], new[index]):
                transitions.append(
                    Transition(TransitionKind.UPDATE, f"{prefix}-{index}",
                               from_={"index": index, "value": old[index]},
                               to={"index": index, "value": new[index]})
                )
        for index in range(len(old), len(new)):
            transitions.append(
                Transition(TransitionKind.INSERT, f"{prefix}-{index}",
                           to={"index": index, "value": new[index]})
            )
        for index in range(len(new), len(old)):
            transitions.append(
                Transition(TransitionKind.DELETE, f"{prefix}-{index}",
                           from_={"index": index, "value": old[index]})
            )
        return transitions

    return diff


# ---------- Keyed (hash table, graph) ----------

def _keyed_diff(old: Dict[Any, Any], new: Dict[Any, Any],
                element_id: Callable[[Any], str],
                payload: Callable[[Any, Any], Dict[str, Any]],
                compare_values: bool = True) -> List[Transition]:
    transitions: List[Transition] = []
    for key, value in old.items():
        if key not in new:
            transitions.append(
                Transition(TransitionKind.DELETE, element_id(key), from_=payload(key, value))
            )
    for key, value in new.items():
        if key not in old:
            transitions.append(
                Transition(TransitionKind.INSERT, element_id(key), to=payload(key, value))
            )
        elif compare_values and not _same(old[key], value):
            transitions.append(
                Transition(TransitionKind.UPDATE, element_id(key),
                           from_=payload(key, old[key]), to=payload(key, value))
            )
    return transitions


def _hash_diff(prev, next_) -> List[Transition]:
    # True and 1 are distinct table keys even though they compare equal
    def entry_map(snapshot):
        return {
            (isinstance(entry["key"], bool), _hashable(entry["key"])): (entry["key"], entry["value"])
            for entry in snapshot.get("entries", [])
        }

    old = entry_map(prev)
    new = entry_map(next_)
    return _keyed_diff(
        {k: v[1] for k, v in old.items()},
        {k: v[1] for k, v in new.items()},
        element_id=lambda key: f"hash-{(old.get(key) or new.get(key))[0]}",
        payload=lambda key, value: {"key": (old.get(key) or new.get(key))[0], "value": value},
    )


def _graph_diff(prev, next_) -> List[Transition]:
    old_nodes = {node["id"]: node.get("value") for node in prev.get("nodes", [])}
    new_nodes = {node["id"]: node.get("value") for node in next_.get("nodes", [])}
    transitions = _keyed_diff(
        old_nodes,
        new_nodes,
        element_id=str,
        payload=lambda key, value: {"value": value},
    )

    def edge_map(snapshot):
        return {
            f"{edge['source']}-{edge['target']}": edge
            for edge in snapshot.get("edges", [])
        }

    transitions.extend(
        _keyed_diff(
            edge_map(prev),
            edge_map(next_),
            element_id=lambda key: f"edge-{key}",
            payload=lambda key, edge: {"source": edge["source"], "target": edge["target"]},
            compare_values=False,
        )
    )
    return transitions


# ---------- Tree ----------

def _flatten_tree(root) -> Dict[str, Dict[str, Any]]:
    """Pre-order ``id -> {value, parent, side}`` map of a nested tree snapshot."""
    flat: Dict[str, Dict[str, Any]] = {}
    stack = [(root, None, None)]
    while stack:
        info, parent, side = stack.pop()
        if info is None:
            continue
        flat[info["id"]] = {"value": info["value"], "parent": parent, "side": side}
        stack.append((info.get("right"), info["id"], "right"))
        stack.append((info.get("left"), info["id"], "left"))
    return flat


def _tree_diff(prev, next_) -> List[Transition]:
    old = _flatten_tree(prev.get("root"))
    new = _flatten_tree(next_.get("root"))
    transitions: List[Transition] = []

    for node_id, info in old.items():
        if node_id not in new:
            transitions.append(Transition(TransitionKind.DELETE, node_id, from_=dict(info)))

    for node_id, info in new.items():
        if node_id not in old:
            transitions.append(Transition(TransitionKind.INSERT, node_id, to=dict(info)))
            continue
        before = old[node_id]
        if not _same(before["value"], info["value"]):
            transitions.append(
                Transition(TransitionKind.UPDATE, node_id,
                           from_={"value": before["value"]}, to={"value": info["value"]})
            )
        if (before["parent"], before["side"]) != (info["parent"], info["side"]):
            transitions.append(
                Transition(TransitionKind.MOVE, node_id,
                           from_={"parent": before["parent"], "side": before["side"]},
                           to={"parent": info["parent"], "side": info["side"]})
            )
    return transitions


_DIFFERS: Dict[StructureKind, Callable[[Any, Any], List[Transition]]] = {
    StructureKind.ARRAY: _sequence_diff,
    StructureKind.LINKED_LIST: _chain_diff,
    StructureKind.STACK: _linear_diff("stack"),
    StructureKind.QUEUE: _linear_diff("queue"),
    StructureKind.HASH_TABLE: _hash_diff,
    StructureKind.TREE: _tree_diff,
    StructureKind.GRAPH: _graph_diff,
}


def compute_diff(prev_snapshot: Optional[Any], next_snapshot: Optional[Any],
                 kind) -> List[Transition]:
    """
    Compute the transitions that take ``prev_snapshot`` to ``next_snapshot``.

    Args:
        prev_snapshot: Snapshot before the mutation (None means empty)
        next_snapshot: Snapshot after the mutation (None means empty)
        kind: StructureKind or its string value

    Returns:
        Ordered transitions; an empty list for an unknown kind
    """
    parsed = StructureKind.parse(kind)
    if parsed is None:
        return []
    empty = EMPTY_SNAPSHOTS[parsed]
    prev = empty if prev_snapshot is None else prev_snapshot
    next_ = empty if next_snapshot is None else next_snapshot
    return _DIFFERS[parsed](prev, next_)
