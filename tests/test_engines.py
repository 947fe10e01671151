"""Tests for the engine factory."""

import pytest

from dsviz.core.engines import create_engine, engine_from_snapshot, resolve_kind, supported_kinds
from dsviz.core.errors import SnapshotFormatError, UnknownStructureError
from dsviz.core.types import StructureKind


def test_every_kind_has_an_engine():
    assert supported_kinds() == [
        "array", "linkedlist", "stack", "queue", "hashtable", "tree", "graph",
    ]
    for name in supported_kinds():
        engine = create_engine(name)
        assert engine.kind is StructureKind(name)
        assert len(engine) == 0


def test_options_reach_the_constructor():
    chain = create_engine("linkedlist", chain_type="circular")
    table = create_engine(StructureKind.HASH_TABLE, capacity=4)

    assert chain.chain_type == "circular"
    assert table.capacity == 4


def test_kind_names_are_case_insensitive():
    assert resolve_kind("Graph") is StructureKind.GRAPH


def test_unknown_kind():
    with pytest.raises(UnknownStructureError):
        create_engine("heap")


def test_engine_from_snapshot():
    queue = engine_from_snapshot("queue", {"items": [1, 2], "maxSize": 4})

    assert queue.peek() == 1
    assert queue.max_size == 4


def test_engine_from_malformed_snapshot():
    with pytest.raises(SnapshotFormatError):
        engine_from_snapshot("tree", {"nodes": []})


@pytest.mark.parametrize("kind, snapshot", [
    ("linkedlist", {"type": "singly", "elements": [{"value": 1}]}),
    ("stack", {"items": [1], "maxSize": "5"}),
    ("queue", {"items": [1], "maxSize": None}),
    ("hashtable", {"capacity": 4, "entries": [{"value": 1}]}),
    ("tree", {"type": "bst", "root": {"value": 1}}),
    ("graph", {"type": "directed", "nodes": [{"value": 1}], "edges": []}),
    ("graph", {"type": "directed", "nodes": [{"id": "node-0"}], "edges": [{"target": "node-0"}]}),
])
def test_malformed_entries_raise_snapshot_format_error(kind, snapshot):
    with pytest.raises(SnapshotFormatError):
        engine_from_snapshot(kind, snapshot)
