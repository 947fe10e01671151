"""Tests for snapshot files."""

import json

import pytest

from dsviz.bst.bst_model import BinarySearchTreeModel
from dsviz.core.engines import engine_from_snapshot
from dsviz.core.errors import SnapshotFormatError
from dsviz.core.persistence import load_snapshot_file, save_snapshot
from dsviz.core.types import StructureKind


def test_round_trip(tmp_path):
    tree = BinarySearchTreeModel("avl")
    tree.create_from_iterable([3, 1, 2])

    path = save_snapshot(tmp_path / "tree.json", "tree", tree.snapshot())
    kind, snapshot = load_snapshot_file(path)

    assert kind is StructureKind.TREE
    assert engine_from_snapshot(kind, snapshot).snapshot() == tree.snapshot()


def test_envelope_format(tmp_path):
    path = save_snapshot(tmp_path / "nested" / "arr", StructureKind.ARRAY, {"data": ["é"]})

    assert path.name == "arr.json"
    text = path.read_text(encoding="utf-8")
    assert "é" in text
    assert json.loads(text) == {
        "schema": "dsviz",
        "version": 1,
        "structure": "array",
        "snapshot": {"data": ["é"]},
    }


def test_unknown_kind_is_rejected_on_save(tmp_path):
    with pytest.raises(SnapshotFormatError):
        save_snapshot(tmp_path / "x.json", "heap", {})


def test_wrong_schema(tmp_path):
    path = tmp_path / "other.json"
    path.write_text(json.dumps({"schema": "pyqt_ds_visualizer", "structure": "stack"}))

    with pytest.raises(SnapshotFormatError):
        load_snapshot_file(path)


def test_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json")

    with pytest.raises(SnapshotFormatError, match="invalid JSON"):
        load_snapshot_file(path)


def test_unsupported_version(tmp_path):
    path = tmp_path / "v2.json"
    path.write_text(json.dumps({"schema": "dsviz", "version": 2, "structure": "array",
                                "snapshot": {"data": []}}))

    with pytest.raises(SnapshotFormatError, match="version"):
        load_snapshot_file(path)


def test_expected_kind_mismatch(tmp_path):
    path = save_snapshot(tmp_path / "s.json", "stack", {"items": [], "maxSize": 3})

    with pytest.raises(SnapshotFormatError):
        load_snapshot_file(path, expected_kind="queue")
    assert load_snapshot_file(path, expected_kind="stack")[0] is StructureKind.STACK


def test_missing_file_propagates(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_snapshot_file(tmp_path / "nope.json")
