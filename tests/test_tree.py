"""Tests for BinarySearchTreeModel (plain BST and AVL)."""

import random

import pytest

from dsviz.bst.bst_model import BinarySearchTreeModel
from dsviz.core.errors import SnapshotFormatError

VALUES = [50, 30, 70, 20, 40, 60, 80]


@pytest.fixture
def bst():
    tree = BinarySearchTreeModel()
    tree.create_from_iterable(VALUES)
    return tree


def test_traversals(bst):
    assert bst.in_order() == [20, 30, 40, 50, 60, 70, 80]
    assert bst.pre_order() == [50, 30, 20, 40, 70, 60, 80]
    assert bst.post_order() == [20, 40, 30, 60, 80, 70, 50]
    assert bst.level_order() == [50, 30, 70, 20, 40, 60, 80]


def test_duplicate_insert_is_rejected(bst):
    assert bst.insert(40) is False
    assert bst.size == 7


def test_min_max_height(bst):
    assert bst.min_value() == 20
    assert bst.max_value() == 80
    assert bst.height() == 3


def test_empty_tree():
    tree = BinarySearchTreeModel()

    assert tree.min_value() is None
    assert tree.max_value() is None
    assert tree.height() == 0
    assert tree.delete(1) is False
    assert tree.in_order() == []
    assert tree.level_order() == []


def test_find_returns_search_path(bst):
    node_id, path = bst.find(60)

    assert node_id == "tree-node-5"
    assert path == ["tree-node-0", "tree-node-2", "tree-node-5"]


def test_find_missing_value_still_reports_path(bst):
    node_id, path = bst.find(65)

    assert node_id is None
    assert path == ["tree-node-0", "tree-node-2", "tree-node-5"]
    assert bst.search(65) is False


def test_delete_leaf_and_single_child(bst):
    assert bst.delete(20) is True
    assert bst.delete(30) is True
    assert bst.in_order() == [40, 50, 60, 70, 80]


def test_delete_with_two_children_copies_successor(bst):
    root_id = bst.root

    assert bst.delete(50) is True

    assert bst.root == root_id
    assert bst.value_of(root_id) == 60
    assert bst.search(50) is False
    assert bst.find(60)[0] == root_id
    assert bst.in_order() == [20, 30, 40, 60, 70, 80]


def test_plain_bst_does_not_rebalance():
    tree = BinarySearchTreeModel()
    tree.create_from_iterable([1, 2, 3, 4])

    assert tree.height() == 4
    assert tree.is_balanced() is False


def test_avl_rotates_right_right():
    tree = BinarySearchTreeModel("avl")
    tree.create_from_iterable([1, 2, 3])

    assert tree.value_of(tree.root) == 2
    assert tree.height() == 2


def test_avl_rotates_left_right():
    tree = BinarySearchTreeModel("avl")
    tree.create_from_iterable([30, 10, 20])

    assert tree.value_of(tree.root) == 20
    assert tree.pre_order() == [20, 10, 30]


def test_avl_stays_balanced_under_random_operations():
    rng = random.Random(7)
    tree = BinarySearchTreeModel("avl")
    present = set()

    for _ in range(400):
        value = rng.randint(0, 120)
        if rng.random() < 0.65:
            assert tree.insert(value) is (value not in present)
            present.add(value)
        else:
            assert tree.delete(value) is (value in present)
            present.discard(value)

        assert tree.is_balanced()
        assert tree.in_order() == sorted(present)


def test_balance_factor(bst):
    assert bst.balance_factor(bst.root) == 0
    assert bst.balance_factor(None) == 0


def test_snapshot_round_trip():
    tree = BinarySearchTreeModel("avl")
    tree.create_from_iterable(range(10))

    restored = BinarySearchTreeModel.from_snapshot(tree.snapshot())

    assert restored.snapshot() == tree.snapshot()
    assert restored.to_visual() == tree.to_visual()
    assert restored.tree_type == "avl"


def test_ids_continue_after_restore(bst):
    restored = BinarySearchTreeModel.from_snapshot(bst.snapshot())
    restored.insert(65)

    assert restored.find(65)[0] == "tree-node-7"


def test_visual_carries_parent_and_depth(bst):
    elements = {element["value"]: element for element in bst.to_visual()}

    assert elements[50]["parent"] is None
    assert elements[60]["parent"] == elements[70]["id"]
    assert elements[60]["side"] == "left"
    assert elements[60]["depth"] == 2


def test_snapshot_with_duplicate_ids_raises():
    leaf = {"id": "t", "value": 1, "left": None, "right": None}
    snapshot = {"type": "bst", "root": {"id": "t", "value": 2, "left": leaf, "right": None}}

    with pytest.raises(SnapshotFormatError):
        BinarySearchTreeModel.from_snapshot(snapshot)


@pytest.mark.parametrize("root", [
    {"value": 1},
    {"id": "t"},
    {"id": "t", "value": 2, "left": {"value": 1}, "right": None},
    [1, 2],
])
def test_snapshot_with_malformed_node_raises(root):
    with pytest.raises(SnapshotFormatError):
        BinarySearchTreeModel.from_snapshot({"type": "avl", "root": root})
