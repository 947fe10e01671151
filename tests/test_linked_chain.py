"""Tests for LinkedChainModel."""

import pytest

from dsviz.core.errors import SnapshotFormatError
from dsviz.linklist.ll_model import CHAIN_TYPES, LinkedChainModel


def make_chain(chain_type="singly", values=(1, 2, 3)):
    chain = LinkedChainModel(chain_type)
    chain.create_from_iterable(values)
    return chain


@pytest.mark.parametrize("chain_type", CHAIN_TYPES)
def test_traversal_terminates(chain_type):
    chain = make_chain(chain_type)

    assert chain.values() == [1, 2, 3]
    assert chain.find(4) == -1


def test_append_and_prepend_return_node_ids():
    chain = LinkedChainModel()

    first = chain.append("b")
    second = chain.prepend("a")

    assert (first, second) == ("node-0", "node-1")
    assert chain.node_ids() == ["node-1", "node-0"]


def test_insert_at_bounds():
    chain = make_chain()

    assert chain.insert_at(1, 9) is True
    assert chain.insert_at(4, 10) is True
    assert chain.insert_at(9, 0) is False
    assert chain.values() == [1, 9, 2, 3, 10]


def test_remove_on_empty_returns_none():
    chain = LinkedChainModel("doubly")

    assert chain.remove_head() is None
    assert chain.remove_tail() is None
    assert chain.remove_at(0) is None


def test_remove_variants():
    chain = make_chain(values=(1, 2, 3, 4))

    assert chain.remove_head() == 1
    assert chain.remove_tail() == 4
    assert chain.remove_at(1) == 3
    assert chain.values() == [2]
    assert chain.head == chain.tail


def test_circular_closes_tail_to_head():
    chain = make_chain("circular")
    tail = chain.nodes[chain.tail]

    assert tail["next"] == chain.head
    assert chain.nodes[chain.head]["prev"] is None


def test_doubly_circular_closes_both_ends():
    chain = make_chain("doubly_circular")

    assert chain.nodes[chain.tail]["next"] == chain.head
    assert chain.nodes[chain.head]["prev"] == chain.tail


def test_circular_stays_closed_after_removals():
    chain = make_chain("circular", values=(1, 2, 3, 4))

    chain.remove_head()
    chain.remove_tail()

    assert chain.values() == [2, 3]
    assert chain.nodes[chain.tail]["next"] == chain.head


def test_doubly_prev_links():
    chain = make_chain("doubly")
    ids = chain.node_ids()

    assert [chain.nodes[i]["prev"] for i in ids] == [None, ids[0], ids[1]]


@pytest.mark.parametrize("chain_type", CHAIN_TYPES)
def test_reverse_keeps_chain_type(chain_type):
    chain = make_chain(chain_type)

    chain.reverse()

    assert chain.values() == [3, 2, 1]
    expected_next = chain.head if chain.is_circular else None
    assert chain.nodes[chain.tail]["next"] == expected_next


def test_get_and_set():
    chain = make_chain()

    assert chain.get(2) == 3
    assert chain.get(3) is None
    assert chain.set(0, "x") is True
    assert chain.set(5, "y") is False
    assert chain.values() == ["x", 2, 3]


@pytest.mark.parametrize("chain_type", CHAIN_TYPES)
def test_snapshot_round_trip(chain_type):
    chain = make_chain(chain_type)

    restored = LinkedChainModel.from_snapshot(chain.snapshot())

    assert restored.snapshot() == chain.snapshot()
    assert restored.to_visual() == chain.to_visual()


def test_ids_continue_after_restore():
    chain = make_chain()
    restored = LinkedChainModel.from_snapshot(chain.snapshot())

    assert restored.append(4) == "node-3"


def test_duplicate_ids_in_snapshot_raise():
    snapshot = {"type": "singly", "elements": [{"id": "n", "value": 1}, {"id": "n", "value": 2}]}

    with pytest.raises(SnapshotFormatError):
        LinkedChainModel.from_snapshot(snapshot)


@pytest.mark.parametrize("elements", [
    [{"value": 1}],
    [{"id": "node-0"}],
    [3],
    None,
])
def test_malformed_elements_raise(elements):
    with pytest.raises(SnapshotFormatError):
        LinkedChainModel.from_snapshot({"type": "singly", "elements": elements})


def test_unknown_chain_type_raises():
    with pytest.raises(ValueError):
        LinkedChainModel("triply")
