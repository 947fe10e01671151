"""Maps a structure kind to its engine class."""

from typing import Any, Dict, Type

from dsviz.arrayviz.arr_model import SequenceModel
from dsviz.bst.bst_model import BinarySearchTreeModel
from dsviz.core.base_model import StructureModel
from dsviz.core.errors import UnknownStructureError
from dsviz.core.types import StructureKind
from dsviz.graph.gr_model import GraphModel
from dsviz.hashtable.ht_model import ChainedHashTableModel
from dsviz.linklist.ll_model import LinkedChainModel
from dsviz.queueviz.qu_model import BoundedQueueModel
from dsviz.stack.st_model import BoundedStackModel

ENGINE_TYPES: Dict[StructureKind, Type[StructureModel]] = {
    StructureKind.ARRAY: SequenceModel,
    StructureKind.LINKED_LIST: LinkedChainModel,
    StructureKind.STACK: BoundedStackModel,
    StructureKind.QUEUE: BoundedQueueModel,
    StructureKind.HASH_TABLE: ChainedHashTableModel,
    StructureKind.TREE: BinarySearchTreeModel,
    StructureKind.GRAPH: GraphModel,
}


def resolve_kind(kind) -> StructureKind:
    parsed = StructureKind.parse(kind)
    if parsed is None:
        raise UnknownStructureError(f"unknown structure kind: {kind!r}")
    return parsed


def create_engine(kind, **options: Any) -> StructureModel:
    """Build an empty engine; ``options`` go to the engine constructor."""
    return ENGINE_TYPES[resolve_kind(kind)](**options)


def engine_from_snapshot(kind, snapshot: Dict[str, Any]) -> StructureModel:
    return ENGINE_TYPES[resolve_kind(kind)].from_snapshot(snapshot)


def supported_kinds():
    return [kind.value for kind in ENGINE_TYPES]
