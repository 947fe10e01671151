"""Snapshot files: one structure snapshot wrapped in a small JSON envelope."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from dsviz.core.constants import SNAPSHOT_SCHEMA, SNAPSHOT_VERSION
from dsviz.core.errors import SnapshotFormatError
from dsviz.core.types import StructureKind

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def save_snapshot(path: PathLike, kind, snapshot: Dict[str, Any]) -> Path:
    """Write ``snapshot`` to ``path`` (``.json`` appended when missing)."""
    parsed = StructureKind.parse(kind)
    if parsed is None:
        raise SnapshotFormatError(f"unknown structure kind: {kind!r}")

    path = Path(path)
    if path.suffix.lower() != ".json":
        path = path.with_name(path.name + ".json")
    path.parent.mkdir(parents=True, exist_ok=True)

    payload = {
        "schema": SNAPSHOT_SCHEMA,
        "version": SNAPSHOT_VERSION,
        "structure": parsed.value,
        "snapshot": snapshot,
    }
    with open(path, "w", encoding="utf-8") as fh:
        json.dump(payload, fh, ensure_ascii=False, indent=2)
    logger.debug("saved %s snapshot to %s", parsed.value, path)
    return path


def load_snapshot_file(path: PathLike,
                       expected_kind: Optional[str] = None) -> Tuple[StructureKind, Dict[str, Any]]:
    """
    Read a file written by :func:`save_snapshot`.

    Returns (kind, snapshot). Raises SnapshotFormatError when the file is
    not valid JSON, has another schema or version, or (with
    ``expected_kind``) holds a different structure. OSError propagates.
    """
    with open(path, "r", encoding="utf-8") as fh:
        try:
            payload = json.load(fh)
        except json.JSONDecodeError as exc:
            raise SnapshotFormatError(f"{path}: invalid JSON ({exc})") from exc

    if not isinstance(payload, dict) or payload.get("schema") != SNAPSHOT_SCHEMA:
        raise SnapshotFormatError(f"{path}: not a {SNAPSHOT_SCHEMA} snapshot file")
    if payload.get("version") != SNAPSHOT_VERSION:
        raise SnapshotFormatError(f"{path}: unsupported version {payload.get('version')!r}")

    kind = StructureKind.parse(payload.get("structure"))
    if kind is None:
        raise SnapshotFormatError(f"{path}: unknown structure {payload.get('structure')!r}")
    if expected_kind is not None and kind is not StructureKind.parse(expected_kind):
        raise SnapshotFormatError(f"{path}: expected {expected_kind}, found {kind.value}")

    snapshot = payload.get("snapshot")
    if not isinstance(snapshot, dict):
        raise SnapshotFormatError(f"{path}: snapshot must be an object")
    return kind, snapshot
