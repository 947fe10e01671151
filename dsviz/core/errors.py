"""Exceptions raised for programmer and file errors.

Expected conditions (empty, full, missing key, index out of range) never
raise; engines return ``None`` / ``False`` / ``-1`` instead.
"""


class DsvizError(Exception):
    """Base class for every error raised by dsviz."""


class SnapshotFormatError(DsvizError, ValueError):
    """A snapshot payload or snapshot file does not have the expected shape."""


class UnknownStructureError(DsvizError, ValueError):
    """The requested structure kind has no engine."""


class UnknownOperationError(DsvizError, AttributeError):
    """A session was asked to run an operation the engine does not expose."""
