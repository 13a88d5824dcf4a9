"""
Error taxonomy for docwatch.

Only SetupError is fatal. Everything derived from EventError or StoreError
is caught at the single-event boundary and reduced to a log line.
"""

from pathlib import Path
from typing import Any, Optional


class DocwatchError(Exception):
    """Base class for all docwatch errors."""


class SetupError(DocwatchError):
    """Watch or store initialization failed before the loop started."""


# =====================================================
# Per-event errors
# =====================================================

class EventError(DocwatchError):
    """A single change event could not be processed."""

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path


class MissingIdentity(EventError):
    """Path has no file name, or the name is not valid text."""


class ClassificationError(EventError):
    """Store lookup failed while classifying a change."""


class RoutingError(EventError):
    """No entity kind is mapped to the path."""


class MissingExtension(EventError):
    """Path has no extension to derive the type field from."""


# =====================================================
# Store errors
# =====================================================

class StoreError(DocwatchError):
    """Base class for repository failures."""


class StoreWriteError(StoreError):
    """Insert or update was rejected by the store."""


class NotFound(StoreError):
    """No document has the requested id."""

    def __init__(self, collection: str, record_id: Any):
        super().__init__(f"No document {record_id} in '{collection}'")
        self.collection = collection
        self.record_id = record_id


class DecodeError(StoreError):
    """A stored document could not be decoded into its entity kind."""
