"""Change events delivered by the watcher and the actions derived from them."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union

from bson import ObjectId

from docwatch.models.schemas import EntityKind


class ChangeKind(str, Enum):
    """Coarse kind of a file-system notification."""
    CREATE = "create"
    MODIFY = "modify"
    OTHER = "other"


@dataclass(slots=True)
class ChangeEvent:
    """One notification from the watch subsystem; may cover several paths."""

    kind: ChangeKind
    paths: List[Path] = field(default_factory=list)


@dataclass(slots=True, frozen=True)
class CreateAction:
    """The changed path has no record yet and should be indexed."""

    changed_path: Path
    file_name: str


@dataclass(slots=True, frozen=True)
class UpdateAction:
    """The changed path already has a record, named by ``record_id``."""

    changed_path: Path
    file_name: str
    record_id: ObjectId
    kind: EntityKind


@dataclass(slots=True, frozen=True)
class NoAction:
    """Nothing to persist for this change."""

    changed_path: Optional[Path] = None


FileAction = Union[CreateAction, UpdateAction, NoAction]
