"""
Single-event processing boundary.

Runs one change event through filter → classifier → router/repository. Every
per-event failure, expected or not, is caught here and reduced to a log line,
so no malformed event can stop the watch loop.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional

from bson import ObjectId
from loguru import logger

from docwatch.errors import EventError, StoreError
from docwatch.models.actions import ChangeEvent, ChangeKind, CreateAction, FileAction, UpdateAction
from docwatch.pipeline.classifier import ActionClassifier
from docwatch.pipeline.filters import ChangeFilter
from docwatch.pipeline.router import TypeRouter
from docwatch.repository.registry import RepositoryRegistry
from docwatch.utils.helpers import get_file_extension


class Outcome(str, Enum):
    """Terminal state of one changed path."""
    DROPPED = "dropped"
    SKIPPED = "skipped"
    CREATED = "created"
    UPDATED = "updated"
    FAILED = "failed"


@dataclass(slots=True)
class PathResult:
    """What happened to one path of a change event."""
    path: Path
    outcome: Outcome
    action: Optional[FileAction] = None
    record_id: Optional[ObjectId] = None
    error: Optional[Exception] = None


class EventProcessor:
    """Classify, route and persist change events one at a time."""

    def __init__(
        self,
        change_filter: ChangeFilter,
        classifier: ActionClassifier,
        router: TypeRouter,
        repositories: RepositoryRegistry,
    ):
        self.change_filter = change_filter
        self.classifier = classifier
        self.router = router
        self.repositories = repositories

    def process(self, event: ChangeEvent) -> List[PathResult]:
        """Process every path of an event, in delivery order."""
        return [self.process_path(event.kind, path) for path in event.paths]

    def process_path(self, kind: ChangeKind, path: Path) -> PathResult:
        """
        Process one changed path.

        Args:
            kind: Kind of the raw notification
            path: Changed path

        Returns:
            PathResult describing the terminal state
        """
        if self.change_filter.should_ignore(path):
            logger.debug(f"Ignored: {path}")
            return PathResult(path, Outcome.DROPPED)

        action = None
        try:
            action = self.classifier.classify(kind, path)

            if isinstance(action, CreateAction):
                return self._create(action)
            if isinstance(action, UpdateAction):
                return self._update(action)

            logger.debug(f"No action for {kind.value}: {path}")
            return PathResult(path, Outcome.SKIPPED, action)

        except (EventError, StoreError) as e:
            logger.warning(f"Dropped {kind.value} event for {path}: {type(e).__name__}: {e}")
            return PathResult(path, Outcome.FAILED, action, error=e)
        except Exception as e:
            logger.warning(f"Unexpected failure on {kind.value} event for {path}: {type(e).__name__}: {e}")
            return PathResult(path, Outcome.FAILED, action, error=e)

    def _create(self, action: CreateAction) -> PathResult:
        kind, entity = self.router.route(action.changed_path, action.file_name)
        record_id = entity.index(self.repositories[kind])

        logger.info(f"Indexed new {kind.value} '{action.file_name}' as {record_id}")
        return PathResult(action.changed_path, Outcome.CREATED, action, record_id)

    def _update(self, action: UpdateAction) -> PathResult:
        extension = get_file_extension(action.changed_path)
        entity = action.kind.model.modification(action.file_name, extension)
        record_id = entity.update(action.changed_path, action.record_id, self.repositories[action.kind])

        logger.info(f"Updated {action.kind.value} '{action.file_name}' ({record_id})")
        return PathResult(action.changed_path, Outcome.UPDATED, action, record_id)
