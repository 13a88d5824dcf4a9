"""
Classify each surviving change as create, update or nothing.
"""

from pathlib import Path

from loguru import logger

from docwatch.errors import ClassificationError, StoreError
from docwatch.models.actions import ChangeKind, CreateAction, FileAction, NoAction, UpdateAction
from docwatch.pipeline.router import TypeRouter
from docwatch.repository.registry import RepositoryRegistry
from docwatch.utils.helpers import derive_identity


class ActionClassifier:
    """Decides what a raw change means by consulting persisted state."""

    def __init__(self, repositories: RepositoryRegistry, router: TypeRouter):
        """
        Initialize classifier.

        Args:
            repositories: Repository per entity kind
            router: Path routes; a modified path is only matched against
                records of the kind its route names
        """
        self.repositories = repositories
        self.router = router

    def classify(self, kind: ChangeKind, path: Path) -> FileAction:
        """
        Classify one changed path.

        Modify-kind changes resolve the path's entity kind, look up existing
        records of that kind by identity, and become an update of the first
        matching record, or a create when none exists. Create-kind changes
        always become a create, with no existing-record check. Anything else
        is a no-op.

        Args:
            kind: Kind of the raw notification
            path: Changed path that survived filtering

        Returns:
            CreateAction, UpdateAction or NoAction

        Raises:
            MissingIdentity: If the path has no usable file name
            RoutingError: If a modified path has no route
            ClassificationError: If the store lookup fails
        """
        file_name = derive_identity(path)

        if kind is ChangeKind.CREATE:
            return CreateAction(changed_path=path, file_name=file_name)

        if kind is not ChangeKind.MODIFY:
            return NoAction(changed_path=path)

        entity_kind = self.router.resolve(path)
        repository = self.repositories[entity_kind]
        try:
            matches = repository.get_documents_by_file_name(file_name)
        except StoreError as e:
            raise ClassificationError(
                f"Lookup of '{file_name}' in '{repository.name}' failed: {e}", path
            ) from e

        if not matches:
            return CreateAction(changed_path=path, file_name=file_name)

        if len(matches) > 1:
            logger.debug(f"{len(matches)} records named '{file_name}', using {matches[0].id}")
        return UpdateAction(
            changed_path=path,
            file_name=file_name,
            record_id=matches[0].id,
            kind=entity_kind,
        )
