"""
Per-kind repositories and the kind → repository dispatch table.
"""

from typing import Dict, Iterator, Tuple

from docwatch.models.schemas import EntityKind, ImageMetadata, PostMetadata
from docwatch.repository.repo import MongoRepository
from docwatch.utils.config import Settings
from docwatch.utils.mongo_client import MongoStore


class ImageRepository(MongoRepository[ImageMetadata]):
    """Image metadata collection."""
    model = ImageMetadata


class PostRepository(MongoRepository[PostMetadata]):
    """Post metadata collection."""
    model = PostMetadata


class RepositoryRegistry:
    """
    Dispatch table from entity kind to its repository.

    Iteration order is the order kinds were registered, which is also the order
    the classifier searches when looking up an existing record.
    """

    def __init__(self, repositories: Dict[EntityKind, MongoRepository]):
        self._repositories = dict(repositories)

    @classmethod
    def from_store(cls, store: MongoStore, settings: Settings) -> "RepositoryRegistry":
        """Bind one repository per kind to the shared store handle."""
        return cls({
            EntityKind.IMAGE: ImageRepository.init(settings.image_collection, store),
            EntityKind.POST: PostRepository.init(settings.post_collection, store),
        })

    def __getitem__(self, kind: EntityKind) -> MongoRepository:
        return self._repositories[kind]

    def __contains__(self, kind: EntityKind) -> bool:
        return kind in self._repositories

    def items(self) -> Iterator[Tuple[EntityKind, MongoRepository]]:
        return iter(self._repositories.items())

    def ensure_indexes(self) -> int:
        """Create lookup indexes on every registered collection."""
        return sum(repo.ensure_indexes() for repo in self._repositories.values())
