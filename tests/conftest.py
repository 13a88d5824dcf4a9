from pathlib import Path

import mongomock
import pytest

from docwatch.models.schemas import EntityKind
from docwatch.pipeline.classifier import ActionClassifier
from docwatch.pipeline.filters import ChangeFilter
from docwatch.pipeline.processor import EventProcessor
from docwatch.pipeline.router import TypeRouter
from docwatch.repository.registry import RepositoryRegistry
from docwatch.utils.config import Settings
from docwatch.utils.mongo_client import MongoStore

DATA_ROOT = Path("/data")
ROUTES = [("/data/images/", "image"), ("/data/posts/", "post")]


@pytest.fixture
def settings() -> Settings:
    return Settings(watch_root=DATA_ROOT, database_name="docwatch_test", _env_file=None)


@pytest.fixture
def store(settings) -> MongoStore:
    """Store handle backed by an in-memory mongomock client."""
    return MongoStore(
        uri="mongodb://mongomock",
        database_name=settings.database_name,
        client=mongomock.MongoClient(),
    )


@pytest.fixture
def repositories(store, settings) -> RepositoryRegistry:
    return RepositoryRegistry.from_store(store, settings)


@pytest.fixture
def image_repo(repositories):
    return repositories[EntityKind.IMAGE]


@pytest.fixture
def post_repo(repositories):
    return repositories[EntityKind.POST]


@pytest.fixture
def processor(repositories) -> EventProcessor:
    router = TypeRouter(ROUTES)
    return EventProcessor(
        change_filter=ChangeFilter(),
        classifier=ActionClassifier(repositories, router),
        router=router,
        repositories=repositories,
    )
