"""
Service-level test for the ingestion pipeline against a real MongoDB.

Uses Testcontainers to start a throwaway MongoDB so that timestamp encoding,
upserts and lookups are checked against the real server rather than an
in-memory fake. Skipped when Docker is not available.
"""

from pathlib import Path

import pytest
from bson import ObjectId

from docwatch.models.actions import ChangeEvent, ChangeKind, UpdateAction
from docwatch.models.schemas import EntityKind
from docwatch.pipeline.classifier import ActionClassifier
from docwatch.pipeline.filters import ChangeFilter
from docwatch.pipeline.processor import EventProcessor, Outcome
from docwatch.pipeline.router import TypeRouter
from docwatch.repository.registry import RepositoryRegistry
from docwatch.utils.config import Settings
from docwatch.utils.mongo_client import MongoStore

pytestmark = pytest.mark.service

MONGO_IMAGE = "mongo:7.0"


def _docker_available() -> bool:
    docker = pytest.importorskip("docker")
    try:
        docker.from_env().ping()
    except Exception:
        return False
    return True


@pytest.fixture(scope="module")
def mongo_uri():
    """Provides the connection URL of a throwaway MongoDB container."""
    if not _docker_available():
        pytest.skip("Docker daemon is not reachable")

    mongodb = pytest.importorskip("testcontainers.mongodb")
    with mongodb.MongoDbContainer(MONGO_IMAGE) as mongo:
        yield mongo.get_connection_url()


@pytest.fixture
def live_store(mongo_uri):
    store = MongoStore(uri=mongo_uri, database_name=f"docwatch_{ObjectId()}")
    store.connect()
    yield store
    store.client.drop_database(store.database_name)
    store.close()


@pytest.fixture
def live_pipeline(live_store):
    settings = Settings(watch_root=Path("/data"), _env_file=None)
    repositories = RepositoryRegistry.from_store(live_store, settings)
    repositories.ensure_indexes()
    router = TypeRouter(settings.get_type_routes())
    processor = EventProcessor(
        change_filter=ChangeFilter(settings.get_ignore_patterns()),
        classifier=ActionClassifier(repositories, router),
        router=router,
        repositories=repositories,
    )
    return processor, repositories


def test_create_and_modify_against_mongodb(live_pipeline):
    processor, repositories = live_pipeline
    images = repositories[EntityKind.IMAGE]
    cat = Path("/data/images/cat.png")

    created = processor.process(ChangeEvent(ChangeKind.CREATE, [cat]))[0]
    assert created.outcome is Outcome.CREATED

    raw = images.collection.find_one({"_id": created.record_id})
    assert raw["file_name"] == "cat"
    assert raw["image_type"] == "png"
    assert raw["date_created"].endswith("Z") and len(raw["date_created"]) == 24
    assert "date_last_modified" not in raw

    updated = processor.process(ChangeEvent(ChangeKind.MODIFY, [cat]))[0]
    assert isinstance(updated.action, UpdateAction)
    assert updated.action.record_id == created.record_id

    assert images.collection.count_documents({}) == 1
    record = images.get(created.record_id)
    assert record.date_last_modified is not None
    assert record.date_created is not None


def test_ignored_path_creates_nothing(live_pipeline):
    processor, repositories = live_pipeline

    results = processor.process(ChangeEvent(ChangeKind.CREATE, [Path("/data/images/.#cat.png")]))

    assert results[0].outcome is Outcome.DROPPED
    assert repositories[EntityKind.IMAGE].collection.count_documents({}) == 0


def test_upsert_creates_record_for_unknown_id(live_pipeline):
    _, repositories = live_pipeline
    images = repositories[EntityKind.IMAGE]
    record_id = ObjectId()

    result = images.update_one(record_id, {"file_name": "dog", "image_type": "jpg"})

    assert result.upserted_id == record_id
    assert images.get(record_id).file_name == "dog"
    assert images.collection.count_documents({}) == 1
