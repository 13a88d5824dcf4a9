"""
Generic CRUD/upsert repository over one MongoDB collection.

Documents are decoded into the repository's entity model on the way out.
Multi-document reads are all-or-nothing: the first document that fails to
decode aborts the scan.
"""

from typing import Any, Dict, Generic, List, Mapping, Type, TypeVar

from bson import ObjectId
from bson.errors import BSONError
from loguru import logger
from pydantic import ValidationError
from pymongo.collection import Collection
from pymongo.errors import PyMongoError
from pymongo.results import UpdateResult

from docwatch.errors import DecodeError, NotFound, StoreError, StoreWriteError
from docwatch.models.schemas import IndexableEntity
from docwatch.utils.mongo_client import MongoStore

T = TypeVar("T", bound=IndexableEntity)


class MongoRepository(Generic[T]):
    """CRUD operations for one entity kind's collection."""

    model: Type[T]

    def __init__(self, collection: Collection, model: Type[T] = None):
        """
        Initialize repository.

        Args:
            collection: Collection holding this kind's documents
            model: Entity model used to decode documents
        """
        self.collection = collection
        if model is not None:
            self.model = model

    @classmethod
    def init(cls, collection_name: str, store: MongoStore, **kwargs) -> "MongoRepository[T]":
        """Build a repository bound to ``collection_name`` on ``store``."""
        return cls(store.collection(collection_name), **kwargs)

    @property
    def name(self) -> str:
        return self.collection.name

    def _decode(self, document: Mapping[str, Any]) -> T:
        try:
            return self.model.from_document(dict(document))
        except (ValidationError, ValueError, TypeError) as e:
            raise DecodeError(
                f"Document {document.get('_id')} in '{self.name}' is not a valid "
                f"{self.model.__name__}: {e}"
            ) from e

    def create(self, entity: T) -> ObjectId:
        """
        Insert a new record.

        Returns:
            Store-assigned id

        Raises:
            StoreWriteError: If the store rejects the insert
        """
        try:
            result = self.collection.insert_one(entity.to_document())
        except (PyMongoError, BSONError) as e:
            raise StoreWriteError(f"Error creating entity in '{self.name}': {e}") from e
        return result.inserted_id

    def get(self, record_id: ObjectId) -> T:
        """
        Fetch one record by id.

        Raises:
            NotFound: If no record has that id
            DecodeError: If the stored document is malformed
        """
        try:
            document = self.collection.find_one({"_id": record_id})
        except BSONError as e:
            raise DecodeError(f"Document {record_id} in '{self.name}' is not valid BSON: {e}") from e
        except PyMongoError as e:
            raise StoreError(f"Error getting {record_id} from '{self.name}': {e}") from e

        if document is None:
            raise NotFound(self.name, record_id)
        return self._decode(document)

    def update_one(
        self,
        record_id: ObjectId,
        partial: Dict[str, Any],
        upsert: bool = True,
    ) -> UpdateResult:
        """
        Update one record by id.

        ``partial`` may be a full update document (``{"$set": ...}``) or a
        plain field mapping, which is applied with ``$set``. With upsert on, a
        missing id creates a new record holding those fields.

        Raises:
            StoreWriteError: If the update fails
        """
        if partial and all(key.startswith("$") for key in partial):
            update = partial
        else:
            update = {"$set": partial}

        try:
            result = self.collection.update_one({"_id": record_id}, update, upsert=upsert)
        except (PyMongoError, BSONError) as e:
            raise StoreWriteError(f"Update of {record_id} in '{self.name}' failed: {e}") from e

        if result.upserted_id is not None:
            logger.debug(f"Upserted {result.upserted_id} into '{self.name}'")
        return result

    def find_by_criteria(self, criteria: Dict[str, Any]) -> List[T]:
        """
        Find every record matching a filter, in natural store order.

        Raises:
            DecodeError: On the first malformed document; no partial results
            StoreError: If the query fails
        """
        results = []
        try:
            for document in self.collection.find(criteria):
                results.append(self._decode(document))
        except BSONError as e:
            raise DecodeError(f"Undecodable document in '{self.name}': {e}") from e
        except PyMongoError as e:
            raise StoreError(f"Query on '{self.name}' failed: {e}") from e
        return results

    def get_all(self) -> List[T]:
        """Get all records (use with caution on large collections)."""
        return self.find_by_criteria({})

    def get_documents_by_file_name(self, file_name: str) -> List[T]:
        """Records whose natural key matches ``file_name``."""
        return self.find_by_criteria({"file_name": file_name})

    def ensure_indexes(self) -> int:
        """
        Create the non-unique ``file_name`` lookup index if missing.

        Returns:
            Number of indexes created
        """
        existing_keys = {
            tuple(sorted(dict(idx["key"]).items()))
            for idx in self.collection.list_indexes()
        }

        if (("file_name", 1),) in existing_keys:
            return 0

        self.collection.create_index("file_name")
        logger.info(f"Created file_name index on '{self.name}'")
        return 1
