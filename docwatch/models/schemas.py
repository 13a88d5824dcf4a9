"""
Pydantic models for docwatch entities.

Each entity kind lives in its own collection and is identified naturally by
``file_name``. Documents are rebuilt from every change event; nothing here is
cached between events.
"""

from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, ClassVar, Dict, List, Optional, Type

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator

from docwatch.utils.helpers import format_timestamp, get_file_extension, now_utc, parse_iso_timestamp

TIMESTAMP_FIELDS = ("date_created", "date_last_modified")


class EntityKind(str, Enum):
    """Closed set of persisted entity kinds."""
    IMAGE = "image"
    POST = "post"

    @property
    def model(self) -> Type["IndexableEntity"]:
        return ENTITY_MODELS[self]


# =====================================================
# Indexable base
# =====================================================

class IndexableEntity(BaseModel):
    """
    Base for persistable entity kinds.

    Subclasses name the field that carries the file extension and know how to
    build a blank record. ``index`` and ``update`` are the capability the
    pipeline relies on; both take the kind's own repository.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, populate_by_name=True)

    TYPE_FIELD: ClassVar[str]

    id: Optional[ObjectId] = Field(default=None, alias="_id")
    file_name: str
    date_created: Optional[datetime] = None
    date_last_modified: Optional[datetime] = None

    @field_validator(*TIMESTAMP_FIELDS, mode="before")
    @classmethod
    def _decode_timestamp(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_iso_timestamp(value)
        if isinstance(value, datetime):
            # BSON datetimes come back naive but are UTC
            if value.tzinfo is None:
                return value.replace(tzinfo=timezone.utc)
            return value.astimezone(timezone.utc)
        return value

    @classmethod
    def blank(cls, file_name: str, extension: str, stamp: datetime) -> "IndexableEntity":
        """
        Build a mostly-empty entity for a file.

        Subclass hook: every entity kind overrides this to fill its own
        required fields. The base class has no fields of its own to fill.

        Args:
            file_name: Identity derived from the path
            extension: File extension without the dot
            stamp: Event time, used by kinds that derive fields from it

        Raises:
            NotImplementedError: If called on the base class
        """
        raise NotImplementedError(f"{cls.__name__} does not define blank()")

    @classmethod
    def new_record(cls, file_name: str, extension: str) -> "IndexableEntity":
        """Entity for a newly seen file: ``date_created`` set, id unset."""
        stamp = now_utc()
        entity = cls.blank(file_name, extension, stamp)
        entity.date_created = stamp
        return entity

    @classmethod
    def modification(cls, file_name: str, extension: str) -> "IndexableEntity":
        """Entity describing a change to an existing file."""
        stamp = now_utc()
        entity = cls.blank(file_name, extension, stamp)
        entity.date_last_modified = stamp
        return entity

    def to_document(self) -> Dict[str, Any]:
        """
        Encode for the store.

        Timestamps become ``YYYY-MM-DDTHH:MM:SS.sssZ`` strings and are omitted
        when unset. An unset id is omitted so the store assigns one.
        """
        document = self.model_dump(exclude={"id"})
        for field in TIMESTAMP_FIELDS:
            if document[field] is None:
                del document[field]
            else:
                document[field] = format_timestamp(document[field])

        if self.id is not None:
            document["_id"] = self.id
        return document

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "IndexableEntity":
        return cls.model_validate(document)

    # Indexable capability ------------------------------------------------

    def index(self, repository) -> ObjectId:
        """
        Insert this entity as a brand-new record.

        Raises:
            StoreWriteError: If the insert fails
        """
        return repository.create(self)

    def update(self, changed_path: Path, record_id: ObjectId, repository) -> ObjectId:
        """
        Patch the existing record in place.

        Only the type field and ``date_last_modified`` are written to an
        existing record; every other stored field is left untouched. Upsert is
        on, so a record deleted since classification is recreated under the
        same id, filled from this entity so that it still decodes.

        Raises:
            MissingExtension: If the changed path has no extension
            StoreWriteError: If the update fails
        """
        stamp = self.date_last_modified or now_utc()
        patch = {
            self.TYPE_FIELD: get_file_extension(changed_path),
            "date_last_modified": format_timestamp(stamp),
        }
        on_insert = {
            field: value
            for field, value in self.to_document().items()
            if field != "_id" and field not in patch
        }
        repository.update_one(record_id, {"$set": patch, "$setOnInsert": on_insert})
        return record_id


# =====================================================
# Entity kinds
# =====================================================

class ImageMetadata(IndexableEntity):
    """Metadata for an image file."""

    TYPE_FIELD: ClassVar[str] = "image_type"

    image_type: str
    year: Optional[int] = None
    month: Optional[int] = None
    description: Optional[str] = None
    source: Optional[str] = None

    @classmethod
    def blank(cls, file_name: str, extension: str, stamp: datetime) -> "ImageMetadata":
        return cls(file_name=file_name, image_type=extension)


class PostMetadata(IndexableEntity):
    """Metadata for a post file."""

    TYPE_FIELD: ClassVar[str] = "post_type"

    heading: str
    author: str
    post_type: str
    year: int
    month: int
    description: Optional[str] = None
    tags: Optional[List[str]] = None
    reading_time_minutes: Optional[int] = None
    is_featured: Optional[bool] = None
    in_progress: Optional[bool] = None
    active: Optional[bool] = None
    image: Optional[ObjectId] = None
    checksum: Optional[str] = None
    body: Optional[str] = None

    @classmethod
    def blank(cls, file_name: str, extension: str, stamp: datetime) -> "PostMetadata":
        # heading/author/year/month are required on posts
        return cls(
            file_name=file_name,
            heading=file_name,
            author="",
            post_type=extension,
            year=stamp.year,
            month=stamp.month,
        )


ENTITY_MODELS: Dict[EntityKind, Type[IndexableEntity]] = {
    EntityKind.IMAGE: ImageMetadata,
    EntityKind.POST: PostMetadata,
}
