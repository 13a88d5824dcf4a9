"""
MongoDB store handle.

One MongoStore is constructed at startup, connected once, and passed to every
repository that needs it. Write serialization is left to the server.
"""

from typing import Optional

import pymongo
from loguru import logger
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

from docwatch.errors import SetupError
from docwatch.utils.config import Settings


class MongoStore:
    """MongoDB database handle with connection pooling."""

    def __init__(
        self,
        uri: str,
        database_name: str,
        server_selection_timeout_ms: int = 5000,
        connect_timeout_ms: int = 5000,
        socket_timeout_ms: int = 10000,
        client: Optional[pymongo.MongoClient] = None,
    ):
        """
        Initialize store handle.

        Args:
            uri: MongoDB connection string
            database_name: Database holding the entity collections
            server_selection_timeout_ms: Max wait for a reachable server
            connect_timeout_ms: Max wait for a new connection
            socket_timeout_ms: Max wait for a single operation
            client: Pre-built client (tests pass a mongomock client here)
        """
        self.uri = uri
        self.database_name = database_name
        self.timeouts = {
            "serverSelectionTimeoutMS": server_selection_timeout_ms,
            "connectTimeoutMS": connect_timeout_ms,
            "socketTimeoutMS": socket_timeout_ms,
        }
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "MongoStore":
        """Build a store handle from application settings."""
        return cls(
            uri=settings.mongo_uri,
            database_name=settings.database_name,
            server_selection_timeout_ms=settings.server_selection_timeout_ms,
            connect_timeout_ms=settings.connect_timeout_ms,
            socket_timeout_ms=settings.socket_timeout_ms,
        )

    def connect(self):
        """
        Establish connection to MongoDB and verify it responds.

        Raises:
            SetupError: If the server cannot be reached
        """
        try:
            if self._client is None:
                logger.info(f"Connecting to MongoDB at {self.uri}...")
                self._client = pymongo.MongoClient(self.uri, **self.timeouts)
            self._client.admin.command("ping")
        except PyMongoError as e:
            raise SetupError(f"Failed to connect to MongoDB at {self.uri}: {e}") from e

        logger.success(f"Connected to database: {self.database_name}")

    def close(self):
        """Close MongoDB connection."""
        if self._client is not None:
            logger.info("Closing MongoDB connection...")
            self._client.close()
            self._client = None

    @property
    def client(self) -> pymongo.MongoClient:
        """Get client, connecting if necessary."""
        if self._client is None:
            self.connect()
        return self._client

    @property
    def database(self) -> Database:
        return self.client[self.database_name]

    def collection(self, name: str) -> Collection:
        """Get a collection handle by name."""
        return self.database[name]
