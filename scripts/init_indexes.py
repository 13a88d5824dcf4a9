#!/usr/bin/env python3
"""
Initialize MongoDB lookup indexes for docwatch collections.

Creates the non-unique ``file_name`` index on every entity collection so
classification lookups do not scan. Safe to run repeatedly.

Usage:
    python scripts/init_indexes.py
"""

import sys

from loguru import logger
from pymongo.errors import PyMongoError

from docwatch.errors import SetupError
from docwatch.repository.registry import RepositoryRegistry
from docwatch.utils.config import get_settings
from docwatch.utils.mongo_client import MongoStore


def verify_indexes(registry: RepositoryRegistry):
    """List the indexes of every entity collection."""
    for kind, repository in registry.items():
        logger.info(f"=== {kind.value} ({repository.name}) ===")
        for index in repository.collection.list_indexes():
            logger.info(f"  {index['name']}: {dict(index['key'])}")


def main():
    """Main initialization function."""
    logger.info("Starting MongoDB index initialization...")

    settings = get_settings()
    store = MongoStore.from_settings(settings)

    try:
        store.connect()
        registry = RepositoryRegistry.from_store(store, settings)

        created = registry.ensure_indexes()
        logger.info(f"Created {created} indexes")

        verify_indexes(registry)
        logger.success("Index initialization completed successfully!")
        return 0

    except (SetupError, PyMongoError) as e:
        logger.error(f"Index initialization failed: {e}")
        return 1

    finally:
        store.close()
        logger.info("Disconnected from MongoDB")


if __name__ == "__main__":
    sys.exit(main())
