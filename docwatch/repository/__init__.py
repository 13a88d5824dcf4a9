"""
Repositories

Generic CRUD/upsert access to one collection per entity kind:
- repo.py - MongoRepository, shared by every kind
- registry.py - per-kind repositories and the kind → repository table
"""

from docwatch.repository.registry import ImageRepository, PostRepository, RepositoryRegistry
from docwatch.repository.repo import MongoRepository

__all__ = ["ImageRepository", "MongoRepository", "PostRepository", "RepositoryRegistry"]
