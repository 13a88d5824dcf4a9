"""
Path → entity kind routing for newly seen files.
"""

from pathlib import Path
from typing import Iterable, List, Tuple, Union

from loguru import logger

from docwatch.errors import RoutingError, SetupError
from docwatch.models.schemas import EntityKind, IndexableEntity
from docwatch.utils.helpers import get_file_extension


class TypeRouter:
    """Ordered (prefix, kind) table, first match wins."""

    def __init__(self, routes: Iterable[Tuple[str, Union[str, EntityKind]]]):
        """
        Initialize router.

        Args:
            routes: Ordered (path prefix, entity kind) pairs

        Raises:
            SetupError: If a route names an unknown entity kind
        """
        self.routes: List[Tuple[str, EntityKind]] = []
        for prefix, kind in routes:
            try:
                self.routes.append((str(prefix), EntityKind(kind)))
            except ValueError as e:
                raise SetupError(f"Unknown entity kind '{kind}' for prefix '{prefix}'") from e

        logger.info(f"Type routes: {[(p, k.value) for p, k in self.routes]}")

    def resolve(self, path: Path) -> EntityKind:
        """
        Find the entity kind for a path.

        Raises:
            RoutingError: If no prefix matches
        """
        path_str = str(path)
        for prefix, kind in self.routes:
            if path_str.startswith(prefix):
                return kind
        raise RoutingError(f"No entity kind is mapped to {path_str}", path)

    def route(self, path: Path, file_name: str) -> Tuple[EntityKind, IndexableEntity]:
        """
        Construct a new, mostly-empty entity for a newly seen file.

        Args:
            path: Changed path
            file_name: Identity derived from the path

        Returns:
            The matched kind and the unsaved entity

        Raises:
            RoutingError: If no prefix matches
            MissingExtension: If the path has no extension
        """
        kind = self.resolve(path)
        extension = get_file_extension(path)
        return kind, kind.model.new_record(file_name, extension)
