"""
docwatch - main entrypoint

Watches a directory tree and keeps MongoDB metadata collections in sync:
- New files → routed by path to an entity kind and indexed
- Modified files → matched by file name and patched in place
- Editor noise → dropped by ignore patterns
"""

import argparse
import signal
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from docwatch.errors import SetupError
from docwatch.pipeline.classifier import ActionClassifier
from docwatch.pipeline.filters import ChangeFilter
from docwatch.pipeline.processor import EventProcessor
from docwatch.pipeline.router import TypeRouter
from docwatch.repository.registry import RepositoryRegistry
from docwatch.utils.config import Settings, get_settings
from docwatch.utils.mongo_client import MongoStore
from docwatch.watchers.filesystem import FileSystemWatcher


def configure_logging(level: str = "INFO"):
    """Configure loguru output."""
    logger.remove()
    logger.add(
        sys.stdout,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
        level=level.upper()
    )


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments. Unset flags fall back to settings."""
    parser = argparse.ArgumentParser(
        description="Watch a directory tree and sync file metadata into MongoDB.",
    )
    parser.add_argument(
        "--root",
        type=Path,
        default=None,
        help="Directory to watch recursively (env: DOCWATCH_WATCH_ROOT).",
    )
    parser.add_argument(
        "--mongo-uri",
        default=None,
        help="MongoDB connection string (env: DOCWATCH_MONGO_URI).",
    )
    parser.add_argument(
        "--database",
        default=None,
        help="Database name (env: DOCWATCH_DATABASE_NAME).",
    )
    parser.add_argument(
        "--ignore",
        action="append",
        default=None,
        help="Regex of paths to ignore (can be repeated; replaces the defaults).",
    )
    parser.add_argument(
        "--route",
        action="append",
        default=None,
        help="prefix=kind route, first match wins (can be repeated; replaces the defaults).",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (DEBUG, INFO, WARNING, ERROR).",
    )
    return parser.parse_args(argv)


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Return settings with CLI flags applied on top."""
    overrides = {}
    if args.root is not None:
        overrides["watch_root"] = args.root
    if args.mongo_uri is not None:
        overrides["mongo_uri"] = args.mongo_uri
    if args.database is not None:
        overrides["database_name"] = args.database
    if args.ignore:
        overrides["ignore_patterns"] = ",".join(args.ignore)
    if args.route:
        overrides["type_routes"] = ",".join(args.route)
    if args.log_level is not None:
        overrides["log_level"] = args.log_level
    return settings.model_copy(update=overrides)


def build_processor(settings: Settings, store: MongoStore) -> EventProcessor:
    """
    Wire the ingestion pipeline around one store handle.

    Raises:
        SetupError: If patterns or routes are invalid
    """
    repositories = RepositoryRegistry.from_store(store, settings)

    try:
        routes = settings.get_type_routes()
    except ValueError as e:
        raise SetupError(str(e)) from e

    router = TypeRouter(routes)
    return EventProcessor(
        change_filter=ChangeFilter(settings.get_ignore_patterns()),
        classifier=ActionClassifier(repositories, router),
        router=router,
        repositories=repositories,
    )


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    settings = apply_overrides(get_settings(), args)
    configure_logging(settings.log_level)

    logger.info("docwatch - file metadata sync")

    store = MongoStore.from_settings(settings)
    try:
        store.connect()
        processor = build_processor(settings, store)
        watcher = FileSystemWatcher(settings.get_watch_root(), processor)

        def _signal_handler(signum, frame):
            logger.info(f"Received signal {signum}, shutting down.")
            watcher.bridge.close()

        signal.signal(signal.SIGINT, _signal_handler)
        signal.signal(signal.SIGTERM, _signal_handler)

        processed = watcher.run()
        logger.info(f"Watcher stopped after {processed} events")
        if watcher.bridge.source_failed:
            return 1

    except SetupError as e:
        logger.error(f"Setup failed: {e}")
        return 1
    finally:
        store.close()

    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
