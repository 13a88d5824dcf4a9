"""
File system watcher for docwatch.

Monitors the configured root directory recursively and feeds every change
through the ingestion pipeline. Uses watchdog for cross-platform file system
event monitoring.
"""

from pathlib import Path
from typing import Optional

from loguru import logger
from watchdog.observers import Observer

from docwatch.errors import SetupError
from docwatch.pipeline.processor import EventProcessor
from docwatch.watchers.bridge import EventBridge


class FileSystemWatcher:
    """File system monitoring orchestrator."""

    def __init__(
        self,
        watch_root: Path,
        processor: EventProcessor,
        observer: Optional[Observer] = None,
        poll_interval: float = 0.5,
    ):
        """
        Initialize file system watcher.

        Args:
            watch_root: Directory watched recursively
            processor: Pipeline that handles each change
            observer: watchdog observer (defaults to the platform observer)
            poll_interval: Seconds between shutdown checks while idle
        """
        self.watch_root = watch_root
        self.processor = processor
        self.observer = observer or Observer()
        self.bridge = EventBridge(
            poll_interval=poll_interval,
            source_alive=self._source_alive,
        )
        self._started = False

    def _source_alive(self) -> bool:
        # Only a started observer can die
        return not self._started or self.observer.is_alive()

    def start_watching(self):
        """
        Schedule the root and start the observer thread.

        Raises:
            SetupError: If the root cannot be watched
        """
        if not self.watch_root.is_dir():
            raise SetupError(f"Watch root {self.watch_root} is not a directory")

        try:
            self.observer.schedule(self.bridge, str(self.watch_root), recursive=True)
            self.observer.start()
            self._started = True
        except OSError as e:
            raise SetupError(f"Failed to watch {self.watch_root}: {e}") from e

        logger.success(f"Started watching: {self.watch_root}")

    def stop_watching(self):
        """Close the stream and stop the observer."""
        self.bridge.close()
        if self.observer.is_alive():
            self.observer.stop()
            self.observer.join()
        logger.info("File system observer stopped")

    def consume(self) -> int:
        """
        Process changes one at a time until the bridge closes.

        Returns:
            Number of change events processed
        """
        processed = 0
        for change in self.bridge.events():
            self.processor.process(change)
            processed += 1
        return processed

    def run(self) -> int:
        """Run the watcher until stopped or the observer dies."""
        logger.info("Starting file system watcher...")
        self.start_watching()

        try:
            return self.consume()
        finally:
            self.stop_watching()
