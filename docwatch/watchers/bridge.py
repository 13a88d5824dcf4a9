"""
Bridge from watchdog callbacks to a single ordered consumer.

watchdog invokes its handler synchronously on the observer thread. The bridge
hands each notification over a queue of capacity one, so delivery blocks
until the consumer has taken the previous change. Nothing is dropped at the
boundary while the bridge is open; a slow consumer stalls the observer thread
instead.
"""

import os
import queue
import threading
from pathlib import Path
from typing import Callable, Iterator, Optional

from loguru import logger
from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)

from docwatch.models.actions import ChangeEvent, ChangeKind


def to_change_event(event: FileSystemEvent) -> ChangeEvent:
    """
    Convert a watchdog event into a ChangeEvent.

    Renames count as modifications of the destination path; editors that
    save atomically move a temp file into place. Directory events and every
    other event type (deleted, opened, closed) map to OTHER.
    """
    src_path = Path(os.fsdecode(event.src_path))

    if event.is_directory:
        return ChangeEvent(ChangeKind.OTHER, [src_path])

    if event.event_type == EVENT_TYPE_CREATED:
        return ChangeEvent(ChangeKind.CREATE, [src_path])
    if event.event_type == EVENT_TYPE_MODIFIED:
        return ChangeEvent(ChangeKind.MODIFY, [src_path])
    if event.event_type == EVENT_TYPE_MOVED and event.dest_path:
        return ChangeEvent(ChangeKind.MODIFY, [Path(os.fsdecode(event.dest_path))])

    return ChangeEvent(ChangeKind.OTHER, [src_path])


class EventBridge(FileSystemEventHandler):
    """watchdog handler that relays changes through a capacity-one queue."""

    def __init__(
        self,
        poll_interval: float = 0.5,
        source_alive: Optional[Callable[[], bool]] = None,
    ):
        """
        Initialize bridge.

        Args:
            poll_interval: Seconds between checks for shutdown while blocked
            source_alive: Returns False once the upstream source has died
        """
        super().__init__()
        self.poll_interval = poll_interval
        self.source_alive = source_alive
        self._relay: queue.Queue = queue.Queue(maxsize=1)
        self._closed = threading.Event()
        self.source_failed = False

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def on_any_event(self, event: FileSystemEvent):
        """Relay every watchdog event, whatever its type."""
        self.deliver(to_change_event(event))

    def deliver(self, change: ChangeEvent):
        """
        Hand a change to the consumer, blocking while the previous one is pending.

        Returns once the change is queued, or discards it if the bridge
        closes while waiting.
        """
        while not self._closed.is_set():
            try:
                self._relay.put(change, timeout=self.poll_interval)
                return
            except queue.Full:
                continue

        logger.debug(f"Bridge closed, discarding {change.kind.value} for {change.paths}")

    def close(self):
        """
        Stop the stream. Safe to call from a signal handler or any thread.

        Changes already queued are still yielded before ``events`` returns.
        """
        self._closed.set()

    def events(self) -> Iterator[ChangeEvent]:
        """Yield changes in delivery order until the bridge closes."""
        while True:
            try:
                change = self._relay.get(timeout=self.poll_interval)
            except queue.Empty:
                if self._closed.is_set():
                    return
                if self.source_alive is not None and not self.source_alive():
                    logger.error("Watch source stopped unexpectedly")
                    self.source_failed = True
                    self._closed.set()
                    return
                continue

            yield change
