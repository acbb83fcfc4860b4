"""
File system watcher feeding raw events to the driver loop.

Translates watchdog callbacks, which arrive on the observer thread, into
RawEvent values on a thread-safe queue that the driver loop drains.
"""

import logging
import os
import queue
from pathlib import Path

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from auto_check.core.interfaces import IEventSource
from auto_check.models import (
    Created,
    Error,
    MetadataOnly,
    MonitoringError,
    RawEvent,
    Removed,
    Renamed,
    TransportError,
    Written,
)

logger = logging.getLogger(__name__)

# Marks the end of the event stream on the queue.
_END_OF_STREAM = object()


def translate_event(event: FileSystemEvent) -> RawEvent:
    """
    Convert a watchdog event into a RawEvent.

    Directory modifications and open/close notifications carry no content
    change and become MetadataOnly.
    """
    src_path = Path(os.fsdecode(event.src_path))

    if event.event_type == EVENT_TYPE_MOVED:
        return Renamed(src=src_path, dst=Path(os.fsdecode(event.dest_path)), is_directory=event.is_directory)
    if event.event_type == EVENT_TYPE_CREATED:
        return Created(path=src_path, is_directory=event.is_directory)
    if event.event_type == EVENT_TYPE_DELETED:
        return Removed(path=src_path, is_directory=event.is_directory)
    if event.event_type == EVENT_TYPE_MODIFIED and not event.is_directory:
        return Written(path=src_path)
    return MetadataOnly(path=src_path)


def _source_path(event: FileSystemEvent) -> Path | None:
    try:
        return Path(os.fsdecode(event.src_path)) if event.src_path else None
    except (TypeError, ValueError):
        return None


class WatchdogEventSource(FileSystemEventHandler, IEventSource):
    """
    Event source backed by a watchdog observer.

    The observer thread pushes translated events onto an unbounded queue;
    ``get`` blocks on it with a timeout.
    """

    def __init__(self):
        super().__init__()
        self._queue: queue.Queue = queue.Queue()
        self._observer: Observer | None = None
        self._watched_paths: set[str] = set()

    def watch(self, root_path: Path, recursive: bool = True) -> None:
        """
        Start watching a directory for file changes.

        Args:
            root_path: Path to directory to monitor
            recursive: Whether to monitor subdirectories

        Raises:
            MonitoringError: If monitoring cannot be started
        """
        if not root_path.exists():
            raise MonitoringError(f"Directory does not exist: {root_path}", path=str(root_path), operation="watch")

        if not root_path.is_dir():
            raise MonitoringError(f"Path is not a directory: {root_path}", path=str(root_path), operation="watch")

        try:
            if self._observer is None:
                self._observer = Observer()

            directory_str = str(root_path.resolve())
            if directory_str not in self._watched_paths:
                self._observer.schedule(self, directory_str, recursive=recursive)
                self._watched_paths.add(directory_str)
                logger.info("Started watching %s (recursive: %s)", root_path, recursive)

            if not self._observer.is_alive():
                self._observer.start()
                logger.debug("File watching observer started")

        except Exception as e:
            logger.error("Failed to start file watching: %s", e)
            raise MonitoringError(
                f"Failed to start watching: {e}",
                path=str(root_path),
                operation="watch",
                underlying_error=e,
            ) from e

    def stop(self) -> None:
        """Stop the observer and close the event stream."""
        if self._observer is not None and self._observer.is_alive():
            self._observer.stop()
            self._observer.join(timeout=5.0)
            logger.info("File watching stopped")
        self._watched_paths.clear()
        self._queue.put(_END_OF_STREAM)

    def get(self, timeout: float) -> RawEvent | None:
        """
        Wait up to ``timeout`` seconds for the next event.

        Raises:
            TransportError: If the stream was closed or the observer died
        """
        try:
            item = self._queue.get(timeout=timeout)
        except queue.Empty:
            if not self.is_watching:
                raise TransportError("File watching observer is not running") from None
            return None

        if item is _END_OF_STREAM:
            raise TransportError("Event stream closed")
        return item

    def dispatch(self, event: FileSystemEvent) -> None:
        """Translate every watchdog event and queue it; runs on the observer thread."""
        try:
            raw_event = translate_event(event)
        except Exception as e:
            logger.debug("Could not translate %r: %s", event, e)
            raw_event = Error(cause=f"{type(e).__name__}: {e}", path=_source_path(event))
        self._queue.put(raw_event)

    @property
    def is_watching(self) -> bool:
        """Check if currently watching for file changes."""
        return self._observer is not None and self._observer.is_alive()

    def get_watched_paths(self) -> list[str]:
        """Get list of currently watched directory paths."""
        return list(self._watched_paths)

    def get_pending_events_count(self) -> int:
        """Get count of events not yet taken by the driver loop."""
        return self._queue.qsize()
