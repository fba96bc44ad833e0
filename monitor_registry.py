"""Registry of active file monitors.

Maps each monitored path to exactly one WatchEntry: the file's TailTracker,
the actor task feeding it and the watchdog observer producing its change
notifications. Polling is used rather than native notifications so that
network mounts and other unreliable filesystems still work.
"""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers.api import BaseObserver
from watchdog.observers.polling import PollingObserver

from config import DEFAULT_POLL_INTERVAL_SECONDS
from event_sink import EventSink
from tail_tracker import TailTracker

logger = logging.getLogger(__name__)

ObserverFactory = Callable[..., BaseObserver]


class StartStatus(Enum):
    """Outcome of MonitorRegistry.start()."""

    STARTED = "started"
    ALREADY_MONITORING = "already_monitoring"


class _ChangeForwarder(FileSystemEventHandler):
    """Forwards events for one file from the observer thread into a queue.

    The observer watches the file's parent directory, so events for other
    entries in that directory are dropped here. When the path is a symlink,
    events on its current target also count, since appends through the link
    show up there.
    """

    def __init__(self, path: Path, loop: asyncio.AbstractEventLoop, queue: asyncio.Queue) -> None:
        super().__init__()
        self.path = path
        self._loop = loop
        self._queue = queue

    def _concerns_file(self, event: FileSystemEvent) -> bool:
        if event.is_directory:
            return False
        if event.event_type in (EVENT_TYPE_MODIFIED, EVENT_TYPE_CREATED):
            return self._is_target(event.src_path)
        if event.event_type == EVENT_TYPE_MOVED:
            # A file moved into place, e.g. an atomic rewrite
            return self._is_target(event.dest_path)
        return False

    def _is_target(self, raw_path: str | bytes) -> bool:
        event_path = Path(os.fsdecode(raw_path))
        if event_path == self.path:
            return True
        # Re-resolved per event so a retargeted link is followed
        return os.path.realpath(event_path) == os.path.realpath(self.path)

    def on_any_event(self, event: FileSystemEvent) -> None:
        if not self._concerns_file(event):
            return
        try:
            self._loop.call_soon_threadsafe(self._queue.put_nowait, event.event_type)
        except RuntimeError:
            # Event loop already closed during shutdown
            logger.debug(f"Dropped {event.event_type} event for {self.path}")


@dataclass
class WatchEntry:
    """A single active monitor.

    Attributes:
        path: Absolute path of the monitored file (registry key).
        tracker: Offset state and change reaction for the file.
        observer: The underlying watch resource.
        queue: Change notifications waiting for the tracker.
        task: The tracker's actor task.
    """

    path: Path
    tracker: TailTracker
    observer: BaseObserver
    queue: asyncio.Queue
    task: asyncio.Task

    @property
    def last_offset(self) -> int:
        return self.tracker.last_offset

    @property
    def pattern(self) -> Optional[str]:
        return self.tracker.pattern


class MonitorRegistry:
    """Owns the start/stop lifecycle of file monitors.

    At most one monitor exists per path. start() and stop() are serialized,
    so a path's old watch is fully released before a new one can start.

    Args:
        sink: Destination for events from every tracker.
        poll_interval: Seconds between polls of each watched directory.
        observer_factory: Creates the watch resource; called with timeout=poll_interval.
    """

    def __init__(
        self,
        sink: EventSink,
        poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
        observer_factory: ObserverFactory = PollingObserver,
    ) -> None:
        self.sink = sink
        self.poll_interval = poll_interval
        self._observer_factory = observer_factory
        self._entries: Dict[Path, WatchEntry] = {}
        self._lock = asyncio.Lock()

    def __contains__(self, path: object) -> bool:
        return path in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, path: Path) -> Optional[WatchEntry]:
        """Return the entry for a path, or None if it is not monitored."""
        return self._entries.get(path)

    def paths(self) -> List[Path]:
        """Return the monitored paths in start order."""
        return list(self._entries)

    async def start(
        self, path: Path, pattern: Optional[str] = None, display_path: Optional[str] = None
    ) -> StartStatus:
        """Start monitoring a file unless it is already monitored.

        The file itself need not exist yet, but its directory must.

        Args:
            path: Absolute path of the file.
            pattern: Optional substring; only matching appended lines are published.
            display_path: The path as the caller wrote it, used in events.

        Returns:
            STARTED, or ALREADY_MONITORING if an entry for path exists.

        Raises:
            FileNotFoundError: If the parent directory does not exist.
            OSError: If the watch cannot be created.
        """
        async with self._lock:
            if path in self._entries:
                return StartStatus.ALREADY_MONITORING

            queue: asyncio.Queue = asyncio.Queue()
            # Starting a polling observer snapshots the whole directory
            tracker, observer = await asyncio.to_thread(
                self._open_watch, path, pattern, display_path, asyncio.get_running_loop(), queue
            )

            task = asyncio.create_task(tracker.run(queue), name=f"tail:{path}")
            self._entries[path] = WatchEntry(
                path=path, tracker=tracker, observer=observer, queue=queue, task=task
            )
            logger.info(
                f"Started monitoring {path} at offset {tracker.last_offset}"
                + (f" for pattern {pattern!r}" if tracker.pattern else "")
            )
            return StartStatus.STARTED

    def _open_watch(
        self,
        path: Path,
        pattern: Optional[str],
        display_path: Optional[str],
        loop: asyncio.AbstractEventLoop,
        queue: asyncio.Queue,
    ) -> Tuple[TailTracker, BaseObserver]:
        parent = path.parent
        if not parent.is_dir():
            raise FileNotFoundError(f"Directory not found: {parent}")

        tracker = TailTracker(path, self.sink, pattern=pattern, display_path=display_path)
        observer = self._observer_factory(timeout=self.poll_interval)
        observer.schedule(_ChangeForwarder(path, loop, queue), str(parent), recursive=False)
        observer.start()
        return tracker, observer

    async def stop(self, path: Path) -> bool:
        """Stop monitoring a file and release its watch.

        Returns only after the observer thread has exited and the tracker
        has finished any notification it was handling.

        Returns:
            True if the path was monitored, False otherwise.
        """
        async with self._lock:
            entry = self._entries.get(path)
            if entry is None:
                return False

            await self._release(entry)
            del self._entries[path]
            logger.info(f"Stopped monitoring {path}")
            return True

    async def stop_all(self) -> None:
        """Stop every active monitor."""
        async with self._lock:
            for path, entry in list(self._entries.items()):
                try:
                    await self._release(entry)
                except Exception:
                    logger.exception(f"Error releasing watch for {path}")
                del self._entries[path]

    async def _release(self, entry: WatchEntry) -> None:
        await asyncio.to_thread(_stop_observer, entry.observer)
        # Notifications queued before the sentinel are still handled
        entry.queue.put_nowait(None)
        await entry.task


def _stop_observer(observer: BaseObserver) -> None:
    observer.stop()
    observer.join()
