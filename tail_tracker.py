"""Incremental tail tracking for monitored files.

A TailTracker remembers how many bytes of its file have been delivered.
On each change notification it re-stats the file, reads only the appended
region and publishes it (optionally filtered by a pattern) to the event
sink. A shrinking file is treated as rotated: the offset jumps to the new
size and nothing is delivered for that notification. A file replaced by a
different one (new device or inode, e.g. a retargeted symlink or a file
moved into place) is read from its first byte, since all of its content
postdates the replacement.
"""

from __future__ import annotations

import asyncio
import codecs
import logging
from pathlib import Path
from typing import Optional, Tuple

from event_sink import ChangeEvent, EventSink, MatchEvent
from line_scanner import split_lines
from matcher import build_line_predicate

logger = logging.getLogger(__name__)


class TailTracker:
    """Per-file offset state and change reaction.

    handle_change() must not run concurrently for one tracker; run() feeds
    it notifications one at a time.

    Attributes:
        path: Absolute path of the monitored file.
        display_path: The path as the caller wrote it, used in events.
        pattern: Optional case-insensitive substring filter.
        last_offset: Number of bytes already consumed.
    """

    def __init__(
        self,
        path: Path,
        sink: EventSink,
        pattern: Optional[str] = None,
        display_path: Optional[str] = None,
    ) -> None:
        self.path = path
        self.display_path = display_path if display_path is not None else str(path)
        self.pattern = pattern or None
        self._sink = sink
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        # Monitoring filters by substring only, even when search used regex
        self._matches = (
            build_line_predicate(self.pattern) if self.pattern is not None else None
        )

        # (st_dev, st_ino) of the file last seen at path
        self._identity: Optional[Tuple[int, int]] = None
        try:
            st = path.stat()
            self.last_offset = st.st_size
            self._identity = (st.st_dev, st.st_ino)
        except FileNotFoundError:
            # Created later: everything it receives counts as new content
            self.last_offset = 0

    def handle_change(self) -> None:
        """React to one change notification for the file.

        Never raises: failures are logged and the tracker stays usable for
        the next notification.
        """
        try:
            try:
                # Follows symlinks, so a retargeted link is picked up
                st = self.path.stat()
            except OSError as e:
                logger.error(f"Error monitoring file {self.display_path}: {e}")
                return

            identity = (st.st_dev, st.st_ino)
            if self._identity is not None and identity != self._identity:
                logger.info(
                    f"File {self.display_path} was replaced, reading new file from the start"
                )
                self.last_offset = 0
                self._decoder.reset()
            self._identity = identity
            new_size = st.st_size

            if new_size < self.last_offset:
                logger.info(
                    f"File {self.display_path} shrank from {self.last_offset} to "
                    f"{new_size} bytes, treating as rotation"
                )
                self.last_offset = new_size
                self._decoder.reset()
                return
            if new_size == self.last_offset:
                return

            new_content = self._read_delta(new_size)
            if new_content:
                self._emit(new_content)
        except Exception:
            logger.exception(f"Error monitoring file {self.display_path}")

    def _read_delta(self, new_size: int) -> str:
        """Read bytes [last_offset, new_size) and advance the offset.

        The offset advances by what was actually read, in case the file
        shrank between stat and read.
        """
        with self.path.open("rb") as f:
            f.seek(self.last_offset)
            data = f.read(new_size - self.last_offset)

        self.last_offset += len(data)
        logger.debug(f"Read {len(data)} new bytes from {self.display_path}")
        # Incomplete multi-byte sequences are held until the next read
        return self._decoder.decode(data)

    def _emit(self, new_content: str) -> None:
        if self._matches is None:
            self._sink.publish(ChangeEvent(path=self.display_path, new_content=new_content))
            return

        matches = tuple(line for line in split_lines(new_content) if self._matches(line))
        if matches:
            self._sink.publish(
                MatchEvent(path=self.display_path, matches=matches, pattern=self.pattern)
            )

    async def run(self, queue: asyncio.Queue) -> None:
        """Process change notifications from a queue until a None sentinel.

        Each notification is handled in a worker thread, and the next one is
        not taken until the previous has finished.
        """
        while True:
            notification = await queue.get()
            try:
                if notification is None:
                    return
                await asyncio.to_thread(self.handle_change)
            finally:
                queue.task_done()
