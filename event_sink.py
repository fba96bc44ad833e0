"""Publish point for monitoring events.

Tail trackers publish ChangeEvent and MatchEvent values here; whoever runs
the server decides what to do with them by subscribing.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Callable, List, Tuple, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChangeEvent:
    """New content appended to a monitored file (no pattern set).

    Attributes:
        path: The monitored path as the caller supplied it.
        new_content: The appended text.
    """

    path: str
    new_content: str


@dataclass(frozen=True)
class MatchEvent:
    """Appended lines that matched a monitor's pattern.

    Attributes:
        path: The monitored path as the caller supplied it.
        matches: The matching lines, in file order.
        pattern: The pattern the monitor was started with.
    """

    path: str
    matches: Tuple[str, ...]
    pattern: str


MonitorEvent = Union[ChangeEvent, MatchEvent]
Subscriber = Callable[[MonitorEvent], None]


class EventSink:
    """Fan-out of monitoring events to subscribers.

    Subscribers run synchronously on the publishing thread, in the order
    they subscribed. A failing subscriber is logged and skipped.
    """

    def __init__(self) -> None:
        self._subscribers: List[Subscriber] = []
        self._lock = threading.Lock()

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback for every published event.

        Returns:
            A function that removes the callback again.
        """
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, event: MonitorEvent) -> None:
        """Deliver an event to all current subscribers."""
        with self._lock:
            subscribers = list(self._subscribers)

        for callback in subscribers:
            try:
                callback(event)
            except Exception:
                logger.exception(f"Event subscriber failed for {event.path}")
