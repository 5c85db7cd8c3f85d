"""
Event Bus

Synchronous publish/subscribe channel used as the observation sink for
session activity. Controllers publish structured events here instead of
printing; tests and views subscribe to assert on or render them.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

EventCallback = Callable[["Event"], None]


@dataclass(frozen=True)
class Event:
    """A single published observation."""

    type: Enum
    data: Dict[str, Any] = field(default_factory=dict)
    timestamp: float = field(default_factory=time.time)


class EventBus:
    """
    Publish/subscribe event dispatcher.

    Delivery is synchronous, in subscription order, on the publishing thread.
    A subscriber that raises is logged and skipped; it never breaks the
    publisher.

    Usage:
        bus = EventBus()
        bus.subscribe(SessionEvent.SEGMENT_ADDED, lambda e: print(e.data))
        bus.publish(SessionEvent.SEGMENT_ADDED, {"segment_id": 1})
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self._subscribers: Dict[Enum, List[EventCallback]] = {}
        self._wildcard: List[EventCallback] = []
        self._lock = threading.Lock()

    def subscribe(self, event_type: Enum, callback: EventCallback) -> None:
        """Register a handler for one event type"""
        with self._lock:
            self._subscribers.setdefault(event_type, []).append(callback)
        self.logger.debug(f"Subscribed to {event_type.value}")

    def subscribe_all(self, callback: EventCallback) -> None:
        """Register a handler that receives every event"""
        with self._lock:
            self._wildcard.append(callback)

    def unsubscribe(
        self,
        callback: EventCallback,
        event_type: Optional[Enum] = None,
    ) -> bool:
        """
        Remove a handler.

        Args:
            callback: Previously registered handler
            event_type: Type it was registered for, or None for wildcard

        Returns:
            True if the handler was registered and removed
        """
        with self._lock:
            handlers = (
                self._wildcard
                if event_type is None
                else self._subscribers.get(event_type, [])
            )
            if callback in handlers:
                handlers.remove(callback)
                return True
        return False

    def publish(self, event_type: Enum, data: Optional[Dict[str, Any]] = None) -> Event:
        """
        Deliver an event to every matching subscriber.

        Returns:
            The event that was delivered
        """
        event = Event(type=event_type, data=dict(data or {}))

        with self._lock:
            handlers = list(self._subscribers.get(event_type, []))
            handlers.extend(self._wildcard)

        self.logger.debug(f"Event: {event_type.value} {event.data}")

        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                self.logger.error(f"Error in {event_type.value} subscriber: {e}")

        return event

    def subscriber_count(self, event_type: Optional[Enum] = None) -> int:
        """Number of handlers for a type (wildcards included)"""
        with self._lock:
            if event_type is None:
                return len(self._wildcard) + sum(
                    len(h) for h in self._subscribers.values()
                )
            return len(self._subscribers.get(event_type, [])) + len(self._wildcard)
