"""Domain events published by Declutter services."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable

LOGGER = logging.getLogger(__name__)

DEFAULT_QUEUE_SIZE = 256

Subscriber = Callable[["DomainEvent"], None]


@dataclass(slots=True)
class DomainEvent:
    """Something that happened in the core, for the UI layer to react to.

    Attributes:
        name: Event name such as ``templateApplied`` or ``folderCreated``.
        payload: JSON-ready details.
        timestamp: When the event was published.
    """

    name: str
    payload: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class EventBus:
    """Bounded queue of domain events plus synchronous subscribers.

    Subscribers are notified as events are published; the queue keeps the
    most recent ``maxsize`` events for consumers that poll with ``drain``.
    """

    def __init__(self, maxsize: int = DEFAULT_QUEUE_SIZE) -> None:
        self._events: deque[DomainEvent] = deque(maxlen=maxsize)
        self._subscribers: list[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback`` and return a function that unregisters it."""
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    def publish(self, name: str, **payload: Any) -> DomainEvent:
        event = DomainEvent(name=name, payload=payload)
        self._events.append(event)
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception:
                LOGGER.exception("Event subscriber failed for %s", name)
        return event

    def drain(self) -> list[DomainEvent]:
        """Return and clear queued events, oldest first."""
        events = list(self._events)
        self._events.clear()
        return events

    def __len__(self) -> int:
        return len(self._events)


__all__ = ["DomainEvent", "EventBus", "Subscriber"]
