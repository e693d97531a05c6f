"""In-process telemetry for word navigation.

Events are plain dictionaries tagged with an ``"event"`` key and delivered
synchronously to listeners registered for that name. Nothing leaves the
process; hosts wire a sink (for instance :class:`InMemoryTelemetrySink`) when
they want to inspect activity.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from dataclasses import asdict, dataclass
from typing import Any, Callable, Mapping

LOGGER = logging.getLogger(__name__)

Listener = Callable[[dict[str, Any]], None]

__all__ = [
    "EventBus",
    "InMemoryTelemetrySink",
    "NavigationEvent",
    "emit",
    "register_event_listener",
    "unregister_event_listener",
]


@dataclass(slots=True)
class NavigationEvent:
    """One navigation request as seen by the editor actions."""

    direction: str
    outcome: str
    word_length: int
    found_offset: int | None
    ordinal: int
    total: int
    from_selection: bool

    def to_payload(self) -> dict[str, Any]:
        return asdict(self)


class EventBus:
    """Named-event fan-out; a failing listener is logged and skipped."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}
        self._lock = threading.Lock()

    def subscribe(self, event_name: str, listener: Listener) -> None:
        if not event_name:
            return
        with self._lock:
            registered = self._listeners.setdefault(event_name, [])
            if listener not in registered:
                registered.append(listener)

    def unsubscribe(self, event_name: str, listener: Listener) -> None:
        with self._lock:
            registered = self._listeners.get(event_name, [])
            if listener in registered:
                registered.remove(listener)
            if not registered:
                self._listeners.pop(event_name, None)

    def publish(self, event_name: str, payload: Mapping[str, Any] | None = None) -> None:
        if not event_name:
            return
        event = {"event": event_name, **(payload or {})}
        with self._lock:
            targets = tuple(self._listeners.get(event_name, ()))
        LOGGER.debug("Telemetry %s -> %d listener(s): %s", event_name, len(targets), event)
        for listener in targets:
            try:
                listener(dict(event))
            except Exception:  # pragma: no cover - listeners must not break emitters
                LOGGER.debug("Telemetry listener %r failed on %s", listener, event_name, exc_info=True)


class InMemoryTelemetrySink:
    """Bounded buffer of received events, newest last."""

    def __init__(self, capacity: int = 200) -> None:
        self._events: deque[dict[str, Any]] = deque(maxlen=max(10, capacity))
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._events.maxlen or 0

    def __call__(self, payload: dict[str, Any]) -> None:
        with self._lock:
            self._events.append(payload)

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def tail(self, limit: int | None = None) -> list[dict[str, Any]]:
        """Return up to ``limit`` of the most recent events (all when ``None``)."""

        with self._lock:
            snapshot = list(self._events)
        if limit is None:
            return snapshot
        return snapshot[-limit:] if limit > 0 else []


_BUS = EventBus()


def register_event_listener(event_name: str, callback: Listener) -> None:
    """Call ``callback`` with every payload emitted under ``event_name``."""

    _BUS.subscribe(event_name, callback)


def unregister_event_listener(event_name: str, callback: Listener) -> None:
    _BUS.unsubscribe(event_name, callback)


def emit(event_name: str, payload: Mapping[str, Any] | None = None) -> None:
    """Publish ``payload`` under ``event_name`` on the process-wide bus."""

    _BUS.publish(event_name, payload)
