"""
Knife Hit - Feedback Event Definitions

Symbolic events emitted by the rules engine. Listeners decide how to render
them (sound, vibration, popups); the engine never waits on them.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

logger = logging.getLogger(__name__)


class FeedbackEvent(Enum):
    """Events that can occur during a round."""

    THROW = "throw"
    HIT = "hit"
    APPLE = "apple"
    FAIL = "fail"
    WIN = "win"
    COIN = "coin"


@dataclass
class EventPayload:
    """Wrapper for feedback event data."""

    event: FeedbackEvent
    stage_number: int | None = None
    data: dict[str, Any] = field(default_factory=dict)


Listener = Callable[[EventPayload], None]


class EventBus:
    """Fan-out of feedback events to registered listeners.

    Emission is fire-and-forget: a failing listener is logged and the
    remaining listeners still run.
    """

    def __init__(self) -> None:
        self._listeners: list[Listener] = []
        self._lock = threading.Lock()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener.

        Returns:
            A callable that removes the listener again.
        """
        with self._lock:
            self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: Listener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def emit(
        self,
        event: FeedbackEvent,
        stage_number: int | None = None,
        **data: Any,
    ) -> EventPayload:
        """Deliver an event to every listener and return its payload."""
        payload = EventPayload(event=event, stage_number=stage_number, data=data)
        with self._lock:
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(payload)
            except Exception:
                logger.exception("Feedback listener failed for %s", event.value)
        return payload


class EventRecorder:
    """Listener that keeps every payload it receives, in order."""

    def __init__(self) -> None:
        self.payloads: list[EventPayload] = []

    def __call__(self, payload: EventPayload) -> None:
        self.payloads.append(payload)

    @property
    def events(self) -> list[FeedbackEvent]:
        return [p.event for p in self.payloads]

    def drain(self) -> list[EventPayload]:
        """Return and forget everything recorded so far."""
        drained, self.payloads = self.payloads, []
        return drained
