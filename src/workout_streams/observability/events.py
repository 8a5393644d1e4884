"""
Structured event reporting for the query and split pipelines.

Services report what they do to an injected ``EventObserver`` instead of a
module logger, so callers can route events wherever they like. The default
``LoggingObserver`` writes them to the standard logging module.

Usage:
    observer = RecordingObserver()
    service = WorkoutService(store, observer=observer)
    ...
    assert observer.names() == ["detail.started", "detail.joined"]
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable


# Events logged above DEBUG by LoggingObserver
WARNING_EVENTS = frozenset({
    "channel.discarded",
    "detail.failed",
    "routes.failed",
    "heart_rate.failed",
    "workouts.not_found",
})


@runtime_checkable
class EventObserver(Protocol):
    """Receives structured events from services and store adapters."""

    def record(self, event: str, **fields: Any) -> None:
        """Record one event with its fields."""
        ...


class LoggingObserver:
    """Observer that forwards events to a logger."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._logger = logger or logging.getLogger("workout_streams")

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def record(self, event: str, **fields: Any) -> None:
        level = logging.WARNING if event in WARNING_EVENTS else logging.DEBUG
        if not self._logger.isEnabledFor(level):
            return
        rendered = " ".join(f"{key}={value}" for key, value in fields.items())
        self._logger.log(level, f"{event} {rendered}".rstrip(), extra={"event": event, "fields": fields})


class NullObserver:
    """Observer that drops every event."""

    def record(self, event: str, **fields: Any) -> None:
        return None


@dataclass
class RecordedEvent:
    """An event captured by RecordingObserver."""
    name: str
    fields: Dict[str, Any] = field(default_factory=dict)


class RecordingObserver:
    """Observer that keeps every event in memory, in arrival order."""

    def __init__(self) -> None:
        self.events: List[RecordedEvent] = []

    def record(self, event: str, **fields: Any) -> None:
        self.events.append(RecordedEvent(name=event, fields=dict(fields)))

    def names(self) -> List[str]:
        return [e.name for e in self.events]

    def of(self, name: str) -> List[RecordedEvent]:
        return [e for e in self.events if e.name == name]

    def clear(self) -> None:
        self.events.clear()


def default_observer() -> EventObserver:
    """Observer used when a service is built without one."""
    return LoggingObserver()
