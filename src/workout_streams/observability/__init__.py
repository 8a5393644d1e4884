"""
Observability for workout-streams.

Provides structured event observers and logging configuration.
"""

from .events import (
    EventObserver,
    LoggingObserver,
    NullObserver,
    RecordedEvent,
    RecordingObserver,
    default_observer,
)
from .logging_config import configure_logging

__all__ = [
    "EventObserver",
    "LoggingObserver",
    "NullObserver",
    "RecordedEvent",
    "RecordingObserver",
    "default_observer",
    "configure_logging",
]
