"""Workout data models: workouts, recorded events, splits and joined details."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple
import uuid

from .samples import HeartRateSample, LocationPoint, parse_timestamp


# Metadata key recorded segment events may carry their distance under
DISTANCE_METADATA_KEY = "distance_m"


class ActivityKind(str, Enum):
    """Activity types a workout can be recorded as."""
    RUNNING = "running"
    WALKING = "walking"
    HIKING = "hiking"
    CYCLING = "cycling"
    SWIMMING = "swimming"
    OTHER = "other"


class WorkoutEventType(str, Enum):
    """Kinds of events recorded alongside a workout."""
    PAUSE = "pause"
    RESUME = "resume"
    LAP = "lap"
    MARKER = "marker"
    SEGMENT = "segment"


@dataclass(frozen=True)
class WorkoutEvent:
    """An event recorded by the device during a workout."""
    kind: WorkoutEventType
    start: datetime
    end: datetime
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "metadata": dict(self.metadata),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "WorkoutEvent":
        start = parse_timestamp(data["start"])
        return cls(
            kind=WorkoutEventType(data["kind"]),
            start=start,
            end=parse_timestamp(data["end"]) if data.get("end") else start,
            metadata=dict(data.get("metadata") or {}),
        )


@dataclass(frozen=True)
class SplitEvent:
    """
    A fixed-distance segment of a workout.

    Computed splits always carry ``distance_m``. Splits taken from recorded
    segment events only have it when the device stored it in the metadata.
    """
    start: datetime
    end: datetime
    duration_s: float
    distance_m: Optional[float]
    kind: WorkoutEventType = WorkoutEventType.SEGMENT
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def interval(self) -> Tuple[datetime, datetime]:
        return (self.start, self.end)

    @property
    def pace_s_per_m(self) -> Optional[float]:
        """Seconds per meter, or None when the distance is unknown or zero."""
        if not self.distance_m:
            return None
        return self.duration_s / self.distance_m

    @classmethod
    def from_workout_event(cls, event: WorkoutEvent) -> "SplitEvent":
        """Wrap a recorded segment event, keeping its interval and metadata."""
        distance = event.metadata.get(DISTANCE_METADATA_KEY)
        return cls(
            start=event.start,
            end=event.end,
            duration_s=(event.end - event.start).total_seconds(),
            distance_m=float(distance) if distance is not None else None,
            kind=event.kind,
            metadata=dict(event.metadata),
        )

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "distance_m": self.distance_m,
            "duration_s": self.duration_s,
            "pace_s_per_m": self.pace_s_per_m,
            "metadata": dict(self.metadata),
        }


@dataclass(frozen=True)
class Workout:
    """A workout record as read from the activity store."""
    id: str
    activity_kind: ActivityKind
    start: datetime
    end: datetime
    events: Optional[Tuple[WorkoutEvent, ...]] = None
    total_distance_m: Optional[float] = None

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "activity_kind": self.activity_kind.value,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "events": [e.to_dict() for e in self.events] if self.events is not None else None,
            "total_distance_m": self.total_distance_m,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Workout":
        events = data.get("events")
        return cls(
            id=str(data["id"]),
            activity_kind=ActivityKind(data.get("activity_kind", "other")),
            start=parse_timestamp(data["start"]),
            end=parse_timestamp(data["end"]),
            events=tuple(WorkoutEvent.from_dict(e) for e in events) if events is not None else None,
            total_distance_m=data.get("total_distance_m"),
        )


@dataclass(frozen=True)
class WorkoutDetail:
    """
    A workout together with its location and heart-rate tracks.

    ``locations`` is sorted ascending by timestamp across all routes of the
    workout; ``heart_rate`` keeps the order the store returned (ascending by
    end date).
    """
    workout: Workout
    locations: Tuple[LocationPoint, ...]
    heart_rate: Tuple[HeartRateSample, ...]
    id: str = field(default_factory=lambda: str(uuid.uuid4()), compare=False)

    @classmethod
    def create(
        cls,
        workout: Workout,
        locations: List[LocationPoint],
        heart_rate: List[HeartRateSample],
    ) -> "WorkoutDetail":
        return cls(workout=workout, locations=tuple(locations), heart_rate=tuple(heart_rate))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "workout": self.workout.to_dict(),
            "locations": [p.to_dict() for p in self.locations],
            "heart_rate": [s.to_dict() for s in self.heart_rate],
        }
