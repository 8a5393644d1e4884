"""
JSON export format for the in-memory store.

An export file holds workouts, distance and heart-rate samples, and routes
with their location points. It is validated with pydantic before the store
is built from it.

Example:
    {
        "workouts": [{"id": "w1", "activity_kind": "running",
                      "start": "2024-05-01T07:00:00Z", "end": "2024-05-01T07:30:00Z"}],
        "distance": [{"workout_id": "w1", "start": "...", "end": "...", "distance_m": 12.5}],
        "heart_rate": [{"start": "...", "value": 142}],
        "routes": [{"id": "r1", "workout_id": "w1", "points": [...]}]
    }
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from ..models import (
    ActivityKind,
    DistanceSample,
    HeartRateSample,
    LocationPoint,
    Workout,
    WorkoutEvent,
    WorkoutEventType,
    WorkoutRoute,
)
from .base import SampleKind
from .memory import InMemorySampleStore

DISTANCE_KINDS = {
    SampleKind.DISTANCE_WALKING_RUNNING,
    SampleKind.DISTANCE_CYCLING,
    SampleKind.DISTANCE_SWIMMING,
}


class ExportModel(BaseModel):
    """Base for export records. Timestamps without an offset are read as UTC."""

    @field_validator("*")
    @classmethod
    def naive_as_utc(cls, value: Any) -> Any:
        if isinstance(value, datetime) and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class ExportEvent(ExportModel):
    """A recorded workout event."""
    kind: WorkoutEventType
    start: datetime
    end: Optional[datetime] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)

    def to_domain(self) -> WorkoutEvent:
        return WorkoutEvent(
            kind=self.kind,
            start=self.start,
            end=self.end or self.start,
            metadata=dict(self.metadata),
        )


class ExportWorkout(ExportModel):
    """A workout record."""
    id: str = Field(..., min_length=1)
    activity_kind: ActivityKind = ActivityKind.OTHER
    start: datetime
    end: datetime
    events: Optional[List[ExportEvent]] = None
    total_distance_m: Optional[float] = Field(None, ge=0)

    @model_validator(mode="after")
    def check_range(self) -> "ExportWorkout":
        if self.end < self.start:
            raise ValueError("Workout end must not be before its start")
        return self

    def to_domain(self) -> Workout:
        return Workout(
            id=self.id,
            activity_kind=self.activity_kind,
            start=self.start,
            end=self.end,
            events=tuple(e.to_domain() for e in self.events) if self.events is not None else None,
            total_distance_m=self.total_distance_m,
        )


class ExportDistance(ExportModel):
    """A distance sample, optionally linked to a workout."""
    kind: SampleKind = SampleKind.DISTANCE_WALKING_RUNNING
    workout_id: Optional[str] = None
    start: datetime
    end: datetime
    distance_m: float = Field(..., ge=0, description="Distance accrued during the interval")

    @model_validator(mode="after")
    def check_kind(self) -> "ExportDistance":
        if self.kind not in DISTANCE_KINDS:
            raise ValueError(f"{self.kind.value} is not a distance sample kind")
        return self

    def to_domain(self) -> DistanceSample:
        return DistanceSample(start=self.start, end=self.end, distance_m=self.distance_m)


class ExportHeartRate(ExportModel):
    """A heart-rate sample."""
    workout_id: Optional[str] = None
    start: datetime
    end: Optional[datetime] = None
    value: float = Field(..., ge=0)
    unit: str = "count/min"

    def to_domain(self) -> HeartRateSample:
        return HeartRateSample(start=self.start, end=self.end or self.start, value=self.value, unit=self.unit)


class ExportLocation(ExportModel):
    """A route location point."""
    timestamp: datetime
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    altitude_m: Optional[float] = None
    horizontal_accuracy_m: Optional[float] = None
    vertical_accuracy_m: Optional[float] = None
    speed_mps: Optional[float] = None
    course_deg: Optional[float] = None

    def to_domain(self) -> LocationPoint:
        return LocationPoint(**self.model_dump())


class ExportRoute(ExportModel):
    """A workout route with its points."""
    id: str = Field(..., min_length=1)
    workout_id: str
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    points: List[ExportLocation] = Field(default_factory=list)

    def to_domain(self) -> WorkoutRoute:
        return WorkoutRoute(id=self.id, workout_id=self.workout_id, start=self.start, end=self.end)


class ExportDocument(ExportModel):
    """Top-level export document."""
    workouts: List[ExportWorkout] = Field(default_factory=list)
    distance: List[ExportDistance] = Field(default_factory=list)
    heart_rate: List[ExportHeartRate] = Field(default_factory=list)
    routes: List[ExportRoute] = Field(default_factory=list)


def build_store(document: ExportDocument, **store_options: Any) -> InMemorySampleStore:
    """Create an InMemorySampleStore holding everything in ``document``."""
    store = InMemorySampleStore(**store_options)
    for workout in document.workouts:
        store.add_workout(workout.to_domain())
    for sample in document.distance:
        store.add_samples(sample.kind, [sample.to_domain()], workout_id=sample.workout_id)
    for sample in document.heart_rate:
        store.add_samples(SampleKind.HEART_RATE, [sample.to_domain()], workout_id=sample.workout_id)
    for route in document.routes:
        store.add_route(route.to_domain(), [p.to_domain() for p in route.points])
    return store


def parse_export(data: Union[str, bytes, Dict[str, Any]], **store_options: Any) -> InMemorySampleStore:
    """
    Validate export data and build a store from it.

    Raises:
        pydantic.ValidationError: If the document does not match the format
    """
    if isinstance(data, (str, bytes)):
        document = ExportDocument.model_validate_json(data)
    else:
        document = ExportDocument.model_validate(data)
    return build_store(document, **store_options)


def load_export(path: Union[str, Path], **store_options: Any) -> InMemorySampleStore:
    """Read an export file and build a store from it."""
    return parse_export(Path(path).read_text(encoding="utf-8"), **store_options)

