"""Data models for workouts, samples and derived splits."""

from .samples import (
    DistanceSample,
    HeartRateSample,
    LocationPoint,
    WorkoutRoute,
    parse_timestamp,
)
from .workouts import (
    DISTANCE_METADATA_KEY,
    ActivityKind,
    SplitEvent,
    Workout,
    WorkoutDetail,
    WorkoutEvent,
    WorkoutEventType,
)

__all__ = [
    # Samples
    "DistanceSample",
    "HeartRateSample",
    "LocationPoint",
    "WorkoutRoute",
    "parse_timestamp",
    # Workouts
    "DISTANCE_METADATA_KEY",
    "ActivityKind",
    "SplitEvent",
    "Workout",
    "WorkoutDetail",
    "WorkoutEvent",
    "WorkoutEventType",
]
