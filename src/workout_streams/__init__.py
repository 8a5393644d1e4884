"""
Workout Streams - workout details and splits from an activity store.

Joins a workout's route locations and heart-rate samples into one detail
record, and computes per-distance splits from distance samples.
"""

__version__ = "0.1.0"

from .exceptions import (
    ErrorCode,
    NoPermissionError,
    NoWorkoutsFoundError,
    StoreUnavailableError,
    UpstreamQueryFailedError,
    WorkoutStreamsError,
)
from .models import (
    ActivityKind,
    DistanceSample,
    HeartRateSample,
    LocationPoint,
    SplitEvent,
    Workout,
    WorkoutDetail,
    WorkoutEvent,
    WorkoutEventType,
    WorkoutRoute,
)
from .services import WorkoutService

__all__ = [
    "__version__",
    # Errors
    "ErrorCode",
    "NoPermissionError",
    "NoWorkoutsFoundError",
    "StoreUnavailableError",
    "UpstreamQueryFailedError",
    "WorkoutStreamsError",
    # Models
    "ActivityKind",
    "DistanceSample",
    "HeartRateSample",
    "LocationPoint",
    "SplitEvent",
    "Workout",
    "WorkoutDetail",
    "WorkoutEvent",
    "WorkoutEventType",
    "WorkoutRoute",
    # Services
    "WorkoutService",
]
