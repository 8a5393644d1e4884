"""Services that query the activity store and derive workout data."""

from .detail import DetailJoiner
from .heart_rate import HeartRateFetcher
from .join import join_all
from .routes import RouteAggregator
from .workout_service import WorkoutService

__all__ = [
    "DetailJoiner",
    "HeartRateFetcher",
    "join_all",
    "RouteAggregator",
    "WorkoutService",
]
