"""
Base classes for activity store integrations.

Describes the single query interface the services consume: a query for one
sample kind, with a predicate, a sort order and a limit, answered by zero or
more batches followed by completion, or by an exception.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, AsyncIterator, List, Optional

from ..exceptions import UpstreamQueryFailedError, WorkoutStreamsError
from ..models import ActivityKind, LocationPoint, Workout, WorkoutRoute


# Limit value meaning "return every matching sample"
NO_LIMIT = 0


class SampleKind(str, Enum):
    """Sample types the store can be queried for."""
    DISTANCE_WALKING_RUNNING = "distance_walking_running"
    DISTANCE_CYCLING = "distance_cycling"
    DISTANCE_SWIMMING = "distance_swimming"
    HEART_RATE = "heart_rate"
    ROUTE = "route"
    WORKOUT = "workout"

    @classmethod
    def distance_for(cls, activity_kind: ActivityKind) -> "SampleKind":
        """Distance sample kind recorded for an activity."""
        if activity_kind == ActivityKind.CYCLING:
            return cls.DISTANCE_CYCLING
        if activity_kind == ActivityKind.SWIMMING:
            return cls.DISTANCE_SWIMMING
        return cls.DISTANCE_WALKING_RUNNING


class SortField(str, Enum):
    """Fields query results can be sorted by."""
    START_DATE = "start_date"
    END_DATE = "end_date"


@dataclass(frozen=True)
class SortDescriptor:
    """Sort order for a query."""
    field: SortField
    ascending: bool = True


@dataclass(frozen=True)
class QueryPredicate:
    """
    Filter for a store query.

    All set conditions must hold. A time range matches any sample whose
    interval overlaps ``[start, end]``.
    """
    workout_id: Optional[str] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    activity_kind: Optional[ActivityKind] = None

    @classmethod
    def for_workout(cls, workout: Workout) -> "QueryPredicate":
        """Objects that belong to a workout."""
        return cls(workout_id=workout.id)

    @classmethod
    def for_time_range(cls, start: datetime, end: datetime) -> "QueryPredicate":
        """Samples recorded within a time range."""
        return cls(start=start, end=end)

    @classmethod
    def for_workouts(
        cls,
        activity_kind: ActivityKind,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> "QueryPredicate":
        """Workouts of one activity kind, optionally within a time range."""
        return cls(activity_kind=activity_kind, start=start, end=end)

    def overlaps(self, start: datetime, end: datetime) -> bool:
        """Check whether an interval falls within the predicate's time range."""
        if self.start is not None and end < self.start:
            return False
        if self.end is not None and start > self.end:
            return False
        return True


@dataclass(frozen=True)
class SampleQuery:
    """A query against the activity store."""
    kind: SampleKind
    predicate: QueryPredicate
    sort: Optional[SortDescriptor] = None
    limit: int = NO_LIMIT

    @property
    def label(self) -> str:
        """Short name used in errors and events."""
        return self.kind.value


class SampleStore(ABC):
    """
    Abstract base class for activity stores.

    Implementations deliver results as an async iterator of batches. The
    iterator ends on success and raises on failure; nothing is delivered
    after either.
    """

    provider: str = "base"

    @abstractmethod
    def query(self, query: SampleQuery) -> AsyncIterator[List[Any]]:
        """
        Run a sample query.

        Args:
            query: Kind, predicate, sort order and limit.

        Returns:
            Async iterator yielding batches of samples.
        """
        pass

    @abstractmethod
    def route_locations(self, route: WorkoutRoute) -> AsyncIterator[List[LocationPoint]]:
        """
        Stream the location points of one route.

        Args:
            route: A route object returned by a ``SampleKind.ROUTE`` query.

        Returns:
            Async iterator yielding ordered batches of location points.
        """
        pass

    async def fetch_all(self, query: SampleQuery) -> List[Any]:
        """Drain every batch of a query into one list."""
        return await drain(self.query(query), query.label)


async def drain(batches: AsyncIterator[List[Any]], label: str) -> List[Any]:
    """
    Collect every batch of a result stream into one list.

    Raises:
        StoreUnavailableError, NoPermissionError: Passed through unchanged
        UpstreamQueryFailedError: For any other failure of the stream
    """
    results: List[Any] = []
    try:
        async for batch in batches:
            results.extend(batch)
    except WorkoutStreamsError:
        raise
    except Exception as e:
        raise UpstreamQueryFailedError(label, e) from e
    return results
