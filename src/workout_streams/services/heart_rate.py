"""Heart-rate retrieval for a workout's time range."""

from typing import List, Optional

from ..exceptions import WorkoutStreamsError
from ..integrations.base import (
    NO_LIMIT,
    QueryPredicate,
    SampleKind,
    SampleQuery,
    SampleStore,
    SortDescriptor,
    SortField,
)
from ..models import HeartRateSample, Workout
from ..observability import EventObserver, default_observer


class HeartRateFetcher:
    """Fetches every heart-rate sample recorded during a workout."""

    def __init__(self, store: SampleStore, observer: Optional[EventObserver] = None) -> None:
        self.store = store
        self._observer = observer or default_observer()

    @staticmethod
    def build_query(workout: Workout) -> SampleQuery:
        """Heart-rate samples in the workout's range, ascending by end date."""
        return SampleQuery(
            kind=SampleKind.HEART_RATE,
            predicate=QueryPredicate.for_time_range(workout.start, workout.end),
            sort=SortDescriptor(SortField.END_DATE, ascending=True),
            limit=NO_LIMIT,
        )

    async def fetch(self, workout: Workout) -> List[HeartRateSample]:
        """
        Get the heart-rate samples of a workout.

        Returns:
            Samples in the order the store sorted them. An empty list when
            nothing was recorded.
        """
        try:
            samples = await self.store.fetch_all(self.build_query(workout))
        except WorkoutStreamsError as e:
            self._observer.record("heart_rate.failed", workout_id=workout.id, error=e.code.value)
            raise
        self._observer.record("heart_rate.fetched", workout_id=workout.id, samples=len(samples))
        return samples
