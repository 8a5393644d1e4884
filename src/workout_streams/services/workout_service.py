"""
Workout service.

Public entry points over an activity store:
- Workout lookups by activity kind and date range
- Joined workout detail (locations + heart rate)
- Splits, from recorded segment events or computed from distance samples
"""

from datetime import datetime
from typing import List, Optional

from ..config import Settings, get_settings
from ..exceptions import NoWorkoutsFoundError
from ..integrations.base import (
    NO_LIMIT,
    QueryPredicate,
    SampleKind,
    SampleQuery,
    SampleStore,
    SortDescriptor,
    SortField,
)
from ..metrics.splits import SplitCalculator, prerecorded_paces
from ..models import ActivityKind, DistanceSample, SplitEvent, Workout, WorkoutDetail
from ..observability import EventObserver, default_observer
from .detail import DetailJoiner


class WorkoutService:
    """
    Service for reading workouts and deriving details and splits.

    Usage:
        service = WorkoutService(store)
        workouts = await service.get_workouts(ActivityKind.RUNNING, limit=5)
        detail = await service.get_workout_detail(workouts[0])
        splits = await service.get_splits(workouts[0])
    """

    def __init__(
        self,
        store: SampleStore,
        settings: Optional[Settings] = None,
        observer: Optional[EventObserver] = None,
    ) -> None:
        self.store = store
        self.settings = settings or get_settings()
        self._observer = observer or default_observer()
        self._joiner = DetailJoiner(store, self._observer)

    # ------------------------------------------------------------------
    # Workouts
    # ------------------------------------------------------------------

    async def get_workouts(self, kind: ActivityKind, limit: int = NO_LIMIT) -> List[Workout]:
        """
        Get workouts of one activity kind, newest first.

        Raises:
            NoWorkoutsFoundError: If no workout matches
        """
        query = SampleQuery(
            kind=SampleKind.WORKOUT,
            predicate=QueryPredicate.for_workouts(kind),
            sort=SortDescriptor(SortField.END_DATE, ascending=False),
            limit=limit,
        )
        return await self._find_workouts(query, {"activity_kind": kind.value})

    async def get_workouts_between(
        self,
        kind: ActivityKind,
        start: datetime,
        end: datetime,
    ) -> List[Workout]:
        """
        Get workouts of one activity kind within a date range, newest first.

        Raises:
            NoWorkoutsFoundError: If no workout matches
        """
        query = SampleQuery(
            kind=SampleKind.WORKOUT,
            predicate=QueryPredicate.for_workouts(kind, start, end),
            sort=SortDescriptor(SortField.END_DATE, ascending=False),
        )
        return await self._find_workouts(
            query,
            {"activity_kind": kind.value, "start": start.isoformat(), "end": end.isoformat()},
        )

    async def get_workout(self, workout_id: str) -> Workout:
        """
        Get one workout by id.

        Raises:
            NoWorkoutsFoundError: If the workout does not exist
        """
        query = SampleQuery(
            kind=SampleKind.WORKOUT,
            predicate=QueryPredicate(workout_id=workout_id),
            limit=1,
        )
        workouts = await self._find_workouts(query, {"workout_id": workout_id})
        return workouts[0]

    async def _find_workouts(self, query: SampleQuery, details: dict) -> List[Workout]:
        workouts = await self.store.fetch_all(query)
        if not workouts:
            self._observer.record("workouts.not_found", **details)
            raise NoWorkoutsFoundError(details=details)
        return workouts

    # ------------------------------------------------------------------
    # Detail
    # ------------------------------------------------------------------

    async def get_workout_detail(self, workout: Workout) -> WorkoutDetail:
        """Get a workout with its sorted location track and heart-rate samples."""
        return await self._joiner.join(workout)

    # ------------------------------------------------------------------
    # Splits
    # ------------------------------------------------------------------

    def get_prerecorded_paces(self, workout: Workout) -> List[SplitEvent]:
        """Segment events recorded by the device. Never fails."""
        return prerecorded_paces(workout)

    async def get_distance_samples(self, workout: Workout) -> List[DistanceSample]:
        """Distance samples of a workout, ascending by start."""
        query = SampleQuery(
            kind=SampleKind.distance_for(workout.activity_kind),
            predicate=QueryPredicate.for_workout(workout),
            sort=SortDescriptor(SortField.START_DATE, ascending=True),
        )
        return await self.store.fetch_all(query)

    async def get_splits(
        self,
        workout: Workout,
        split_distance_m: Optional[float] = None,
        use_recorded: bool = True,
    ) -> List[SplitEvent]:
        """
        Get the splits of a workout.

        Recorded segment events are returned when the workout has any and
        ``use_recorded`` is set; otherwise splits are computed from the
        workout's distance samples.

        Args:
            workout: Workout to split
            split_distance_m: Split distance, the configured default (1000 m)
                when not given
            use_recorded: Prefer segment events recorded by the device

        Returns:
            Splits in order. Empty when there are no distance samples.
        """
        if use_recorded:
            recorded = prerecorded_paces(workout)
            if recorded:
                self._observer.record("splits.recorded", workout_id=workout.id, splits=len(recorded))
                return recorded

        distance = split_distance_m if split_distance_m is not None else self.settings.split_distance_m
        calculator = SplitCalculator(distance, self._observer)
        samples = await self.get_distance_samples(workout)
        splits = calculator.calculate(samples, workout.start)
        self._observer.record(
            "splits.computed",
            workout_id=workout.id,
            samples=len(samples),
            splits=len(splits),
        )
        return splits
