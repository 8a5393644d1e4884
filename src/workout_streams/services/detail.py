"""
Workout detail join.

Runs the location and heart-rate queries of a workout concurrently and
combines them into one ``WorkoutDetail`` once both succeeded.
"""

from typing import Optional

from ..exceptions import WorkoutStreamsError
from ..integrations.base import SampleStore
from ..models import Workout, WorkoutDetail
from ..observability import EventObserver, default_observer
from .heart_rate import HeartRateFetcher
from .join import join_all
from .routes import RouteAggregator


class DetailJoiner:
    """
    Join barrier over a workout's location and heart-rate queries.

    Exactly one detail is produced when both branches succeed. When either
    branch fails, its error is raised and the other branch is cancelled, so
    no partial detail ever exists. Buffers are local to each ``join`` call.
    """

    def __init__(
        self,
        store: SampleStore,
        observer: Optional[EventObserver] = None,
        routes: Optional[RouteAggregator] = None,
        heart_rate: Optional[HeartRateFetcher] = None,
    ) -> None:
        self._observer = observer or default_observer()
        self.routes = routes or RouteAggregator(store, self._observer)
        self.heart_rate = heart_rate or HeartRateFetcher(store, self._observer)

    async def join(self, workout: Workout) -> WorkoutDetail:
        """
        Build the detail of a workout.

        Raises:
            WorkoutStreamsError: The first failure of either branch
        """
        self._observer.record("detail.started", workout_id=workout.id)
        try:
            locations, heart_rate = await join_all(
                self.routes.fetch(workout),
                self.heart_rate.fetch(workout),
            )
        except WorkoutStreamsError as e:
            self._observer.record("detail.failed", workout_id=workout.id, error=e.code.value)
            raise

        detail = WorkoutDetail.create(workout, locations, heart_rate)
        self._observer.record(
            "detail.joined",
            workout_id=workout.id,
            locations=len(detail.locations),
            heart_rate=len(detail.heart_rate),
        )
        return detail
