"""Location track aggregation across all routes of a workout."""

from typing import List, Optional

from ..exceptions import WorkoutStreamsError
from ..integrations.base import QueryPredicate, SampleKind, SampleQuery, SampleStore, drain
from ..models import LocationPoint, Workout, WorkoutRoute
from ..observability import EventObserver, default_observer
from .join import join_all


class RouteAggregator:
    """
    Collects every location point of a workout.

    Queries the workout's route objects, streams each route's points
    concurrently and returns them as one list sorted by timestamp. Batches
    of different routes can interleave out of global order, so the result
    is always sorted. A failure of any route stream fails the whole
    aggregation; no partial track is returned.
    """

    def __init__(self, store: SampleStore, observer: Optional[EventObserver] = None) -> None:
        self.store = store
        self._observer = observer or default_observer()

    async def fetch(self, workout: Workout) -> List[LocationPoint]:
        """
        Get the sorted location track of a workout.

        Returns:
            All points of all routes, ascending by timestamp. Empty when the
            workout has no routes.
        """
        try:
            routes = await self.fetch_routes(workout)
            self._observer.record("routes.found", workout_id=workout.id, routes=len(routes))
            if not routes:
                return []

            tracks = await join_all(*(self._drain_route(route) for route in routes))
        except WorkoutStreamsError as e:
            self._observer.record("routes.failed", workout_id=workout.id, error=e.code.value)
            raise

        locations = [point for track in tracks for point in track]
        locations.sort(key=lambda point: point.timestamp)
        self._observer.record("routes.aggregated", workout_id=workout.id, points=len(locations))
        return locations

    async def fetch_routes(self, workout: Workout) -> List[WorkoutRoute]:
        """Get the route objects attached to a workout."""
        query = SampleQuery(kind=SampleKind.ROUTE, predicate=QueryPredicate.for_workout(workout))
        return await self.store.fetch_all(query)

    async def _drain_route(self, route: WorkoutRoute) -> List[LocationPoint]:
        return await drain(self.store.route_locations(route), f"route_locations:{route.id}")
