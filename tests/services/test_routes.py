"""Tests for location track aggregation."""

from datetime import datetime, timedelta, timezone

import pytest

from workout_streams.exceptions import NoPermissionError, UpstreamQueryFailedError
from workout_streams.integrations import InMemorySampleStore, SampleKind
from workout_streams.models import ActivityKind, LocationPoint, Workout, WorkoutRoute
from workout_streams.observability import RecordingObserver
from workout_streams.services.routes import RouteAggregator


T0 = datetime(2024, 5, 1, 7, 0, tzinfo=timezone.utc)


def point(seconds: float, latitude: float = 41.0) -> LocationPoint:
    return LocationPoint(timestamp=T0 + timedelta(seconds=seconds), latitude=latitude, longitude=2.0)


@pytest.fixture
def workout():
    return Workout(id="w1", activity_kind=ActivityKind.RUNNING, start=T0, end=T0 + timedelta(hours=1))


@pytest.fixture
def observer():
    return RecordingObserver()


@pytest.fixture
def store(workout, observer):
    store = InMemorySampleStore(observer=observer)
    store.add_workout(workout)
    return store


class TestRouteAggregator:
    """Tests for RouteAggregator.fetch."""

    @pytest.mark.asyncio
    async def test_no_routes(self, store, workout, observer):
        """Test a workout without routes gives an empty track."""
        aggregator = RouteAggregator(store, observer)

        assert await aggregator.fetch(workout) == []
        assert observer.of("routes.found")[0].fields["routes"] == 0

    @pytest.mark.asyncio
    async def test_single_route_multiple_batches(self, store, workout, observer):
        """Test all batches of a route are collected."""
        store.add_route(
            WorkoutRoute("r1", "w1"),
            batches=[[point(0), point(1)], [point(2)], [point(3), point(4)]],
        )

        locations = await RouteAggregator(store, observer).fetch(workout)

        assert [p.timestamp for p in locations] == [point(i).timestamp for i in range(5)]

    @pytest.mark.asyncio
    async def test_interleaved_routes_sorted(self, store, workout, observer):
        """Test points of interleaving routes come out sorted by timestamp."""
        store.add_route(WorkoutRoute("r1", "w1"), batches=[[point(4), point(6)], [point(8)]])
        store.add_route(WorkoutRoute("r2", "w1"), batches=[[point(1)], [point(3), point(5)], [point(7)]])
        store.set_delay("route_locations:r1", 0.001)
        store.set_delay("route_locations:r2", 0.003)

        locations = await RouteAggregator(store, observer).fetch(workout)

        timestamps = [p.timestamp for p in locations]
        assert timestamps == sorted(timestamps)
        assert len(locations) == 7

    @pytest.mark.asyncio
    async def test_sort_is_stable(self, store, workout, observer):
        """Test points with equal timestamps keep their delivery order."""
        store.add_route(WorkoutRoute("r1", "w1"), batches=[[point(1, latitude=10.0), point(1, latitude=20.0)]])

        locations = await RouteAggregator(store, observer).fetch(workout)

        assert [p.latitude for p in locations] == [10.0, 20.0]

    @pytest.mark.asyncio
    async def test_route_failure_fails_aggregation(self, store, workout, observer):
        """Test one failing route fails the whole aggregation."""
        store.add_route(WorkoutRoute("r1", "w1"), [point(0), point(1)])
        store.add_route(WorkoutRoute("r2", "w1"), [point(2)])
        store.fail_route("r2", RuntimeError("corrupt route"))

        with pytest.raises(UpstreamQueryFailedError) as exc_info:
            await RouteAggregator(store, observer).fetch(workout)

        assert exc_info.value.query == "route_locations:r2"
        assert "routes.failed" in observer.names()
        assert observer.of("routes.aggregated") == []

    @pytest.mark.asyncio
    async def test_route_query_permission(self, workout, observer):
        """Test store errors of the route query propagate unchanged."""
        store = InMemorySampleStore(readable_kinds=[SampleKind.HEART_RATE], observer=observer)
        store.add_workout(workout)

        with pytest.raises(NoPermissionError):
            await RouteAggregator(store, observer).fetch(workout)
