"""Tests for heart-rate retrieval."""

from datetime import datetime, timedelta, timezone

import pytest

from workout_streams.exceptions import StoreUnavailableError
from workout_streams.integrations import NO_LIMIT, InMemorySampleStore, SampleKind, SortField
from workout_streams.models import ActivityKind, HeartRateSample, Workout
from workout_streams.observability import RecordingObserver
from workout_streams.services.heart_rate import HeartRateFetcher


T0 = datetime(2024, 5, 1, 7, 0, tzinfo=timezone.utc)


def reading(seconds: float, value: float) -> HeartRateSample:
    moment = T0 + timedelta(seconds=seconds)
    return HeartRateSample(start=moment, end=moment, value=value)


@pytest.fixture
def workout():
    return Workout(id="w1", activity_kind=ActivityKind.RUNNING, start=T0, end=T0 + timedelta(minutes=30))


@pytest.fixture
def observer():
    return RecordingObserver()


class TestBuildQuery:
    """Tests for HeartRateFetcher.build_query."""

    def test_query_shape(self, workout):
        """Test kind, range, sort and limit of the query."""
        query = HeartRateFetcher.build_query(workout)

        assert query.kind == SampleKind.HEART_RATE
        assert query.predicate.start == workout.start
        assert query.predicate.end == workout.end
        assert query.sort.field == SortField.END_DATE
        assert query.sort.ascending is True
        assert query.limit == NO_LIMIT


class TestFetch:
    """Tests for HeartRateFetcher.fetch."""

    @pytest.mark.asyncio
    async def test_samples_sorted_by_end(self, workout, observer):
        """Test samples in the workout are returned ascending."""
        store = InMemorySampleStore(batch_size=2, observer=observer)
        store.add_samples(
            SampleKind.HEART_RATE,
            [reading(300, 150), reading(60, 120), reading(180, 140), reading(7200, 99)],
        )

        samples = await HeartRateFetcher(store, observer).fetch(workout)

        assert [s.value for s in samples] == [120, 140, 150]
        assert observer.of("heart_rate.fetched")[0].fields["samples"] == 3

    @pytest.mark.asyncio
    async def test_no_samples(self, workout, observer):
        """Test no recorded heart rate is an empty list, not an error."""
        store = InMemorySampleStore(observer=observer)

        assert await HeartRateFetcher(store, observer).fetch(workout) == []

    @pytest.mark.asyncio
    async def test_store_unavailable(self, workout, observer):
        """Test store errors are reported and re-raised."""
        store = InMemorySampleStore(available=False, observer=observer)

        with pytest.raises(StoreUnavailableError):
            await HeartRateFetcher(store, observer).fetch(workout)

        failed = observer.of("heart_rate.failed")
        assert failed[0].fields["error"] == "STORE_UNAVAILABLE"
