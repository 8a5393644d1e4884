"""Tests for data models."""

from datetime import datetime, timedelta, timezone

import pytest

from workout_streams.models import (
    ActivityKind,
    DistanceSample,
    HeartRateSample,
    LocationPoint,
    SplitEvent,
    Workout,
    WorkoutDetail,
    WorkoutEvent,
    WorkoutEventType,
    parse_timestamp,
)


T0 = datetime(2024, 5, 1, 7, 0, tzinfo=timezone.utc)


class TestParseTimestamp:
    """Tests for parse_timestamp."""

    def test_zulu_suffix(self):
        """Test a trailing Z is read as UTC."""
        assert parse_timestamp("2024-05-01T07:00:00Z") == T0

    def test_datetime_passthrough(self):
        """Test datetimes are returned as is."""
        assert parse_timestamp(T0) is T0


class TestDistanceSample:
    """Tests for DistanceSample."""

    def test_duration(self):
        """Test duration in seconds."""
        sample = DistanceSample(T0, T0 + timedelta(seconds=30), 200)

        assert sample.duration_s == 30

    def test_from_dict(self):
        """Test parsing from a dict."""
        sample = DistanceSample.from_dict({
            "start": "2024-05-01T07:00:00Z",
            "end": "2024-05-01T07:00:30Z",
            "distance_m": "200.5",
        })

        assert sample.start == T0
        assert sample.distance_m == 200.5


class TestHeartRateSample:
    """Tests for HeartRateSample."""

    def test_end_defaults_to_start(self):
        """Test instantaneous readings."""
        sample = HeartRateSample.from_dict({"start": "2024-05-01T07:00:00Z", "value": 142})

        assert sample.end == sample.start
        assert sample.unit == "count/min"


class TestSplitEvent:
    """Tests for SplitEvent."""

    def test_from_workout_event(self):
        """Test a segment event keeps interval and metadata."""
        event = WorkoutEvent(
            WorkoutEventType.SEGMENT,
            T0,
            T0 + timedelta(minutes=5),
            {"distance_m": "1000", "index": 1},
        )

        split = SplitEvent.from_workout_event(event)

        assert split.interval == (event.start, event.end)
        assert split.duration_s == 300
        assert split.distance_m == 1000.0
        assert split.pace_s_per_m == pytest.approx(0.3)
        assert split.metadata == {"distance_m": "1000", "index": 1}

    def test_to_dict(self):
        """Test serialization includes pace."""
        split = SplitEvent(T0, T0 + timedelta(seconds=250), 250, 1000)

        data = split.to_dict()

        assert data["kind"] == "segment"
        assert data["pace_s_per_m"] == 0.25
        assert data["start"] == "2024-05-01T07:00:00+00:00"


class TestWorkout:
    """Tests for Workout."""

    def test_from_dict(self):
        """Test parsing a workout with events."""
        workout = Workout.from_dict({
            "id": "w1",
            "activity_kind": "cycling",
            "start": "2024-05-01T07:00:00Z",
            "end": "2024-05-01T08:00:00Z",
            "events": [{"kind": "lap", "start": "2024-05-01T07:30:00Z"}],
        })

        assert workout.activity_kind == ActivityKind.CYCLING
        assert workout.duration == timedelta(hours=1)
        assert workout.events[0].kind == WorkoutEventType.LAP
        assert workout.events[0].end == workout.events[0].start

    def test_to_dict(self):
        """Test serialization without events."""
        workout = Workout("w1", ActivityKind.RUNNING, T0, T0 + timedelta(minutes=30))

        data = workout.to_dict()

        assert data["activity_kind"] == "running"
        assert data["events"] is None


class TestWorkoutDetail:
    """Tests for WorkoutDetail."""

    def test_create(self):
        """Test lists are frozen into tuples."""
        workout = Workout("w1", ActivityKind.RUNNING, T0, T0 + timedelta(minutes=30))
        point = LocationPoint(T0, 41.39, 2.17, altitude_m=12.0)

        detail = WorkoutDetail.create(workout, [point], [])

        assert detail.locations == (point,)
        assert detail.heart_rate == ()
        assert detail.to_dict()["locations"][0]["altitude_m"] == 12.0
