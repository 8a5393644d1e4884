"""
Distance splits.

Turns the time-ordered distance samples of a workout into fixed-distance
splits (per kilometer or per mile) with duration and pace, for workouts whose
device did not record segment events itself.

The calculation is a fold: ``step`` consumes one sample and returns the next
state plus the splits completed by that sample, ``finish`` emits the partial
trailing split. Time during which nothing was measured (positioning warm-up
after the workout starts, signal loss between samples) does not count toward
a split's duration.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from ..models import DistanceSample, SplitEvent, Workout, WorkoutEventType
from ..observability import EventObserver, NullObserver


METERS_PER_KILOMETER = 1000.0
METERS_PER_MILE = 1609.344
DEFAULT_SPLIT_DISTANCE_M = METERS_PER_KILOMETER

# Distances closer than this are treated as equal
DISTANCE_TOLERANCE_M = 1e-6


def validate_split_distance(split_distance_m: float) -> float:
    """Reject split distances that are not longer than the distance tolerance."""
    if split_distance_m <= DISTANCE_TOLERANCE_M:
        raise ValueError(f"split_distance_m must be greater than {DISTANCE_TOLERANCE_M} m")
    return split_distance_m


class SplitUnit(str, Enum):
    """Distance units splits are commonly taken in."""
    KILOMETER = "km"
    MILE = "mi"

    @property
    def meters(self) -> float:
        if self == SplitUnit.MILE:
            return METERS_PER_MILE
        return METERS_PER_KILOMETER


@dataclass(frozen=True)
class SplitCalculatorState:
    """
    Accumulator threaded through the split fold.

    Attributes:
        split_distance_m: Distance of one full split
        workout_start: Recorded start of the workout
        accumulated_m: Distance collected since the current split started
        accumulated_s: In-motion time collected since the current split started
        gps_drops_s: Unmeasured time inside the current split, reset per split
        split_start: Logical start of the current split
        previous: Last consumed sample
        samples_seen: Number of consumed samples
        initial_drift_s: Delay between workout start and the first sample
        total_gap_s: Unmeasured time between samples over the whole workout
    """
    split_distance_m: float
    workout_start: datetime
    accumulated_m: float = 0.0
    accumulated_s: float = 0.0
    gps_drops_s: float = 0.0
    split_start: Optional[datetime] = None
    previous: Optional[DistanceSample] = None
    samples_seen: int = 0
    initial_drift_s: Optional[float] = None
    total_gap_s: float = 0.0

    @classmethod
    def initial(
        cls,
        workout_start: datetime,
        split_distance_m: float = DEFAULT_SPLIT_DISTANCE_M,
    ) -> "SplitCalculatorState":
        validate_split_distance(split_distance_m)
        return cls(split_distance_m=split_distance_m, workout_start=workout_start)


def step(
    state: SplitCalculatorState,
    sample: DistanceSample,
) -> Tuple[SplitCalculatorState, Tuple[SplitEvent, ...]]:
    """
    Consume one sample.

    Returns:
        The next state and the splits the sample completed (usually none or
        one, several when a single sample covers more than one split).
    """
    split_start = state.split_start
    gps_drops_s = state.gps_drops_s
    initial_drift_s = state.initial_drift_s
    total_gap_s = state.total_gap_s

    if state.samples_seen == 0:
        # The split starts at workout start + drift, i.e. with the first sample
        initial_drift_s = (sample.start - state.workout_start).total_seconds()
        split_start = state.workout_start + timedelta(seconds=initial_drift_s)
    elif state.previous is not None and sample.start != state.previous.end:
        gap_s = (sample.start - state.previous.end).total_seconds()
        gps_drops_s += gap_s
        total_gap_s += gap_s

    accumulated_s = state.accumulated_s + sample.duration_s
    accumulated_m = state.accumulated_m + sample.distance_m

    splits: List[SplitEvent] = []
    while accumulated_m + DISTANCE_TOLERANCE_M >= state.split_distance_m:
        accumulated_s = (sample.end - split_start).total_seconds() - gps_drops_s
        pace = accumulated_s / accumulated_m
        carry_m = max(accumulated_m - state.split_distance_m, 0.0)
        carry_s = carry_m * pace
        split_s = accumulated_s - carry_s

        splits.append(SplitEvent(
            start=split_start,
            end=split_start + timedelta(seconds=split_s),
            duration_s=split_s,
            distance_m=state.split_distance_m,
        ))

        split_start = sample.end - timedelta(seconds=carry_s)
        accumulated_m = carry_m
        accumulated_s = carry_s
        gps_drops_s = 0.0

    next_state = replace(
        state,
        accumulated_m=accumulated_m,
        accumulated_s=accumulated_s,
        gps_drops_s=gps_drops_s,
        split_start=split_start,
        previous=sample,
        samples_seen=state.samples_seen + 1,
        initial_drift_s=initial_drift_s,
        total_gap_s=total_gap_s,
    )
    return next_state, tuple(splits)


def finish(state: SplitCalculatorState) -> Optional[SplitEvent]:
    """
    Emit the trailing split for whatever distance is left.

    Returns None when no samples were consumed or the leftover distance is
    zero (the last sample completed a split exactly).
    """
    if state.samples_seen == 0 or state.split_start is None:
        return None
    if state.accumulated_m <= DISTANCE_TOLERANCE_M:
        return None
    return SplitEvent(
        start=state.split_start,
        end=state.split_start + timedelta(seconds=state.accumulated_s),
        duration_s=state.accumulated_s,
        distance_m=state.accumulated_m,
    )


def calculate_splits(
    samples: Iterable[DistanceSample],
    workout_start: datetime,
    split_distance_m: float = DEFAULT_SPLIT_DISTANCE_M,
) -> List[SplitEvent]:
    """
    Compute splits from distance samples sorted by start time.

    Args:
        samples: Distance samples of one workout, ascending by start
        workout_start: Recorded start of the workout
        split_distance_m: Distance of one split

    Returns:
        Full splits in order, followed by the partial trailing split if any.
    """
    return SplitCalculator(split_distance_m).calculate(samples, workout_start)


class SplitCalculator:
    """
    Computes splits and reports what it saw to an observer.

    Usage:
        calculator = SplitCalculator(SplitUnit.MILE.meters)
        splits = calculator.calculate(samples, workout.start)
    """

    def __init__(
        self,
        split_distance_m: float = DEFAULT_SPLIT_DISTANCE_M,
        observer: Optional[EventObserver] = None,
    ) -> None:
        self.split_distance_m = validate_split_distance(split_distance_m)
        self._observer = observer or NullObserver()

    def calculate(
        self,
        samples: Iterable[DistanceSample],
        workout_start: datetime,
    ) -> List[SplitEvent]:
        state = SplitCalculatorState.initial(workout_start, self.split_distance_m)
        splits: List[SplitEvent] = []

        for sample in samples:
            previous_gap_s = state.total_gap_s
            state, completed = step(state, sample)

            if state.samples_seen == 1:
                self._observer.record("split.drift", drift_s=state.initial_drift_s)
            if state.total_gap_s != previous_gap_s:
                self._observer.record(
                    "split.gap",
                    at=sample.start.isoformat(),
                    gap_s=state.total_gap_s - previous_gap_s,
                )
            for split in completed:
                self._observer.record(
                    "split.emitted",
                    index=len(splits),
                    distance_m=split.distance_m,
                    duration_s=split.duration_s,
                )
                splits.append(split)

        trailing = finish(state)
        if trailing is not None:
            self._observer.record(
                "split.trailing",
                index=len(splits),
                distance_m=trailing.distance_m,
                duration_s=trailing.duration_s,
            )
            splits.append(trailing)
        elif state.samples_seen:
            self._observer.record("split.trailing_suppressed", leftover_m=state.accumulated_m)

        return splits


def prerecorded_paces(workout: Workout) -> List[SplitEvent]:
    """
    Segment events the device recorded for a workout, as splits.

    Never fails; a workout without events gives an empty list.
    """
    if not workout.events:
        return []
    return [
        SplitEvent.from_workout_event(event)
        for event in workout.events
        if event.kind == WorkoutEventType.SEGMENT
    ]
