"""
In-memory activity store.

Holds workouts, samples, routes and route points in memory and answers
queries the way a device-local store does: asynchronously, in batches,
through callbacks scheduled on the running event loop.

Usage:
    store = InMemorySampleStore(batch_size=50)
    store.add_workout(workout)
    store.add_samples(SampleKind.HEART_RATE, heart_rate_samples)
    store.add_route(WorkoutRoute(id="r1", workout_id=workout.id), points)

    async for batch in store.query(query):
        ...
"""

import asyncio
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, Tuple

from ..exceptions import NoPermissionError, StoreUnavailableError
from ..models import LocationPoint, Workout, WorkoutRoute
from ..observability import EventObserver
from .base import NO_LIMIT, QueryPredicate, SampleKind, SampleQuery, SortDescriptor, SortField
from .callback import CallbackSampleStore
from .channel import BatchChannel


@dataclass
class InjectedFailure:
    """A failure a query reports after delivering some batches."""
    error: BaseException
    after_batches: int = 0


def chunk(items: Sequence[Any], size: int) -> List[List[Any]]:
    """Split items into consecutive batches of at most ``size``."""
    return [list(items[i:i + size]) for i in range(0, len(items), size)]


def route_label(route_id: str) -> str:
    """Query label used for a route's location stream."""
    return f"route_locations:{route_id}"


class InMemorySampleStore(CallbackSampleStore):
    """
    Activity store backed by in-memory collections.

    Besides the data itself it models the store-level behaviour callers
    have to cope with: the store being unavailable, kinds the caller is not
    authorized to read, queries failing part-way, and per-query latency.
    """

    provider = "memory"

    def __init__(
        self,
        batch_size: int = 100,
        delivery_delay_s: float = 0.0,
        available: bool = True,
        readable_kinds: Optional[Iterable[SampleKind]] = None,
        observer: Optional[EventObserver] = None,
    ) -> None:
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        if delivery_delay_s < 0:
            raise ValueError("delivery_delay_s must not be negative")
        super().__init__(observer)
        self.batch_size = batch_size
        self.delivery_delay_s = delivery_delay_s
        self.available = available
        self.readable_kinds: Optional[Set[SampleKind]] = (
            set(readable_kinds) if readable_kinds is not None else None
        )

        self._workouts: Dict[str, Workout] = {}
        # kind -> [(owning workout id or None, sample)]
        self._samples: Dict[SampleKind, List[Tuple[Optional[str], Any]]] = defaultdict(list)
        self._routes: Dict[str, List[WorkoutRoute]] = defaultdict(list)
        self._route_batches: Dict[str, List[List[LocationPoint]]] = {}
        self._failures: Dict[str, InjectedFailure] = {}
        self._delays: Dict[str, float] = {}

    # ------------------------------------------------------------------
    # Population
    # ------------------------------------------------------------------

    def add_workout(self, workout: Workout) -> None:
        self._workouts[workout.id] = workout

    def add_samples(
        self,
        kind: SampleKind,
        samples: Iterable[Any],
        workout_id: Optional[str] = None,
    ) -> None:
        """
        Add samples of one kind.

        Samples without a ``workout_id`` still match a "for workout" query
        when they fall inside that workout's time range.
        """
        if kind in (SampleKind.WORKOUT, SampleKind.ROUTE):
            raise ValueError(f"Use add_workout/add_route for {kind.value}")
        self._samples[kind].extend((workout_id, s) for s in samples)

    def add_route(
        self,
        route: WorkoutRoute,
        points: Optional[Sequence[LocationPoint]] = None,
        batches: Optional[Sequence[Sequence[LocationPoint]]] = None,
    ) -> None:
        """
        Attach a route to a workout.

        Points are delivered in ``batch_size`` batches unless explicit
        ``batches`` are given.
        """
        self._routes[route.workout_id].append(route)
        if batches is not None:
            self._route_batches[route.id] = [list(b) for b in batches]
        else:
            self._route_batches[route.id] = chunk(list(points or []), self.batch_size)

    def fail_query(self, kind: SampleKind, error: BaseException, after_batches: int = 0) -> None:
        """Make queries of ``kind`` fail after delivering ``after_batches`` batches."""
        self._failures[kind.value] = InjectedFailure(error, after_batches)

    def fail_route(self, route_id: str, error: BaseException, after_batches: int = 0) -> None:
        """Make the location stream of one route fail."""
        self._failures[route_label(route_id)] = InjectedFailure(error, after_batches)

    def set_delay(self, label: str, delay_s: float) -> None:
        """Override the per-batch delay of one query label."""
        self._delays[label] = delay_s

    # ------------------------------------------------------------------
    # Query execution
    # ------------------------------------------------------------------

    def execute(self, query: SampleQuery, channel: BatchChannel) -> None:
        denial = self._access_error(query.kind)
        if denial is not None:
            self._schedule(channel, query.label, [], InjectedFailure(denial))
            return

        if query.kind == SampleKind.WORKOUT:
            results: List[Any] = self._match_workouts(query.predicate)
        elif query.kind == SampleKind.ROUTE:
            results = self._match_routes(query.predicate)
        else:
            results = self._match_samples(query.kind, query.predicate)

        results = self._sorted(results, query.sort)
        if query.limit != NO_LIMIT:
            results = results[:query.limit]

        self._schedule(
            channel,
            query.label,
            chunk(results, self.batch_size),
            self._failures.get(query.label),
        )

    def execute_route(self, route: WorkoutRoute, channel: BatchChannel) -> None:
        label = route_label(route.id)
        denial = self._access_error(SampleKind.ROUTE)
        if denial is not None:
            self._schedule(channel, label, [], InjectedFailure(denial))
            return
        self._schedule(
            channel,
            label,
            self._route_batches.get(route.id, []),
            self._failures.get(label),
        )

    def _access_error(self, kind: SampleKind) -> Optional[BaseException]:
        if not self.available:
            return StoreUnavailableError()
        if self.readable_kinds is not None and kind not in self.readable_kinds:
            return NoPermissionError(kind.value)
        return None

    def _schedule(
        self,
        channel: BatchChannel,
        label: str,
        batches: List[List[Any]],
        failure: Optional[InjectedFailure],
    ) -> None:
        """Deliver batches and the terminal signal from the event loop."""
        loop = asyncio.get_running_loop()
        delay = self._delays.get(label, self.delivery_delay_s)
        calls: List[Tuple[Any, ...]] = []

        for index, batch in enumerate(batches):
            if failure is not None and index == failure.after_batches:
                break
            calls.append((channel.deliver, batch))

        if failure is not None:
            calls.append((channel.fail, failure.error))
        else:
            calls.append((channel.finish,))

        for step, (callback, *args) in enumerate(calls, start=1):
            if delay > 0:
                loop.call_later(delay * step, callback, *args)
            else:
                loop.call_soon(callback, *args)

    # ------------------------------------------------------------------
    # Matching
    # ------------------------------------------------------------------

    def _match_workouts(self, predicate: QueryPredicate) -> List[Workout]:
        matches = []
        for workout in self._workouts.values():
            if predicate.workout_id is not None and workout.id != predicate.workout_id:
                continue
            if predicate.activity_kind is not None and workout.activity_kind != predicate.activity_kind:
                continue
            if not predicate.overlaps(workout.start, workout.end):
                continue
            matches.append(workout)
        return matches

    def _match_routes(self, predicate: QueryPredicate) -> List[WorkoutRoute]:
        if predicate.workout_id is not None:
            return list(self._routes.get(predicate.workout_id, []))
        routes = [r for rs in self._routes.values() for r in rs]
        return [
            r for r in routes
            if r.start is None or r.end is None or predicate.overlaps(r.start, r.end)
        ]

    def _match_samples(self, kind: SampleKind, predicate: QueryPredicate) -> List[Any]:
        workout = None
        if predicate.workout_id is not None:
            workout = self._workouts.get(predicate.workout_id)

        matches = []
        for owner, sample in self._samples.get(kind, []):
            if predicate.workout_id is not None:
                if owner is not None and owner != predicate.workout_id:
                    continue
                if owner is None and (
                    workout is None or not _within(sample.start, sample.end, workout.start, workout.end)
                ):
                    continue
            if not predicate.overlaps(sample.start, sample.end):
                continue
            matches.append(sample)
        return matches

    @staticmethod
    def _sorted(results: List[Any], sort: Optional[SortDescriptor]) -> List[Any]:
        if sort is None:
            return results
        attribute = "start" if sort.field == SortField.START_DATE else "end"
        return sorted(
            results,
            key=lambda item: getattr(item, attribute) or datetime.min,
            reverse=not sort.ascending,
        )

    @property
    def workouts(self) -> List[Workout]:
        return list(self._workouts.values())


def _within(start: datetime, end: datetime, range_start: datetime, range_end: datetime) -> bool:
    return start >= range_start and end <= range_end
