"""
Callback-driven store base class.

Subclasses implement ``execute`` and ``execute_route`` the way native
activity stores work: start the query, return immediately, and report
batches and completion later through the given channel.
"""

import itertools
from abc import abstractmethod
from typing import Any, AsyncIterator, Callable, List, Optional

from ..exceptions import UpstreamQueryFailedError, WorkoutStreamsError
from ..models import LocationPoint, WorkoutRoute
from ..observability import EventObserver, default_observer
from .base import SampleQuery, SampleStore
from .channel import BatchChannel


class CallbackSampleStore(SampleStore):
    """
    SampleStore whose queries report through callbacks.

    Every invocation gets its own ``BatchChannel`` with a fresh generation
    token. Leaving the iteration early (cancellation, a failing sibling
    query) closes the channel so late callbacks are discarded.
    """

    def __init__(self, observer: Optional[EventObserver] = None) -> None:
        self.observer = observer or default_observer()
        self._tokens = itertools.count(1)

    @abstractmethod
    def execute(self, query: SampleQuery, channel: BatchChannel) -> None:
        """Start a sample query; results go to ``channel``."""
        pass

    @abstractmethod
    def execute_route(self, route: WorkoutRoute, channel: BatchChannel) -> None:
        """Start a route location query; results go to ``channel``."""
        pass

    def query(self, query: SampleQuery) -> AsyncIterator[List[Any]]:
        return self._stream(query.label, lambda channel: self.execute(query, channel))

    def route_locations(self, route: WorkoutRoute) -> AsyncIterator[List[LocationPoint]]:
        return self._stream(f"route_locations:{route.id}", lambda channel: self.execute_route(route, channel))

    async def _stream(
        self,
        label: str,
        start: Callable[[BatchChannel], None],
    ) -> AsyncIterator[List[Any]]:
        channel: BatchChannel = BatchChannel(next(self._tokens), label=label, observer=self.observer)
        self.observer.record("query.started", token=channel.token, query=label)
        try:
            start(channel)
            async for batch in channel:
                self.observer.record("query.batch", token=channel.token, query=label, size=len(batch))
                yield batch
        except WorkoutStreamsError:
            raise
        except Exception as e:
            raise UpstreamQueryFailedError(label, e) from e
        finally:
            channel.close()
        self.observer.record("query.finished", token=channel.token, query=label, batches=channel.delivered)
