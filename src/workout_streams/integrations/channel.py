"""
Bridge from callback-style store deliveries to async iteration.

A store that reports results through callbacks (one call per batch, then a
terminal "done" or "error") pushes them into a ``BatchChannel``. The consumer
iterates the channel with ``async for``. Each channel belongs to exactly one
query invocation and carries that invocation's generation token, so a
delivery that arrives after the consumer has gone away lands on a closed
channel and is discarded instead of being applied to a stale accumulator.
Callbacks may come from another thread.
"""

import asyncio
from enum import Enum
from typing import Any, Generic, List, Optional, Sequence, Tuple, TypeVar

from ..observability import EventObserver, NullObserver


T = TypeVar("T")

_BATCH = "batch"
_DONE = "done"
_ERROR = "error"


class ChannelState(str, Enum):
    """Lifecycle of a channel."""
    OPEN = "open"
    FINISHED = "finished"
    FAILED = "failed"
    CLOSED = "closed"


class BatchChannel(Generic[T]):
    """
    Single-invocation channel of sample batches.

    Producers call ``deliver``, then exactly one of ``finish`` or ``fail``.
    Anything delivered once the channel is no longer open (terminated by the
    producer or closed by the consumer) is dropped and reported to the
    observer as ``channel.discarded``.
    """

    def __init__(
        self,
        token: int,
        label: str = "",
        observer: Optional[EventObserver] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        self.token = token
        self.label = label
        self._observer = observer or NullObserver()
        self._loop = loop or asyncio.get_running_loop()
        self._queue: "asyncio.Queue[Tuple[str, Any]]" = asyncio.Queue()
        self._state = ChannelState.OPEN
        self._exhausted = False
        self.delivered = 0
        self.discarded = 0

    @property
    def state(self) -> ChannelState:
        return self._state

    @property
    def is_open(self) -> bool:
        return self._state == ChannelState.OPEN

    def deliver(self, batch: Sequence[T]) -> bool:
        """
        Deliver one batch.

        Returns:
            True if the batch was accepted, False if it was discarded.
        """
        if not self.is_open:
            self._discard(_BATCH, size=len(batch))
            return False
        self.delivered += 1
        self._put((_BATCH, list(batch)))
        return True

    def finish(self) -> bool:
        """Signal successful completion."""
        if not self.is_open:
            self._discard(_DONE)
            return False
        self._state = ChannelState.FINISHED
        self._put((_DONE, None))
        return True

    def fail(self, error: BaseException) -> bool:
        """Signal failure; the consumer's iteration raises ``error``."""
        if not self.is_open:
            self._discard(_ERROR, error=repr(error))
            return False
        self._state = ChannelState.FAILED
        self._put((_ERROR, error))
        return True

    def close(self) -> None:
        """Abandon the channel from the consumer side."""
        if self.is_open:
            self._state = ChannelState.CLOSED
            self._observer.record("channel.closed", token=self.token, query=self.label)

    def _discard(self, signal: str, **fields: Any) -> None:
        self.discarded += 1
        self._observer.record(
            "channel.discarded",
            token=self.token,
            query=self.label,
            signal=signal,
            state=self._state.value,
            **fields,
        )

    def _put(self, item: Tuple[str, Any]) -> None:
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is self._loop:
            self._queue.put_nowait(item)
        else:
            self._loop.call_soon_threadsafe(self._queue.put_nowait, item)

    def __aiter__(self) -> "BatchChannel[T]":
        return self

    async def __anext__(self) -> List[T]:
        if self._exhausted:
            raise StopAsyncIteration
        signal, payload = await self._queue.get()
        if signal == _BATCH:
            return payload
        self._exhausted = True
        if signal == _DONE:
            raise StopAsyncIteration
        raise payload
