"""
Structured join for concurrent queries.

``join_all`` runs awaitables as tasks and returns all their results once
every one of them succeeded. The first failure cancels the remaining tasks
and is raised as is; cancelling the caller cancels every task.
"""

import asyncio
from typing import Any, Awaitable, Tuple


async def join_all(*aws: Awaitable[Any]) -> Tuple[Any, ...]:
    """
    Await several awaitables concurrently, all-or-nothing.

    Returns:
        Results in argument order.

    Raises:
        The exception of the first task to fail (by argument order when
        several fail in the same loop iteration).
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    if not tasks:
        return ()

    try:
        done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
    except asyncio.CancelledError:
        await _cancel(tasks)
        raise

    failed = [t for t in tasks if t in done and not t.cancelled() and t.exception() is not None]
    if failed:
        await _cancel(pending)
        raise failed[0].exception()

    return tuple(t.result() for t in tasks)


async def _cancel(tasks) -> None:
    """Cancel tasks and wait until they have unwound."""
    for task in tasks:
        task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)
