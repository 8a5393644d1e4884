"""Tests for the structured join."""

import asyncio

import pytest

from workout_streams.services.join import join_all


async def value_after(value, delay: float):
    await asyncio.sleep(delay)
    return value


async def fail_after(error: BaseException, delay: float):
    await asyncio.sleep(delay)
    raise error


class TestJoinAll:
    """Tests for join_all."""

    @pytest.mark.asyncio
    async def test_results_in_argument_order(self):
        """Test results keep argument order regardless of completion order."""
        results = await join_all(value_after("slow", 0.03), value_after("fast", 0))

        assert results == ("slow", "fast")

    @pytest.mark.asyncio
    async def test_no_awaitables(self):
        """Test joining nothing gives an empty tuple."""
        assert await join_all() == ()

    @pytest.mark.asyncio
    async def test_first_failure_raised_and_sibling_cancelled(self):
        """Test a failure cancels the still running sibling."""
        sibling_cancelled = asyncio.Event()

        async def long_running():
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                sibling_cancelled.set()
                raise

        with pytest.raises(ValueError, match="boom"):
            await join_all(long_running(), fail_after(ValueError("boom"), 0.01))

        assert sibling_cancelled.is_set()

    @pytest.mark.asyncio
    async def test_earliest_failure_wins(self):
        """Test the failure that happened first is raised."""
        with pytest.raises(KeyError):
            await join_all(
                fail_after(ValueError("later"), 0.05),
                fail_after(KeyError("first"), 0.01),
            )

    @pytest.mark.asyncio
    async def test_caller_cancellation_cancels_children(self):
        """Test cancelling the join cancels every child."""
        cancelled = []

        async def child(name):
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled.append(name)
                raise

        task = asyncio.ensure_future(join_all(child("a"), child("b")))
        await asyncio.sleep(0.01)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

        assert sorted(cancelled) == ["a", "b"]
