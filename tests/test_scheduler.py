import asyncio
import pytest

from backoffice.consumers.analysis_scheduler import RecurringJob


@pytest.mark.asyncio
async def test_tick_returns_job_result():
    async def job():
        return "done"

    assert await RecurringJob("test", job).tick() == "done"


@pytest.mark.asyncio
async def test_failing_run_is_contained():
    async def job():
        raise RuntimeError("store unavailable")

    assert await RecurringJob("test", job).tick() is None


@pytest.mark.asyncio
async def test_loop_keeps_running_after_failures_and_stops():
    calls = []

    async def job():
        calls.append(1)
        raise RuntimeError("boom")

    runner = RecurringJob("test", job, interval=0.01, initial_delay=0)
    runner.start()
    await asyncio.sleep(0.1)
    assert runner.running

    await runner.stop()

    assert not runner.running
    assert len(calls) >= 2
