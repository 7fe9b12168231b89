"""주기 동기화 스케줄러 테스트"""
import asyncio
import logging

import pytest

from nutrisync.local.scheduler import SyncScheduler


@pytest.mark.asyncio
async def test_trigger_all_runs_every_job():
    scheduler = SyncScheduler()
    scheduler.add_job("a", lambda: asyncio.sleep(0, result="A"), 60)
    scheduler.add_job("b", lambda: asyncio.sleep(0, result="B"), 60)

    assert await scheduler.trigger_all() == {"a": "A", "b": "B"}


def test_duplicate_job_rejected():
    scheduler = SyncScheduler()
    scheduler.add_job("a", lambda: asyncio.sleep(0), 60)

    with pytest.raises(ValueError):
        scheduler.add_job("a", lambda: asyncio.sleep(0), 60)


@pytest.mark.asyncio
async def test_job_error_logged_not_raised(caplog):
    async def broken():
        raise RuntimeError("relay exploded")

    scheduler = SyncScheduler()
    scheduler.add_job("broken", broken, 60)

    with caplog.at_level(logging.ERROR, logger="nutrisync.local.scheduler"):
        assert await scheduler.run_job("broken") is None

    assert scheduler.jobs["broken"].last_error == "relay exploded"
    assert "Scheduled job broken failed" in caplog.text


@pytest.mark.asyncio
async def test_start_runs_immediately_and_stop_shuts_down():
    ran = asyncio.Event()

    async def job():
        ran.set()

    scheduler = SyncScheduler()
    scheduler.add_job("sync", job, 3600)
    scheduler.start()

    await asyncio.wait_for(ran.wait(), timeout=1)
    assert scheduler.running is True

    await scheduler.stop()
    assert scheduler.running is False


@pytest.mark.asyncio
async def test_interval_job_survives_failures():
    attempts = []

    async def flaky():
        attempts.append(1)
        if len(attempts) == 1:
            raise RuntimeError("first cycle fails")

    scheduler = SyncScheduler()
    scheduler.add_job("flaky", flaky, 0.05)
    scheduler.start()

    for _ in range(200):
        if len(attempts) >= 2:
            break
        await asyncio.sleep(0.01)
    await scheduler.stop()

    assert len(attempts) >= 2


@pytest.mark.asyncio
async def test_jobs_registered_as_single_instance_intervals():
    scheduler = SyncScheduler()
    scheduler.add_job("food_logs", lambda: asyncio.sleep(0), 300)
    scheduler.start(run_immediately=False)

    try:
        job = scheduler._scheduler.get_job("food_logs")
        assert job.max_instances == 1
        assert job.coalesce is True
        assert job.trigger.interval.total_seconds() == 300
    finally:
        await scheduler.stop()


@pytest.mark.asyncio
async def test_start_without_run_immediately_waits_for_interval():
    ran = asyncio.Event()

    async def job():
        ran.set()

    scheduler = SyncScheduler()
    scheduler.add_job("sync", job, 3600)
    scheduler.start(run_immediately=False)

    await asyncio.sleep(0.05)
    assert not ran.is_set()
    await scheduler.stop()


@pytest.mark.asyncio
async def test_stop_then_start_again():
    runs = []

    async def job():
        runs.append(1)

    scheduler = SyncScheduler()
    scheduler.add_job("sync", job, 3600)
    scheduler.start()
    await scheduler.stop()
    scheduler.start()

    for _ in range(100):
        if runs:
            break
        await asyncio.sleep(0.01)
    await scheduler.stop()

    assert runs
    assert scheduler.running is False
