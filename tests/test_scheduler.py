from __future__ import annotations

import pytest

from uptime_checker.config import Settings
from uptime_checker.errors import StoreFailure
from uptime_checker.scheduler import SWEEP_JOB_ID, SweepScheduler, cron_trigger, run_scheduled_sweep
from uptime_checker.services.monitor import Monitor
from uptime_checker.services.store import MemoryStore


class _DownStore(MemoryStore):
    async def get(self, key: str) -> str | None:
        raise StoreFailure("backend unavailable")


def test_cron_trigger_requires_five_fields() -> None:
    assert "*/5" in str(cron_trigger("*/5 * * * *"))
    with pytest.raises(ValueError):
        cron_trigger("*/5 * * *")


@pytest.mark.asyncio
async def test_scheduled_sweep_swallows_store_failure() -> None:
    monitor = Monitor(_DownStore(), Settings(STORE_BACKEND="memory"))
    await run_scheduled_sweep(monitor)


@pytest.mark.asyncio
async def test_scheduler_registers_single_sweep_job() -> None:
    sched = SweepScheduler(Monitor(MemoryStore(), Settings(STORE_BACKEND="memory")), "*/5 * * * *")
    sched.start()
    try:
        sched.start()
        job = sched.scheduler.get_job(SWEEP_JOB_ID)
        assert job is not None
        assert job.max_instances == 1
        assert len(sched.scheduler.get_jobs()) == 1
    finally:
        sched.stop()
    assert sched.running is False
