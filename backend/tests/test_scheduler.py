"""스케줄러 테스트."""
from datetime import datetime, timezone

import pytest
from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_EXECUTED, JobExecutionEvent

from core.cache import APICache
from core.config import Settings
from scheduler import SchedulerManager
from scheduler.scheduler import CACHE_SWEEP_JOB_ID


def make_settings(**overrides):
    values = {"scheduler_enabled": True, "cache_sweep_interval_seconds": 300}
    values.update(overrides)
    return Settings(**values)


class TestSchedulerManager:

    @pytest.mark.asyncio
    async def test_start_registers_cache_sweep(self):
        manager = SchedulerManager(make_settings(), APICache())
        manager.start()
        try:
            assert manager.is_running
            jobs = manager.get_jobs()
            assert [job["id"] for job in jobs] == [CACHE_SWEEP_JOB_ID]
            assert jobs[0]["runs"] == 0
            assert jobs[0]["trigger"] == "interval[0:05:00]"
        finally:
            manager.shutdown()

        assert not manager.is_running

    def test_disabled_scheduler_does_not_start(self):
        manager = SchedulerManager(make_settings(scheduler_enabled=False), APICache())
        manager.start()

        assert not manager.is_running
        assert manager.get_jobs() == []

    def test_job_events_are_recorded(self):
        manager = SchedulerManager(make_settings(), APICache())
        scheduled = datetime.now(timezone.utc)

        manager._on_job_event(JobExecutionEvent(EVENT_JOB_EXECUTED, CACHE_SWEEP_JOB_ID, "default", scheduled, retval=3))
        manager._on_job_event(
            JobExecutionEvent(EVENT_JOB_ERROR, CACHE_SWEEP_JOB_ID, "default", scheduled, exception=RuntimeError("boom"))
        )

        run = manager._runs[CACHE_SWEEP_JOB_ID]
        assert run["runs"] == 2
        assert run["failures"] == 1
        assert run["last_result"] == 3
        assert run["last_error"] == "boom"
