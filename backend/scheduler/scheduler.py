"""백그라운드 작업 스케줄러.

현재 등록되는 작업은 만료 캐시 정리(cache_sweep) 하나입니다.
작업별 마지막 실행 결과를 기억해 두었다가 상태 API에서 함께 보여줍니다.
"""
import logging
from typing import Optional, Callable, Any

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_EXECUTED, JobExecutionEvent

from core.cache import APICache
from core.config import Settings
from core.timezone import now_utc
from scheduler.jobs.cache_sweep import sweep_expired_cache

logger = logging.getLogger(__name__)

CACHE_SWEEP_JOB_ID = "cache_sweep"


class SchedulerManager:
    """AsyncIOScheduler 래퍼. 앱 lifespan에서 생성/시작/종료합니다."""

    def __init__(self, settings: Settings, cache: APICache):
        self.settings = settings
        self.cache = cache
        self._scheduler: Optional[AsyncIOScheduler] = None
        self._runs: dict[str, dict] = {}  # job_id -> 마지막 실행 결과

    @property
    def scheduler(self) -> AsyncIOScheduler:
        if self._scheduler is None:
            self._scheduler = AsyncIOScheduler(
                timezone="UTC",
                job_defaults={
                    "coalesce": True,
                    "max_instances": 1,
                    "misfire_grace_time": 60,
                },
            )
            self._scheduler.add_listener(self._on_job_event, EVENT_JOB_EXECUTED | EVENT_JOB_ERROR)
        return self._scheduler

    @property
    def is_running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def _on_job_event(self, event: JobExecutionEvent) -> None:
        run = self._runs.setdefault(event.job_id, {"runs": 0, "failures": 0})
        run["runs"] += 1
        run["last_run_at"] = now_utc().isoformat() + "Z"

        if event.exception:
            run["failures"] += 1
            run["last_error"] = str(event.exception)
            logger.error(f"Job {event.job_id} failed: {event.exception}", exc_info=event.exception)
        else:
            run["last_error"] = None
            run["last_result"] = event.retval
            logger.debug(f"Job {event.job_id} executed (result={event.retval})")

    def add_interval_job(self, func: Callable, job_id: str, seconds: int, **kwargs: Any) -> None:
        self.scheduler.add_job(
            func,
            trigger=IntervalTrigger(seconds=seconds),
            id=job_id,
            replace_existing=True,
            **kwargs,
        )
        logger.info(f"Added interval job: {job_id} (every {seconds}s)")

    def get_jobs(self) -> list[dict]:
        """등록된 작업과 마지막 실행 결과."""
        if self._scheduler is None:
            return []
        return [
            {
                "id": job.id,
                "next_run_time": job.next_run_time.isoformat() if job.next_run_time else None,
                "trigger": str(job.trigger),
                **self._runs.get(job.id, {"runs": 0, "failures": 0}),
            }
            for job in self._scheduler.get_jobs()
        ]

    def start(self) -> None:
        if not self.settings.scheduler_enabled:
            logger.info("Scheduler disabled (SCHEDULER_ENABLED=false)")
            return
        if self.is_running:
            return

        self.add_interval_job(
            sweep_expired_cache,
            job_id=CACHE_SWEEP_JOB_ID,
            seconds=self.settings.cache_sweep_interval_seconds,
            args=[self.cache],
        )
        self.scheduler.start()
        logger.info("Scheduler started")

    def shutdown(self) -> None:
        if self.is_running:
            self._scheduler.shutdown(wait=False)
            logger.info("Scheduler shutdown")
