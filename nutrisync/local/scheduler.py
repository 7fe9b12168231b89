"""주기 동기화 스케줄러

APScheduler AsyncIOScheduler 위에서 작업마다 interval 트리거 하나를 등록한다.
같은 작업은 동시에 하나만 실행되고 (max_instances=1), 밀린 실행은 한 번으로 합친다 (coalesce).
포그라운드 복귀 시 trigger_all()로 즉시 실행. 예약 실행 중 발생한 오류는 로그만 남기고 다음 주기로 넘어간다.
"""
import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler

logger = logging.getLogger(__name__)


@dataclass
class ScheduledJob:
    name: str
    func: Callable[[], Awaitable[Any]]
    interval_seconds: float
    last_result: Any = None
    last_error: Optional[str] = None


class SyncScheduler:

    def __init__(self) -> None:
        self.jobs: Dict[str, ScheduledJob] = {}
        self._scheduler: Optional[AsyncIOScheduler] = None

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def add_job(self, name: str, func: Callable[[], Awaitable[Any]], interval_seconds: float) -> None:
        if name in self.jobs:
            raise ValueError(f"Job already registered: {name}")
        self.jobs[name] = ScheduledJob(name=name, func=func, interval_seconds=interval_seconds)

    async def run_job(self, name: str) -> Any:
        job = self.jobs[name]
        try:
            job.last_result = await job.func()
            job.last_error = None
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            job.last_error = str(exc)
            logger.exception("Scheduled job %s failed", name)
        return job.last_result

    def start(self, run_immediately: bool = True) -> None:
        """
        실행 중인 이벤트 루프 안에서 호출해야 한다.

        Args:
            run_immediately: True면 첫 실행을 interval 대기 없이 바로 시작
        """
        if self.running:
            return

        scheduler = AsyncIOScheduler(timezone=timezone.utc)
        for name, job in self.jobs.items():
            options: Dict[str, Any] = {}
            if run_immediately:
                options["next_run_time"] = datetime.now(timezone.utc)
            scheduler.add_job(
                func=self.run_job,
                trigger="interval",
                seconds=job.interval_seconds,
                args=[name],
                id=name,
                max_instances=1,
                coalesce=True,
                **options,
            )
        scheduler.start()
        self._scheduler = scheduler
        logger.info("Sync scheduler started with jobs: %s", ", ".join(self.jobs) or "none")

    async def trigger_all(self) -> Dict[str, Any]:
        """앱이 포그라운드로 돌아왔을 때 모든 작업 즉시 실행"""
        results = await asyncio.gather(*(self.run_job(name) for name in self.jobs))
        return dict(zip(self.jobs, results))

    async def stop(self) -> None:
        # 진행 중인 작업은 executor가 취소한다
        if self.running:
            self._scheduler.shutdown(wait=False)
            logger.info("Sync scheduler stopped")
        self._scheduler = None
        await asyncio.sleep(0)
