"""강의 모집 상태 스윕 스케줄러 — APScheduler 래퍼.

Lecture status sweep scheduler — APScheduler wrapper owning the sweep
lifecycle. Each tick runs one sweep in its own transaction; a tick that
fires while the previous sweep is still running is skipped.
"""

import asyncio
import logging

from apscheduler.job import Job
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from mentoring.config import settings
from mentoring.database import session_scope
from mentoring.services.lecture_service import lecture_service

logger = logging.getLogger(__name__)

SWEEP_JOB_ID: str = "lecture_status_sweep"


class LectureStatusScheduler:
    """강의 상태 스윕을 주기적으로 실행하는 스케줄러.

    Explicit scheduler object: start()/shutdown() are owned by the host
    application lifespan instead of process-wide state.

    Args:
        session_factory: 세션 팩토리, None이면 전역 팩토리 (Session factory, default: global)
        interval_seconds: 실행 주기(초) (Sweep interval, default: settings value)
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
        interval_seconds: int | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._interval: int = interval_seconds or settings.LECTURE_STATUS_SWEEP_SECONDS
        self._scheduler = AsyncIOScheduler(timezone=settings.TIMEZONE)
        self._running = asyncio.Lock()
        self._started = False

    @property
    def started(self) -> bool:
        return self._started

    @property
    def job(self) -> Job | None:
        """등록된 스윕 작업 — The registered sweep job, if started."""
        return self._scheduler.get_job(SWEEP_JOB_ID)

    async def run_once(self) -> int | None:
        """스윕을 한 번 실행합니다 — 이미 실행 중이면 건너뜁니다.

        Run a single sweep inside one transaction (single-flight).

        Returns:
            int | None: 갱신한 강의 수, 건너뛰면 None (Lectures swept, None when skipped)
        """
        if self._running.locked():
            logger.warning("Lecture status sweep still running; skipping this tick")
            return None

        async with self._running:
            try:
                async with session_scope(self._session_factory) as db:
                    return await lecture_service.recompute_all_statuses(db)
            except Exception:
                logger.exception("Lecture status sweep failed")
                raise

    def start(self) -> None:
        if self._started:
            return
        self._scheduler.add_job(
            self.run_once,
            trigger=IntervalTrigger(seconds=self._interval),
            id=SWEEP_JOB_ID,
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        self._scheduler.start()
        self._started = True
        logger.info("Lecture status scheduler started (every %d seconds)", self._interval)

    def shutdown(self) -> None:
        if not self._started:
            return
        self._scheduler.shutdown(wait=False)
        self._started = False
        logger.info("Lecture status scheduler stopped")


__all__ = ["LectureStatusScheduler", "SWEEP_JOB_ID"]
