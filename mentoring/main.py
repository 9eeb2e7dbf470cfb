"""FastAPI 애플리케이션 엔트리포인트 — 로깅, 스케줄러 수명주기, 헬스 체크.

FastAPI application entry point — Logging bootstrap, sweep scheduler
lifecycle, and health check.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from mentoring.config import settings
from mentoring.scheduler import LectureStatusScheduler
from mentoring.services.email_service import email_service
from mentoring.utils.axiom_logging import setup_logging, stop_logging


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """앱 시작 시 스케줄러를 시작하고 종료 시 정지합니다.

    Start the lecture status scheduler on startup and stop it on shutdown,
    then wait for in-flight confirmation mails and flush log shipping.
    """
    log_listener = setup_logging()
    scheduler: LectureStatusScheduler = LectureStatusScheduler()
    app.state.lecture_scheduler = scheduler
    if settings.SCHEDULER_ENABLED:
        scheduler.start()
    try:
        yield
    finally:
        scheduler.shutdown()
        await email_service.drain()
        stop_logging(log_listener)


app: FastAPI = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    lifespan=lifespan,
)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """서버 상태 확인 엔드포인트.

    Health check endpoint for load balancers and monitoring.
    """
    scheduler: LectureStatusScheduler | None = getattr(app.state, "lecture_scheduler", None)
    return {
        "status": "ok",
        "scheduler": "running" if scheduler is not None and scheduler.started else "stopped",
    }
