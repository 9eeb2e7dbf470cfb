"""테스트 인프라 — 인메모리 DB, 세션, 메일 기록 픽스처.

Test infrastructure — In-memory database, session, and mail recorder fixtures.
Each test gets a fresh SQLite database (aiosqlite) with the schema created
from the ORM metadata, so tests never share state.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import date
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool, StaticPool

from mentoring.database import Base
from mentoring.models import *  # noqa: F401,F403 — register all models with metadata
from mentoring.models.enrollment import Enrollment
from mentoring.models.lecture import Lecture
from mentoring.models.member import Mentee, Mentor
from mentoring.schemas.lecture import LectureCreate
from mentoring.services.email_service import email_service
from mentoring.services.lecture_service import lecture_service

TEST_DATABASE_URL = "sqlite+aiosqlite://"


# ---------------------------------------------------------------------------
# Function-scoped: 엔진, 세션
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """테스트용 인메모리 엔진. 스키마를 매번 새로 생성합니다."""
    eng = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트에 격리된 DB 세션을 제공합니다."""
    async with session_factory() as session:
        yield session
        await session.rollback()


# ---------------------------------------------------------------------------
# 파일 기반 DB — 세션마다 별도 연결이 필요한 동시성 테스트용
# ---------------------------------------------------------------------------
def _file_engine(path: Path, immediate: bool) -> AsyncEngine:
    eng = create_async_engine(f"sqlite+aiosqlite:///{path}", poolclass=NullPool)
    if immediate:
        # SQLite에는 행 잠금이 없으므로 트랜잭션 시작 시 쓰기 잠금을 잡아
        # PostgreSQL의 SELECT ... FOR UPDATE와 같은 직렬화를 재현합니다.
        @event.listens_for(eng.sync_engine, "connect")
        def _no_driver_begin(dbapi_connection, connection_record):
            dbapi_connection.isolation_level = None

        @event.listens_for(eng.sync_engine, "begin")
        def _begin_immediate(conn):
            conn.exec_driver_sql("BEGIN IMMEDIATE")

    return eng


@asynccontextmanager
async def _file_session_factory(
    path: Path,
    immediate: bool,
) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    eng = _file_engine(path, immediate)
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(eng, class_=AsyncSession, expire_on_commit=False)
    await eng.dispose()


@pytest_asyncio.fixture
async def interleaved_session_factory(tmp_path: Path) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """드라이버 기본 트랜잭션 — 세션 간 읽기가 서로 끼어듭니다."""
    async with _file_session_factory(tmp_path / "interleaved.db", immediate=False) as factory:
        yield factory


@pytest_asyncio.fixture
async def serialized_session_factory(tmp_path: Path) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """행 잠금을 흉내 낸 직렬화 트랜잭션."""
    async with _file_session_factory(tmp_path / "serialized.db", immediate=True) as factory:
        yield factory


# ---------------------------------------------------------------------------
# 메일 발송 기록 — 실제 SMTP 대신 호출만 기록
# ---------------------------------------------------------------------------
@pytest.fixture
def sent_mails(monkeypatch: pytest.MonkeyPatch) -> list[dict[str, str]]:
    """커밋 후 예약되는 확인 메일 발송을 가로채 기록합니다."""
    mails: list[dict[str, str]] = []

    def _record(to: str, subject: str, text: str) -> None:
        mails.append({"to": to, "subject": subject, "text": text})

    monkeypatch.setattr(email_service, "send_enrollment_confirmation", _record)
    return mails


# ---------------------------------------------------------------------------
# 헬퍼 픽스처: 테스트용 데이터 생성
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def mentor(db: AsyncSession) -> Mentor:
    """테스트 멘토를 생성합니다."""
    m = Mentor(name="김멘토", email="mentor@test.com")
    db.add(m)
    await db.flush()
    await db.refresh(m)
    return m


@pytest_asyncio.fixture
async def mentee(db: AsyncSession) -> Mentee:
    """포인트 100을 가진 테스트 멘티를 생성합니다."""
    return await make_mentee(db, name="이멘티", point=100)


async def make_mentee(db: AsyncSession, name: str = "멘티", point: int = 0, email: str | None = None) -> Mentee:
    m = Mentee(name=name, email=email or f"{name}@test.com", point=point)
    db.add(m)
    await db.flush()
    await db.refresh(m)
    return m


def lecture_data(**overrides: Any) -> LectureCreate:
    """기본 강의 생성 데이터 — 1월 모집, 2월 강의."""
    data: dict[str, Any] = {
        "title": "파이썬 백엔드 입문",
        "recruitment_start_date": date(2026, 1, 1),
        "recruitment_end_date": date(2026, 1, 31),
        "capacity": 10,
        "fee": 100,
        "lecture_start_date": date(2026, 2, 3),
        "lecture_end_date": date(2026, 2, 28),
        "team_url": "https://teams.example.com/python",
    }
    data.update(overrides)
    return LectureCreate(**data)


async def make_lecture(db: AsyncSession, mentor: Mentor, **overrides: Any) -> Lecture:
    return await lecture_service.create_lecture(db, mentor.id, lecture_data(**overrides))


async def add_enrollments(db: AsyncSession, lecture: Lecture, count: int) -> list[Enrollment]:
    """포인트 결제 없이 수강 신청 레코드를 직접 추가합니다."""
    enrollments: list[Enrollment] = []
    for i in range(count):
        m = await make_mentee(db, name=f"seat{i}-{lecture.id.hex[:6]}")
        e = Enrollment(mentee_id=m.id, lecture_id=lecture.id, mentor_id=lecture.mentor_id)
        db.add(e)
        enrollments.append(e)
    await db.flush()
    return enrollments
