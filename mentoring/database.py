"""데이터베이스 엔진 및 세션 설정 모듈.

Database engine and session configuration module.
Sets up the async SQLAlchemy engine, session factory, ORM base class,
and the transaction scope used by background jobs.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, AsyncEngine, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from mentoring.config import settings

# asyncpg 전용 옵션 — Supavisor(트랜잭션 모드 풀러)에서 prepared statement 비활성화
# asyncpg-only: disable prepared statement caches for transaction-mode pooling
_connect_args: dict[str, Any] = (
    {"statement_cache_size": 0} if settings.DATABASE_URL.startswith("postgresql+asyncpg") else {}
)

# 비동기 데이터베이스 엔진 — Async database engine
# pool_pre_ping=True: 커넥션 풀에서 꺼낸 연결의 유효성을 사전 확인 (Validates connections before use)
engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_pre_ping=True,
    connect_args=_connect_args,
)

# 비동기 세션 팩토리 — Async session factory
# expire_on_commit=False: 커밋 후에도 객체 속성 접근 가능 (Allows attribute access after commit without refresh)
async_session: async_sessionmaker[AsyncSession] = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """SQLAlchemy 선언적 베이스 클래스.

    Declarative base class for all ORM models.
    """

    pass


@asynccontextmanager
async def session_scope(
    factory: async_sessionmaker[AsyncSession] | None = None,
) -> AsyncGenerator[AsyncSession, None]:
    """하나의 트랜잭션 범위를 제공합니다 — 성공 시 커밋, 예외 시 롤백.

    Provide one atomic unit of work. Services only flush; this scope
    commits when the block succeeds and rolls everything back otherwise,
    so every write of a service operation commits or aborts together.

    Args:
        factory: 세션 팩토리, None이면 전역 팩토리 사용
                 (Session factory; defaults to the global one)

    Yields:
        AsyncSession: 트랜잭션 세션 (Session bound to the unit of work)
    """
    session_factory = factory or async_session
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
