"""초기 데이터 시드 스크립트 — 테이블 생성, 데모 멘토/멘티 생성.

Seed script — Creates the schema and a demo mentor and mentee.

Usage:
    python -m mentoring.seed

Creates:
    - 1명 멘토: "Demo Mentor" (1 mentor)
    - 1명 멘티: "Demo Mentee", 10000 포인트 (1 mentee with 10000 points)
"""

import asyncio

from sqlalchemy import select

from mentoring.database import Base, async_session, engine
from mentoring.models import Mentee, Mentor


async def seed() -> None:
    """데이터베이스를 초기 데이터로 시드합니다.

    Idempotent: 멘토가 이미 있으면 건너뜁니다 (Skips if any mentor exists).
    """
    # 테이블 생성 — DDL 실행 (Create all tables from ORM metadata)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as db:
        result = await db.execute(select(Mentor).limit(1))
        if result.scalar_one_or_none():
            print("Already seeded. Skipping.")
            return

        mentor: Mentor = Mentor(name="Demo Mentor", email="mentor@example.com")
        mentee: Mentee = Mentee(name="Demo Mentee", email="mentee@example.com", point=10000)
        db.add_all([mentor, mentee])
        await db.commit()

        print(f"Seeded: mentor={mentor.id}, mentee={mentee.id}")


if __name__ == "__main__":
    asyncio.run(seed())
