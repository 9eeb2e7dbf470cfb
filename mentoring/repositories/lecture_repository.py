"""강의 레포지토리 — 강의 조회 및 수강 인원 집계 쿼리.

Lecture Repository — Lecture lookups and enrolled-count aggregation.
"""

from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from mentoring.models.enrollment import Enrollment
from mentoring.models.lecture import Lecture
from mentoring.repositories.base import BaseRepository


class LectureRepository(BaseRepository[Lecture]):
    """강의 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the lectures table.
    """

    def __init__(self) -> None:
        super().__init__(Lecture)

    async def get_all_ordered(self, db: AsyncSession) -> list[Lecture]:
        """전체 강의를 생성 순으로 조회합니다 — All lectures, oldest first."""
        result = await db.execute(select(Lecture).order_by(Lecture.created_at, Lecture.id))
        return list(result.scalars().all())

    async def get_for_update(
        self,
        db: AsyncSession,
        lecture_id: UUID,
    ) -> Lecture | None:
        """강의 행을 잠그고 조회합니다.

        Retrieve a lecture with a row lock (SELECT ... FOR UPDATE) so that
        concurrent enrollments against the same lecture are serialized at
        the storage layer. Backends without row locks ignore the clause.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            lecture_id: 강의 ID (Lecture UUID)

        Returns:
            Lecture | None: 잠긴 강의 또는 None (Locked lecture or None)
        """
        query: Select = select(Lecture).where(Lecture.id == lecture_id).with_for_update()
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def count_enrolled_students(
        self,
        db: AsyncSession,
        lecture_id: UUID,
    ) -> int:
        """강의의 현재 수강 신청 인원을 집계합니다.

        Count the mentees currently enrolled in a lecture.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            lecture_id: 강의 ID (Lecture UUID)

        Returns:
            int: 수강 신청 인원 (Enrolled count)
        """
        query: Select = (
            select(func.count(Enrollment.id))
            .where(Enrollment.lecture_id == lecture_id)
        )
        return (await db.execute(query)).scalar() or 0

    async def count_enrolled_by_lecture(self, db: AsyncSession) -> dict[UUID, int]:
        """강의별 수강 신청 인원을 한 번의 쿼리로 집계합니다.

        Enrolled count per lecture in a single grouped query.
        Lectures without enrollments are absent from the mapping.

        Returns:
            dict[UUID, int]: {강의 ID: 인원} (Mapping lecture id -> enrolled count)
        """
        query: Select = (
            select(Enrollment.lecture_id, func.count(Enrollment.id))
            .group_by(Enrollment.lecture_id)
        )
        result = await db.execute(query)
        return {lecture_id: count for lecture_id, count in result.all()}


# 싱글턴 인스턴스 — Singleton instance
lecture_repository: LectureRepository = LectureRepository()
