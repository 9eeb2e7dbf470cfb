"""수강 신청 레포지토리 — 멘티-강의 쌍 조회.

Enrollment Repository — Lookup by (mentee, lecture) pair.
"""

from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from mentoring.models.enrollment import Enrollment
from mentoring.repositories.base import BaseRepository


class EnrollmentRepository(BaseRepository[Enrollment]):
    """수강 신청 테이블 레포지토리."""

    def __init__(self) -> None:
        super().__init__(Enrollment)

    async def get_by_mentee_and_lecture(
        self,
        db: AsyncSession,
        mentee_id: UUID,
        lecture_id: UUID,
    ) -> Enrollment | None:
        """멘티-강의 쌍의 수강 신청을 조회합니다.

        Retrieve the enrollment of a mentee in a lecture.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            mentee_id: 멘티 ID (Mentee UUID)
            lecture_id: 강의 ID (Lecture UUID)

        Returns:
            Enrollment | None: 수강 신청 또는 None (Enrollment or None)
        """
        query: Select = select(Enrollment).where(
            Enrollment.mentee_id == mentee_id,
            Enrollment.lecture_id == lecture_id,
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()


# 싱글턴 인스턴스 — Singleton instance
enrollment_repository: EnrollmentRepository = EnrollmentRepository()
