"""멘토/멘티 레포지토리.

Mentor and Mentee repositories. The mentee repository owns the atomic
point debit used by enrollment.
"""

from uuid import UUID

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from mentoring.models.member import Mentee, Mentor
from mentoring.repositories.base import BaseRepository


class MentorRepository(BaseRepository[Mentor]):
    """멘토 테이블 레포지토리."""

    def __init__(self) -> None:
        super().__init__(Mentor)


class MenteeRepository(BaseRepository[Mentee]):
    """멘티 테이블 레포지토리."""

    def __init__(self) -> None:
        super().__init__(Mentee)

    async def debit_points(
        self,
        db: AsyncSession,
        mentee: Mentee,
        amount: int,
    ) -> bool:
        """잔액이 충분할 때만 포인트를 차감합니다.

        Debit ``amount`` in a single conditional UPDATE
        (``point = point - amount WHERE point >= amount``), so concurrent
        debits of the same mentee are applied against the stored balance
        rather than a value read earlier. The loaded ``mentee`` is refreshed
        afterwards.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            mentee: 멘티 (Mentee to debit)
            amount: 차감할 포인트 (Points to debit)

        Returns:
            bool: 차감 여부, 잔액 부족이면 False (False when the balance is too low)
        """
        mentee_id: UUID = mentee.id
        result = await db.execute(
            update(Mentee)
            .where(Mentee.id == mentee_id, Mentee.point >= amount)
            .values(point=Mentee.point - amount)
            .execution_options(synchronize_session=False)
        )
        await db.refresh(mentee, ["point"])
        return result.rowcount == 1


# 싱글턴 인스턴스 — Singleton instances
mentor_repository: MentorRepository = MentorRepository()
mentee_repository: MenteeRepository = MenteeRepository()
