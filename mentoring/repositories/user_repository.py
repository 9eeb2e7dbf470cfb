"""사용자 레포지토리 — 카카오 식별자 기반 사용자 조회.

User Repository — Lookups by Kakao member id or Kakao account e-mail.
"""

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from mentoring.models.user import User
from mentoring.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """사용자 테이블 레포지토리."""

    def __init__(self) -> None:
        super().__init__(User)

    async def get_by_kakao_email(
        self,
        db: AsyncSession,
        email: str,
    ) -> User | None:
        """카카오 계정 이메일로 사용자를 조회합니다.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            email: 카카오 계정 이메일 (Kakao account e-mail)

        Returns:
            User | None: 사용자 또는 None (User or None)
        """
        query: Select = select(User).where(User.kakao_email == email)
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_by_kakao_id(
        self,
        db: AsyncSession,
        kakao_id: int,
    ) -> User | None:
        """카카오 회원 번호로 사용자를 조회합니다 — Lookup by Kakao member id."""
        query: Select = select(User).where(User.kakao_id == kakao_id)
        result = await db.execute(query)
        return result.scalar_one_or_none()


# 싱글턴 인스턴스 — Singleton instance
user_repository: UserRepository = UserRepository()
