"""카카오 로그인 사용자 모델.

User model — Accounts created lazily on the first successful Kakao login.
Users are keyed by their Kakao account e-mail; profile fields are
denormalized copies of the provider profile at creation time.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import BigInteger, DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from mentoring.database import Base

# 기본 사용자 역할 — Default role tag for OAuth-created users
ROLE_USER: str = "ROLE_USER"


class User(Base):
    """사용자 모델 — 카카오 계정과 1:1 매핑.

    User model — One row per Kakao account.

    Attributes:
        id: 로컬 사용자 식별자 UUID (Local user identifier)
        kakao_id: 카카오 회원 번호 (Kakao member id, unique)
        kakao_profile_img: 프로필 이미지 URL (Profile image URL)
        kakao_nickname: 카카오 닉네임 (Kakao nickname)
        kakao_email: 카카오 계정 이메일, 조회 키 (Account e-mail, lookup key)
        user_role: 역할 태그 (Role tag, "ROLE_USER")
        created_at: 생성 일시 UTC (Creation timestamp)
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    kakao_id: Mapped[int | None] = mapped_column(BigInteger, unique=True, nullable=True)
    kakao_profile_img: Mapped[str | None] = mapped_column(String(500), nullable=True)
    kakao_nickname: Mapped[str | None] = mapped_column(String(100), nullable=True)
    kakao_email: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True)
    user_role: Mapped[str] = mapped_column(String(30), nullable=False, default=ROLE_USER)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
