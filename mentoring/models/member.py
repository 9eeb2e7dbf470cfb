"""멘토 및 멘티 모델.

Mentor and Mentee models.

Tables:
    - mentors: 강의를 개설하는 멘토 (Mentors who create and own lectures)
    - mentees: 포인트로 수강 신청하는 멘티 (Mentees who enroll and pay with points)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, DateTime, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from mentoring.database import Base


class Mentor(Base):
    """멘토 모델 — 강의의 소유자.

    Mentor model — Referential owner of zero or more lectures.

    Relationships:
        lectures: 개설한 강의 목록 (Lectures created by this mentor)
    """

    __tablename__ = "mentors"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    lectures = relationship("Lecture", back_populates="mentor")


class Mentee(Base):
    """멘티 모델 — 포인트 잔액을 보유.

    Mentee model — Holds the point balance debited by enrollments.

    Attributes:
        name: 이름 (Display name, used in confirmation mails)
        email: 이메일 (Confirmation mail recipient)
        point: 포인트 잔액, 음수 불가 (Point balance, never negative)

    Constraints:
        ck_mentee_point_non_negative: 포인트 잔액 >= 0 (Balance must stay non-negative)
    """

    __tablename__ = "mentees"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    point: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        CheckConstraint("point >= 0", name="ck_mentee_point_non_negative"),
    )

    enrollments = relationship("Enrollment", back_populates="mentee")
