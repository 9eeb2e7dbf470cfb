"""수강 신청 모델 — 멘티 한 명의 강의 한 개에 대한 신청 기록.

Enrollment model — A single commitment of a mentee to a lecture.
Created by enrollment, deleted by cancellation, never otherwise mutated.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from mentoring.database import Base


class Enrollment(Base):
    """수강 신청 테이블.

    Attributes:
        mentee_id: 신청한 멘티 FK (Enrolled mentee)
        lecture_id: 대상 강의 FK (Target lecture)
        mentor_id: 강의의 멘토 FK, 생성 시 복사 (Lecture's mentor, copied at creation)

    Constraints:
        uq_enrollment_mentee_lecture: 멘티-강의 쌍당 1건 (One enrollment per mentee/lecture pair)
    """

    __tablename__ = "enrollments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    mentee_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("mentees.id", ondelete="CASCADE"), nullable=False)
    lecture_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("lectures.id", ondelete="CASCADE"), nullable=False)
    mentor_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("mentors.id"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("mentee_id", "lecture_id", name="uq_enrollment_mentee_lecture"),
    )

    mentee = relationship("Mentee", back_populates="enrollments")
    lecture = relationship("Lecture", back_populates="enrollments")
