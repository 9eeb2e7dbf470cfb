"""강의 모델 — 모집 기간, 정원, 수강료, 모집 상태.

Lecture model — Recruitment window, capacity, fee, and recruitment status.
The status column is a cached projection of
{today, recruitment window, capacity, enrolled count}; it is rewritten by
the periodic sweep and recomputed on every read.
"""

import enum
import uuid
from datetime import date, datetime, timezone

from sqlalchemy import Date, DateTime, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from mentoring.database import Base


class LectureStatus(str, enum.Enum):
    """강의 모집 상태.

    NOT_STARTED: 모집 시작 전 (Before the recruitment window)
    RECRUITING: 모집 중 (Inside the window with seats left)
    RECRUITMENT_ENDED: 모집 마감 (Window closed or capacity reached)
    """

    NOT_STARTED = "NOT_STARTED"
    RECRUITING = "RECRUITING"
    RECRUITMENT_ENDED = "RECRUITMENT_ENDED"


class Lecture(Base):
    """강의 모델.

    Lecture model created by a mentor.

    Attributes:
        title: 강의 제목 (Lecture title)
        recruitment_start_date: 모집 시작일 (Recruitment window start)
        recruitment_end_date: 모집 종료일 (Recruitment window end)
        capacity: 정원 (Maximum number of enrollments)
        fee: 수강료, 포인트 (Fee in points)
        lecture_start_date: 강의 시작일 (Lecture window start)
        lecture_end_date: 강의 종료일 (Lecture window end)
        mentor_id: 멘토 FK (Owning mentor)
        mentor_name: 생성 시점 멘토 이름 (Mentor name copied at creation)
        status: 모집 상태 (LectureStatus value)
        team_url: 강의 접속 URL (External team-access URL)
    """

    __tablename__ = "lectures"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    recruitment_start_date: Mapped[date] = mapped_column(Date, nullable=False)
    recruitment_end_date: Mapped[date] = mapped_column(Date, nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    fee: Mapped[int] = mapped_column(Integer, nullable=False)
    lecture_start_date: Mapped[date] = mapped_column(Date, nullable=False)
    lecture_end_date: Mapped[date] = mapped_column(Date, nullable=False)
    mentor_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("mentors.id"), nullable=False)
    mentor_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    status: Mapped[str] = mapped_column(String(30), nullable=False, default=LectureStatus.NOT_STARTED.value)
    team_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    mentor = relationship("Mentor", back_populates="lectures")
    enrollments = relationship("Enrollment", back_populates="lecture")
