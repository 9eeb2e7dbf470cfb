"""강의 서비스 — 강의 생성, 조회, 모집 상태 갱신 비즈니스 로직.

Lecture Service — Lecture creation, lookup, and the recruitment status
state machine. The stored status is a cached projection of
{today, recruitment window, capacity, enrolled count}: the periodic sweep
rewrites it for every lecture and every read path recomputes it, so a
caller never observes a value that drifted between sweeps.
"""

import logging
from datetime import date, datetime
from uuid import UUID
from zoneinfo import ZoneInfo

from sqlalchemy.ext.asyncio import AsyncSession

from mentoring.config import settings
from mentoring.models.lecture import Lecture, LectureStatus
from mentoring.models.member import Mentor
from mentoring.repositories.lecture_repository import lecture_repository
from mentoring.repositories.member_repository import mentor_repository
from mentoring.schemas.lecture import LectureCreate
from mentoring.utils.exceptions import MentorNotFoundError, NotFoundError

logger = logging.getLogger(__name__)


def compute_lecture_status(
    today: date,
    recruitment_start: date,
    recruitment_end: date,
    capacity: int,
    enrolled_count: int,
) -> LectureStatus:
    """모집 상태를 계산합니다 (순수 함수).

    Pure status function. Precedence:
        1. 모집 종료일 당일 또는 이후 → RECRUITMENT_ENDED
        2. 모집 기간 안(시작일 다음 날부터) 정원 도달 → RECRUITMENT_ENDED, 아니면 RECRUITING
        3. 그 외(시작일 당일 및 이전) → NOT_STARTED

    Args:
        today: 기준 날짜 (Reference date)
        recruitment_start: 모집 시작일 (Window start, exclusive)
        recruitment_end: 모집 종료일 (Window end, exclusive)
        capacity: 정원 (Capacity)
        enrolled_count: 현재 신청 인원 (Current enrolled count)

    Returns:
        LectureStatus: 계산된 상태 (Computed status)
    """
    if today >= recruitment_end:
        return LectureStatus.RECRUITMENT_ENDED
    if recruitment_start < today:
        if enrolled_count >= capacity:
            return LectureStatus.RECRUITMENT_ENDED
        return LectureStatus.RECRUITING
    return LectureStatus.NOT_STARTED


def _resolve_today(now: datetime | date | None) -> date:
    """기준 날짜 결정 — 설정된 시간대의 오늘 날짜.

    Resolve the reference date in settings.TIMEZONE. Aware datetimes are
    converted to that zone first; naive datetimes and dates are taken as is.
    """
    tz = ZoneInfo(settings.TIMEZONE)
    if now is None:
        return datetime.now(tz).date()
    if isinstance(now, datetime):
        return now.astimezone(tz).date() if now.tzinfo is not None else now.date()
    return now


class LectureService:
    """강의 관련 비즈니스 로직을 처리하는 서비스.

    Service handling lecture business logic and the status sweep.
    """

    def _apply_status(self, lecture: Lecture, today: date, enrolled_count: int) -> LectureStatus:
        status: LectureStatus = compute_lecture_status(
            today,
            lecture.recruitment_start_date,
            lecture.recruitment_end_date,
            lecture.capacity,
            enrolled_count,
        )
        lecture.status = status.value
        return status

    async def create_lecture(
        self,
        db: AsyncSession,
        mentor_id: UUID,
        data: LectureCreate,
    ) -> Lecture:
        """멘토의 새 강의를 생성합니다.

        Create a lecture owned by a mentor. Fields are copied verbatim;
        the status starts at NOT_STARTED.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            mentor_id: 멘토 ID (Mentor UUID)
            data: 강의 생성 데이터 (Lecture creation data)

        Returns:
            Lecture: 저장된 강의 (Persisted lecture)

        Raises:
            MentorNotFoundError: 멘토를 찾을 수 없을 때 (Mentor not found)
        """
        mentor: Mentor | None = await mentor_repository.get_by_id(db, mentor_id)
        if mentor is None:
            raise MentorNotFoundError(mentor_id)

        lecture: Lecture = await lecture_repository.create(
            db,
            {
                **data.model_dump(),
                "mentor_id": mentor.id,
                "mentor_name": mentor.name,
                "status": LectureStatus.NOT_STARTED.value,
            },
        )
        logger.info("Lecture created", extra={"lecture_id": str(lecture.id), "mentor_id": str(mentor.id)})
        return lecture

    async def get_lecture(
        self,
        db: AsyncSession,
        lecture_id: UUID,
        now: datetime | date | None = None,
    ) -> Lecture:
        """강의 한 건을 상태를 재계산하여 조회합니다.

        Retrieve one lecture with its status recomputed.

        Raises:
            NotFoundError: 강의를 찾을 수 없을 때 (Lecture not found)
        """
        lecture: Lecture | None = await lecture_repository.get_by_id(db, lecture_id)
        if lecture is None:
            raise NotFoundError("Lecture not found")

        enrolled: int = await lecture_repository.count_enrolled_students(db, lecture.id)
        self._apply_status(lecture, _resolve_today(now), enrolled)
        await db.flush()
        return lecture

    async def find_all_lectures(
        self,
        db: AsyncSession,
        now: datetime | date | None = None,
    ) -> list[Lecture]:
        """전체 강의를 조회합니다 (페이지네이션 없음).

        Return every lecture, with statuses recomputed on read.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            now: 기준 시각, None이면 현재 시각 (Reference time, default: now)

        Returns:
            list[Lecture]: 강의 목록 (All lectures)
        """
        lectures: list[Lecture] = await lecture_repository.get_all_ordered(db)
        counts: dict[UUID, int] = await lecture_repository.count_enrolled_by_lecture(db)
        today: date = _resolve_today(now)
        for lecture in lectures:
            self._apply_status(lecture, today, counts.get(lecture.id, 0))
        await db.flush()
        return lectures

    async def recompute_all_statuses(
        self,
        db: AsyncSession,
        now: datetime | date | None = None,
    ) -> int:
        """모든 강의의 모집 상태를 다시 계산하여 저장합니다 (스윕).

        Sweep: assign the computed status to every lecture, changed or not,
        and flush the writes into the caller's transaction.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            now: 기준 시각, None이면 현재 시각 (Reference time, default: now)

        Returns:
            int: 갱신한 강의 수 (Number of lectures swept)
        """
        lectures: list[Lecture] = await lecture_repository.get_all_ordered(db)
        counts: dict[UUID, int] = await lecture_repository.count_enrolled_by_lecture(db)
        today: date = _resolve_today(now)

        changed: int = 0
        for lecture in lectures:
            previous: str = lecture.status
            status: LectureStatus = self._apply_status(lecture, today, counts.get(lecture.id, 0))
            if previous != status.value:
                changed += 1

        await db.flush()
        logger.info(
            "Lecture status sweep finished: %d lectures, %d changed",
            len(lectures),
            changed,
            extra={"swept": len(lectures), "changed": changed, "today": today.isoformat()},
        )
        return len(lectures)


# 싱글턴 인스턴스 — Singleton instance
lecture_service: LectureService = LectureService()
