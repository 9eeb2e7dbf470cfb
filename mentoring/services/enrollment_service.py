"""수강 신청 서비스 — 신청, 포인트 결제, 취소 비즈니스 로직.

Enrollment Service — Mentee enrollment with point payment, and cancellation.

Transaction contract:
    모든 쓰기는 호출자의 트랜잭션 안에서 flush만 수행합니다. 잔액 검증은
    수강 신청 레코드 생성 이전에 수행되므로, 실패 시 기록되는 것이 없습니다.
    All writes are flushed into the caller's transaction; funds are validated
    before the enrollment row is created, so a failed enrollment writes nothing.

Concurrency:
    강의 행 잠금(SELECT ... FOR UPDATE)으로 같은 강의에 대한 신청을 커밋 시점까지
    직렬화하고, 포인트는 조건부 UPDATE 한 번으로 차감합니다.
    Enrollments against one lecture are serialized by a row lock on the
    lecture that is held until the caller commits, so the capacity check sees
    every committed enrollment. The point debit is a single conditional
    UPDATE, so concurrent enrollments of one mentee cannot overwrite each
    other's debit.

Notification:
    확인 메일은 호출자의 트랜잭션이 커밋된 뒤에만 발송됩니다.
    The confirmation mail is queued on the session and sent only after the
    caller commits; a rolled-back enrollment sends nothing.
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from mentoring.models.enrollment import Enrollment
from mentoring.models.lecture import Lecture
from mentoring.models.member import Mentee
from mentoring.repositories.enrollment_repository import enrollment_repository
from mentoring.repositories.lecture_repository import lecture_repository
from mentoring.repositories.member_repository import mentee_repository
from mentoring.services.email_service import email_service
from mentoring.utils.exceptions import (
    DuplicateError,
    InsufficientFundsError,
    LectureFullError,
    NotFoundError,
)

logger = logging.getLogger(__name__)


def build_confirmation_mail(mentee: Mentee, lecture: Lecture) -> tuple[str, str]:
    """수강 신청 확인 메일 제목과 본문을 만듭니다.

    Build the (subject, body) of the confirmation mail: the subject names the
    mentee and lecture, the body names the lecture start month/day and the
    team-access URL.
    """
    subject: str = f"{mentee.name}님 {lecture.title}의 신청이 완료되었습니다."
    start = lecture.lecture_start_date
    text: str = f"{start.month}월 {start.day}일에 {lecture.team_url} 로 접속해주세요."
    return subject, text


class EnrollmentService:
    """수강 신청 관련 비즈니스 로직을 처리하는 서비스."""

    async def _get_mentee(self, db: AsyncSession, mentee_id: UUID) -> Mentee:
        mentee: Mentee | None = await mentee_repository.get_by_id(db, mentee_id)
        if mentee is None:
            raise NotFoundError("Mentee not found")
        return mentee

    async def _get_lecture(self, db: AsyncSession, lecture_id: UUID) -> Lecture:
        lecture: Lecture | None = await lecture_repository.get_by_id(db, lecture_id)
        if lecture is None:
            raise NotFoundError("Lecture not found")
        return lecture

    async def count_enrollments(self, db: AsyncSession, lecture_id: UUID) -> int:
        """강의의 현재 신청 인원 — Current enrolled count of a lecture."""
        return await lecture_repository.count_enrolled_students(db, lecture_id)

    async def enroll_in_lecture(
        self,
        db: AsyncSession,
        mentee_id: UUID,
        lecture_id: UUID,
    ) -> Enrollment:
        """멘티를 강의에 수강 신청하고 포인트를 차감합니다.

        Enroll a mentee in a lecture, debit the fee from the point balance,
        and queue the confirmation mail for after the caller commits.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            mentee_id: 멘티 ID (Mentee UUID)
            lecture_id: 강의 ID (Lecture UUID)

        Returns:
            Enrollment: 생성된 수강 신청 (Created enrollment)

        Raises:
            NotFoundError: 멘티 또는 강의를 찾을 수 없을 때 (Mentee or lecture not found)
            DuplicateError: 이미 신청한 강의일 때 (Already enrolled)
            LectureFullError: 정원이 찼을 때 (Capacity reached)
            InsufficientFundsError: 포인트가 수강료보다 적을 때 (Balance below fee)
        """
        mentee: Mentee = await self._get_mentee(db, mentee_id)
        # 커밋까지 강의 행 잠금 유지 — Row lock held until the caller commits
        lecture: Lecture | None = await lecture_repository.get_for_update(db, lecture_id)
        if lecture is None:
            raise NotFoundError("Lecture not found")

        existing: Enrollment | None = await enrollment_repository.get_by_mentee_and_lecture(
            db, mentee.id, lecture.id
        )
        if existing is not None:
            raise DuplicateError(
                f"Mentee '{mentee.name}' is already enrolled in lecture '{lecture.title}'"
            )

        enrolled: int = await lecture_repository.count_enrolled_students(db, lecture.id)
        if enrolled >= lecture.capacity:
            raise LectureFullError(lecture.title, lecture.capacity)

        if not await mentee_repository.debit_points(db, mentee, lecture.fee):
            logger.info(
                "Enrollment rejected: insufficient points",
                extra={"mentee_id": str(mentee.id), "lecture_id": str(lecture.id)},
            )
            raise InsufficientFundsError(mentee.name, lecture.title)

        enrollment: Enrollment = await enrollment_repository.create(
            db,
            {
                "mentee_id": mentee.id,
                "lecture_id": lecture.id,
                "mentor_id": lecture.mentor_id,
            },
        )

        subject, text = build_confirmation_mail(mentee, lecture)
        email_service.send_after_commit(db, mentee.email, subject, text)

        logger.info(
            "Mentee enrolled in lecture",
            extra={
                "enrollment_id": str(enrollment.id),
                "mentee_id": str(mentee.id),
                "lecture_id": str(lecture.id),
                "fee": lecture.fee,
            },
        )
        return enrollment

    async def cancel_lecture_enrollment(
        self,
        db: AsyncSession,
        mentee_id: UUID,
        lecture_id: UUID,
    ) -> Enrollment:
        """수강 신청을 취소합니다. 포인트는 환불되지 않습니다.

        Cancel a mentee's enrollment and return the deleted record.
        The point balance is not restored.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            mentee_id: 멘티 ID (Mentee UUID)
            lecture_id: 강의 ID (Lecture UUID)

        Returns:
            Enrollment: 삭제된 수강 신청의 마지막 상태 (Deleted enrollment, last known state)

        Raises:
            NotFoundError: 멘티, 강의, 수강 신청 중 하나를 찾을 수 없을 때
                           (Mentee, lecture, or enrollment not found)
        """
        mentee: Mentee = await self._get_mentee(db, mentee_id)
        lecture: Lecture = await self._get_lecture(db, lecture_id)

        enrollment: Enrollment | None = await enrollment_repository.get_by_mentee_and_lecture(
            db, mentee.id, lecture.id
        )
        if enrollment is None:
            raise NotFoundError("Enrollment not found")

        await enrollment_repository.remove(db, enrollment)
        logger.info(
            "Enrollment cancelled",
            extra={"enrollment_id": str(enrollment.id), "mentee_id": str(mentee.id), "lecture_id": str(lecture.id)},
        )
        return enrollment


# 싱글턴 인스턴스 — Singleton instance
enrollment_service: EnrollmentService = EnrollmentService()
