"""수강 신청 및 취소 테스트.

Enrollment and cancellation tests — point payment, confirmation mail,
transaction atomicity, and concurrent enrollments in separate sessions.
"""

import asyncio
import uuid

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from mentoring.database import session_scope
from mentoring.models.enrollment import Enrollment
from mentoring.models.member import Mentee, Mentor
from mentoring.services.enrollment_service import build_confirmation_mail, enrollment_service
from mentoring.services.lecture_service import lecture_service
from mentoring.utils.exceptions import (
    DuplicateError,
    InsufficientFundsError,
    LectureFullError,
    NotFoundError,
)

from tests.conftest import add_enrollments, lecture_data, make_lecture, make_mentee


async def count_enrollments(db: AsyncSession) -> int:
    return (await db.execute(select(func.count(Enrollment.id)))).scalar() or 0


class TestEnroll:
    """수강 신청 테스트."""

    async def test_enroll_debits_exact_fee(self, db: AsyncSession, mentor, mentee, sent_mails):
        """포인트 100, 수강료 100 → 성공, 잔액 0, 메일 1통."""
        lecture = await make_lecture(db, mentor, fee=100)

        enrollment = await enrollment_service.enroll_in_lecture(db, mentee.id, lecture.id)
        assert sent_mails == []
        await db.commit()

        assert enrollment.mentee_id == mentee.id
        assert enrollment.lecture_id == lecture.id
        assert enrollment.mentor_id == mentor.id
        assert mentee.point == 0
        assert await count_enrollments(db) == 1
        assert len(sent_mails) == 1
        assert sent_mails[0]["to"] == mentee.email

    async def test_enroll_partial_balance(self, db: AsyncSession, mentor, sent_mails):
        rich = await make_mentee(db, name="부자", point=350)
        lecture = await make_lecture(db, mentor, fee=120)

        await enrollment_service.enroll_in_lecture(db, rich.id, lecture.id)

        assert rich.point == 230

    async def test_enroll_insufficient_funds(self, db: AsyncSession, mentor, sent_mails):
        """포인트 50, 수강료 100 → InsufficientFundsError, 메일 없음, 잔액 50 유지."""
        poor = await make_mentee(db, name="가난", point=50)
        lecture = await make_lecture(db, mentor, fee=100, title="비싼 강의")

        with pytest.raises(InsufficientFundsError) as exc_info:
            await enrollment_service.enroll_in_lecture(db, poor.id, lecture.id)

        assert "가난" in exc_info.value.detail
        assert "비싼 강의" in exc_info.value.detail
        assert exc_info.value.status_code == 402
        assert sent_mails == []
        assert await count_enrollments(db) == 0
        await db.refresh(poor)
        assert poor.point == 50

    async def test_enroll_unknown_mentee(self, db: AsyncSession, mentor, sent_mails):
        lecture = await make_lecture(db, mentor)
        with pytest.raises(NotFoundError, match="Mentee not found"):
            await enrollment_service.enroll_in_lecture(db, uuid.uuid4(), lecture.id)

    async def test_enroll_unknown_lecture(self, db: AsyncSession, mentee, sent_mails):
        with pytest.raises(NotFoundError, match="Lecture not found"):
            await enrollment_service.enroll_in_lecture(db, mentee.id, uuid.uuid4())

    async def test_enroll_twice_rejected(self, db: AsyncSession, mentor, sent_mails):
        """같은 강의 중복 신청 거부, 포인트는 한 번만 차감."""
        m = await make_mentee(db, name="중복", point=1000)
        lecture = await make_lecture(db, mentor, fee=100)

        await enrollment_service.enroll_in_lecture(db, m.id, lecture.id)
        with pytest.raises(DuplicateError):
            await enrollment_service.enroll_in_lecture(db, m.id, lecture.id)
        await db.commit()

        assert m.point == 900
        assert await count_enrollments(db) == 1
        assert len(sent_mails) == 1

    async def test_enroll_full_lecture(self, db: AsyncSession, mentor, mentee, sent_mails):
        """정원이 찬 강의 신청 시 LectureFullError."""
        lecture = await make_lecture(db, mentor, capacity=2)
        await add_enrollments(db, lecture, 2)

        with pytest.raises(LectureFullError):
            await enrollment_service.enroll_in_lecture(db, mentee.id, lecture.id)

        assert mentee.point == 100
        assert sent_mails == []

    async def test_confirmation_mail_content(self, db: AsyncSession, mentor, mentee, sent_mails):
        lecture = await make_lecture(db, mentor, title="데이터 분석")

        await enrollment_service.enroll_in_lecture(db, mentee.id, lecture.id)
        await db.commit()

        mail = sent_mails[0]
        assert mail["subject"] == "이멘티님 데이터 분석의 신청이 완료되었습니다."
        assert mail["text"] == "2월 3일에 https://teams.example.com/python 로 접속해주세요."

    async def test_build_confirmation_mail(self):
        lecture = lecture_data(title="알고리즘")
        mentee = Mentee(name="박멘티", email="p@test.com", point=0)
        subject, text = build_confirmation_mail(mentee, lecture)  # type: ignore[arg-type]
        assert subject.startswith("박멘티님 알고리즘")
        assert text.startswith("2월 3일에")


class TestEnrollConcurrency:
    """동시 신청 테스트 — 세션(트랜잭션)마다 별도 연결로 동시에 신청한다."""

    async def _enroll(self, factory: async_sessionmaker[AsyncSession], mentee_id, lecture_id):
        async with session_scope(factory) as db:
            return await enrollment_service.enroll_in_lecture(db, mentee_id, lecture_id)

    async def test_last_seat_goes_to_one_mentee(self, serialized_session_factory, sent_mails):
        """정원-1 상태에서 서로 다른 세션의 동시 신청 2건 → 1건만 성공."""
        factory = serialized_session_factory
        async with session_scope(factory) as db:
            mentor = Mentor(name="동시성 멘토")
            db.add(mentor)
            await db.flush()
            lecture = await make_lecture(db, mentor, capacity=2)
            await add_enrollments(db, lecture, 1)
            first = await make_mentee(db, name="첫째", point=100)
            second = await make_mentee(db, name="둘째", point=100)

        results = await asyncio.gather(
            self._enroll(factory, first.id, lecture.id),
            self._enroll(factory, second.id, lecture.id),
            return_exceptions=True,
        )

        assert len([r for r in results if isinstance(r, Enrollment)]) == 1
        assert len([r for r in results if isinstance(r, LectureFullError)]) == 1
        async with factory() as db:
            assert await enrollment_service.count_enrollments(db, lecture.id) == 2
            points = sorted([(await db.get(Mentee, m.id)).point for m in (first, second)])
            assert points == [0, 100]
        assert len(sent_mails) == 1

    async def test_concurrent_debits_of_one_mentee(self, interleaved_session_factory, sent_mails):
        """한 멘티가 두 강의에 동시 신청 → 잔액만큼만 차감, 1건만 성공."""
        factory = interleaved_session_factory
        async with session_scope(factory) as db:
            mentor = Mentor(name="동시성 멘토")
            db.add(mentor)
            await db.flush()
            mentee = await make_mentee(db, name="한 명", point=100)
            lectures = [
                await make_lecture(db, mentor, title="강의 A", fee=100),
                await make_lecture(db, mentor, title="강의 B", fee=100),
            ]

        results = await asyncio.gather(
            *(self._enroll(factory, mentee.id, lecture.id) for lecture in lectures),
            return_exceptions=True,
        )

        assert len([r for r in results if isinstance(r, Enrollment)]) == 1
        assert len([r for r in results if isinstance(r, InsufficientFundsError)]) == 1
        async with factory() as db:
            assert await count_enrollments(db) == 1
            assert (await db.get(Mentee, mentee.id)).point == 0
        assert len(sent_mails) == 1


class TestEnrollTransaction:
    """트랜잭션 경계 테스트 — 하나의 작업은 통째로 커밋되거나 롤백된다."""

    async def _setup(self, session_factory: async_sessionmaker[AsyncSession], point: int):
        async with session_scope(session_factory) as db:
            mentor = Mentor(name="트랜잭션 멘토")
            db.add(mentor)
            await db.flush()
            mentee = await make_mentee(db, name="트랜잭션 멘티", point=point)
            lecture = await make_lecture(db, mentor, fee=100)
        return mentee.id, lecture.id

    async def test_failed_enrollment_leaves_nothing(self, session_factory, sent_mails):
        mentee_id, lecture_id = await self._setup(session_factory, point=50)

        with pytest.raises(InsufficientFundsError):
            async with session_scope(session_factory) as db:
                await enrollment_service.enroll_in_lecture(db, mentee_id, lecture_id)

        async with session_factory() as db:
            assert await count_enrollments(db) == 0
            assert (await db.get(Mentee, mentee_id)).point == 50

    async def test_error_after_enrollment_rolls_back_everything(self, session_factory, sent_mails):
        """신청 후 같은 트랜잭션에서 오류 발생 시 레코드와 차감 모두 롤백."""
        mentee_id, lecture_id = await self._setup(session_factory, point=100)

        with pytest.raises(RuntimeError):
            async with session_scope(session_factory) as db:
                await enrollment_service.enroll_in_lecture(db, mentee_id, lecture_id)
                raise RuntimeError("boom")

        async with session_factory() as db:
            assert await count_enrollments(db) == 0
            assert (await db.get(Mentee, mentee_id)).point == 100
        assert sent_mails == []

    async def test_successful_enrollment_commits(self, session_factory, sent_mails):
        mentee_id, lecture_id = await self._setup(session_factory, point=100)

        async with session_scope(session_factory) as db:
            await enrollment_service.enroll_in_lecture(db, mentee_id, lecture_id)

        async with session_factory() as db:
            assert await count_enrollments(db) == 1
            assert (await db.get(Mentee, mentee_id)).point == 0
        assert len(sent_mails) == 1


class TestCancel:
    """수강 취소 테스트."""

    async def test_cancel_returns_deleted_record(self, db: AsyncSession, mentor, mentee, sent_mails):
        lecture = await make_lecture(db, mentor)
        enrollment = await enrollment_service.enroll_in_lecture(db, mentee.id, lecture.id)
        enrollment_id = enrollment.id

        cancelled = await enrollment_service.cancel_lecture_enrollment(db, mentee.id, lecture.id)

        assert cancelled.id == enrollment_id
        assert cancelled.mentee_id == mentee.id
        assert cancelled.lecture_id == lecture.id
        assert cancelled.mentor_id == mentor.id
        assert await count_enrollments(db) == 0

    async def test_cancel_removes_only_that_record(self, db: AsyncSession, mentor, mentee, sent_mails):
        lecture = await make_lecture(db, mentor, fee=10)
        others = await add_enrollments(db, lecture, 2)

        await enrollment_service.enroll_in_lecture(db, mentee.id, lecture.id)
        await enrollment_service.cancel_lecture_enrollment(db, mentee.id, lecture.id)

        remaining = (await db.execute(select(Enrollment.id))).scalars().all()
        assert set(remaining) == {e.id for e in others}

    async def test_cancel_does_not_refund(self, db: AsyncSession, mentor, mentee, sent_mails):
        """취소해도 포인트는 환불되지 않는다 (현재 정책, 의도된 동작)."""
        lecture = await make_lecture(db, mentor, fee=100)
        await enrollment_service.enroll_in_lecture(db, mentee.id, lecture.id)
        assert mentee.point == 0

        await enrollment_service.cancel_lecture_enrollment(db, mentee.id, lecture.id)

        await db.refresh(mentee)
        assert mentee.point == 0

    async def test_cancel_without_enrollment(self, db: AsyncSession, mentor, mentee):
        lecture = await make_lecture(db, mentor)
        with pytest.raises(NotFoundError, match="Enrollment not found"):
            await enrollment_service.cancel_lecture_enrollment(db, mentee.id, lecture.id)

    async def test_cancel_unknown_mentee_or_lecture(self, db: AsyncSession, mentor, mentee):
        lecture = await make_lecture(db, mentor)
        with pytest.raises(NotFoundError, match="Mentee not found"):
            await enrollment_service.cancel_lecture_enrollment(db, uuid.uuid4(), lecture.id)
        with pytest.raises(NotFoundError, match="Lecture not found"):
            await enrollment_service.cancel_lecture_enrollment(db, mentee.id, uuid.uuid4())

    async def test_reenroll_after_cancel(self, db: AsyncSession, mentor, sent_mails):
        m = await make_mentee(db, name="재신청", point=200)
        lecture = await make_lecture(db, mentor, fee=100)

        await enrollment_service.enroll_in_lecture(db, m.id, lecture.id)
        await enrollment_service.cancel_lecture_enrollment(db, m.id, lecture.id)
        await enrollment_service.enroll_in_lecture(db, m.id, lecture.id)

        assert m.point == 0
        assert await count_enrollments(db) == 1


async def test_enrollment_counts_feed_status(db: AsyncSession, mentor, mentee, sent_mails):
    """신청으로 정원이 차면 조회 시 모집 마감."""
    from datetime import date

    lecture = await make_lecture(db, mentor, capacity=1)
    await enrollment_service.enroll_in_lecture(db, mentee.id, lecture.id)

    lectures = await lecture_service.find_all_lectures(db, now=date(2026, 1, 20))
    assert lectures[0].status == "RECRUITMENT_ENDED"


async def test_count_enrollments(db: AsyncSession, mentor, mentee, sent_mails):
    lecture = await make_lecture(db, mentor)
    await add_enrollments(db, lecture, 2)
    assert await enrollment_service.count_enrollments(db, lecture.id) == 2

    await enrollment_service.enroll_in_lecture(db, mentee.id, lecture.id)
    assert await enrollment_service.count_enrollments(db, lecture.id) == 3
