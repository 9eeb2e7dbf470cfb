"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package ensures all models are registered with the
SQLAlchemy metadata, which is required for schema creation and
relationship resolution.

Modules:
    company: 경력 기록 (Work-history company records)
    user: 카카오 로그인 사용자 (Kakao OAuth users)
    member: 멘토 및 멘티 (Mentors and mentees)
    lecture: 강의 및 모집 상태 (Lectures and recruitment status)
    enrollment: 수강 신청 (Mentee-to-lecture enrollments)
"""

from mentoring.models.company import Company
from mentoring.models.user import User
from mentoring.models.member import Mentor, Mentee
from mentoring.models.lecture import Lecture, LectureStatus
from mentoring.models.enrollment import Enrollment

__all__ = [
    "Company",
    "User",
    "Mentor", "Mentee",
    "Lecture", "LectureStatus",
    "Enrollment",
]
