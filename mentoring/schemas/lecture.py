"""강의 관련 Pydantic 요청 스키마 정의.

Lecture-related Pydantic request schema definitions.
"""

from datetime import date

from pydantic import BaseModel


class LectureCreate(BaseModel):
    """강의 생성 요청 스키마.

    Lecture creation request. Fields are copied verbatim onto the lecture;
    ranges (dates, capacity, fee) are trusted as given by the caller.

    Attributes:
        title: 강의 제목 (Lecture title)
        recruitment_start_date: 모집 시작일 (Recruitment window start)
        recruitment_end_date: 모집 종료일 (Recruitment window end)
        capacity: 정원 (Capacity)
        fee: 수강료, 포인트 (Fee in points)
        lecture_start_date: 강의 시작일 (Lecture window start)
        lecture_end_date: 강의 종료일 (Lecture window end)
        team_url: 강의 접속 URL (Team-access URL)
    """

    title: str
    recruitment_start_date: date
    recruitment_end_date: date
    capacity: int
    fee: int
    lecture_start_date: date
    lecture_end_date: date
    team_url: str | None = None
