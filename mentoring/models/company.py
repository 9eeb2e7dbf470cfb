"""경력 기록 모델 — 강의 도메인과 무관한 독립 레코드.

Company model — Standalone work-history record, unrelated to the lecture domain.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from mentoring.database import Base


class Company(Base):
    """경력(회사) 테이블.

    Work-history entry. Dates are kept as free-form strings.

    Attributes:
        company_name: 회사 이름 (Company name)
        work_type: 고용 형태 (Employment type)
        position: 직책 (Position held)
        start_date: 입사일 (Start date string)
        end_date: 퇴사일, 재직 중이면 None (End date string, None while employed)
    """

    __tablename__ = "company"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    company_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    work_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    position: Mapped[str | None] = mapped_column(String(100), nullable=True)
    start_date: Mapped[str | None] = mapped_column(String(50), nullable=True)
    # 재직 중이면 NULL 허용 — NULL while still employed
    end_date: Mapped[str | None] = mapped_column(String(50), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
