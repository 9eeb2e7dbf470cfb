"""경력(회사) Pydantic 요청 스키마."""

from pydantic import BaseModel


class CompanyCreate(BaseModel):
    """경력 생성 요청 스키마 — end_date는 재직 중이면 None."""

    company_name: str | None = None
    work_type: str | None = None
    position: str | None = None
    start_date: str | None = None
    end_date: str | None = None
