"""경력 레포지토리 — Company CRUD."""

from mentoring.models.company import Company
from mentoring.repositories.base import BaseRepository


class CompanyRepository(BaseRepository[Company]):
    """경력(회사) 테이블 레포지토리."""

    def __init__(self) -> None:
        super().__init__(Company)


# 싱글턴 인스턴스 — Singleton instance
company_repository: CompanyRepository = CompanyRepository()
