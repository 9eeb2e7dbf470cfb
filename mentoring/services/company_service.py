"""경력 서비스 — 회사(경력) 레코드 CRUD.

Company Service — CRUD for standalone work-history records.
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from mentoring.models.company import Company
from mentoring.repositories.company_repository import company_repository
from mentoring.schemas.company import CompanyCreate
from mentoring.utils.exceptions import NotFoundError


class CompanyService:
    """경력 레코드 서비스."""

    async def create_company(self, db: AsyncSession, data: CompanyCreate) -> Company:
        """경력 레코드를 생성합니다 — Create a work-history record."""
        return await company_repository.create(db, data.model_dump())

    async def list_companies(self, db: AsyncSession) -> list[Company]:
        return list(await company_repository.get_all(db, order_by=Company.created_at))

    async def delete_company(self, db: AsyncSession, company_id: UUID) -> None:
        """경력 레코드를 삭제합니다.

        Raises:
            NotFoundError: 레코드를 찾을 수 없을 때 (Record not found)
        """
        deleted: bool = await company_repository.delete(db, company_id)
        if not deleted:
            raise NotFoundError("Company not found")


# 싱글턴 인스턴스 — Singleton instance
company_service: CompanyService = CompanyService()
