"""경력(회사) 레코드 테스트."""

import uuid

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from mentoring.schemas.company import CompanyCreate
from mentoring.services.company_service import company_service
from mentoring.utils.exceptions import NotFoundError


class TestCompany:
    async def test_create_and_list(self, db: AsyncSession):
        created = await company_service.create_company(
            db,
            CompanyCreate(company_name="Growable", work_type="정규직", position="백엔드", start_date="2024-03"),
        )

        companies = await company_service.list_companies(db)
        assert [c.id for c in companies] == [created.id]
        assert companies[0].end_date is None

    async def test_delete(self, db: AsyncSession):
        created = await company_service.create_company(db, CompanyCreate(company_name="Old Corp"))
        await company_service.delete_company(db, created.id)
        assert await company_service.list_companies(db) == []

    async def test_delete_missing(self, db: AsyncSession):
        with pytest.raises(NotFoundError):
            await company_service.delete_company(db, uuid.uuid4())
