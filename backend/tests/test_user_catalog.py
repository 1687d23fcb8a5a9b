"""
Adoption Intake Backend: User and Service Catalog Tests
==========================================================
"""

import pytest

from intake.exceptions import ConflictError, NotFoundError
from intake.models import DocumentType, UserRole
from intake.schemas.service import ServiceCreate
from intake.schemas.user import UserCreate
from intake.services.catalog_service import CatalogService
from intake.services.user_service import UserService


class TestUserService:

    def setup_method(self):
        self.service = UserService()

    @pytest.mark.asyncio
    async def test_create_and_get(self, db_session):
        created = await self.service.create_user(
            db_session,
            UserCreate(email="staff@example.org", full_name="Dewi Lestari", role=UserRole.STAFF),
        )
        fetched = await self.service.get_user(db_session, created.id)

        assert fetched.email == "staff@example.org"
        assert fetched.role == UserRole.STAFF
        assert fetched.phone is None

    @pytest.mark.asyncio
    async def test_duplicate_email_conflicts(self, db_session, citizen):
        with pytest.raises(ConflictError, match="already exists"):
            await self.service.create_user(
                db_session,
                UserCreate(email=citizen.email, full_name="Someone Else", role=UserRole.CITIZEN),
            )

    @pytest.mark.asyncio
    async def test_unknown_user(self, db_session):
        with pytest.raises(NotFoundError, match="User with id 5 not found"):
            await self.service.get_user(db_session, 5)


class TestCatalogService:

    def setup_method(self):
        self.service = CatalogService()

    @pytest.mark.asyncio
    async def test_duplicate_requirements_collapsed(self, db_session):
        created = await self.service.create_service(
            db_session,
            ServiceCreate(
                name="Adoption Recommendation",
                required_documents=[DocumentType.SKCK, DocumentType.PHOTO, DocumentType.SKCK],
            ),
        )
        assert created.required_documents == [DocumentType.SKCK, DocumentType.PHOTO]
        assert created.is_active is True

    @pytest.mark.asyncio
    async def test_list_returns_active_services_by_name(self, db_session):
        await self.service.create_service(db_session, ServiceCreate(name="Zeta"))
        await self.service.create_service(db_session, ServiceCreate(name="Alpha"))
        await self.service.create_service(db_session, ServiceCreate(name="Retired", is_active=False))

        services = await self.service.list_services(db_session)
        assert [s.name for s in services] == ["Alpha", "Zeta"]

    @pytest.mark.asyncio
    async def test_unknown_service(self, db_session):
        with pytest.raises(NotFoundError):
            await self.service.get_service(db_session, 321)


class TestListUsers:

    @pytest.mark.asyncio
    async def test_list_users_by_role(self, db_session, citizen, staff):
        service = UserService()

        everyone = await service.list_users(db_session)
        reviewers = await service.list_users(db_session, role=UserRole.STAFF)

        assert [u.email for u in everyone] == [citizen.email, staff.email]
        assert [u.id for u in reviewers] == [7]
