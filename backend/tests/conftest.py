"""
Adoption Intake Backend: Test Configuration (conftest.py)
============================================================

What:  Shared fixtures: a real SQLite database per test, seeded users, a
       service, a draft application and an HTTP client.
How:   Each test gets its own database file under tmp_path (aiosqlite), with
       the schema created from Base.metadata. The HTTP client talks to the
       app through ASGITransport with get_db_session pointed at that file.

Fixture Hierarchy:
    engine ──▶ session_factory ──▶ db_session ──▶ citizen / staff / adoption_service
                      │                                   └──▶ draft_application
                      └──▶ test_client
    temp_storage: a storage root for file-removal tests
"""

import os
import tempfile

# Must be set before anything imports intake.config.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    tempfile.mkdtemp(prefix="intake_test_db_"), "health.db"
)
os.environ["STORAGE_ROOT"] = tempfile.mkdtemp(prefix="intake_test_storage_")
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from intake.database import Base, get_db_session
from intake.models import (
    Application,
    ApplicationDocument,
    ApplicationStatus,
    DocumentType,
    Service,
    ServiceType,
    User,
    UserRole,
)


# ══════════════════════════════════════════════════════════════════════════
# Database
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def engine(tmp_path):
    eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'intake.db'}")
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


# ══════════════════════════════════════════════════════════════════════════
# Seed Data
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def citizen(db_session):
    user = User(email="citizen@example.org", full_name="Siti Rahma", role=UserRole.CITIZEN)
    db_session.add(user)
    await db_session.commit()
    return user


@pytest_asyncio.fixture
async def staff(db_session):
    """Staff reviewer with the fixed id 7."""
    user = User(id=7, email="reviewer@example.org", full_name="Budi Santoso", role=UserRole.STAFF)
    db_session.add(user)
    await db_session.commit()
    return user


@pytest_asyncio.fixture
async def adoption_service(db_session):
    """Requires SKCK and HEALTH_CERTIFICATE, in that order."""
    service = Service(
        name="Adoption Recommendation",
        description="Recommendation letter for child adoption",
        type=ServiceType.ADOPTION_RECOMMENDATION,
        required_documents=[DocumentType.SKCK.value, DocumentType.HEALTH_CERTIFICATE.value],
        is_active=True,
    )
    db_session.add(service)
    await db_session.commit()
    return service


@pytest_asyncio.fixture
async def draft_application(db_session, citizen, adoption_service):
    application = Application(
        service_id=adoption_service.id,
        applicant_id=citizen.id,
        status=ApplicationStatus.DRAFT,
        application_data={"applicant_name": "Siti Rahma"},
    )
    db_session.add(application)
    await db_session.commit()
    return application


async def attach(session, application_id, document_type, file_path=None):
    """Insert a document row directly, bypassing the upload checks."""
    document = ApplicationDocument(
        application_id=application_id,
        document_type=document_type,
        file_name=f"{document_type.value.lower()}.pdf",
        file_path=file_path or f"applications/{application_id}/{document_type.value.lower()}.pdf",
        file_size=2048,
        mime_type="application/pdf",
    )
    session.add(document)
    await session.commit()
    return document


@pytest.fixture
def temp_storage(tmp_path):
    storage_dir = tmp_path / "storage"
    storage_dir.mkdir()
    return str(storage_dir)


# ══════════════════════════════════════════════════════════════════════════
# HTTP Client
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(session_factory):
    """
    HTTPX AsyncClient bound to the app, using the per-test database.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from intake.main import app

    async def override_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
