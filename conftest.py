"""Pytest configuration and fixtures."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from typing import AsyncGenerator, Awaitable, Callable

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.config import Settings
from app.core.security import CredentialVault
from app.db.base import Base
from app.db.session import get_db
from app.main import app
from app.models.application import Application, ApplicationStatus
from app.models.job import Job
from app.models.user import User, UserRole
from app.services.container import ServiceContainer
from app.services.session_store import SessionStore


# Test database URL (use in-memory SQLite for testing)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_PASSWORD = "correct-horse-battery"


@pytest.fixture
def test_settings() -> Settings:
    """Settings with a fixed secret, cheap hashing and no SMS credentials."""
    return Settings(
        SECRET_KEY="test-secret-key",
        BCRYPT_ROUNDS=4,
        SMS_GATEWAY_URL="https://sms.example.test",
        SMS_DEVICE_ID="",
        SMS_API_KEY="",
        SMS_TIMEOUT_SECONDS=2.0,
        ENVIRONMENT="test",
    )


@pytest.fixture
def vault() -> CredentialVault:
    return CredentialVault(rounds=4)


@pytest.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with async_session() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def services(test_settings: Settings) -> AsyncGenerator[ServiceContainer, None]:
    container = ServiceContainer.from_settings(test_settings)
    yield container
    await container.close()


@pytest.fixture
def session_store(db_session: AsyncSession, test_settings: Settings) -> SessionStore:
    return SessionStore(db_session, test_settings.session_duration)


@pytest.fixture
def make_user(db_session: AsyncSession, vault: CredentialVault) -> Callable[..., Awaitable[User]]:
    """Factory for persisted users."""
    counter = {"n": 0}

    async def _make_user(
        role: UserRole = UserRole.JOB_SEEKER,
        email: str | None = None,
        phone: str | None = None,
        password: str = TEST_PASSWORD,
        is_active: bool = True,
    ) -> User:
        counter["n"] += 1
        n = counter["n"]
        user = User(
            email=email or f"{role.value}{n}@example.com",
            password_hash=vault.hash(password),
            role=role.value,
            first_name="Test",
            last_name=f"User{n}",
            phone=phone,
            is_active=is_active,
        )
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
async def job_seeker(make_user) -> User:
    return await make_user(UserRole.JOB_SEEKER, email="seeker@example.com", phone="09171234567")


@pytest.fixture
async def employer(make_user) -> User:
    return await make_user(UserRole.EMPLOYER, email="employer@example.com", phone="09179876543")


@pytest.fixture
async def other_employer(make_user) -> User:
    return await make_user(UserRole.EMPLOYER, email="rival@example.com")


@pytest.fixture
async def admin(make_user) -> User:
    return await make_user(UserRole.ADMIN, email="admin@example.com")


@pytest.fixture
async def job(db_session: AsyncSession, employer: User) -> Job:
    """Active job owned by ``employer``."""
    job = Job(
        employer_id=employer.id,
        title="Warehouse Supervisor",
        company="Pili Logistics",
        location="Naga City",
    )
    db_session.add(job)
    await db_session.commit()
    await db_session.refresh(job)
    return job


@pytest.fixture
async def application(db_session: AsyncSession, job: Job, job_seeker: User) -> Application:
    """Freshly submitted application from ``job_seeker`` to ``job``."""
    application = Application(
        job_id=job.id,
        applicant_id=job_seeker.id,
        first_name="Juan",
        last_name="Dela Cruz",
        email=job_seeker.email,
        phone="09171234567",
        status=ApplicationStatus.APPLIED.value,
        required_documents=[],
        submitted_documents={},
    )
    db_session.add(application)
    await db_session.commit()
    await db_session.refresh(application)
    return application


@pytest.fixture
async def client(
    db_session: AsyncSession, services: ServiceContainer
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with database and service overrides."""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.state.services = services

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def login_as(client: AsyncClient, session_store: SessionStore) -> Callable[[User], Awaitable[str]]:
    """Open a session for ``user`` and attach its cookie to ``client``."""

    async def _login_as(user: User) -> str:
        session_id = await session_store.create_session(user.id)
        client.cookies.clear()
        client.cookies.set("session", session_id)
        return session_id

    return _login_as
