"""Database seeding script for development."""

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.config import settings
from app.core.security import CredentialVault
from app.db.base import Base
from app.models.application import Application, ApplicationStatus
from app.models.job import Job
from app.models.user import User, UserRole, VerificationStatus

SEED_USERS = [
    {
        "email": "admin@pilijobs.test",
        "password": "admin12345",
        "role": UserRole.ADMIN,
        "first_name": "Admin",
        "last_name": "User",
    },
    {
        "email": "employer@pilijobs.test",
        "password": "employer123",
        "role": UserRole.EMPLOYER,
        "first_name": "Elena",
        "last_name": "Bautista",
        "phone": "09170000002",
        "company_name": "Pili Logistics",
    },
    {
        "email": "seeker@pilijobs.test",
        "password": "seeker1234",
        "role": UserRole.JOB_SEEKER,
        "first_name": "Juan",
        "last_name": "Dela Cruz",
        "phone": "09170000003",
    },
]


async def get_or_create_user(session: AsyncSession, vault: CredentialVault, data: dict) -> User:
    result = await session.execute(select(User).where(User.email == data["email"]))
    user = result.scalar_one_or_none()
    if user:
        print(f"  ℹ User already exists: {user.email}")
        return user

    user = User(
        email=data["email"],
        password_hash=vault.hash(data["password"]),
        role=data["role"].value,
        first_name=data["first_name"],
        last_name=data["last_name"],
        phone=data.get("phone"),
        company_name=data.get("company_name"),
        is_verified=data["role"] is UserRole.EMPLOYER,
        verification_status=(
            VerificationStatus.APPROVED.value
            if data["role"] is UserRole.EMPLOYER
            else VerificationStatus.PENDING.value
        ),
    )
    session.add(user)
    await session.flush()
    print(f"  ✓ Created {user.role} user: {user.email}")
    return user


async def seed_database():
    """Seed the database with test data."""
    engine = create_async_engine(settings.DATABASE_URL, echo=False)
    async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    vault = CredentialVault(rounds=settings.BCRYPT_ROUNDS)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as session:
        print("Creating test users...")
        users = {}
        for data in SEED_USERS:
            users[data["role"]] = await get_or_create_user(session, vault, data)
        await session.commit()

        employer = users[UserRole.EMPLOYER]
        seeker = users[UserRole.JOB_SEEKER]

        print("\nCreating sample jobs...")
        result = await session.execute(select(Job).where(Job.employer_id == employer.id))
        if result.scalars().first():
            print("  ℹ Sample jobs already exist")
            await engine.dispose()
            return

        warehouse = Job(
            employer_id=employer.id,
            title="Warehouse Supervisor",
            company="Pili Logistics",
            location="Naga City",
            description="Oversee daily receiving and dispatch operations.",
        )
        driver = Job(
            employer_id=employer.id,
            title="Delivery Driver",
            company="Pili Logistics",
            location="Legazpi City",
            phone="09170000004",
        )
        session.add_all([warehouse, driver])
        await session.flush()
        print(f"  ✓ Created jobs: {warehouse.title}, {driver.title}")

        print("\nCreating sample application...")
        session.add(
            Application(
                job_id=warehouse.id,
                applicant_id=seeker.id,
                first_name=seeker.first_name,
                last_name=seeker.last_name,
                email=seeker.email,
                phone=seeker.phone,
                cover_letter="Three years of inventory experience.",
                status=ApplicationStatus.APPLIED.value,
                required_documents=[],
                submitted_documents={},
            )
        )
        await session.commit()
        print("  ✓ Created application for Warehouse Supervisor")

        print("\n✅ Database seeding completed!")
        print("\n📋 Test credentials:")
        for data in SEED_USERS:
            print(f"   {data['role'].value}: {data['email']} / {data['password']}")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(seed_database())
